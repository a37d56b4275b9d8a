from .models import ProjectDefinition, Target, TargetDefinition, WorkspaceDefinition

__all__ = ["ProjectDefinition", "Target", "TargetDefinition", "WorkspaceDefinition"]
