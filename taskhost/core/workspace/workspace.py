from __future__ import annotations

import logging
from pathlib import Path
from typing import Any, Dict, Optional, Union

from pydantic import ValidationError

from taskhost.core.builders.adapter import convert_executor_into_builder
from taskhost.core.builders.loading import parse_document
from taskhost.core.builders.models import NativeBuilder
from taskhost.core.errors import (
    InvalidWorkspaceError,
    UnknownConfigurationError,
    UnknownProjectError,
    UnknownTargetError,
)

from .models import ProjectDefinition, Target, TargetDefinition, WorkspaceDefinition

log = logging.getLogger("taskhost.workspace")


class Workspace:
    """
    In-memory view over a parsed workspace definition.

    base_path is the directory the workspace file lives in; None for
    workspaces built in memory.
    """

    def __init__(self, definition: WorkspaceDefinition, *, base_path: Optional[Union[str, Path]] = None):
        self.definition = definition
        self.base_path: Optional[str] = str(Path(base_path).resolve()) if base_path is not None else None

    @classmethod
    def from_dict(cls, data: Dict[str, Any], *, base_path: Optional[Union[str, Path]] = None) -> "Workspace":
        return cls(WorkspaceDefinition.model_validate(data), base_path=base_path)

    def get_project(self, project_name: str) -> ProjectDefinition:
        project = self.definition.projects.get(project_name)
        if project is None:
            raise UnknownProjectError(project_name)
        return project

    def get_target(self, target: Target) -> TargetDefinition:
        project = self.get_project(target.project)
        definition = project.targets.get(target.target)
        if definition is None:
            raise UnknownTargetError(target.project, target.target)
        return definition

    def get_options_for_target(self, target: Target) -> Dict[str, Any]:
        """
        Base options overlaid with each configuration in order.

        The overlay is shallow: a later key replaces an earlier one wholesale,
        nested objects included.
        """
        definition = self.get_target(target)
        options: Dict[str, Any] = dict(definition.options or {})

        for name in target.configuration_names():
            overlay = definition.configurations.get(name)
            if overlay is None:
                raise UnknownConfigurationError(name, target.project, target.target)
            options.update(overlay)

        return options

    def get_project_metadata(self, project_name: str) -> Dict[str, Any]:
        project = self.get_project(project_name)
        metadata: Dict[str, Any] = {"root": project.root}
        if project.source_root is not None:
            metadata["sourceRoot"] = project.source_root
        if project.prefix is not None:
            metadata["prefix"] = project.prefix
        metadata.update(project.extensions)
        return metadata

    def convert_executor_into_builder(self, executor: Any) -> NativeBuilder:
        return convert_executor_into_builder(executor)


def load_workspace(path: Union[str, Path]) -> Workspace:
    """Read a JSON or YAML workspace file."""
    p = Path(path).resolve()
    try:
        data = parse_document(p)
    except Exception as e:
        raise InvalidWorkspaceError(str(p), str(e)) from e

    if not isinstance(data, dict):
        raise InvalidWorkspaceError(str(p), "top-level value must be an object")

    try:
        workspace = Workspace.from_dict(data, base_path=p.parent)
    except ValidationError as e:
        raise InvalidWorkspaceError(str(p), str(e)) from e

    log.debug("workspace.loaded path=%s projects=%s", p, len(workspace.definition.projects))
    return workspace
