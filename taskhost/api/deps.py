from __future__ import annotations

import os

from taskhost.core.config import get_settings
from taskhost.core.host import BuilderHost
from taskhost.core.workspace.models import WorkspaceDefinition
from taskhost.core.workspace.workspace import Workspace, load_workspace


def get_host() -> BuilderHost:
    """Built per request from settings; tests override via app.dependency_overrides."""
    settings = get_settings()
    if settings.workspace_file is not None:
        workspace = load_workspace(settings.workspace_file)
    else:
        workspace = Workspace(WorkspaceDefinition())
    return BuilderHost(
        start_cwd=os.getcwd(),
        workspace=workspace,
        plugin_dirs=settings.plugin_paths,
    )
