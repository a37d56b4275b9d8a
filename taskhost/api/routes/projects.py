from __future__ import annotations

from typing import Any, Dict, Optional

from fastapi import APIRouter, Depends, Query

from taskhost.api.deps import get_host
from taskhost.core.host import BuilderHost
from taskhost.core.workspace.models import Target

router = APIRouter(prefix="/api/v1/projects", tags=["Projects"])


@router.get("/{project}")
def project_metadata(project: str, host: BuilderHost = Depends(get_host)) -> Dict[str, Any]:
    return {"project": project, "metadata": host.get_project_metadata(project)}


@router.get("/{project}/targets/{target}")
def target_options(
    project: str,
    target: str,
    configuration: Optional[str] = Query(default=None),
    host: BuilderHost = Depends(get_host),
) -> Dict[str, Any]:
    t = Target(project=project, target=target, configuration=configuration or None)
    return {
        "project": project,
        "target": target,
        "configuration": t.configuration_names(),
        "builder": host.get_builder_name_for_target(t),
        "options": host.get_options_for_target(t),
    }
