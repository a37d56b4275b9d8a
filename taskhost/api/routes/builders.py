from __future__ import annotations

from typing import Any, Dict

from fastapi import APIRouter, Depends, Query

from taskhost.api.deps import get_host
from taskhost.core.builders.loading import document_cache, module_cache
from taskhost.core.host import BuilderHost

router = APIRouter(prefix="/api/v1/builders", tags=["Builders"])


# registered before /{package} so "resolve" is not taken as a package name
@router.get("/resolve")
def resolve_builder(
    spec: str = Query(..., min_length=1),
    host: BuilderHost = Depends(get_host),
) -> Dict[str, Any]:
    descriptor = host.resolve_builder(spec)
    return {"spec": spec, "builder": descriptor.to_dict()}


@router.get("/cache/stats")
def cache_stats() -> Dict[str, Any]:
    return {"caches": [document_cache().stats(), module_cache().stats()]}


@router.get("/{package:path}")
def list_builders(package: str, host: BuilderHost = Depends(get_host)) -> Dict[str, Any]:
    builders = host.list_builders(package)
    return {
        "package": package,
        "count": len(builders),
        "builders": builders,
    }
