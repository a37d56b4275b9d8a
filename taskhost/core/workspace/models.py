from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field


@dataclass(frozen=True)
class Target:
    project: str
    target: str
    # comma separated, order significant: "production,ci"
    configuration: Optional[str] = None

    def configuration_names(self) -> List[str]:
        if not self.configuration:
            return []
        return [c.strip() for c in self.configuration.split(",") if c.strip()]

    def __str__(self) -> str:
        base = f"{self.project}:{self.target}"
        return f"{base}:{self.configuration}" if self.configuration else base


class TargetDefinition(BaseModel):
    builder: str
    options: Optional[Dict[str, Any]] = None
    configurations: Dict[str, Dict[str, Any]] = Field(default_factory=dict)


class ProjectDefinition(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    root: str
    source_root: Optional[str] = Field(default=None, alias="sourceRoot")
    prefix: Optional[str] = None
    extensions: Dict[str, Any] = Field(default_factory=dict)
    targets: Dict[str, TargetDefinition] = Field(default_factory=dict)


class WorkspaceDefinition(BaseModel):
    version: int = 1
    projects: Dict[str, ProjectDefinition] = Field(default_factory=dict)
