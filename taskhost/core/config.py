"""Host configuration.

Env vars:
  TASKHOST_ENV          - "dev" | "prod" (default dev)
  TASKHOST_WORKSPACE    - path to the workspace file served by the API
  TASKHOST_PLUGIN_PATH  - extra plugin base directories (os.pathsep separated)
  TASKHOST_LOG_LEVEL    - logging level for the API process (default INFO)
"""

from __future__ import annotations

import os
from pathlib import Path
from typing import List, Optional

from pydantic import BaseModel, Field


def _env_str(name: str, default: Optional[str] = None) -> Optional[str]:
    value = os.getenv(name)
    if value is None:
        return default
    value = value.strip()
    return value or default


def _env_paths(name: str) -> List[Path]:
    raw = os.getenv(name) or ""
    # Build ordered list (dedup while preserving order)
    out: List[Path] = []
    for part in raw.split(os.pathsep):
        part = part.strip()
        if not part:
            continue
        p = Path(part)
        if p not in out:
            out.append(p)
    return out


class Settings(BaseModel):
    env: str = "dev"
    workspace_file: Optional[Path] = None
    plugin_paths: List[Path] = Field(default_factory=list)
    log_level: str = "INFO"

    @property
    def is_prod(self) -> bool:
        return self.env == "prod"


def get_settings() -> Settings:
    """Read settings from the environment at call time (tests monkeypatch env)."""
    workspace = _env_str("TASKHOST_WORKSPACE")
    return Settings(
        env=(_env_str("TASKHOST_ENV", "dev") or "dev").lower(),
        workspace_file=Path(workspace) if workspace else None,
        plugin_paths=_env_paths("TASKHOST_PLUGIN_PATH"),
        log_level=(_env_str("TASKHOST_LOG_LEVEL", "INFO") or "INFO").upper(),
    )
