from __future__ import annotations

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, List, Mapping, Optional

from taskhost.core.errors import InvalidBuilderError

from .loading import load_document

log = logging.getLogger("taskhost.manifest")


@dataclass(frozen=True)
class LoadedManifest:
    path: Path  # final document, after indirection
    builders: Dict[str, Any]
    executors: Optional[Dict[str, Any]] = None

    @property
    def directory(self) -> Path:
        return self.path.parent

    def names(self) -> List[str]:
        """Builder names first, then executor-only names; no duplicates."""
        out = list(self.builders.keys())
        for name in (self.executors or {}).keys():
            if name not in self.builders:
                out.append(name)
        return out


class ManifestLoader:
    """
    Loads a manifest, following string-valued `builders` pointers.

    Each pointer is resolved against the directory of the document that
    holds it. A pointer back to an already visited document is rejected.
    """

    def load(self, path: Path, *, package_name: Optional[str] = None) -> LoadedManifest:
        current = Path(path).resolve()
        visited: List[Path] = []

        while True:
            if current in visited:
                chain = " -> ".join(str(p) for p in visited + [current])
                raise InvalidBuilderError(
                    f'Builder configuration for package "{package_name}" points back to itself: {chain}'
                )
            visited.append(current)

            doc = self._read(current)
            builders = doc.get("builders") if isinstance(doc, Mapping) else None

            if isinstance(builders, str):
                log.debug("manifest.indirection from=%s to=%s", current, builders)
                current = (current.parent / builders).resolve()
                continue

            if not isinstance(builders, Mapping):
                raise InvalidBuilderError(
                    f'Invalid builder configuration in "{current}" for package "{package_name}": '
                    '"builders" must be an object or a path to another configuration file'
                )

            executors = doc.get("executors")
            return LoadedManifest(
                path=current,
                builders=dict(builders),
                executors=dict(executors) if isinstance(executors, Mapping) else None,
            )

    @staticmethod
    def _read(path: Path) -> Any:
        try:
            return load_document(path)
        except Exception as e:
            raise InvalidBuilderError(f'Failed to load builder configuration "{path}": {e}') from e
