from __future__ import annotations

import logging
import re
from pathlib import Path
from typing import Iterable, Iterator, List, Optional, Union

from .loading import probe_file

log = logging.getLogger("taskhost.package_resolver")

# File that marks the root of a builder package and points at its manifest.
DOORWAY_FILE = "plugin.json"

_DOTTED_MODULE = re.compile(r"^[A-Za-z_][A-Za-z0-9_]*(\.[A-Za-z_][A-Za-z0-9_]*)+$")

PathLike = Union[str, Path]


def dedupe_dirs(base_dirs: Iterable[Optional[PathLike]]) -> List[Path]:
    """Absolute directories in first-seen order, each exactly once."""
    seen = set()
    out: List[Path] = []
    for d in base_dirs:
        if d is None or str(d) == "":
            continue
        p = Path(d).resolve()
        if p in seen:
            continue
        seen.add(p)
        out.append(p)
    return out


def _specifier_paths(specifier: str) -> Iterator[Path]:
    yield Path(specifier)
    # "pkg.sub" also resolves like an import: pkg/sub
    if _DOTTED_MODULE.match(specifier):
        yield Path(*specifier.split("."))


class PackageResolver:
    """
    Locates a builder package or module on disk.

    Every base directory is searched once, in order. Per base directory the
    package doorway (<spec>/plugin.json) is tried before the bare specifier.
    """

    def __init__(self, base_dirs: Iterable[Optional[PathLike]] = ()):
        self.base_dirs = dedupe_dirs(base_dirs)

    def resolve(self, specifier: str, base_dirs: Optional[Iterable[Optional[PathLike]]] = None) -> Optional[Path]:
        dirs = self.base_dirs if base_dirs is None else dedupe_dirs(base_dirs)
        for base in dirs:
            found = self._resolve_in(base, specifier)
            if found is not None:
                log.debug("package.resolved spec=%s base=%s path=%s", specifier, base, found)
                return found
        log.debug("package.not_found spec=%s bases=%s", specifier, [str(d) for d in dirs])
        return None

    def _resolve_in(self, base: Path, specifier: str) -> Optional[Path]:
        candidates = list(_specifier_paths(specifier))

        for rel in candidates:
            doorway = base / rel / DOORWAY_FILE
            if doorway.is_file():
                return doorway.resolve()

        for rel in candidates:
            found = probe_file(base / rel)
            if found is not None:
                return found

        return None
