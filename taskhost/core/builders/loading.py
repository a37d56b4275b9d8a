from __future__ import annotations

import hashlib
import importlib.util
import json
import logging
import sys
from pathlib import Path
from types import ModuleType
from typing import Any, Optional, Tuple

import yaml

from .cache import PathCache

log = logging.getLogger("taskhost.loading")

DOCUMENT_SUFFIXES: Tuple[str, ...] = (".json", ".yaml", ".yml")
MODULE_SUFFIXES: Tuple[str, ...] = (".py",)
PROBE_SUFFIXES: Tuple[str, ...] = MODULE_SUFFIXES + DOCUMENT_SUFFIXES

_DOCUMENTS = PathCache("documents")
_MODULES = PathCache("modules")


def document_cache() -> PathCache:
    return _DOCUMENTS


def module_cache() -> PathCache:
    return _MODULES


def is_document(path: Path) -> bool:
    return path.suffix.lower() in DOCUMENT_SUFFIXES


def probe_file(candidate: Path) -> Optional[Path]:
    """
    Resolve a path the way an import would:
      1) the path itself when it is a file
      2) the path with a known suffix appended
      3) a package directory's __init__.py
    """
    if candidate.is_file():
        return candidate.resolve()
    for suffix in PROBE_SUFFIXES:
        p = candidate.with_name(candidate.name + suffix)
        if p.is_file():
            return p.resolve()
    init = candidate / "__init__.py"
    if candidate.is_dir() and init.is_file():
        return init.resolve()
    return None


def parse_document(path: Path) -> Any:
    text = path.read_text(encoding="utf-8")
    if path.suffix.lower() in (".yaml", ".yml"):
        return yaml.safe_load(text)
    return json.loads(text)


def load_document(path: Path) -> Any:
    """Parse a JSON/YAML document. Raises OSError / ValueError / yaml.YAMLError."""
    return _DOCUMENTS.get_or_load(path, parse_document)


def _module_name(module_path: Path) -> str:
    # must be deterministic across interpreter restarts
    path_key = str(module_path).replace("\\", "/").encode("utf-8")
    path_hash = hashlib.sha1(path_key).hexdigest()[:16]
    stem = module_path.parent.name if module_path.name == "__init__.py" else module_path.stem
    return f"taskhost_plugin_{stem}_{path_hash}"


def _exec_module(module_path: Path) -> ModuleType:
    module_name = _module_name(module_path)
    search = [str(module_path.parent)] if module_path.name == "__init__.py" else None

    spec = importlib.util.spec_from_file_location(
        module_name, str(module_path), submodule_search_locations=search
    )
    if spec is None or spec.loader is None:
        raise ImportError(f"Cannot create module spec for {module_path}")

    mod = importlib.util.module_from_spec(spec)

    # register BEFORE exec_module (dataclasses needs this)
    sys.modules[module_name] = mod
    try:
        spec.loader.exec_module(mod)
    except Exception:
        # don't leave a broken module registered
        sys.modules.pop(module_name, None)
        raise

    log.debug("module.loaded path=%s name=%s", module_path, module_name)
    return mod


def load_module(path: Path) -> ModuleType:
    """Import a Python file by path. Propagates whatever the module raises."""
    return _MODULES.get_or_load(path, _exec_module)


def load_value(path: Path) -> Any:
    """A document's parsed value, or a module object for Python files."""
    if is_document(path):
        return load_document(path)
    return load_module(path)
