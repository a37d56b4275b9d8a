from __future__ import annotations

import logging
import time
from pathlib import Path
from typing import Any, Dict, Mapping, Optional, Tuple

from taskhost.core.errors import (
    InvalidBuilderError,
    InvalidBuilderSpecifiedError,
    UnknownBuilderError,
)
from taskhost.core.observability.metrics import inc_resolution

from .loading import load_value
from .manifest import LoadedManifest, ManifestLoader
from .models import DEFAULT_EXPORT, BuilderEntry, BuilderFormat, Descriptor, is_builder
from .package_resolver import PackageResolver
from .schema import SchemaLoader

log = logging.getLogger("taskhost.resolver")

DIRECT_PACKAGE = "$direct"


class BuilderResolver:
    """
    Turns a builder specifier into a Descriptor.

    Specifier grammar:
      "<package>:<name>"       entry <name> from the manifest of <package>
      "$direct:<modulePath>"   module at <modulePath>, no manifest

    Nothing is cached here: every call builds a fresh Descriptor. Documents
    and modules underneath are cached by path in `loading`.
    """

    def __init__(
        self,
        packages: PackageResolver,
        manifests: Optional[ManifestLoader] = None,
        schemas: Optional[SchemaLoader] = None,
    ):
        self.packages = packages
        self.manifests = manifests or ManifestLoader()
        self.schemas = schemas or SchemaLoader()

    def load_manifest(self, package_name: str) -> LoadedManifest:
        path = self.packages.resolve(package_name)
        if path is None:
            raise UnknownBuilderError(package_name)
        return self.manifests.load(path, package_name=package_name)

    def resolve_builder(self, specifier: str) -> Descriptor:
        package_name, sep, builder_name = specifier.partition(":")
        if not sep or not package_name:
            raise InvalidBuilderSpecifiedError(specifier)

        source = "direct" if package_name == DIRECT_PACKAGE else "manifest"
        t0 = time.perf_counter()
        try:
            descriptor = self._resolve(package_name, builder_name)
        except Exception as e:
            inc_resolution(source, type(e).__name__)
            raise

        inc_resolution(source, "ok")
        log.debug(
            "resolve_builder spec=%s format=%s implementation=%s ms=%s",
            specifier,
            descriptor.format.value,
            descriptor.implementation_path,
            int(round((time.perf_counter() - t0) * 1000)),
        )
        return descriptor

    # --- internals ---

    def _resolve(self, package_name: str, builder_name: str) -> Descriptor:
        if package_name == DIRECT_PACKAGE:
            base_dir, raw = self._resolve_direct(builder_name)
            owner: Optional[str] = None
            fmt = BuilderFormat.UNKNOWN
        else:
            manifest = self.load_manifest(package_name)
            raw, fmt = self._select_entry(manifest, package_name, builder_name)
            base_dir = manifest.directory
            owner = package_name

        entry = BuilderEntry.from_raw(raw)
        if entry is None:
            if owner is None:
                raise InvalidBuilderError(f'Invalid configuration for builder "{builder_name}"')
            raise InvalidBuilderError(
                f'Invalid configuration for builder "{builder_name}" in package "{owner}"'
            )

        option_schema = self.schemas.load(
            entry.schema,
            base_dir=base_dir,
            builder_name=builder_name,
            package_name=owner,
        )

        implementation, has_export, export = entry.implementation.partition("#")

        return Descriptor(
            package_name=owner,
            builder_name=builder_name,
            description=entry.description,
            option_schema=option_schema,
            implementation_path=str((base_dir / implementation).resolve()),
            implementation_export=export if has_export else None,
            format=fmt,
        )

    @staticmethod
    def _select_entry(manifest: LoadedManifest, package_name: str, builder_name: str) -> Tuple[Any, BuilderFormat]:
        # executors win: a package shipping both may only keep a degraded
        # compatibility shim under builders
        if manifest.executors is not None and builder_name in manifest.executors:
            return manifest.executors[builder_name], BuilderFormat.ALTERNATE

        if builder_name in manifest.builders:
            fmt = BuilderFormat.NATIVE if manifest.executors is not None else BuilderFormat.UNKNOWN
            return manifest.builders[builder_name], fmt

        raise UnknownBuilderError(package_name, builder_name)

    def _resolve_direct(self, module_path: str) -> Tuple[Path, Any]:
        path = self.packages.resolve(module_path)
        if path is None:
            raise UnknownBuilderError(None, module_path)

        try:
            loaded = load_value(path)
        except Exception as e:
            raise InvalidBuilderError(f'Failed to load builder module "{path}": {e}') from e

        value = loaded if isinstance(loaded, Mapping) else getattr(loaded, DEFAULT_EXPORT, loaded)
        return path.parent, self._direct_entry(value, path, module_path)

    @staticmethod
    def _direct_entry(value: Any, path: Path, module_path: str) -> Dict[str, Any]:
        if is_builder(value):
            return {"schema": True, "implementation": path.name}

        if isinstance(value, Mapping):
            if isinstance(value.get("type"), str) and isinstance(value.get("implementation"), str):
                # the document is the option schema of the implementation it names
                entry: Dict[str, Any] = {"schema": path.name, "implementation": value["implementation"]}
                if isinstance(value.get("description"), str):
                    entry["description"] = value["description"]
                return entry
            return dict(value)

        raise InvalidBuilderError(f'"{module_path}" ({path}) is not a valid builder module')
