from __future__ import annotations

import logging
from pathlib import Path
from typing import Any, Callable, Mapping, Optional

from taskhost.core.errors import InvalidBuilderError
from taskhost.core.observability.metrics import inc_load

from .adapter import convert_executor_into_builder
from .loading import load_module, probe_file
from .models import (
    DEFAULT_EXPORT,
    EXECUTOR_SCHEMA_MARKER,
    BuilderFormat,
    Descriptor,
    NativeBuilder,
    is_builder,
)

log = logging.getLogger("taskhost.implementation")

ExecutorConverter = Callable[[Any], NativeBuilder]


def _where(descriptor: Descriptor) -> str:
    return f'builder "{descriptor.builder_name}" in package "{descriptor.package_name}"'


def needs_executor_adapter(descriptor: Descriptor) -> bool:
    if descriptor.format is BuilderFormat.ALTERNATE:
        return True
    if descriptor.format is BuilderFormat.NATIVE:
        return False
    # unknown format: a schema marker may still identify an executor
    key, marker = EXECUTOR_SCHEMA_MARKER
    schema = descriptor.option_schema
    return isinstance(schema, Mapping) and schema.get(key) == marker


class ImplementationLoader:
    """Imports a Descriptor's implementation and returns a NativeBuilder."""

    def __init__(self, convert_executor: Optional[ExecutorConverter] = None):
        self.convert_executor = convert_executor or convert_executor_into_builder

    def load(self, descriptor: Descriptor) -> NativeBuilder:
        adapter = "executor" if needs_executor_adapter(descriptor) else "native"
        try:
            builder = self._load(descriptor, adapter)
        except Exception as e:
            inc_load(adapter, type(e).__name__)
            raise
        inc_load(adapter, "ok")
        return builder

    def _load(self, descriptor: Descriptor, adapter: str) -> NativeBuilder:
        implementation = self._import(descriptor)

        if adapter == "executor":
            log.debug("load_builder adapter=executor builder=%s", descriptor.builder_name)
            return self.convert_executor(implementation)

        if not is_builder(implementation):
            raise InvalidBuilderError(f"Implementation for {_where(descriptor)} is not a builder")
        return implementation

    def _import(self, descriptor: Descriptor) -> Any:
        try:
            module_path = probe_file(Path(descriptor.implementation_path))
            if module_path is None:
                raise FileNotFoundError(f"No module at {descriptor.implementation_path}")
            module = load_module(module_path)
        except Exception as e:
            raise InvalidBuilderError(f"Failed to load implementation for {_where(descriptor)}: {e}") from e

        if descriptor.implementation_export is not None:
            implementation = getattr(module, descriptor.implementation_export, None)
        else:
            implementation = getattr(module, DEFAULT_EXPORT, module)

        if implementation is None:
            raise InvalidBuilderError(f"Failed to load implementation for {_where(descriptor)}")
        return implementation
