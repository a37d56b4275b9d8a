from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Callable, Dict, Mapping, Optional, Union

from taskhost.core.workspace.models import Target

# Name of the module attribute treated as a module's default export.
DEFAULT_EXPORT = "BUILDER"

# Schema marker identifying executor-convention implementations.
EXECUTOR_SCHEMA_MARKER = ("cli", "executor")

JsonSchema = Union[Dict[str, Any], bool]


class BuilderFormat(str, Enum):
    ALTERNATE = "alternate"  # definitely an executor
    NATIVE = "native"        # definitely a builder
    UNKNOWN = "unknown"


@dataclass(frozen=True)
class BuilderOutput:
    success: bool
    error: Optional[str] = None
    data: Dict[str, Any] = field(default_factory=dict)


@dataclass
class BuilderContext:
    """What the execution engine hands a builder at invocation time."""

    workspace_root: str
    current_directory: str
    target: Optional[Target] = None
    project_metadata: Dict[str, Any] = field(default_factory=dict)


@dataclass(frozen=True)
class NativeBuilder:
    """
    A builder produced by create_builder().

    handler(options, context) returns a BuilderOutput, an iterable of them,
    or an async iterable of them.
    """

    handler: Callable[[Dict[str, Any], BuilderContext], Any]
    name: Optional[str] = None


@dataclass(frozen=True)
class AltConventionFunction:
    """An executor: fn(options, executor_context) -> result mapping(s)."""

    fn: Callable[..., Any]
    name: Optional[str] = None


def create_builder(handler: Callable[[Dict[str, Any], BuilderContext], Any], *, name: Optional[str] = None) -> NativeBuilder:
    return NativeBuilder(handler=handler, name=name or getattr(handler, "__name__", None))


def create_executor(fn: Callable[..., Any], *, name: Optional[str] = None) -> AltConventionFunction:
    return AltConventionFunction(fn=fn, name=name or getattr(fn, "__name__", None))


def is_builder(value: Any) -> bool:
    return isinstance(value, NativeBuilder)


@dataclass(frozen=True)
class BuilderEntry:
    implementation: str
    schema: Union[str, bool]
    description: Optional[str] = None

    @staticmethod
    def from_raw(raw: Any) -> Optional["BuilderEntry"]:
        """Returns None when raw is not a structurally valid entry."""
        if not isinstance(raw, Mapping):
            return None
        implementation = raw.get("implementation")
        schema = raw.get("schema")
        if not isinstance(implementation, str):
            return None
        if not isinstance(schema, (str, bool)):
            return None
        description = raw.get("description")
        return BuilderEntry(
            implementation=implementation,
            schema=schema,
            description=description if isinstance(description, str) else None,
        )


@dataclass(frozen=True)
class Descriptor:
    package_name: Optional[str]  # None when referenced via $direct
    builder_name: str
    option_schema: JsonSchema
    implementation_path: str  # absolute
    implementation_export: Optional[str] = None  # default export when None
    format: BuilderFormat = BuilderFormat.UNKNOWN
    description: Optional[str] = None

    @property
    def is_alt_format(self) -> Optional[bool]:
        if self.format is BuilderFormat.ALTERNATE:
            return True
        if self.format is BuilderFormat.NATIVE:
            return False
        return None

    def to_dict(self) -> Dict[str, Any]:
        out: Dict[str, Any] = {
            "package_name": self.package_name,
            "builder_name": self.builder_name,
            "option_schema": self.option_schema,
            "implementation_path": self.implementation_path,
            "implementation_export": self.implementation_export,
            "is_alt_format": self.is_alt_format,
        }
        if self.description is not None:
            out["description"] = self.description
        return out
