from .adapter import ExecutorContext, convert_executor_into_builder
from .implementation import ImplementationLoader
from .manifest import LoadedManifest, ManifestLoader
from .models import (
    AltConventionFunction,
    BuilderContext,
    BuilderEntry,
    BuilderFormat,
    BuilderOutput,
    Descriptor,
    NativeBuilder,
    create_builder,
    create_executor,
    is_builder,
)
from .package_resolver import PackageResolver
from .resolver import DIRECT_PACKAGE, BuilderResolver
from .schema import SchemaLoader

__all__ = [
    "AltConventionFunction",
    "BuilderContext",
    "BuilderEntry",
    "BuilderFormat",
    "BuilderOutput",
    "BuilderResolver",
    "DIRECT_PACKAGE",
    "Descriptor",
    "ExecutorContext",
    "ImplementationLoader",
    "LoadedManifest",
    "ManifestLoader",
    "NativeBuilder",
    "PackageResolver",
    "SchemaLoader",
    "convert_executor_into_builder",
    "create_builder",
    "create_executor",
    "is_builder",
]
