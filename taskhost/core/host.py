from __future__ import annotations

from pathlib import Path
from typing import Any, Dict, Iterable, List, Optional, Union

from taskhost.core.builders.implementation import ImplementationLoader
from taskhost.core.builders.models import BuilderContext, Descriptor, NativeBuilder
from taskhost.core.builders.package_resolver import PackageResolver
from taskhost.core.builders.resolver import BuilderResolver
from taskhost.core.workspace.models import Target
from taskhost.core.workspace.workspace import Workspace


class BuilderHost:
    """
    Facade the execution engine talks to.

    resolve_builder() -> Descriptor, load_builder(Descriptor) -> NativeBuilder,
    and get_options_for_target() for the options passed at invocation time.

    Plugins are searched in the workspace root, then the start directory, then
    any extra plugin directories.
    """

    def __init__(
        self,
        *,
        start_cwd: Union[str, Path],
        workspace: Workspace,
        plugin_dirs: Iterable[Union[str, Path]] = (),
        resolver: Optional[BuilderResolver] = None,
        implementations: Optional[ImplementationLoader] = None,
    ):
        self.start_cwd = str(Path(start_cwd).resolve())
        self.workspace = workspace
        self.resolver = resolver or BuilderResolver(
            PackageResolver([workspace.base_path, self.start_cwd, *plugin_dirs])
        )
        self.implementations = implementations or ImplementationLoader(workspace.convert_executor_into_builder)

    def get_builder_name_for_target(self, target: Target) -> str:
        return self.workspace.get_target(target).builder

    def list_builders(self, package_name: str) -> List[Dict[str, str]]:
        manifest = self.resolver.load_manifest(package_name)
        executors = manifest.executors or {}

        out: List[Dict[str, str]] = []
        for name in manifest.names():
            item = {"name": name}
            description = _description(manifest.builders.get(name))
            if description is None:
                description = _description(executors.get(name))
            if description is not None:
                item["description"] = description
            out.append(item)
        return out

    def resolve_builder(self, specifier: str) -> Descriptor:
        return self.resolver.resolve_builder(specifier)

    def load_builder(self, descriptor: Descriptor) -> NativeBuilder:
        return self.implementations.load(descriptor)

    def get_current_directory(self) -> str:
        return self.start_cwd

    def get_workspace_root(self) -> str:
        return self.workspace.base_path or self.start_cwd

    def get_options_for_target(self, target: Target) -> Dict[str, Any]:
        return self.workspace.get_options_for_target(target)

    def get_project_metadata(self, project_or_target: Union[str, Target]) -> Dict[str, Any]:
        name = project_or_target if isinstance(project_or_target, str) else project_or_target.project
        return self.workspace.get_project_metadata(name)

    def builder_context(self, target: Optional[Target] = None) -> BuilderContext:
        return BuilderContext(
            workspace_root=self.get_workspace_root(),
            current_directory=self.get_current_directory(),
            target=target,
            project_metadata=self.get_project_metadata(target) if target is not None else {},
        )


def _description(entry: Any) -> Optional[str]:
    if isinstance(entry, dict) and isinstance(entry.get("description"), str):
        return entry["description"]
    return None
