from __future__ import annotations

from typing import Optional


class TaskHostError(Exception):
    """Base class for every failure raised by the builder host."""


class InvalidBuilderSpecifiedError(TaskHostError):
    def __init__(self, specifier: str, message: Optional[str] = None):
        self.specifier = specifier
        super().__init__(
            message
            or (
                f'Invalid builder "{specifier}": builders must list a collection, '
                "use $direct as collection to use a builder directly"
            )
        )


class UnknownBuilderError(TaskHostError):
    def __init__(self, package_name: Optional[str], builder_name: Optional[str] = None, message: Optional[str] = None):
        self.package_name = package_name
        self.builder_name = builder_name
        if message is None:
            if builder_name is None:
                message = f'Can\'t find builder package "{package_name}"'
            elif package_name is None:
                message = f'Can\'t find builder "{builder_name}"'
            else:
                message = f'Can\'t find builder "{builder_name}" in package "{package_name}"'
        super().__init__(message)


class InvalidBuilderError(TaskHostError):
    """Manifest, schema or implementation is structurally unusable."""


class UnknownTargetError(TaskHostError):
    def __init__(self, project: str, target: Optional[str] = None, message: Optional[str] = None):
        self.project = project
        self.target = target
        super().__init__(message or f'Project "{project}" has no target named "{target}"')


class UnknownProjectError(UnknownTargetError):
    def __init__(self, project: str):
        super().__init__(project, None, f'Unknown project "{project}"')


class UnknownConfigurationError(TaskHostError):
    def __init__(self, configuration: str, project: str, target: str):
        self.configuration = configuration
        self.project = project
        self.target = target
        super().__init__(
            f'Target "{target}" in project "{project}" has no configuration named "{configuration}"'
        )


class InvalidWorkspaceError(TaskHostError):
    def __init__(self, path: str, reason: str):
        self.path = path
        self.reason = reason
        super().__init__(f"Invalid workspace file {path}: {reason}")
