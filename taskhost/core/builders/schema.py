from __future__ import annotations

from pathlib import Path
from typing import Mapping, Optional, Union

from taskhost.core.errors import InvalidBuilderError

from .loading import is_document, load_document, load_module
from .models import DEFAULT_EXPORT, JsonSchema


def _where(builder_name: str, package_name: Optional[str]) -> str:
    if package_name is None:
        return f'builder "{builder_name}"'
    return f'builder "{builder_name}" in package "{package_name}"'


class SchemaLoader:
    """
    Resolves an entry's `schema` field.

    True accepts any options, False accepts none. A string is a path relative
    to the manifest directory: a JSON/YAML document, or a Python module whose
    BUILDER export is the schema object.
    """

    def load(
        self,
        schema: Union[str, bool],
        *,
        base_dir: Path,
        builder_name: str,
        package_name: Optional[str],
    ) -> JsonSchema:
        if isinstance(schema, bool):
            return schema

        schema_path = (base_dir / schema).resolve()
        try:
            if is_document(schema_path):
                value = load_document(schema_path)
            else:
                value = getattr(load_module(schema_path), DEFAULT_EXPORT, None)
        except Exception as e:
            raise InvalidBuilderError(
                f'Couldn\'t load schema "{schema_path}" for {_where(builder_name, package_name)}: {e}'
            ) from e

        if not isinstance(value, Mapping):
            raise InvalidBuilderError(
                f'Invalid schema at "{schema_path}" for {_where(builder_name, package_name)}'
            )
        return dict(value)
