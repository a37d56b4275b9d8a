from pathlib import Path

import pytest

from taskhost.core.builders.schema import SchemaLoader
from taskhost.core.errors import InvalidBuilderError

from conftest import write_json, write_py


def _load(schema, base_dir: Path):
    return SchemaLoader().load(schema, base_dir=base_dir, builder_name="b", package_name="pkg")


@pytest.mark.parametrize("value", [True, False])
def test_boolean_schema_passes_through(tmp_path: Path, value):
    assert _load(value, tmp_path) is value


def test_string_schema_loads_relative_document(tmp_path: Path):
    write_json(tmp_path / "schemas" / "opts.json", {"type": "object"})
    assert _load("./schemas/opts.json", tmp_path) == {"type": "object"}


def test_python_schema_uses_builder_export(tmp_path: Path):
    write_py(tmp_path / "schema.py", 'BUILDER = {"type": "object", "cli": "executor"}\n')
    assert _load("schema.py", tmp_path) == {"type": "object", "cli": "executor"}


def test_missing_schema_is_unloadable(tmp_path: Path):
    with pytest.raises(InvalidBuilderError) as ei:
        _load("./nope.json", tmp_path)
    assert "Couldn't load schema" in str(ei.value)
    assert 'builder "b" in package "pkg"' in str(ei.value)


def test_non_object_schema_is_invalid(tmp_path: Path):
    write_json(tmp_path / "schema.json", [1, 2, 3])
    with pytest.raises(InvalidBuilderError) as ei:
        _load("schema.json", tmp_path)
    assert "Invalid schema" in str(ei.value)
