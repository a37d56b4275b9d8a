from pathlib import Path

import pytest

from taskhost.core.builders.manifest import ManifestLoader
from taskhost.core.errors import InvalidBuilderError

from conftest import write_json


def test_indirection_is_followed_relative_to_each_document(tmp_path: Path):
    write_json(tmp_path / "plugin.json", {"builders": "./nested/level1.json"})
    write_json(tmp_path / "nested" / "level1.json", {"builders": "../final/builders.json"})
    write_json(
        tmp_path / "final" / "builders.json",
        {"builders": {"a": {"implementation": "./a", "schema": True}}},
    )

    m = ManifestLoader().load(tmp_path / "plugin.json")
    assert m.path == (tmp_path / "final" / "builders.json").resolve()
    assert list(m.builders) == ["a"]
    assert m.executors is None


def test_executors_only_taken_from_final_document(tmp_path: Path):
    write_json(
        tmp_path / "plugin.json",
        {"builders": "./builders.json", "executors": {"ignored": {"implementation": "x", "schema": True}}},
    )
    write_json(
        tmp_path / "builders.json",
        {"builders": {}, "executors": {"run": {"implementation": "./run", "schema": True}}},
    )

    m = ManifestLoader().load(tmp_path / "plugin.json")
    assert m.executors is not None
    assert list(m.executors) == ["run"]


def test_non_object_executors_is_treated_as_absent(tmp_path: Path):
    write_json(tmp_path / "builders.json", {"builders": {}, "executors": "./executors.json"})
    m = ManifestLoader().load(tmp_path / "builders.json")
    assert m.executors is None


def test_missing_builders_field_is_malformed_configuration(tmp_path: Path):
    write_json(tmp_path / "plugin.json", {"name": "nothing-here"})
    with pytest.raises(InvalidBuilderError) as ei:
        ManifestLoader().load(tmp_path / "plugin.json", package_name="pkg")
    assert '"builders" must be an object' in str(ei.value)
    assert "pkg" in str(ei.value)


def test_non_object_builders_field_is_malformed_configuration(tmp_path: Path):
    write_json(tmp_path / "plugin.json", {"builders": ["a", "b"]})
    with pytest.raises(InvalidBuilderError):
        ManifestLoader().load(tmp_path / "plugin.json")


def test_unreadable_hop_names_the_failing_path(tmp_path: Path):
    write_json(tmp_path / "plugin.json", {"builders": "./gone.json"})
    with pytest.raises(InvalidBuilderError) as ei:
        ManifestLoader().load(tmp_path / "plugin.json")
    assert str((tmp_path / "gone.json").resolve()) in str(ei.value)


def test_unparseable_document_names_the_failing_path(tmp_path: Path):
    bad = tmp_path / "plugin.json"
    bad.write_text("{not json", encoding="utf-8")
    with pytest.raises(InvalidBuilderError) as ei:
        ManifestLoader().load(bad)
    assert str(bad.resolve()) in str(ei.value)


def test_self_referencing_pointer_is_rejected(tmp_path: Path):
    write_json(tmp_path / "a.json", {"builders": "./b.json"})
    write_json(tmp_path / "b.json", {"builders": "./a.json"})
    with pytest.raises(InvalidBuilderError) as ei:
        ManifestLoader().load(tmp_path / "a.json", package_name="loop")
    assert "points back to itself" in str(ei.value)


def test_yaml_manifest(tmp_path: Path):
    (tmp_path / "builders.yaml").write_text(
        "builders:\n  lint:\n    implementation: ./lint\n    schema: true\n",
        encoding="utf-8",
    )
    m = ManifestLoader().load(tmp_path / "builders.yaml")
    assert m.builders["lint"] == {"implementation": "./lint", "schema": True}


def test_names_are_unique_builders_first(tmp_path: Path):
    write_json(
        tmp_path / "builders.json",
        {
            "builders": {"a": {}, "shared": {}},
            "executors": {"shared": {}, "z": {}},
        },
    )
    m = ManifestLoader().load(tmp_path / "builders.json")
    assert m.names() == ["a", "shared", "z"]
