from pathlib import Path

from taskhost.core.builders.package_resolver import DOORWAY_FILE, PackageResolver, dedupe_dirs

from conftest import write_json, write_py


def test_dedupe_dirs_preserves_first_seen_order(tmp_path: Path):
    a = tmp_path / "a"
    b = tmp_path / "b"
    dirs = dedupe_dirs([a, b, str(a), None, "", b / ".." / "a"])
    assert dirs == [a.resolve(), b.resolve()]


def test_doorway_is_preferred_over_bare_module(tmp_path: Path):
    base = tmp_path / "base"
    write_json(base / "pkg" / DOORWAY_FILE, {"builders": {}})
    write_py(base / "pkg" / "__init__.py", "")

    found = PackageResolver([base]).resolve("pkg")
    assert found == (base / "pkg" / DOORWAY_FILE).resolve()


def test_bare_specifier_falls_back_to_module_file(tmp_path: Path):
    base = tmp_path / "base"
    write_py(base / "tools" / "my_builder.py", "BUILDER = None\n")

    found = PackageResolver([base]).resolve("tools/my_builder")
    assert found == (base / "tools" / "my_builder.py").resolve()


def test_bare_specifier_resolves_document_and_package_init(tmp_path: Path):
    base = tmp_path / "base"
    write_json(base / "local" / "builders.json", {"builders": {}})
    write_py(base / "pkgdir" / "__init__.py", "")

    resolver = PackageResolver([base])
    assert resolver.resolve("local/builders.json") == (base / "local" / "builders.json").resolve()
    assert resolver.resolve("local/builders") == (base / "local" / "builders.json").resolve()
    assert resolver.resolve("pkgdir") == (base / "pkgdir" / "__init__.py").resolve()


def test_dotted_module_path_resolves_like_an_import(tmp_path: Path):
    base = tmp_path / "base"
    write_py(base / "acme" / "builders" / "lint.py", "")

    found = PackageResolver([base]).resolve("acme.builders.lint")
    assert found == (base / "acme" / "builders" / "lint.py").resolve()


def test_first_base_directory_wins(tmp_path: Path):
    first = tmp_path / "first"
    second = tmp_path / "second"
    write_json(first / "pkg" / DOORWAY_FILE, {"builders": {}})
    write_json(second / "pkg" / DOORWAY_FILE, {"builders": {}})

    found = PackageResolver([first, second]).resolve("pkg")
    assert found == (first / "pkg" / DOORWAY_FILE).resolve()


def test_later_base_directory_is_searched_when_earlier_misses(tmp_path: Path):
    first = tmp_path / "first"
    first.mkdir()
    second = tmp_path / "second"
    write_json(second / "pkg" / DOORWAY_FILE, {"builders": {}})

    found = PackageResolver([first, second]).resolve("pkg")
    assert found == (second / "pkg" / DOORWAY_FILE).resolve()


def test_not_found_returns_none(tmp_path: Path):
    assert PackageResolver([tmp_path]).resolve("missing") is None


def test_explicit_base_dirs_override_constructor_dirs(tmp_path: Path):
    other = tmp_path / "other"
    write_py(other / "mod.py", "")

    resolver = PackageResolver([tmp_path / "nowhere"])
    assert resolver.resolve("mod") is None
    assert resolver.resolve("mod", [other]) == (other / "mod.py").resolve()
