import json
import textwrap
from pathlib import Path

import pytest

from taskhost.core.builders.loading import document_cache, module_cache
from taskhost.core.observability.metrics import reset_metrics


@pytest.fixture(autouse=True)
def _fresh_caches():
    # Make every test start from empty path caches / counters
    document_cache().clear()
    module_cache().clear()
    reset_metrics()
    yield
    document_cache().clear()
    module_cache().clear()


def write_json(path: Path, data) -> Path:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(json.dumps(data, indent=2), encoding="utf-8")
    return path


def write_py(path: Path, source: str) -> Path:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(textwrap.dedent(source), encoding="utf-8")
    return path


NATIVE_BUILDER_SRC = """
from taskhost.core.builders import BuilderOutput, create_builder


def _run(options, context):
    return BuilderOutput(success=True, data={"options": dict(options)})


BUILDER = create_builder(_run, name="native")
"""

EXECUTOR_SRC = """
def run_executor(options, context):
    yield {"success": True, "step": 1, "project": context.project_name}
    yield {"success": bool(options.get("ok", True)), "step": 2}


BUILDER = run_executor
"""


@pytest.fixture()
def plugin_root(tmp_path: Path) -> Path:
    """
    <tmp>/plugins/
      demo/plugin.json        -> {"builders": "./builders.json"}
      demo/builders.json      -> builders + executors maps
      demo/native.py          -> BUILDER = create_builder(...)
      demo/executor.py        -> generator executor
      demo/schema.json
    """
    root = tmp_path / "plugins"
    pkg = root / "demo"
    write_json(pkg / "plugin.json", {"name": "demo", "builders": "./builders.json"})
    write_json(
        pkg / "builders.json",
        {
            "builders": {
                "build": {
                    "implementation": "./native",
                    "schema": "./schema.json",
                    "description": "Native build",
                },
                "shared": {
                    "implementation": "./native",
                    "schema": True,
                    "description": "Shim kept for older hosts",
                },
            },
            "executors": {
                "run": {
                    "implementation": "./executor#run_executor",
                    "schema": True,
                    "description": "Run as executor",
                },
                "shared": {
                    "implementation": "./executor#run_executor",
                    "schema": False,
                },
            },
        },
    )
    write_json(pkg / "schema.json", {"type": "object", "properties": {"out": {"type": "string"}}})
    write_py(pkg / "native.py", NATIVE_BUILDER_SRC)
    write_py(pkg / "executor.py", EXECUTOR_SRC)
    return root
