from __future__ import annotations

"""
Global Pytest Configuration and Fixtures.

This module sets up the testing environment, including:
1. Path manipulation to ensure the 'src' directory is importable.
2. Helpers to materialize and read back small directory trees.
3. A fake bundler: a Python script that writes a preset output tree into
   the directory named by BUILD_OUT_DIR for the variant in VITE_APP_TYPE.
"""

import json
import os
import shlex
import sys
from pathlib import Path
from typing import Any, Callable, Dict, Optional

import pytest

# -----------------------------------------------------------------------------
# Path Configuration
# -----------------------------------------------------------------------------
_SRC_PATH = os.path.abspath(os.path.join(os.path.dirname(__file__), "..", "src"))
if _SRC_PATH not in sys.path:
    sys.path.insert(0, _SRC_PATH)


FAKE_BUNDLER_SOURCE = '''
import json
import os
import sys

here = os.path.dirname(os.path.abspath(__file__))
with open(os.path.join(here, "outputs.json"), "r", encoding="utf-8") as f:
    plan = json.load(f)

variant = os.environ["VITE_APP_TYPE"]
out_dir = os.environ["BUILD_OUT_DIR"]

with open(os.path.join(here, "calls.log"), "a", encoding="utf-8") as f:
    f.write(variant + " " + out_dir + " " + " ".join(sys.argv[1:]) + "\\n")

code = plan.get("exit", {}).get(variant, 0)
if code:
    sys.exit(code)

for rel, content in plan["files"].get(variant, {}).items():
    path = os.path.join(out_dir, *rel.split("/"))
    parent = os.path.dirname(path)
    if parent:
        os.makedirs(parent, exist_ok=True)
    with open(path, "w", encoding="utf-8") as f:
        f.write(content)
'''


# -----------------------------------------------------------------------------
# Tree helpers
# -----------------------------------------------------------------------------
def write_tree(root: Path, files: Dict[str, str]) -> Path:
    """Create files (relative '/'-paths mapped to text content) under root."""
    root.mkdir(parents=True, exist_ok=True)
    for rel, content in files.items():
        path = root.joinpath(*rel.split("/"))
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(content, encoding="utf-8")
    return root


def read_tree(root: Path) -> Dict[str, str]:
    """Return every file under root as a relative '/'-path to content mapping."""
    out: Dict[str, str] = {}
    for path in sorted(root.rglob("*")):
        if path.is_file():
            out[path.relative_to(root).as_posix()] = path.read_text(encoding="utf-8")
    return out


# -----------------------------------------------------------------------------
# Shared Fixtures
# -----------------------------------------------------------------------------
@pytest.fixture
def fake_project(tmp_path: Path) -> Callable[..., Dict[str, Any]]:
    """
    Factory for a project whose build command is the fake bundler.

    Returns a callable taking the per-variant output files and optional
    per-variant exit codes, and returning a raw configuration dictionary.
    """
    def _make(
            files: Dict[str, Dict[str, str]],
            exit_codes: Optional[Dict[str, int]] = None,
    ) -> Dict[str, Any]:
        tools = tmp_path / "tools"
        tools.mkdir(exist_ok=True)
        script = tools / "fake_bundler.py"
        script.write_text(FAKE_BUNDLER_SOURCE, encoding="utf-8")
        (tools / "outputs.json").write_text(
            json.dumps({"files": files, "exit": exit_codes or {}}), encoding="utf-8"
        )

        project = tmp_path / "project"
        project.mkdir(exist_ok=True)

        command = f"{shlex.quote(sys.executable)} {shlex.quote(str(script))} build:{{variant}}"
        return {
            "project_root": str(project),
            "build_command": command,
        }

    return _make


@pytest.fixture
def fake_calls(tmp_path: Path) -> Callable[[], list]:
    """Read the invocations recorded by the fake bundler."""
    def _read() -> list:
        log = tmp_path / "tools" / "calls.log"
        if not log.exists():
            return []
        return log.read_text(encoding="utf-8").splitlines()

    return _read


@pytest.fixture
def make_tree() -> Callable[[Path, Dict[str, str]], Path]:
    return write_tree


@pytest.fixture
def snapshot_tree() -> Callable[[Path], Dict[str, str]]:
    return read_tree
