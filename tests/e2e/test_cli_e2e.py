from __future__ import annotations

"""
End-to-End (E2E) CLI Tests.

Invokes the entry point script via subprocess and validates exit codes,
stream output and filesystem side effects of the build, verify and alias
commands.
"""

import json
import os
import subprocess
import sys
from pathlib import Path
from typing import List

PROJECT_ROOT = Path(__file__).resolve().parent.parent.parent
SRC_DIR = PROJECT_ROOT / "src"
ENTRY_POINT = SRC_DIR / "distmerge" / "main.py"


def run_cli(args: List[str], cwd: Path | None = None) -> subprocess.CompletedProcess[str]:
    """
    Execute the CLI in a separate process with 'src' on PYTHONPATH.

    Args:
        args: Command line arguments (excluding 'python' and script path).
        cwd: Optional working directory for the subprocess.

    Returns:
        subprocess.CompletedProcess: returncode, stdout and stderr.
    """
    env = os.environ.copy()
    env["PYTHONPATH"] = str(SRC_DIR) + os.pathsep + env.get("PYTHONPATH", "")

    cmd = [sys.executable, str(ENTRY_POINT)] + args

    return subprocess.run(
        cmd,
        cwd=cwd,
        env=env,
        capture_output=True,
        text=True,
        encoding="utf-8"
    )


def test_cli_build_happy_path(fake_project) -> None:
    """TC-01: A full build exits 0 and prints the completion banner."""
    cfg = fake_project({
        "student": {"student.html": "s", "assets/app.js": "a"},
        "admin": {"admin.html": "a", "assets/admin.js": "b"},
    })

    result = run_cli(["build", "--root", cfg["project_root"], "--command", cfg["build_command"]])

    assert result.returncode == 0, result.stderr
    assert "Build complete!" in result.stdout
    assert "admin.html" in result.stdout
    assert "Building student app..." in result.stderr
    dist = Path(cfg["project_root"]) / "dist"
    assert (dist / "assets" / "app.js").exists()
    assert (dist / "assets" / "admin.js").exists()


def test_cli_build_propagates_bundler_exit_code(fake_project) -> None:
    """TC-02: The bundler's non-zero status becomes the process status."""
    cfg = fake_project({"student": {}, "admin": {}}, exit_codes={"admin": 4})

    result = run_cli(["build", "--root", cfg["project_root"], "--command", cfg["build_command"]])

    assert result.returncode == 4
    assert "admin" in result.stderr


def test_cli_build_json_output(fake_project) -> None:
    """TC-03: --json prints the result object."""
    cfg = fake_project({
        "student": {"student.html": "s"},
        "admin": {"admin.html": "a"},
    })

    result = run_cli([
        "build", "--root", cfg["project_root"], "--command", cfg["build_command"], "--json",
    ])

    assert result.returncode == 0, result.stderr
    data = json.loads(result.stdout)
    for key in ("ok", "error", "exit_code", "final_state", "dist_dir", "variants", "summary"):
        assert key in data
    assert data["final_state"] == "done"
    assert data["variants"] == ["student", "admin"]


def test_cli_build_reads_project_config(fake_project) -> None:
    """TC-04: distmerge.json in the project root feeds the run."""
    cfg = fake_project({
        "student": {"student.html": "s"},
        "admin": {"admin.html": "a"},
    })
    root = Path(cfg["project_root"])
    (root / "distmerge.json").write_text(
        json.dumps({"build_command": cfg["build_command"], "dist_dir": "site"}),
        encoding="utf-8",
    )

    result = run_cli(["build"], cwd=root)

    assert result.returncode == 0, result.stderr
    assert (root / "site" / "student.html").exists()


def test_cli_dump_config(tmp_path: Path) -> None:
    result = run_cli(["build", "--root", str(tmp_path), "--dump-config", "--use-defaults"])

    assert result.returncode == 0
    data = json.loads(result.stdout)
    assert data["project_root"] == str(tmp_path)
    assert data["alias_name"] == "index.html"


def test_cli_verify_missing_admin(tmp_path: Path) -> None:
    """TC-05: verify exits non-zero naming admin.html."""
    dist = tmp_path / "dist"
    dist.mkdir()
    (dist / "student.html").write_text("s", encoding="utf-8")

    result = run_cli(["verify", "--root", str(tmp_path)])

    assert result.returncode == 1
    assert "admin.html" in result.stderr


def test_cli_verify_ok(tmp_path: Path) -> None:
    dist = tmp_path / "dist"
    dist.mkdir()
    (dist / "student.html").write_text("s", encoding="utf-8")
    (dist / "admin.html").write_text("a", encoding="utf-8")

    result = run_cli(["verify", "--root", str(tmp_path)])

    assert result.returncode == 0
    assert "Verified" in result.stdout


def test_cli_alias_copies_student(tmp_path: Path) -> None:
    """TC-06: alias duplicates student.html as index.html."""
    dist = tmp_path / "dist"
    dist.mkdir()
    (dist / "student.html").write_text("<html>s</html>", encoding="utf-8")

    result = run_cli(["alias"], cwd=tmp_path)

    assert result.returncode == 0, result.stderr
    assert (dist / "index.html").read_text(encoding="utf-8") == "<html>s</html>"


def test_cli_alias_missing_source(tmp_path: Path) -> None:
    """TC-07: alias without student.html exits 1 and creates nothing."""
    dist = tmp_path / "dist"
    dist.mkdir()

    result = run_cli(["alias", "--dir", str(dist)])

    assert result.returncode == 1
    assert "student.html" in result.stderr
    assert not (dist / "index.html").exists()


def test_cli_build_refuses_dist_at_project_root(fake_project) -> None:
    """TC-09: --dist . is a configuration error and the project is left intact."""
    cfg = fake_project({
        "student": {"student.html": "s"},
        "admin": {"admin.html": "a"},
    })
    root = Path(cfg["project_root"])
    (root / "package.json").write_text("{}", encoding="utf-8")

    result = run_cli([
        "build", "--root", str(root), "--command", cfg["build_command"], "--dist", ".",
    ])

    assert result.returncode == 1
    assert "Invalid configuration" in result.stderr
    assert "dist_dir" in result.stderr
    assert (root / "package.json").exists()
    assert not (root / "student.html").exists()


def test_cli_alias_uses_project_config(tmp_path: Path) -> None:
    """TC-10: alias_source, alias_name and dist_dir come from distmerge.json."""
    site = tmp_path / "site"
    site.mkdir()
    (site / "admin.html").write_text("<html>a</html>", encoding="utf-8")
    (tmp_path / "distmerge.json").write_text(
        json.dumps({"dist_dir": "site", "alias_source": "admin.html", "alias_name": "home.html"}),
        encoding="utf-8",
    )

    result = run_cli(["alias", "--root", str(tmp_path)])

    assert result.returncode == 0, result.stderr
    assert (site / "home.html").read_text(encoding="utf-8") == "<html>a</html>"
    assert not (site / "index.html").exists()


def test_cli_alias_flags_override_project_config(tmp_path: Path) -> None:
    dist = tmp_path / "dist"
    dist.mkdir()
    (dist / "student.html").write_text("s", encoding="utf-8")
    (tmp_path / "distmerge.json").write_text(
        json.dumps({"alias_source": "admin.html"}), encoding="utf-8"
    )

    result = run_cli(["alias", "--source", "student.html"], cwd=tmp_path)

    assert result.returncode == 0, result.stderr
    assert (dist / "index.html").read_text(encoding="utf-8") == "s"


def test_cli_help_message() -> None:
    """TC-08: Smoke test for argparse."""
    result = run_cli(["--help"])

    assert result.returncode == 0
    assert "usage: distmerge" in result.stdout
    assert "build" in result.stdout
