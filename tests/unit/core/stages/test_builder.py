from __future__ import annotations

"""
Unit tests for the Variant Build stage.

Verifies the subprocess contract (argv, cwd, environment), exit code
propagation and executable resolution, with subprocess.run mocked out.
"""

import os
import subprocess
from pathlib import Path
from unittest.mock import MagicMock, patch

import pytest

from distmerge.core.pipeline.stages.builder import build_variant
from distmerge.domain.errors import BuildCommandError
from distmerge.domain.pipeline_models import VariantBuildConfig


def _variant(command: str = "npm run build:{variant}") -> VariantBuildConfig:
    return VariantBuildConfig(
        variant_id="admin",
        output_dir="dist-admin-temp",
        command=command,
        variant_env_key="VITE_APP_TYPE",
        output_dir_env_key="BUILD_OUT_DIR",
    )


@patch("distmerge.core.pipeline.stages.builder.shutil.which", return_value="/usr/bin/npm")
@patch("distmerge.core.pipeline.stages.builder.subprocess.run")
def test_build_variant_invokes_bundler(mock_run: MagicMock, _which: MagicMock, tmp_path: Path) -> None:
    """TC-01: Command, cwd and environment overrides are passed to the subprocess."""
    mock_run.return_value = subprocess.CompletedProcess(args=[], returncode=0)

    out = build_variant(_variant(), str(tmp_path), base_env={"PATH": "/usr/bin", "HOME": "/h"})

    argv = mock_run.call_args.args[0]
    kwargs = mock_run.call_args.kwargs
    assert argv == ["/usr/bin/npm", "run", "build:admin"]
    assert kwargs["cwd"] == str(tmp_path)
    assert kwargs["env"]["VITE_APP_TYPE"] == "admin"
    assert kwargs["env"]["BUILD_OUT_DIR"] == "dist-admin-temp"
    assert kwargs["env"]["HOME"] == "/h"
    assert out == os.path.join(str(tmp_path), "dist-admin-temp")


@patch("distmerge.core.pipeline.stages.builder.shutil.which", return_value="/usr/bin/npm")
@patch("distmerge.core.pipeline.stages.builder.subprocess.run")
def test_build_variant_does_not_touch_process_env(mock_run: MagicMock, _which: MagicMock, tmp_path: Path) -> None:
    """TC-02: The parent environment is never mutated."""
    mock_run.return_value = subprocess.CompletedProcess(args=[], returncode=0)
    before = os.environ.get("BUILD_OUT_DIR")

    build_variant(_variant(), str(tmp_path))

    assert os.environ.get("BUILD_OUT_DIR") == before


@patch("distmerge.core.pipeline.stages.builder.shutil.which", return_value="/usr/bin/npm")
@patch("distmerge.core.pipeline.stages.builder.subprocess.run")
def test_build_variant_propagates_exit_code(mock_run: MagicMock, _which: MagicMock, tmp_path: Path) -> None:
    """TC-03: A non-zero exit raises with the bundler's own status."""
    mock_run.return_value = subprocess.CompletedProcess(args=[], returncode=3)

    with pytest.raises(BuildCommandError) as exc:
        build_variant(_variant(), str(tmp_path))

    assert exc.value.returncode == 3
    assert exc.value.exit_code == 3
    assert exc.value.variant_id == "admin"


@patch("distmerge.core.pipeline.stages.builder.shutil.which", return_value=None)
@patch("distmerge.core.pipeline.stages.builder.subprocess.run")
def test_build_variant_missing_executable(mock_run: MagicMock, _which: MagicMock, tmp_path: Path) -> None:
    """TC-04: An executable missing from PATH maps to exit code 127 without running."""
    with pytest.raises(BuildCommandError) as exc:
        build_variant(_variant(), str(tmp_path))

    assert exc.value.exit_code == 127
    mock_run.assert_not_called()


@patch("distmerge.core.pipeline.stages.builder.subprocess.run")
def test_build_variant_relative_program_resolves_under_root(mock_run: MagicMock, tmp_path: Path) -> None:
    """TC-05: './scripts/build.sh' runs from the project root."""
    mock_run.return_value = subprocess.CompletedProcess(args=[], returncode=0)

    build_variant(_variant("./scripts/build.sh {variant}"), str(tmp_path))

    argv = mock_run.call_args.args[0]
    assert argv[0] == os.path.join(str(tmp_path), "./scripts/build.sh")
    assert argv[1] == "admin"


@patch("distmerge.core.pipeline.stages.builder.subprocess.run", side_effect=PermissionError("denied"))
def test_build_variant_os_error_is_wrapped(_run: MagicMock, tmp_path: Path) -> None:
    """TC-06: Failing to start the process is a build failure, not a crash."""
    with pytest.raises(BuildCommandError) as exc:
        build_variant(_variant("/opt/bin/bundle {variant}"), str(tmp_path))

    assert "denied" in str(exc.value)


def test_build_variant_empty_command(tmp_path: Path) -> None:
    """TC-07: A blank command cannot be run."""
    with pytest.raises(BuildCommandError):
        build_variant(_variant("   "), str(tmp_path))
