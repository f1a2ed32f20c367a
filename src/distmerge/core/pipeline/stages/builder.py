from __future__ import annotations

"""
Variant Build Stage.

Runs the external bundler for one variant as a blocking subprocess. The
variant identifier and output directory are handed over through an explicit
environment mapping built from VariantBuildConfig; the parent process
environment is left untouched. There is no timeout and no retry.
"""

import logging
import os
import shlex
import shutil
import subprocess
from typing import List, Mapping, Optional

from distmerge.domain.constants import EXIT_COMMAND_NOT_FOUND
from distmerge.domain.errors import BuildCommandError
from distmerge.domain.pipeline_models import VariantBuildConfig

logger = logging.getLogger(__name__)


def build_variant(
        variant: VariantBuildConfig,
        project_root: str,
        base_env: Optional[Mapping[str, str]] = None,
) -> str:
    """
    Build one variant and return the absolute path of its output tree.

    stdout and stderr of the bundler are inherited so its own progress
    output reaches the terminal unchanged.

    Args:
        variant: Bundler hand-off for this variant.
        project_root: Working directory of the bundler.
        base_env: Parent environment; defaults to os.environ.

    Returns:
        str: Absolute path of the output tree the bundler was told to fill.

    Raises:
        BuildCommandError: The command is empty, cannot be found, or exited
            with a non-zero status.
    """
    env = variant.to_env(base_env)
    argv = _split_command(variant)
    argv[0] = _resolve_executable(argv[0], project_root, env, variant.variant_id)

    logger.info(f"Building {variant.variant_id} app...")
    logger.debug(
        f"Command: {argv} | cwd={project_root} | "
        f"{variant.variant_env_key}={variant.variant_id} "
        f"{variant.output_dir_env_key}={variant.output_dir}"
    )

    try:
        completed = subprocess.run(argv, cwd=project_root, env=env)
    except OSError as e:
        raise BuildCommandError(variant.variant_id, EXIT_COMMAND_NOT_FOUND, str(e)) from e

    if completed.returncode != 0:
        logger.error(
            f"Build of '{variant.variant_id}' exited with status {completed.returncode}"
        )
        raise BuildCommandError(variant.variant_id, completed.returncode)

    return os.path.join(project_root, variant.output_dir)


# -----------------------------------------------------------------------------
# PRIVATE HELPERS
# -----------------------------------------------------------------------------

def _split_command(variant: VariantBuildConfig) -> List[str]:
    command = variant.render_command()
    argv = shlex.split(command, posix=(os.name != "nt"))
    if not argv:
        raise BuildCommandError(variant.variant_id, EXIT_COMMAND_NOT_FOUND, "empty build command")
    return argv


def _resolve_executable(
        program: str,
        project_root: str,
        env: Mapping[str, str],
        variant_id: str
) -> str:
    """
    Locate the program the way a shell would.

    Bare names go through PATH (which also finds npm.cmd on Windows);
    relative paths are taken relative to the project root.
    """
    if os.path.dirname(program):
        if os.path.isabs(program):
            return program
        return os.path.join(project_root, program)

    found = shutil.which(program, path=env.get("PATH"))
    if found is None:
        raise BuildCommandError(
            variant_id, EXIT_COMMAND_NOT_FOUND, f"'{program}' not found on PATH"
        )
    return found
