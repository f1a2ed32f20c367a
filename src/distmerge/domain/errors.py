from __future__ import annotations

"""
Domain Error Taxonomy.

Every failure in a build run is fatal and non-retryable. Each error carries
the process exit code the CLI should return for it.
"""

from distmerge.domain.constants import EXIT_FAILURE


class DistMergeError(Exception):
    """Base class for all distmerge failures."""

    exit_code: int = EXIT_FAILURE


class ConfigError(DistMergeError):
    """Raised by strict configuration validation."""


class BuildCommandError(DistMergeError):
    """
    The external build command exited non-zero or could not be started.

    Attributes:
        variant_id: Variant whose build failed.
        returncode: Exit status of the build command, propagated as-is.
    """

    def __init__(self, variant_id: str, returncode: int, detail: str = "") -> None:
        self.variant_id = variant_id
        self.returncode = returncode
        self.exit_code = returncode if returncode > 0 else EXIT_FAILURE
        msg = f"Build of variant '{variant_id}' failed with exit code {returncode}"
        if detail:
            msg = f"{msg}: {detail}"
        super().__init__(msg)


class MissingArtifactError(DistMergeError):
    """
    A required marker file is absent.

    Attributes:
        filename: Name of the missing file.
        directory: Directory that was searched.
    """

    def __init__(self, filename: str, directory: str) -> None:
        self.filename = filename
        self.directory = directory
        super().__init__(f"{filename} not found in {directory}")


class InvalidTransitionError(DistMergeError):
    """An orchestrator step was invoked out of order."""

    def __init__(self, current: str, attempted: str) -> None:
        self.current = current
        self.attempted = attempted
        super().__init__(f"Cannot run '{attempted}' from state {current}")
