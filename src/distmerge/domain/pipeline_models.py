from __future__ import annotations

"""
Pipeline Domain Data Models.

Defines the build state machine, the explicit bundler hand-off for each
variant, merge reports and the result object passed from the orchestrator
to the interface layer.
"""

import os
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, List, Mapping, Optional

from distmerge.domain.constants import EXIT_OK, VARIANT_PLACEHOLDER

# -----------------------------------------------------------------------------
# STATE MACHINE
# -----------------------------------------------------------------------------

class BuildState(str, Enum):
    """Lifecycle of one dual-variant build run."""
    START = "start"
    PREPARED = "prepared"
    VARIANT1_BUILT = "variant1_built"
    VARIANT1_MERGED = "variant1_merged"
    VARIANT2_BUILT = "variant2_built"
    VARIANT2_MERGED = "variant2_merged"
    VERIFIED = "verified"
    DONE = "done"
    FAILED = "failed"


# Allowed source states for every step. FAILED is terminal.
TRANSITIONS: Dict[BuildState, tuple] = {
    BuildState.PREPARED: (BuildState.START, BuildState.PREPARED),
    BuildState.VARIANT1_BUILT: (BuildState.PREPARED,),
    BuildState.VARIANT1_MERGED: (BuildState.VARIANT1_BUILT,),
    BuildState.VARIANT2_BUILT: (BuildState.VARIANT1_MERGED,),
    BuildState.VARIANT2_MERGED: (BuildState.VARIANT2_BUILT,),
    BuildState.VERIFIED: (BuildState.VARIANT2_MERGED, BuildState.VERIFIED),
    BuildState.DONE: (BuildState.VERIFIED,),
}

# -----------------------------------------------------------------------------
# CORE DATA MODELS
# -----------------------------------------------------------------------------

@dataclass(frozen=True)
class VariantBuildConfig:
    """
    Everything the bundler needs to build one variant.

    Attributes:
        variant_id: Variant identifier handed to the bundler.
        output_dir: Output directory name, relative to the project root.
        command: Build command template; '{variant}' is substituted.
        variant_env_key: Environment key carrying the variant identifier.
        output_dir_env_key: Environment key carrying the output directory.
    """
    variant_id: str
    output_dir: str
    command: str
    variant_env_key: str
    output_dir_env_key: str

    def render_command(self) -> str:
        """Return the command line for this variant."""
        return self.command.replace(VARIANT_PLACEHOLDER, self.variant_id)

    def to_env(self, base: Optional[Mapping[str, str]] = None) -> Dict[str, str]:
        """
        Build the subprocess environment.

        Args:
            base: Parent environment; defaults to a copy of os.environ.

        Returns:
            Dict[str, str]: A new mapping with the two overrides applied.
        """
        env = dict(os.environ if base is None else base)
        env[self.variant_env_key] = self.variant_id
        env[self.output_dir_env_key] = self.output_dir
        return env


@dataclass
class MergeReport:
    """
    What a merge step did, as '/'-separated paths relative to the merged tree.

    Attributes:
        variant_id: Variant the merged output tree belonged to.
        copied: Entries written where nothing existed before.
        overwritten: Entries written over an existing entry.
        skipped: Entries left untouched because the destination already had them.
        replaced_dirs: Nested directories replaced wholesale instead of merged.
        source_missing: True if the output tree did not exist.
    """
    variant_id: str
    copied: List[str] = field(default_factory=list)
    overwritten: List[str] = field(default_factory=list)
    skipped: List[str] = field(default_factory=list)
    replaced_dirs: List[str] = field(default_factory=list)
    source_missing: bool = False

    def as_dict(self) -> Dict[str, Any]:
        return {
            "variant": self.variant_id,
            "copied": list(self.copied),
            "overwritten": list(self.overwritten),
            "skipped": list(self.skipped),
            "replaced_dirs": list(self.replaced_dirs),
            "source_missing": self.source_missing,
        }


@dataclass(frozen=True)
class BuildResult:
    """
    Outcome of a complete build run.

    Attributes:
        ok: Flag indicating success or failure.
        error: Descriptive message in case of failure.
        exit_code: Process exit code the CLI should return.
        final_state: State the orchestrator ended in.
        dist_dir: Absolute path of the merged tree.
        variants: Variant identifiers in build order.
        summary: Merge reports and verified artifacts.
    """
    ok: bool
    error: str
    exit_code: int
    final_state: str
    dist_dir: str
    variants: List[str] = field(default_factory=list)
    summary: Dict[str, Any] = field(default_factory=dict)

# -----------------------------------------------------------------------------
# FACTORY FUNCTIONS
# -----------------------------------------------------------------------------

def create_error_result(
        error: str,
        exit_code: int,
        final_state: BuildState,
        dist_dir: str,
        variants: List[str],
        summary_extra: Optional[Dict[str, Any]] = None
) -> BuildResult:
    """
    Create a failed build result.

    Args:
        error: Detailed error description.
        exit_code: Non-zero exit code to propagate.
        final_state: State reached before failing (usually FAILED).
        dist_dir: Merged tree location.
        variants: Variant identifiers in build order.
        summary_extra: Partial reports collected before the failure.

    Returns:
        BuildResult: An immutable error result object.
    """
    return BuildResult(
        ok=False,
        error=error,
        exit_code=exit_code,
        final_state=final_state.value,
        dist_dir=dist_dir,
        variants=list(variants),
        summary=summary_extra or {},
    )


def create_success_result(
        dist_dir: str,
        variants: List[str],
        summary_extra: Optional[Dict[str, Any]] = None
) -> BuildResult:
    """Create a successful build result in the DONE state."""
    return BuildResult(
        ok=True,
        error="",
        exit_code=EXIT_OK,
        final_state=BuildState.DONE.value,
        dist_dir=dist_dir,
        variants=list(variants),
        summary=summary_extra or {},
    )
