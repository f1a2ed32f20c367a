from __future__ import annotations

"""
Core build orchestration.

Drives one dual-variant build as an explicit state machine:

    START -> PREPARED -> VARIANT1_BUILT -> VARIANT1_MERGED
          -> VARIANT2_BUILT -> VARIANT2_MERGED -> VERIFIED -> DONE

Any build command failure or verification failure moves the run to FAILED,
which is terminal. Steps are strictly sequential: the second bundler run may
share caches with the first and the merge needs both trees complete.
"""

import logging
from typing import Any, Dict, List, Optional

from distmerge.core.pipeline.stages.builder import build_variant
from distmerge.core.pipeline.stages.merger import merge_first, merge_second
from distmerge.core.pipeline.stages.setup import prepare_dist
from distmerge.core.pipeline.stages.validator import validate_config
from distmerge.core.pipeline.stages.verifier import verify_dist
from distmerge.domain.constants import entry_file_name
from distmerge.domain.errors import DistMergeError, InvalidTransitionError
from distmerge.domain.pipeline_models import (
    TRANSITIONS,
    BuildResult,
    BuildState,
    MergeReport,
    VariantBuildConfig,
    create_error_result,
    create_success_result,
)
from distmerge.infra.fs import resolve_under

logger = logging.getLogger(__name__)


class BuildOrchestrator:
    """
    Stateful driver for one build run.

    Each public step checks the current state before doing any work and
    advances it afterwards. Calling a step out of order raises
    InvalidTransitionError without touching the filesystem.
    """

    def __init__(self, cfg: Dict[str, Any]) -> None:
        """
        Args:
            cfg: Validated configuration (see validate_config).
        """
        self.cfg = cfg
        self.project_root: str = cfg["project_root"]
        self.dist_path = resolve_under(self.project_root, cfg["dist_dir"])
        self.first = self._variant(cfg["first_variant"], cfg["first_output_dir"])
        self.second = self._variant(cfg["second_variant"], cfg["second_output_dir"])

        self.state = BuildState.START
        self.reports: List[MergeReport] = []
        self.verified: List[str] = []

    def _variant(self, variant_id: str, output_dir: str) -> VariantBuildConfig:
        return VariantBuildConfig(
            variant_id=variant_id,
            output_dir=output_dir,
            command=self.cfg["build_command"],
            variant_env_key=self.cfg["variant_env_key"],
            output_dir_env_key=self.cfg["output_dir_env_key"],
        )

    @property
    def variant_ids(self) -> List[str]:
        return [self.first.variant_id, self.second.variant_id]

    # -------------------------------------------------------------------------
    # State handling
    # -------------------------------------------------------------------------
    def _guard(self, target: BuildState) -> None:
        if self.state not in TRANSITIONS[target]:
            raise InvalidTransitionError(self.state.value, target.value)

    def _advance(self, target: BuildState) -> None:
        logger.debug(f"State {self.state.value} -> {target.value}")
        self.state = target

    def _fail(self) -> None:
        logger.debug(f"State {self.state.value} -> {BuildState.FAILED.value}")
        self.state = BuildState.FAILED

    # -------------------------------------------------------------------------
    # Steps
    # -------------------------------------------------------------------------
    def prepare(self) -> None:
        """Reset the merged tree to an empty directory."""
        self._guard(BuildState.PREPARED)
        prepare_dist(self.dist_path)
        self._advance(BuildState.PREPARED)

    def build_first(self) -> str:
        """Run the bundler for the baseline variant."""
        return self._build(self.first, BuildState.VARIANT1_BUILT)

    def merge_first(self) -> MergeReport:
        """Deep-copy the baseline output tree into the merged tree."""
        self._guard(BuildState.VARIANT1_MERGED)
        report = merge_first(
            self.first.variant_id,
            resolve_under(self.project_root, self.first.output_dir),
            self.dist_path,
        )
        self.reports.append(report)
        self._advance(BuildState.VARIANT1_MERGED)
        return report

    def build_second(self) -> str:
        """Run the bundler for the overlay variant."""
        return self._build(self.second, BuildState.VARIANT2_BUILT)

    def merge_second(self) -> MergeReport:
        """Overlay the second output tree onto the merged tree."""
        self._guard(BuildState.VARIANT2_MERGED)
        report = merge_second(
            self.second.variant_id,
            resolve_under(self.project_root, self.second.output_dir),
            self.dist_path,
        )
        self.reports.append(report)
        self._advance(BuildState.VARIANT2_MERGED)
        return report

    def verify(self) -> List[str]:
        """Check both entry files are present in the merged tree."""
        self._guard(BuildState.VERIFIED)
        try:
            self.verified = verify_dist(
                self.dist_path, self.first.variant_id, self.second.variant_id
            )
        except DistMergeError:
            self._fail()
            raise
        self._advance(BuildState.VERIFIED)
        return self.verified

    def finish(self) -> None:
        self._guard(BuildState.DONE)
        self._advance(BuildState.DONE)

    def _build(self, variant: VariantBuildConfig, target: BuildState) -> str:
        self._guard(target)
        try:
            out = build_variant(variant, self.project_root)
        except DistMergeError:
            self._fail()
            raise
        self._advance(target)
        return out

    # -------------------------------------------------------------------------
    # Full run
    # -------------------------------------------------------------------------
    def run(self) -> BuildResult:
        """
        Execute every step in order.

        Returns:
            BuildResult: Success in DONE, or an error result carrying the
            exit code of the failure. Unexpected exceptions propagate.
        """
        try:
            self.prepare()
            self.build_first()
            self.merge_first()
            self.build_second()
            self.merge_second()
            self.verify()
            self.finish()
        except DistMergeError as e:
            if self.state is not BuildState.FAILED:
                self._fail()
            logger.error(str(e))
            return create_error_result(
                str(e), e.exit_code, self.state, self.dist_path, self.variant_ids,
                summary_extra=self._summary(),
            )

        logger.info(f"Build complete! Both apps are ready in {self.dist_path}")
        return create_success_result(self.dist_path, self.variant_ids, self._summary())

    def _summary(self) -> Dict[str, Any]:
        return {
            "entry_files": {
                v: entry_file_name(v) for v in self.variant_ids
            },
            "merges": [r.as_dict() for r in self.reports],
            "verified": list(self.verified),
            "replaced_dirs": [d for r in self.reports for d in r.replaced_dirs],
        }


def run_build(config: Optional[Dict[str, Any]]) -> BuildResult:
    """
    Validate configuration and run a complete build.

    Args:
        config: The configuration dictionary (raw or partial).

    Returns:
        BuildResult: Object containing status, exit code and summary.

    Raises:
        ConfigError: If the directory layout is unusable, before anything
            on disk is touched.
    """
    logger.info("Build run started.")
    cfg, warnings = validate_config(config, strict=False)
    for warning in warnings:
        logger.warning(f"Configuration Warning: {warning}")

    return BuildOrchestrator(cfg).run()
