from __future__ import annotations

"""
Command Line Interface (CLI) Application Controller.

Orchestrates the CLI lifecycle: logging bootstrap, configuration layering
(defaults, distmerge.json, CLI overrides), dispatch to the build, verify and
alias operations, and result rendering. Every failure ends up as a process
exit code.
"""

import argparse
import json
import os
import sys
from dataclasses import asdict
from typing import Any, Dict, List, Optional

from distmerge.core.pipeline.engine import run_build
from distmerge.core.pipeline.stages.validator import validate_config
from distmerge.core.pipeline.stages.verifier import verify_dist
from distmerge.core.services.aliaser import alias_entry_point
from distmerge.domain.config import get_default_config, load_config
from distmerge.domain.constants import EXIT_FAILURE, EXIT_INTERRUPTED, EXIT_OK
from distmerge.domain.errors import ConfigError, DistMergeError
from distmerge.domain.pipeline_models import BuildResult
from distmerge.infra.fs import resolve_under
from distmerge.infra.logging import (
    LoggingConfig,
    configure_logging,
    get_logger,
    shutdown_logging,
)
from distmerge.interface.cli import args as cli_args
from distmerge.utils.i18n import i18n

logger = get_logger(__name__)

# -----------------------------------------------------------------------------
# ENTRYPOINT ORCHESTRATOR
# -----------------------------------------------------------------------------

def main(argv: Optional[List[str]] = None) -> int:
    """
    Execute the main CLI application workflow.

    Args:
        argv: Optional list of command line arguments. Defaults to sys.argv.

    Returns:
        int: Process exit code (0 for success, non-zero for failure).
    """
    if sys.platform == "win32":
        if hasattr(sys.stdout, "reconfigure"):
            sys.stdout.reconfigure(encoding="utf-8")
        if hasattr(sys.stderr, "reconfigure"):
            sys.stderr.reconfigure(encoding="utf-8")

    # 1. Argument parsing phase
    parser = cli_args.build_parser()
    args = parser.parse_args(argv)

    # 2. Logging bootstrap (console on stderr, optional rotating file)
    log_level = "DEBUG" if args.debug else "INFO"
    configure_logging(
        LoggingConfig(level=log_level, console=True, log_file=args.log_file),
        force=True,
    )

    try:
        return _dispatch(args)
    except KeyboardInterrupt:
        msg = i18n.t("cli.status.interrupted")
        logger.warning(msg)
        print(msg, file=sys.stderr)
        return EXIT_INTERRUPTED
    finally:
        shutdown_logging()


def _dispatch(args: argparse.Namespace) -> int:
    try:
        if args.command == "build":
            return _run_build(args)
        cfg = _resolve_config(args)
    except ConfigError as e:
        print(i18n.t("cli.errors.config", error=str(e)), file=sys.stderr)
        return EXIT_FAILURE

    if args.command == "verify":
        return _run_verify(cfg)
    return _run_alias(args, cfg)

# -----------------------------------------------------------------------------
# COMMANDS
# -----------------------------------------------------------------------------

def _run_build(args: argparse.Namespace) -> int:
    raw_conf = _layer_config(args)

    if args.dump_config:
        cfg = _validate(raw_conf)
        print(json.dumps(cfg, ensure_ascii=False, indent=2))
        return EXIT_OK

    try:
        result = run_build(raw_conf)
    except OSError as e:
        logger.critical(f"Filesystem failure during build: {e}", exc_info=True)
        print(i18n.t("cli.errors.unexpected", error=str(e)), file=sys.stderr)
        return EXIT_FAILURE

    if args.json_output:
        print(json.dumps(asdict(result), ensure_ascii=False, indent=2))
    else:
        _print_human_summary(result)

    return result.exit_code


def _run_verify(cfg: Dict[str, Any]) -> int:
    dist_path = resolve_under(cfg["project_root"], cfg["dist_dir"])
    try:
        files = verify_dist(dist_path, cfg["first_variant"], cfg["second_variant"])
    except DistMergeError as e:
        print(i18n.t("cli.errors.failed", error=str(e)), file=sys.stderr)
        return e.exit_code

    print(i18n.t("cli.status.verified", files=", ".join(files), dir=dist_path))
    return EXIT_OK


def _run_alias(args: argparse.Namespace, cfg: Dict[str, Any]) -> int:
    # --dir is relative to the working directory, dist_dir to the project root
    if args.alias_dir:
        directory = os.path.abspath(args.alias_dir)
    else:
        directory = resolve_under(cfg["project_root"], cfg["dist_dir"])

    source, alias = cfg["alias_source"], cfg["alias_name"]
    try:
        alias_entry_point(source, alias, directory)
    except DistMergeError as e:
        print(i18n.t("cli.errors.failed", error=str(e)), file=sys.stderr)
        return e.exit_code

    print(i18n.t("cli.status.aliased", source=source, alias=alias, dir=directory))
    return EXIT_OK

# -----------------------------------------------------------------------------
# CONFIGURATION MERGING
# -----------------------------------------------------------------------------

def _layer_config(args: argparse.Namespace) -> Dict[str, Any]:
    """
    Layer defaults, the project configuration file and CLI overrides.

    Returns:
        Dict[str, Any]: Raw configuration, not yet validated.
    """
    overrides = cli_args.args_to_overrides(args)
    project_root = overrides.get("project_root")

    if getattr(args, "use_defaults", False):
        base_conf = get_default_config()
    else:
        base_conf = load_config(getattr(args, "config_path", None), project_root)

    return _merge_config(base_conf, overrides)


def _validate(raw_conf: Dict[str, Any]) -> Dict[str, Any]:
    clean_conf, warnings = validate_config(raw_conf, strict=False)
    for w in warnings:
        logger.warning(f"Configuration Constraint: {w}")
    return clean_conf


def _resolve_config(args: argparse.Namespace) -> Dict[str, Any]:
    """Layered and validated configuration for the verify and alias commands."""
    return _validate(_layer_config(args))


def _merge_config(base: Dict[str, Any], overrides: Dict[str, Any]) -> Dict[str, Any]:
    """
    Shallow merge of non-None override values for known keys.

    Args:
        base: The primary configuration dictionary.
        overrides: New values to inject.

    Returns:
        Dict[str, Any]: The merged configuration state.
    """
    out = dict(base)
    for k in cli_args.OVERRIDE_KEYS:
        if overrides.get(k) is not None:
            out[k] = overrides[k]
    return out

# -----------------------------------------------------------------------------
# VIEW RENDERING (HUMAN READABLE)
# -----------------------------------------------------------------------------

def _print_human_summary(result: BuildResult) -> None:
    """
    Print the completion banner or the failure to the terminal.

    Args:
        result: The build result to render.
    """
    if not result.ok:
        print(i18n.t("cli.errors.failed", error=result.error), file=sys.stderr)
        return

    print(i18n.t("cli.status.success", path=result.dist_dir))
    entry_files = result.summary.get("entry_files", {})
    for variant in result.variants:
        print(i18n.t("cli.status.entry", variant=variant.capitalize(), file=entry_files.get(variant)))

    for path in result.summary.get("replaced_dirs", []):
        print(i18n.t("cli.status.replaced", path=path))

# -----------------------------------------------------------------------------
# CLI ENTRYPOINT
# -----------------------------------------------------------------------------

if __name__ == "__main__":
    sys.exit(main())
