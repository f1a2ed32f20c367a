from __future__ import annotations

"""
CLI Argument Definition and Mapping.

Defines the 'build', 'verify' and 'alias' subcommands and translates the
parsed namespace into configuration overrides.
"""

import argparse
from typing import Any, Dict

from distmerge.utils.i18n import i18n

# -----------------------------------------------------------------------------
# ARGUMENT DEFINITION
# -----------------------------------------------------------------------------

def build_parser() -> argparse.ArgumentParser:
    """
    Construct the argument parser for the distmerge CLI.

    Returns:
        argparse.ArgumentParser: Configured parser instance.
    """
    p = argparse.ArgumentParser(
        prog="distmerge",
        description=i18n.t("app.description"),
    )

    # --- Diagnostics (shared by every subcommand) ---
    p.add_argument(
        "--debug",
        action="store_true",
        help=i18n.t("cli.args.debug"),
    )
    p.add_argument(
        "--log-file",
        dest="log_file",
        default=None,
        help=i18n.t("cli.args.log_file"),
    )

    sub = p.add_subparsers(dest="command", metavar="{build,verify,alias}")
    sub.required = True

    # --- build ---
    b = sub.add_parser("build", help=i18n.t("cli.commands.build"))
    _add_layout_args(b)
    b.add_argument("--config", dest="config_path", default=None, help=i18n.t("cli.args.config"))
    b.add_argument("--first", dest="first_variant", default=None, help=i18n.t("cli.args.first"))
    b.add_argument("--second", dest="second_variant", default=None, help=i18n.t("cli.args.second"))
    b.add_argument(
        "--command",
        dest="build_command",
        default=None,
        help=i18n.t("cli.args.command"),
    )
    b.add_argument(
        "--json",
        dest="json_output",
        action="store_true",
        help=i18n.t("cli.args.json"),
    )
    b.add_argument("--dump-config", action="store_true", help=i18n.t("cli.args.dump"))
    b.add_argument("--use-defaults", action="store_true", help=i18n.t("cli.args.defaults"))

    # --- verify ---
    v = sub.add_parser("verify", help=i18n.t("cli.commands.verify"))
    _add_layout_args(v)
    v.add_argument("--config", dest="config_path", default=None, help=i18n.t("cli.args.config"))
    v.add_argument("--first", dest="first_variant", default=None, help=i18n.t("cli.args.first"))
    v.add_argument("--second", dest="second_variant", default=None, help=i18n.t("cli.args.second"))

    # --- alias ---
    a = sub.add_parser("alias", help=i18n.t("cli.commands.alias"))
    a.add_argument("--root", dest="project_root", default=None, help=i18n.t("cli.args.root"))
    a.add_argument("--config", dest="config_path", default=None, help=i18n.t("cli.args.config"))
    a.add_argument(
        "--dir",
        dest="alias_dir",
        default=None,
        help=i18n.t("cli.args.dir"),
    )
    a.add_argument(
        "--source",
        dest="alias_source",
        default=None,
        help=i18n.t("cli.args.source"),
    )
    a.add_argument(
        "--alias",
        dest="alias_name",
        default=None,
        help=i18n.t("cli.args.alias"),
    )

    return p


def _add_layout_args(parser: argparse.ArgumentParser) -> None:
    parser.add_argument("--root", dest="project_root", default=None, help=i18n.t("cli.args.root"))
    parser.add_argument("--dist", dest="dist_dir", default=None, help=i18n.t("cli.args.dist"))

# -----------------------------------------------------------------------------
# ARGUMENT MAPPING
# -----------------------------------------------------------------------------

OVERRIDE_KEYS = [
    "project_root", "dist_dir",
    "first_variant", "second_variant",
    "build_command",
    "alias_source", "alias_name",
]


def args_to_overrides(args: argparse.Namespace) -> Dict[str, Any]:
    """
    Translate the argparse Namespace into configuration overrides.

    Options the subcommand does not define are reported as None.

    Args:
        args: Parsed command-line arguments.

    Returns:
        Dict[str, Any]: Configuration overrides subset.
    """
    return {key: getattr(args, key, None) for key in OVERRIDE_KEYS}
