from __future__ import annotations

"""
Configuration Validation Service.

Gatekeeper between the raw configuration (defaults, distmerge.json and CLI
overrides) and the orchestrator. Coerces types, injects defaults and rejects
layouts where two build steps would write into the same directory.
"""

import logging
import os
from typing import Any, Dict, List, Tuple

from distmerge.domain.config import get_default_config
from distmerge.domain.constants import VARIANT_PLACEHOLDER, temp_dir_name
from distmerge.domain.errors import ConfigError
from distmerge.infra.fs import normalize_path

logger = logging.getLogger(__name__)

STRING_FIELDS = [
    "project_root", "dist_dir",
    "first_variant", "second_variant",
    "first_output_dir", "second_output_dir",
    "build_command", "variant_env_key", "output_dir_env_key",
    "alias_source", "alias_name",
]

# Values that end up as a single path component
NAME_FIELDS = ["first_variant", "second_variant", "alias_source", "alias_name"]


# -----------------------------------------------------------------------------
# PUBLIC API
# -----------------------------------------------------------------------------

def validate_config(
        config: Any,
        *,
        strict: bool = False,
) -> Tuple[Dict[str, Any], List[str]]:
    """
    Validate and normalize the provided configuration dictionary.

    Args:
        config: Raw configuration data (usually a dictionary).
        strict: If True, raise ConfigError instead of falling back.

    Returns:
        Tuple[Dict[str, Any], List[str]]: A tuple containing the normalized
                                          configuration and a list of warnings.
    """
    warnings: List[str] = []
    defaults = get_default_config()

    if not isinstance(config, dict):
        msg = f"Invalid config type: expected dict, received {type(config).__name__}."
        if strict:
            raise ConfigError(msg)
        warnings.append(f"{msg} Using defaults.")
        logger.warning(msg)
        return defaults, warnings

    merged: Dict[str, Any] = dict(defaults)
    merged.update({k: v for k, v in config.items() if k in defaults})

    for field in STRING_FIELDS:
        merged[field] = _as_str(merged.get(field), defaults[field], field, warnings, strict)

    for field in NAME_FIELDS:
        merged[field] = _as_name(merged[field], defaults[field], field, warnings, strict)

    for field in ("variant_env_key", "output_dir_env_key"):
        merged[field] = _as_env_key(merged[field], defaults[field], field, warnings, strict)

    merged["project_root"] = normalize_path(merged["project_root"], os.getcwd())

    _check_variants(merged, defaults, warnings, strict)
    _check_directories(merged, warnings, strict)

    if VARIANT_PLACEHOLDER not in merged["build_command"]:
        warnings.append(
            f"build_command has no '{VARIANT_PLACEHOLDER}' placeholder; "
            "both variants will run the same command."
        )

    return merged, warnings


# -----------------------------------------------------------------------------
# PRIVATE HELPERS: TYPE COERCION
# -----------------------------------------------------------------------------

def _fail_or_warn(msg: str, warnings: List[str], strict: bool) -> None:
    if strict:
        raise ConfigError(msg)
    warnings.append(f"{msg} Using fallback.")


def _as_str(value: Any, fallback: str, field: str, warnings: List[str], strict: bool) -> str:
    """Validate and sanitize string inputs."""
    if value is None:
        return fallback
    if isinstance(value, str):
        v = value.strip()
        return v if v else fallback

    _fail_or_warn(
        f"Invalid field '{field}': expected str, received {type(value).__name__}.",
        warnings, strict,
    )
    return fallback


def _as_name(value: str, fallback: str, field: str, warnings: List[str], strict: bool) -> str:
    """Reject values that would escape the directory they are joined onto."""
    if "/" in value or "\\" in value or value in (".", ".."):
        _fail_or_warn(f"Invalid field '{field}': '{value}' is not a plain name.", warnings, strict)
        return fallback
    return value


def _as_env_key(value: str, fallback: str, field: str, warnings: List[str], strict: bool) -> str:
    if "=" in value or any(ch.isspace() for ch in value):
        _fail_or_warn(
            f"Invalid field '{field}': '{value}' is not a valid environment key.",
            warnings, strict,
        )
        return fallback
    return value


# -----------------------------------------------------------------------------
# PRIVATE HELPERS: LAYOUT RULES
# -----------------------------------------------------------------------------

def _check_variants(
        merged: Dict[str, Any],
        defaults: Dict[str, Any],
        warnings: List[str],
        strict: bool
) -> None:
    """Both variants must be distinct, otherwise the entry files collide."""
    if merged["first_variant"] != merged["second_variant"]:
        return

    _fail_or_warn(
        f"Variants must differ, both are '{merged['first_variant']}'.", warnings, strict
    )
    merged["first_variant"] = defaults["first_variant"]
    merged["second_variant"] = defaults["second_variant"]


def _check_directories(merged: Dict[str, Any], warnings: List[str], strict: bool) -> None:
    """Output trees must not alias each other, the merged tree or the project root."""
    root = merged["project_root"]

    def _abs(name: str) -> str:
        return os.path.normcase(os.path.normpath(os.path.join(root, name)))

    # Every one of these directories is deleted during a run
    root_key = _abs(".")
    for field in ("dist_dir", "first_output_dir", "second_output_dir"):
        if _is_ancestor_or_same(_abs(merged[field]), root_key):
            raise ConfigError(
                f"{field} '{merged[field]}' resolves to the project root or one of its parents."
            )

    dist = _abs(merged["dist_dir"])

    first = _abs(merged["first_output_dir"])
    if first == dist:
        _fail_or_warn(
            f"first_output_dir '{merged['first_output_dir']}' equals dist_dir.", warnings, strict
        )
        merged["first_output_dir"] = temp_dir_name(merged["first_variant"])
        first = _abs(merged["first_output_dir"])

    second = _abs(merged["second_output_dir"])
    if second in (dist, first):
        _fail_or_warn(
            f"second_output_dir '{merged['second_output_dir']}' collides with another directory.",
            warnings, strict,
        )
        merged["second_output_dir"] = temp_dir_name(merged["second_variant"])
        second = _abs(merged["second_output_dir"])

    if len({dist, first, second}) != 3:
        raise ConfigError("dist_dir and the two output directories must all differ.")


def _is_ancestor_or_same(path: str, other: str) -> bool:
    try:
        return os.path.commonpath([path, other]) == path
    except ValueError:
        # Different drives on Windows
        return False
