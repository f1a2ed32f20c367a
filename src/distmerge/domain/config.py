from __future__ import annotations

"""
Configuration Domain Management.

Builds the run configuration from defaults and an optional project-local
JSON file. CLI overrides are applied on top by the interface layer and the
result is normalized by the validation stage.
"""

import json
import logging
import os
from typing import Any, Dict, Optional

from distmerge.domain.constants import (
    CONFIG_FILE_NAME,
    CURRENT_CONFIG_VERSION,
    DEFAULT_ALIAS_NAME,
    DEFAULT_ALIAS_SOURCE,
    DEFAULT_BUILD_COMMAND,
    DEFAULT_DIST_DIR,
    DEFAULT_FIRST_VARIANT,
    DEFAULT_OUTPUT_DIR_ENV_KEY,
    DEFAULT_SECOND_VARIANT,
    DEFAULT_VARIANT_ENV_KEY,
    temp_dir_name,
)

logger = logging.getLogger(__name__)


# -----------------------------------------------------------------------------
# Configuration Models (Dict-based)
# -----------------------------------------------------------------------------
def get_default_config() -> Dict[str, Any]:
    """
    Generate the default run configuration.

    Returns:
        Dict[str, Any]: Default configuration values.
    """
    return {
        # Layout
        "project_root": os.getcwd(),
        "dist_dir": DEFAULT_DIST_DIR,

        # Variants
        "first_variant": DEFAULT_FIRST_VARIANT,
        "second_variant": DEFAULT_SECOND_VARIANT,
        "first_output_dir": temp_dir_name(DEFAULT_FIRST_VARIANT),
        "second_output_dir": temp_dir_name(DEFAULT_SECOND_VARIANT),

        # Bundler hand-off
        "build_command": DEFAULT_BUILD_COMMAND,
        "variant_env_key": DEFAULT_VARIANT_ENV_KEY,
        "output_dir_env_key": DEFAULT_OUTPUT_DIR_ENV_KEY,

        # Entry-point alias
        "alias_source": DEFAULT_ALIAS_SOURCE,
        "alias_name": DEFAULT_ALIAS_NAME,
    }


# -----------------------------------------------------------------------------
# Persistence Logic
# -----------------------------------------------------------------------------
def resolve_config_file(config_path: Optional[str], project_root: Optional[str]) -> str:
    """
    Pick the configuration file to read.

    An explicit path wins; otherwise distmerge.json in the project root
    (or the current directory) is used.
    """
    if config_path:
        return os.path.abspath(config_path)
    return os.path.join(project_root or os.getcwd(), CONFIG_FILE_NAME)


def load_config(
        config_path: Optional[str] = None,
        project_root: Optional[str] = None,
) -> Dict[str, Any]:
    """
    Load the project configuration merged over the defaults.

    A missing file yields the defaults. A corrupt file is logged and
    ignored. Unknown keys are dropped with a warning.

    Args:
        config_path: Explicit configuration file, if any.
        project_root: Project root used to locate distmerge.json.

    Returns:
        Dict[str, Any]: The configuration dictionary (not yet validated).
    """
    config = get_default_config()
    if project_root:
        config["project_root"] = project_root

    path = resolve_config_file(config_path, project_root)
    if not os.path.exists(path):
        logger.debug(f"Config file not found at {path}. Using defaults.")
        return config

    try:
        with open(path, "r", encoding="utf-8") as f:
            data = json.load(f)
    except (OSError, ValueError) as e:
        logger.error(f"Failed to load config {path}: {e}. Using defaults.")
        return config

    if not isinstance(data, dict):
        logger.warning(f"Config file {path} is not a JSON object. Using defaults.")
        return config

    version = data.pop("version", CURRENT_CONFIG_VERSION)
    if version != CURRENT_CONFIG_VERSION:
        logger.warning(f"Config file version {version} differs from {CURRENT_CONFIG_VERSION}.")

    for key, value in data.items():
        if key not in config:
            logger.warning(f"Ignoring unknown config key '{key}' in {path}")
            continue
        config[key] = value

    # A relative project_root in the file is relative to the file itself
    root = config.get("project_root")
    if "project_root" in data and isinstance(root, str) and not os.path.isabs(root):
        config["project_root"] = os.path.normpath(os.path.join(os.path.dirname(path), root))

    logger.debug(f"Configuration loaded from {path}")
    return config
