from __future__ import annotations

"""
Domain Constants.

Default variant identifiers, directory names and the environment keys the
bundler reads. Everything here can be overridden through configuration.
"""

CURRENT_CONFIG_VERSION = "1.0.0"
CONFIG_FILE_NAME = "distmerge.json"

DEFAULT_DIST_DIR = "dist"
DEFAULT_FIRST_VARIANT = "student"
DEFAULT_SECOND_VARIANT = "admin"
TEMP_DIR_TEMPLATE = "dist-{variant}-temp"

DEFAULT_BUILD_COMMAND = "npm run build:{variant}"
VARIANT_PLACEHOLDER = "{variant}"

DEFAULT_VARIANT_ENV_KEY = "VITE_APP_TYPE"
DEFAULT_OUTPUT_DIR_ENV_KEY = "BUILD_OUT_DIR"

ENTRY_FILE_SUFFIX = ".html"

DEFAULT_ALIAS_SOURCE = "student.html"
DEFAULT_ALIAS_NAME = "index.html"

# Exit codes surfaced at the process boundary
EXIT_OK = 0
EXIT_FAILURE = 1
EXIT_COMMAND_NOT_FOUND = 127
EXIT_INTERRUPTED = 130


def entry_file_name(variant_id: str) -> str:
    """Return the marker file a variant build must produce."""
    return f"{variant_id}{ENTRY_FILE_SUFFIX}"


def temp_dir_name(variant_id: str) -> str:
    """Return the default output directory name for a variant build."""
    return TEMP_DIR_TEMPLATE.format(variant=variant_id)
