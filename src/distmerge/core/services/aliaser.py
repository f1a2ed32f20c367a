from __future__ import annotations

"""
Entry-Point Aliaser.

Static hosts serve index.html for the site root. This service duplicates an
existing entry file of the merged tree under that name. It is independent of
the build orchestrator and may run in a separate invocation.
"""

import logging
import os
import shutil

from distmerge.domain.errors import MissingArtifactError

logger = logging.getLogger(__name__)


def alias_entry_point(source_name: str, alias_name: str, directory: str) -> str:
    """
    Copy directory/source_name to directory/alias_name, overwriting.

    Args:
        source_name: Existing entry file name (e.g. 'student.html').
        alias_name: Platform entry-point name (e.g. 'index.html').
        directory: Merged tree containing the entry file.

    Returns:
        str: Absolute path of the alias file.

    Raises:
        MissingArtifactError: The source file does not exist. The alias is
            not created.
    """
    source = os.path.join(directory, source_name)
    target = os.path.join(directory, alias_name)

    if not os.path.isfile(source):
        logger.error(f"{source_name} not found in {directory}")
        raise MissingArtifactError(source_name, directory)

    shutil.copyfile(source, target)
    logger.info(f"Copied {source_name} to {alias_name}")
    return os.path.abspath(target)
