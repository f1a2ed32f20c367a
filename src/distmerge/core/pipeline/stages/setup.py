from __future__ import annotations

"""
Merged Tree Preparation Stage.

Resets the destination directory before any variant is built so that stale
artifacts from a previous run can never survive into the new merged tree.
"""

import logging
import os

from distmerge.infra.fs import recreate_dir

logger = logging.getLogger(__name__)


def prepare_dist(dist_path: str) -> str:
    """
    Delete the merged tree (if any) and recreate it empty.

    Deleting a missing directory is a no-op, so the call is idempotent.

    Args:
        dist_path: Absolute path of the merged tree.

    Returns:
        str: The same path, now an empty directory.
    """
    if os.path.lexists(dist_path):
        logger.info(f"Cleaning {dist_path}...")
    recreate_dir(dist_path)
    logger.debug(f"Merged tree ready at {dist_path}")
    return dist_path
