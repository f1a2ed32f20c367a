from __future__ import annotations

"""
Merged Tree Verification Stage.

A merged tree is only deployable when both variants' entry files are present.
"""

import logging
from typing import List

from distmerge.domain.constants import entry_file_name
from distmerge.domain.errors import MissingArtifactError
from distmerge.infra.fs import check_existing_output_files

logger = logging.getLogger(__name__)


def verify_dist(dist_path: str, first_variant: str, second_variant: str) -> List[str]:
    """
    Check that both entry files exist in the merged tree.

    Files are checked in build order and the first missing one is reported.

    Args:
        dist_path: Absolute path of the merged tree.
        first_variant: Identifier of the baseline variant.
        second_variant: Identifier of the overlay variant.

    Returns:
        List[str]: The verified entry file names.

    Raises:
        MissingArtifactError: Naming the first entry file that is absent.
    """
    expected = [entry_file_name(first_variant), entry_file_name(second_variant)]

    for name in expected:
        if not check_existing_output_files(dist_path, [name]):
            logger.error(f"Error: {name} not found in build output")
            raise MissingArtifactError(name, dist_path)

    logger.debug(f"Verified entry files in {dist_path}: {expected}")
    return expected
