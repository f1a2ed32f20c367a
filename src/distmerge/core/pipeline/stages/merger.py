from __future__ import annotations

"""
Output Tree Merge Stage.

Combines the two variant output trees into the merged tree:

1. The first variant is the baseline: its tree is deep-copied as-is.
2. The second variant is an overlay, reconciled one level deep:
   - shared top-level directories get their direct children copied in,
     overwriting same-named children;
   - other top-level directories are copied whole;
   - top-level files only land where the name is free, except the second
     variant's own entry file, which always lands.

Shared asset directories hold fingerprinted file names, so one level of
reconciliation keeps both variants' assets. A nested directory present in
both trees is replaced wholesale by the overlay's copy; this is reported in
the MergeReport and logged, not reconciled.

Each output tree is deleted once merged.
"""

import logging
import os

from distmerge.domain.constants import entry_file_name
from distmerge.domain.pipeline_models import MergeReport
from distmerge.infra.fs import copy_tree, list_entries, remove_tree, replace_entry

logger = logging.getLogger(__name__)


# ==============================================================================
# BASELINE MERGE
# ==============================================================================

def merge_first(variant_id: str, output_dir: str, dest_dir: str) -> MergeReport:
    """
    Deep-copy the first variant's output tree into the merged tree.

    Args:
        variant_id: Identifier of the first variant.
        output_dir: Absolute path of its output tree.
        dest_dir: Absolute path of the merged tree.

    Returns:
        MergeReport: Files written, relative to the merged tree.
    """
    report = MergeReport(variant_id=variant_id)

    if not os.path.isdir(output_dir):
        logger.warning(f"Output tree for '{variant_id}' not found at {output_dir}. Skipping merge.")
        report.source_missing = True
        return report

    logger.info(f"Merging {variant_id} build into {dest_dir}...")
    for rel in copy_tree(output_dir, dest_dir):
        report.copied.append(rel)

    remove_tree(output_dir)
    logger.debug(f"Merged {len(report.copied)} files from {variant_id}; removed {output_dir}")
    return report


# ==============================================================================
# OVERLAY MERGE
# ==============================================================================

def merge_second(variant_id: str, output_dir: str, dest_dir: str) -> MergeReport:
    """
    Overlay the second variant's output tree onto the merged tree.

    Args:
        variant_id: Identifier of the second variant; names the reserved
            entry file that always overwrites.
        output_dir: Absolute path of its output tree.
        dest_dir: Absolute path of the merged tree.

    Returns:
        MergeReport: Copied, overwritten and skipped entries.
    """
    report = MergeReport(variant_id=variant_id)

    if not os.path.isdir(output_dir):
        logger.warning(f"Output tree for '{variant_id}' not found at {output_dir}. Skipping merge.")
        report.source_missing = True
        return report

    logger.info(f"Merging {variant_id} build into {dest_dir}...")
    reserved = entry_file_name(variant_id)

    for name in list_entries(output_dir):
        src = os.path.join(output_dir, name)
        dest = os.path.join(dest_dir, name)

        if os.path.isdir(src):
            if os.path.isdir(dest):
                _merge_one_level(src, dest, name, report)
            elif os.path.lexists(dest):
                logger.warning(
                    f"'{name}' is a directory in {variant_id} but a file in the merged tree. "
                    "Keeping the existing file."
                )
                report.skipped.append(name)
            else:
                copy_tree(src, dest)
                report.copied.append(name)
            continue

        if name == reserved:
            existed = os.path.lexists(dest)
            replace_entry(src, dest)
            (report.overwritten if existed else report.copied).append(name)
        elif os.path.lexists(dest):
            report.skipped.append(name)
        else:
            replace_entry(src, dest)
            report.copied.append(name)

    remove_tree(output_dir)
    logger.debug(
        f"Overlay of {variant_id}: {len(report.copied)} copied, "
        f"{len(report.overwritten)} overwritten, {len(report.skipped)} skipped"
    )
    return report


def _merge_one_level(src_dir: str, dest_dir: str, rel_dir: str, report: MergeReport) -> None:
    """Copy every direct child of src_dir over dest_dir, overwriting."""
    for child in list_entries(src_dir):
        src = os.path.join(src_dir, child)
        dest = os.path.join(dest_dir, child)
        rel = f"{rel_dir}/{child}"

        existed = os.path.lexists(dest)
        if existed and os.path.isdir(src) and os.path.isdir(dest):
            logger.warning(
                f"Nested directory '{rel}' exists in both builds; "
                "replacing it with the overlay copy."
            )
            report.replaced_dirs.append(rel)

        replace_entry(src, dest)
        (report.overwritten if existed else report.copied).append(rel)
