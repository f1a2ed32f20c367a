from __future__ import annotations

"""
FileSystem Infrastructure Layer.

Provides path normalization and the tree primitives used by the merge
stages: recursive deletion tolerant of absence, deep copy, single-entry
replacement and directory listing. Acts as an abstraction over 'os' and
'shutil' so the merge rules never touch the raw modules directly.
"""

import os
import shutil
from typing import List, Optional

# -----------------------------------------------------------------------------
# PATH RESOLUTION API
# -----------------------------------------------------------------------------

def normalize_path(path: Optional[str], fallback: str) -> str:
    """
    Normalize a directory path string into an absolute filesystem path.

    Handles environment variable expansion ($VAR/%VAR%) and user home
    shortcuts (~/). Reverts to fallback if the input is empty or malformed.

    Args:
        path: Raw input path string.
        fallback: Default path to use if resolution fails.

    Returns:
        str: Normalized absolute path.
    """
    p = (path or "").strip()
    if not p:
        p = fallback
    try:
        p = os.path.expandvars(os.path.expanduser(p))
        return os.path.abspath(p)
    except Exception:
        return os.path.abspath(fallback)


def resolve_under(root: str, name: str) -> str:
    """
    Join a relative directory name onto the project root.

    Absolute names are kept as they are.

    Args:
        root: Absolute project root.
        name: Relative (or absolute) directory name.

    Returns:
        str: Absolute path.
    """
    if os.path.isabs(name):
        return os.path.normpath(name)
    return os.path.normpath(os.path.join(root, name))

# -----------------------------------------------------------------------------
# TREE OPERATIONS API
# -----------------------------------------------------------------------------

def remove_tree(path: str) -> bool:
    """
    Delete a file or directory tree. A missing path is a no-op.

    Args:
        path: Target path.

    Returns:
        bool: True if something was removed.
    """
    if os.path.isdir(path) and not os.path.islink(path):
        shutil.rmtree(path)
        return True
    if os.path.lexists(path):
        os.remove(path)
        return True
    return False


def recreate_dir(path: str) -> None:
    """Remove any existing entry at path and create it as an empty directory."""
    remove_tree(path)
    os.makedirs(path, exist_ok=True)


def copy_tree(src: str, dest: str) -> List[str]:
    """
    Deep copy src into dest, creating directories as needed.

    Existing files in dest are overwritten, existing directories are
    merged into. Symbolic links are followed and their targets copied.

    Args:
        src: Source directory.
        dest: Destination directory (created if missing).

    Returns:
        List[str]: Relative paths of the files written, '/'-separated.
    """
    written: List[str] = []
    os.makedirs(dest, exist_ok=True)

    for dirpath, dirnames, filenames in os.walk(src, followlinks=True):
        dirnames.sort()
        rel_dir = os.path.relpath(dirpath, src)
        target_dir = dest if rel_dir == "." else os.path.join(dest, rel_dir)
        os.makedirs(target_dir, exist_ok=True)

        for name in sorted(filenames):
            target = os.path.join(target_dir, name)
            if os.path.isdir(target):
                shutil.rmtree(target)
            shutil.copy2(os.path.join(dirpath, name), target)
            rel = name if rel_dir == "." else os.path.join(rel_dir, name)
            written.append(rel.replace(os.sep, "/"))

    return written


def replace_entry(src: str, dest: str) -> None:
    """
    Copy a single entry over dest, discarding whatever dest held before.

    Directories are copied as complete subtrees; a destination directory is
    never reconciled with the incoming one.

    Args:
        src: Source file or directory.
        dest: Destination path.
    """
    if os.path.isdir(dest) and not os.path.islink(dest):
        shutil.rmtree(dest)
    elif os.path.isdir(src) and os.path.lexists(dest):
        os.remove(dest)

    if os.path.isdir(src):
        shutil.copytree(src, dest)
    else:
        shutil.copy2(src, dest)


def list_entries(path: str) -> List[str]:
    """Return the sorted names of the direct children of a directory."""
    return sorted(os.listdir(path))

# -----------------------------------------------------------------------------
# FILESYSTEM VALIDATION API
# -----------------------------------------------------------------------------

def check_existing_output_files(output_dir: str, names: List[str]) -> List[str]:
    """
    Identify which of the given names exist in a directory.

    Args:
        output_dir: Directory to inspect.
        names: List of filenames to check for existence.

    Returns:
        List[str]: Absolute paths of files that exist.
    """
    existing: List[str] = []
    for n in names:
        full = os.path.join(output_dir, n)
        if os.path.exists(full):
            existing.append(full)
    return existing
