"""Locating the entry root and the project root."""

from __future__ import annotations

import logging
import os
from collections.abc import Sequence
from dataclasses import dataclass
from pathlib import Path

from satchel.fs import FileSystem, find_ancestor_file
from satchel.glob import glob_root, is_glob
from satchel.options.defaults import LOCK_FILE_NAMES, PROJECT_ROOT_MARKERS

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ProjectRoot:
    root: Path
    lock_file: Path | None = None


def get_root_dir(entries: Sequence[Path], fallback: Path) -> Path:
    """
    Nearest common ancestor of the directories holding `entries`. A glob entry
    contributes its literal base directory. Returns `fallback` when there are
    no entries or they live on different drives.
    """
    root: Path | None = None
    for entry in entries:
        directory = glob_root(entry) if is_glob(entry) else entry.parent
        if root is None:
            root = directory
        elif directory.anchor != root.anchor:
            return fallback
        else:
            root = Path(os.path.commonpath([root, directory]))
    return root if root is not None else fallback


def find_project_root(fs: FileSystem, entry_root: Path, fallback: Path) -> ProjectRoot:
    """
    The nearest directory at or above `entry_root` containing a lockfile, `.git`
    or `.hg`. Falls back to `fallback` with no lockfile when none is found.
    """
    marker = find_ancestor_file(fs, entry_root, PROJECT_ROOT_MARKERS, Path(entry_root.anchor))
    if marker is None:
        logger.debug("No project root marker above %s, using %s", entry_root, fallback)
        return ProjectRoot(root=fallback)

    lock_file = marker if marker.name in LOCK_FILE_NAMES else None
    logger.debug("Project root %s (marker %s)", marker.parent, marker.name)
    return ProjectRoot(root=marker.parent, lock_file=lock_file)
