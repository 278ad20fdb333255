"""Walking up a directory tree to find the nearest file with a given name."""

from __future__ import annotations

from collections.abc import Sequence
from pathlib import Path

from satchel.fs.types import FileSystem, StrPath, resolve_path


def find_ancestor_file(
    fs: FileSystem,
    start_dir: StrPath,
    names: Sequence[str],
    stop_dir: StrPath | None = None,
) -> Path | None:
    """
    Walk up from `start_dir` looking for any of `names`. Returns the first
    found, or `None`. Within one directory, `names` are tried in order.

    The walk ends after checking `stop_dir` (if given) or the filesystem root.
    """
    cwd = fs.cwd()
    current = resolve_path(cwd, start_dir)
    stop = resolve_path(cwd, stop_dir) if stop_dir is not None else None
    while True:
        for name in names:
            candidate = current / name
            if fs.exists(candidate):
                return candidate
        parent = current.parent
        if current == stop or parent == current:
            break
        current = parent
    return None
