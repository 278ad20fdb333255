"""Filesystem capability used by entry and options resolution."""

from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Protocol

StrPath = str | os.PathLike[str]


@dataclass(frozen=True)
class FileStats:
    """The subset of `stat()` results the build pipeline cares about."""

    is_file: bool
    is_directory: bool
    size: int = 0
    mtime: float = 0.0


class FileSystem(Protocol):
    """
    Filesystem operations needed to resolve entries and options.

    `stat()` and the read operations raise `FileNotFoundError` for missing paths.
    Relative paths are interpreted against `cwd()`.
    """

    def cwd(self) -> Path: ...

    def stat(self, path: StrPath) -> FileStats: ...

    def exists(self, path: StrPath) -> bool: ...

    def read_file(self, path: StrPath, encoding: str = "utf-8") -> str: ...

    def read_bytes(self, path: StrPath) -> bytes: ...

    def readdir(self, path: StrPath) -> list[str]: ...

    def write_file(self, path: StrPath, data: str | bytes) -> None: ...

    def mkdirp(self, path: StrPath) -> None: ...


def resolve_path(base: StrPath, path: StrPath) -> Path:
    """
    Resolve `path` against `base` lexically, without touching the disk.
    Absolute paths are returned normalized; `..` segments are collapsed.
    """
    return Path(os.path.normpath(os.path.join(base, path)))


def relative_display(path: StrPath, start: StrPath) -> str:
    """Path of `path` relative to `start`, for error messages."""
    try:
        return os.path.relpath(path, start)
    except ValueError:
        # Different drives on Windows.
        return str(path)
