"""
In-memory `FileSystem`, used for tests and for builds whose output never
touches the disk.
"""

from __future__ import annotations

import errno
import os
import time
from dataclasses import dataclass
from pathlib import Path

from satchel.fs.types import FileStats, StrPath


@dataclass
class _MemoryFile:
    data: bytes
    mtime: float


class MemoryFileSystem:
    """
    A directory tree held in dictionaries. Paths are normalized against the
    current directory; `write_file()` creates missing parent directories.
    """

    def __init__(self, cwd: StrPath = "/") -> None:
        self._cwd = Path(os.path.normpath(os.path.abspath(cwd)))
        self._files: dict[str, _MemoryFile] = {}
        self._dirs: set[str] = set()
        self.mkdirp(self._cwd)

    def _key(self, path: StrPath) -> str:
        return os.path.normpath(os.path.join(self._cwd, path))

    def cwd(self) -> Path:
        return self._cwd

    def chdir(self, path: StrPath) -> None:
        key = self._key(path)
        if key not in self._dirs:
            raise FileNotFoundError(errno.ENOENT, os.strerror(errno.ENOENT), str(path))
        self._cwd = Path(key)

    def stat(self, path: StrPath) -> FileStats:
        key = self._key(path)
        if key in self._files:
            entry = self._files[key]
            return FileStats(
                is_file=True, is_directory=False, size=len(entry.data), mtime=entry.mtime
            )
        if key in self._dirs:
            return FileStats(is_file=False, is_directory=True)
        raise FileNotFoundError(errno.ENOENT, os.strerror(errno.ENOENT), str(path))

    def exists(self, path: StrPath) -> bool:
        key = self._key(path)
        return key in self._files or key in self._dirs

    def read_bytes(self, path: StrPath) -> bytes:
        key = self._key(path)
        if key in self._dirs:
            raise IsADirectoryError(errno.EISDIR, os.strerror(errno.EISDIR), str(path))
        if key not in self._files:
            raise FileNotFoundError(errno.ENOENT, os.strerror(errno.ENOENT), str(path))
        return self._files[key].data

    def read_file(self, path: StrPath, encoding: str = "utf-8") -> str:
        return self.read_bytes(path).decode(encoding)

    def readdir(self, path: StrPath) -> list[str]:
        key = self._key(path)
        if key in self._files:
            raise NotADirectoryError(errno.ENOTDIR, os.strerror(errno.ENOTDIR), str(path))
        if key not in self._dirs:
            raise FileNotFoundError(errno.ENOENT, os.strerror(errno.ENOENT), str(path))
        names = {
            os.path.basename(child)
            for child in (*self._files, *self._dirs)
            if child != key and os.path.dirname(child) == key
        }
        return sorted(names)

    def write_file(self, path: StrPath, data: str | bytes) -> None:
        key = self._key(path)
        if key in self._dirs:
            raise IsADirectoryError(errno.EISDIR, os.strerror(errno.EISDIR), str(path))
        self.mkdirp(os.path.dirname(key))
        if isinstance(data, str):
            data = data.encode("utf-8")
        self._files[key] = _MemoryFile(data=data, mtime=time.time())

    def mkdirp(self, path: StrPath) -> None:
        key = self._key(path)
        missing: list[str] = []
        current = key
        while current not in self._dirs:
            if current in self._files:
                raise NotADirectoryError(errno.ENOTDIR, os.strerror(errno.ENOTDIR), current)
            missing.append(current)
            parent = os.path.dirname(current)
            if parent == current:
                break
            current = parent
        self._dirs.update(missing)
