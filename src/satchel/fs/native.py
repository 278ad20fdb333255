"""`FileSystem` implementation backed by the local disk."""

from __future__ import annotations

import errno
import os
import stat
from pathlib import Path

from satchel.fs.types import FileStats, StrPath


class NativeFileSystem:
    """Thin wrapper over `os` and `pathlib`."""

    def cwd(self) -> Path:
        return Path.cwd()

    def stat(self, path: StrPath) -> FileStats:
        try:
            st = os.stat(path)
        except NotADirectoryError as err:
            # A file where a parent directory should be: nothing exists at `path`.
            raise FileNotFoundError(errno.ENOENT, os.strerror(errno.ENOENT), str(path)) from err
        return FileStats(
            is_file=stat.S_ISREG(st.st_mode),
            is_directory=stat.S_ISDIR(st.st_mode),
            size=st.st_size,
            mtime=st.st_mtime,
        )

    def exists(self, path: StrPath) -> bool:
        return os.path.exists(path)

    def read_file(self, path: StrPath, encoding: str = "utf-8") -> str:
        return Path(path).read_text(encoding=encoding)

    def read_bytes(self, path: StrPath) -> bytes:
        return Path(path).read_bytes()

    def readdir(self, path: StrPath) -> list[str]:
        return sorted(os.listdir(path))

    def write_file(self, path: StrPath, data: str | bytes) -> None:
        target = Path(path)
        if isinstance(data, str):
            target.write_text(data, encoding="utf-8")
        else:
            target.write_bytes(data)

    def mkdirp(self, path: StrPath) -> None:
        os.makedirs(path, exist_ok=True)
