"""
Build cache backends.

`LMDBCache` keeps everything in one memory-mapped LMDB environment and is the
default for builds writing to the local disk. `FSCache` stores one file per key
on any `FileSystem`, for output filesystems that are not the local disk.

Both open lazily: nothing touches storage until the first `ensure()` or access.
Values passed to `set()` must be JSON-serializable; blobs are raw bytes.
"""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any, Protocol

import lmdb

from satchel.fs import FileSystem

logger = logging.getLogger(__name__)

# Upper bound on the LMDB map, not an allocation.
DEFAULT_MAP_SIZE = 1 << 33  # 8 GiB


class Cache(Protocol):
    def ensure(self) -> None: ...

    def has(self, key: str) -> bool: ...

    def get(self, key: str) -> Any | None: ...

    def set(self, key: str, value: Any) -> None: ...

    def get_blob(self, key: str) -> bytes: ...

    def set_blob(self, key: str, data: bytes) -> None: ...


class FSCache:
    """One file per key, sharded by the first two characters of the key."""

    def __init__(self, fs: FileSystem, cache_dir: Path) -> None:
        self.fs = fs
        self.cache_dir = cache_dir

    def ensure(self) -> None:
        self.fs.mkdirp(self.cache_dir)

    def _path(self, key: str) -> Path:
        return self.cache_dir / key[:2] / (key[2:] or key)

    def has(self, key: str) -> bool:
        return self.fs.exists(self._path(key))

    def get(self, key: str) -> Any | None:
        try:
            return json.loads(self.fs.read_file(self._path(key)))
        except FileNotFoundError:
            return None

    def set(self, key: str, value: Any) -> None:
        self.set_blob(key, json.dumps(value).encode("utf-8"))

    def get_blob(self, key: str) -> bytes:
        try:
            return self.fs.read_bytes(self._path(key))
        except FileNotFoundError:
            raise KeyError(key) from None

    def set_blob(self, key: str, data: bytes) -> None:
        path = self._path(key)
        self.fs.mkdirp(path.parent)
        self.fs.write_file(path, data)


class LMDBCache:
    """Key-value cache in an LMDB environment rooted at `cache_dir`."""

    def __init__(self, cache_dir: Path, *, map_size: int = DEFAULT_MAP_SIZE) -> None:
        self.cache_dir = cache_dir
        self.map_size = map_size
        self._env: lmdb.Environment | None = None

    def ensure(self) -> None:
        self._environment()

    def _environment(self) -> lmdb.Environment:
        if self._env is None:
            logger.debug("Opening LMDB cache at %s", self.cache_dir)
            self._env = lmdb.open(str(self.cache_dir), map_size=self.map_size)
        return self._env

    def _read(self, key: str) -> bytes | None:
        with self._environment().begin() as txn:
            value = txn.get(key.encode("utf-8"))
        return bytes(value) if value is not None else None

    def has(self, key: str) -> bool:
        return self._read(key) is not None

    def get(self, key: str) -> Any | None:
        data = self._read(key)
        return json.loads(data) if data is not None else None

    def set(self, key: str, value: Any) -> None:
        self.set_blob(key, json.dumps(value).encode("utf-8"))

    def get_blob(self, key: str) -> bytes:
        data = self._read(key)
        if data is None:
            raise KeyError(key)
        return data

    def set_blob(self, key: str, data: bytes) -> None:
        with self._environment().begin(write=True) as txn:
            txn.put(key.encode("utf-8"), data)

    def close(self) -> None:
        if self._env is not None:
            self._env.close()
            self._env = None
