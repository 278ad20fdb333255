"""
Filesystem capability, its two implementations, and ancestor search.

Usage::

    from satchel.fs import MemoryFileSystem

    fs = MemoryFileSystem("/project")
    fs.write_file("src/index.js", "export default 1;")
    fs.stat("src").is_directory  # True
"""

from satchel.fs.memory import MemoryFileSystem
from satchel.fs.native import NativeFileSystem
from satchel.fs.search import find_ancestor_file
from satchel.fs.types import FileStats, FileSystem, StrPath, relative_display, resolve_path

__all__ = [
    "FileStats",
    "FileSystem",
    "MemoryFileSystem",
    "NativeFileSystem",
    "StrPath",
    "find_ancestor_file",
    "relative_display",
    "resolve_path",
]
