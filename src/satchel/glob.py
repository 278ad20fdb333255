"""
Glob detection and expansion over any `FileSystem`.

Patterns use shell-style wildcards per path segment (`*`, `?`, `[...]`), `**`
for zero or more directories, and `{a,b}` alternatives. Wildcards do not match
names starting with `.` unless the pattern segment itself starts with `.`.
"""

from __future__ import annotations

import os
import re
from collections.abc import Iterator
from fnmatch import fnmatchcase
from pathlib import Path
from typing import Protocol

from satchel.fs import FileSystem, StrPath, resolve_path

# Characters that indicate a path is a glob pattern rather than a literal path.
_GLOB_CHARS = frozenset("*?[")

# Innermost `{a,b}` group. Braces without a comma are literal.
_BRACE_RE = re.compile(r"\{([^{}]*,[^{}]*)\}")


class GlobMatcher(Protocol):
    def __call__(
        self, pattern: str, fs: FileSystem, *, absolute: bool = True, only_files: bool = False
    ) -> list[Path]: ...


def _is_magic(segment: str) -> bool:
    return any(c in segment for c in _GLOB_CHARS) or _BRACE_RE.search(segment) is not None


def is_glob(specifier: StrPath) -> bool:
    """True if the specifier contains glob syntax. Purely syntactic."""
    return _is_magic(str(specifier))


def expand_braces(pattern: str) -> list[str]:
    """Expand `{a,b}` alternatives, innermost group first, preserving order."""
    match = _BRACE_RE.search(pattern)
    if match is None:
        return [pattern]
    head, tail = pattern[: match.start()], pattern[match.end() :]
    expanded: list[str] = []
    for option in match.group(1).split(","):
        expanded.extend(expand_braces(head + option + tail))
    return expanded


def glob_root(pattern: StrPath) -> Path:
    """
    The literal directory a pattern is rooted at: every path segment before the
    first one containing glob syntax.
    """
    parts = Path(pattern).parts
    for i, part in enumerate(parts):
        if _is_magic(part):
            return Path(*parts[:i]) if i > 0 else Path(".")
    return Path(pattern).parent


def glob(
    pattern: str, fs: FileSystem, *, absolute: bool = True, only_files: bool = False
) -> list[Path]:
    """
    Expand `pattern` against `fs`, relative patterns being rooted at `fs.cwd()`.

    Matches come back in depth-first order with directory listings sorted by
    name, without duplicates. Directories are included unless `only_files`.
    """
    cwd = fs.cwd()
    seen: set[Path] = set()
    result: list[Path] = []

    for expanded in expand_braces(pattern):
        parts = resolve_path(cwd, expanded).parts
        split = next((i for i, part in enumerate(parts) if _is_magic(part)), len(parts))
        base = Path(*parts[:split])
        segments = parts[split:]

        if segments:
            candidates: Iterator[Path] = _match(fs, base, segments)
        else:
            candidates = iter([base] if fs.exists(base) else [])

        for found in candidates:
            if found in seen:
                continue
            if only_files and not _is_file(fs, found):
                continue
            seen.add(found)
            result.append(found if absolute else Path(os.path.relpath(found, cwd)))

    return result


def _match(fs: FileSystem, directory: Path, segments: tuple[str, ...]) -> Iterator[Path]:
    segment, rest = segments[0], segments[1:]

    if segment == "**":
        if rest:
            yield from _match(fs, directory, rest)
        for name in _listdir(fs, directory):
            if name.startswith("."):
                continue
            child = directory / name
            if not rest:
                yield child
            if _is_dir(fs, child):
                yield from _match(fs, child, segments)
        return

    if not _is_magic(segment):
        child = directory / segment
        if rest:
            if _is_dir(fs, child):
                yield from _match(fs, child, rest)
        elif fs.exists(child):
            yield child
        return

    for name in _listdir(fs, directory):
        if name.startswith(".") and not segment.startswith("."):
            continue
        if not fnmatchcase(name, segment):
            continue
        child = directory / name
        if not rest:
            yield child
        elif _is_dir(fs, child):
            yield from _match(fs, child, rest)


def _listdir(fs: FileSystem, directory: Path) -> list[str]:
    # A missing or non-directory base simply has no matches.
    try:
        return fs.readdir(directory)
    except (FileNotFoundError, NotADirectoryError):
        return []


def _is_dir(fs: FileSystem, path: Path) -> bool:
    try:
        return fs.stat(path).is_directory
    except FileNotFoundError:
        return False


def _is_file(fs: FileSystem, path: Path) -> bool:
    try:
        return fs.stat(path).is_file
    except FileNotFoundError:
        return False
