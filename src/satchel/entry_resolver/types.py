"""Result types for entry resolution."""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path


class SpecifierKind(Enum):
    """What an entry specifier turned out to be."""

    GLOB = "glob"
    DIRECTORY = "directory"
    FILE = "file"
    UNKNOWN = "unknown"


@dataclass(frozen=True)
class Entry:
    """
    A source file to start building from. `package_path` is the directory whose
    manifest redirected to `file_path`, if any.
    """

    file_path: Path
    package_path: Path | None = None


@dataclass(frozen=True)
class File:
    """A file whose modification invalidates the entry resolution that read it."""

    file_path: Path


@dataclass
class EntryResult:
    entries: list[Entry] = field(default_factory=list)
    files: list[File] = field(default_factory=list)

    @classmethod
    def concat(cls, results: Iterable[EntryResult]) -> EntryResult:
        """Join results in order, keeping duplicates."""
        joined = cls()
        for result in results:
            joined.entries.extend(result.entries)
            joined.files.extend(result.files)
        return joined
