"""
Exceptions raised by entry and options resolution.

Every entry error is terminal for the specifier being resolved. Nothing here is
retried.
"""

from __future__ import annotations

from pathlib import Path


class SatchelError(Exception):
    """Base class for errors raised deliberately by satchel."""


class EntryError(SatchelError):
    """An entry specifier could not be resolved."""


class EntryNotFoundError(EntryError, FileNotFoundError):
    """The entry path does not exist."""

    def __init__(self, entry: Path | str) -> None:
        super().__init__(f"Entry {entry} does not exist")
        self.entry = entry


class InvalidManifestError(EntryError):
    """A `package.json` exists but could not be parsed."""

    def __init__(self, file_path: Path, display_path: Path | str, reason: str) -> None:
        super().__init__(f"Error parsing {display_path}: {reason}")
        self.file_path = file_path


class MissingSourceError(EntryError):
    """The manifest `source` field points at a path that does not exist."""


class InvalidSourceError(EntryError):
    """The manifest `source` field points at something other than a regular file."""


class UnresolvableDirectoryError(EntryError):
    """A directory entry has no manifest, or the manifest has no usable `source`."""

    def __init__(self, entry: Path | str) -> None:
        super().__init__(f"Could not find entry: {entry}")
        self.entry = entry


class UnknownEntryTypeError(EntryError):
    """The entry exists but is neither a regular file nor a directory."""

    def __init__(self, entry: Path | str) -> None:
        super().__init__(f"Unknown entry {entry}")
        self.entry = entry


class ConfigurationError(SatchelError, ValueError):
    """Initial options contain a combination that cannot be built."""


class PackageNotFoundError(SatchelError, LookupError):
    """A package could not be located in any `node_modules` directory."""
