"""
EntryResolver: turns one entry specifier into the source files to build and the
manifests that fed into that decision.

A specifier is handled as:
- Glob pattern -> expanded, every match resolved concurrently, results joined
  in match order
- Directory -> redirected through `package.json#source`
- Regular file -> used directly
- Anything else that exists -> `UnknownEntryTypeError`
- Missing -> `EntryNotFoundError`
"""

from __future__ import annotations

import asyncio
import logging
from pathlib import Path
from typing import assert_never

from satchel.entry_resolver.types import Entry, EntryResult, File, SpecifierKind
from satchel.errors import (
    EntryNotFoundError,
    InvalidSourceError,
    MissingSourceError,
    UnknownEntryTypeError,
    UnresolvableDirectoryError,
)
from satchel.fs import FileStats, FileSystem, StrPath, relative_display, resolve_path
from satchel.glob import GlobMatcher, glob, is_glob
from satchel.package import PackageDescriptor, read_package

logger = logging.getLogger(__name__)


class EntryResolver:
    """
    Resolves entry specifiers against a filesystem. Holds no state between
    calls, so concurrent resolutions need no locking.
    """

    def __init__(self, fs: FileSystem, *, glob: GlobMatcher = glob) -> None:
        self.fs: FileSystem = fs
        self._glob: GlobMatcher = glob

    async def resolve_entry(self, entry: StrPath) -> EntryResult:
        kind = await self.classify(entry)

        if kind is SpecifierKind.GLOB:
            return await self._resolve_glob(str(entry))
        elif kind is SpecifierKind.DIRECTORY:
            return await self._resolve_directory(resolve_path(self.fs.cwd(), entry))
        elif kind is SpecifierKind.FILE:
            return EntryResult(entries=[Entry(resolve_path(self.fs.cwd(), entry))], files=[])
        elif kind is SpecifierKind.UNKNOWN:
            raise UnknownEntryTypeError(entry)
        else:
            assert_never(kind)

    async def classify(self, entry: StrPath) -> SpecifierKind:
        """
        Glob detection is syntactic; everything else is decided by `stat()`.
        Raises `EntryNotFoundError` for a non-glob path that does not exist.
        """
        if is_glob(entry):
            return SpecifierKind.GLOB

        stats = await self._stat(resolve_path(self.fs.cwd(), entry))
        if stats is None:
            raise EntryNotFoundError(entry)
        if stats.is_directory:
            return SpecifierKind.DIRECTORY
        if stats.is_file:
            return SpecifierKind.FILE
        return SpecifierKind.UNKNOWN

    async def read_package(self, directory: Path) -> PackageDescriptor | None:
        """Read `directory/package.json`; `None` means there is none."""
        return await asyncio.to_thread(read_package, self.fs, directory)

    async def _resolve_glob(self, pattern: str) -> EntryResult:
        matches = await asyncio.to_thread(
            self._glob, pattern, self.fs, absolute=True, only_files=False
        )
        logger.debug("Entry glob %s matched %d paths", pattern, len(matches))

        try:
            async with asyncio.TaskGroup() as group:
                tasks = [group.create_task(self.resolve_entry(match)) for match in matches]
        except* Exception as failures:
            # Re-raise the first failure itself, not the group wrapping it.
            raise failures.exceptions[0] from None

        return EntryResult.concat(task.result() for task in tasks)

    async def _resolve_directory(self, directory: Path) -> EntryResult:
        pkg = await self.read_package(directory)
        if pkg is None or pkg.source is None:
            raise UnresolvableDirectoryError(directory)

        source = resolve_path(pkg.directory, pkg.source.lstrip("/\\"))
        manifest = relative_display(pkg.file_path, self.fs.cwd())

        stats = await self._stat(source)
        if stats is None:
            raise MissingSourceError(f"{pkg.source} in {manifest}#source does not exist")
        if not stats.is_file:
            raise InvalidSourceError(f"{pkg.source} in {manifest}#source is not a file")

        logger.debug("Entry %s redirected to %s by %s", directory, source, manifest)
        return EntryResult(
            entries=[Entry(source, package_path=directory)],
            files=[File(pkg.file_path)],
        )

    async def _stat(self, path: Path) -> FileStats | None:
        try:
            return await asyncio.to_thread(self.fs.stat, path)
        except FileNotFoundError:
            return None
