"""
Entry request: the unit an incremental build tracks for one entry specifier.

The request id is stable for a given input, so repeated requests for the same
specifier can be memoized by the request tracker. Running a request resolves
the entry and registers the invalidations that make a later build re-run it.
"""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import TYPE_CHECKING, Protocol

from satchel.entry_resolver.resolver import EntryResolver
from satchel.entry_resolver.types import EntryResult
from satchel.glob import is_glob

if TYPE_CHECKING:
    from satchel.options import Options

ENTRY_REQUEST_TYPE = "entry_request"


class InvalidationSink(Protocol):
    def invalidate_on_file_update(self, path: Path) -> None: ...

    def invalidate_on_file_create(self, glob: str) -> None: ...


@dataclass(frozen=True)
class EntryRequest:
    id: str
    input: str
    type: str = ENTRY_REQUEST_TYPE

    async def run(self, *, api: InvalidationSink, options: Options) -> EntryResult:
        resolver = EntryResolver(options.input_fs)
        result = await resolver.resolve_entry(self.input)

        # Manifests that redirected a directory entry.
        for file in result.files:
            api.invalidate_on_file_update(file.file_path)

        # A new file matching the pattern changes the result.
        if is_glob(self.input):
            api.invalidate_on_file_create(self.input)

        return result


def create_entry_request(input: str | Path) -> EntryRequest:
    input = str(input)
    return EntryRequest(id=f"{ENTRY_REQUEST_TYPE}:{input}", input=input)
