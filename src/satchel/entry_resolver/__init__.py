"""
Entry resolution: file paths, directories and glob patterns in, entry files and
invalidating manifests out.

Usage::

    from satchel.entry_resolver import EntryResolver
    from satchel.fs import NativeFileSystem

    resolver = EntryResolver(NativeFileSystem())
    result = await resolver.resolve_entry("packages/*")
"""

from satchel.entry_resolver.request import (
    ENTRY_REQUEST_TYPE,
    EntryRequest,
    InvalidationSink,
    create_entry_request,
)
from satchel.entry_resolver.resolver import EntryResolver
from satchel.entry_resolver.types import Entry, EntryResult, File, SpecifierKind

__all__ = [
    "ENTRY_REQUEST_TYPE",
    "Entry",
    "EntryRequest",
    "EntryResolver",
    "EntryResult",
    "File",
    "InvalidationSink",
    "SpecifierKind",
    "create_entry_request",
]
