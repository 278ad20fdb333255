"""
Satchel core: resolving build entries and build options.

Usage::

    from satchel import EntryResolver, InitialOptions, resolve_options

    options = resolve_options(InitialOptions(entries=["src/index.html"], mode="production"))
    result = await EntryResolver(options.input_fs).resolve_entry(options.entries[0])
"""

from satchel.entry_resolver import (
    Entry,
    EntryRequest,
    EntryResolver,
    EntryResult,
    File,
    create_entry_request,
)
from satchel.errors import (
    ConfigurationError,
    EntryError,
    EntryNotFoundError,
    InvalidManifestError,
    InvalidSourceError,
    MissingSourceError,
    SatchelError,
    UnknownEntryTypeError,
    UnresolvableDirectoryError,
)
from satchel.options import InitialOptions, InitialTargetOptions, Options, resolve_options

__all__ = [
    "ConfigurationError",
    "Entry",
    "EntryError",
    "EntryNotFoundError",
    "EntryRequest",
    "EntryResolver",
    "EntryResult",
    "File",
    "InitialOptions",
    "InitialTargetOptions",
    "InvalidManifestError",
    "InvalidSourceError",
    "MissingSourceError",
    "Options",
    "SatchelError",
    "UnknownEntryTypeError",
    "UnresolvableDirectoryError",
    "create_entry_request",
    "resolve_options",
]
