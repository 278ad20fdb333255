"""Reading `package.json` manifests."""

from __future__ import annotations

import json
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

from satchel.errors import InvalidManifestError
from satchel.fs import FileSystem, relative_display

MANIFEST_NAME = "package.json"


@dataclass(frozen=True)
class PackageDescriptor:
    """A parsed manifest together with the path it was read from."""

    file_path: Path
    data: dict[str, Any] = field(default_factory=dict)

    @property
    def directory(self) -> Path:
        return self.file_path.parent

    @property
    def name(self) -> str | None:
        value = self.data.get("name")
        return value if isinstance(value, str) else None

    @property
    def source(self) -> str | None:
        """The `source` field, only when it is a string."""
        value = self.data.get("source")
        return value if isinstance(value, str) else None


def read_package(fs: FileSystem, directory: Path) -> PackageDescriptor | None:
    """
    Read `directory/package.json`.

    Returns `None` when there is no manifest. A manifest that exists but is not
    a UTF-8 encoded JSON object raises `InvalidManifestError`, naming the
    manifest relative to the filesystem's cwd.
    """
    manifest = directory / MANIFEST_NAME
    display = relative_display(manifest, fs.cwd())
    try:
        content = fs.read_file(manifest, "utf-8")
    except (FileNotFoundError, IsADirectoryError, NotADirectoryError):
        return None
    except UnicodeDecodeError as err:
        raise InvalidManifestError(manifest, display, str(err)) from err

    try:
        data = json.loads(content)
    except json.JSONDecodeError as err:
        raise InvalidManifestError(manifest, display, str(err)) from err

    if not isinstance(data, dict):
        raise InvalidManifestError(manifest, display, "manifest must be a JSON object")

    return PackageDescriptor(file_path=manifest, data=data)
