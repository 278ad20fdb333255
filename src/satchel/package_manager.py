"""Locating installed packages for the rest of the build pipeline."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Protocol

from satchel.errors import PackageNotFoundError
from satchel.fs import FileSystem, StrPath, resolve_path
from satchel.package import PackageDescriptor, read_package

logger = logging.getLogger(__name__)


class PackageManager(Protocol):
    def resolve(self, name: str, from_dir: StrPath) -> PackageDescriptor: ...


class NodePackageManager:
    """
    Finds packages installed in `node_modules` directories, searching from the
    requesting directory up to the project root.
    """

    def __init__(self, fs: FileSystem, project_root: Path) -> None:
        self.fs = fs
        self.project_root = project_root

    def resolve(self, name: str, from_dir: StrPath) -> PackageDescriptor:
        current = resolve_path(self.fs.cwd(), from_dir)
        while True:
            if current.name != "node_modules":
                pkg = read_package(self.fs, current / "node_modules" / name)
                if pkg is not None:
                    logger.debug("Resolved package %s to %s", name, pkg.file_path)
                    return pkg
            parent = current.parent
            if current == self.project_root or parent == current:
                break
            current = parent
        raise PackageNotFoundError(f"Cannot find package {name!r} from {from_dir}")
