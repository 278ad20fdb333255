"""Initial (user-supplied) and resolved option records."""

from __future__ import annotations

from collections.abc import Mapping, Sequence
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Literal

from satchel.cache import Cache
from satchel.fs import FileSystem, StrPath
from satchel.package_manager import PackageManager

LogLevel = Literal["none", "error", "warn", "info", "progress", "verbose"]


@dataclass(frozen=True)
class HMROptions:
    port: int | None = None
    host: str | None = None


@dataclass
class InitialServeOptions:
    port: int
    host: str | None = None
    https: bool = False
    public_url: str | None = None


@dataclass(frozen=True)
class ServeOptions:
    dist_dir: Path
    port: int
    host: str | None = None
    https: bool = False
    public_url: str | None = None


@dataclass
class InitialTargetOptions:
    should_optimize: bool | None = None
    should_scope_hoist: bool | None = None
    source_maps: bool | None = None
    public_url: str | None = None
    dist_dir: StrPath | None = None
    engines: dict[str, str] | None = None
    output_format: str | None = None


@dataclass(frozen=True)
class TargetOptions:
    should_optimize: bool
    should_scope_hoist: bool
    source_maps: bool
    public_url: str
    dist_dir: Path | None = None
    engines: Mapping[str, str] | None = None
    output_format: str | None = None


@dataclass
class InitialOptions:
    """
    Options as supplied by the caller. Every field is optional; `None` means
    "not set", so defaults can tell an explicit `False` from an omission.
    """

    entries: StrPath | Sequence[StrPath] | None = None
    entry_root: StrPath | None = None
    config: str | None = None
    default_config: str | None = None
    env: Mapping[str, str] | None = None
    targets: Any = None
    should_disable_cache: bool | None = None
    cache_dir: StrPath | None = None
    cache: Cache | None = None
    mode: str | None = None
    hmr_options: HMROptions | None = None
    should_content_hash: bool | None = None
    serve_options: InitialServeOptions | None = None
    should_auto_install: bool | None = None
    log_level: LogLevel | None = None
    should_profile: bool | None = None
    should_patch_console: bool | None = None
    should_build_lazily: bool | None = None
    should_bundle_incrementally: bool | None = None
    input_fs: FileSystem | None = None
    output_fs: FileSystem | None = None
    package_manager: PackageManager | None = None
    additional_reporters: Sequence[Any] | None = None
    default_target_options: InitialTargetOptions | None = None
    detailed_report: int | None = None


@dataclass(frozen=True)
class Options:
    """Fully resolved options for one build invocation."""

    entries: tuple[Path, ...]
    entry_root: Path
    project_root: Path
    lock_file: Path | None
    cache_dir: Path
    cache: Cache
    input_fs: FileSystem
    output_fs: FileSystem
    package_manager: PackageManager
    env: Mapping[str, str]
    mode: str
    instance_id: str
    default_target_options: TargetOptions
    should_build_lazily: bool
    should_content_hash: bool
    should_bundle_incrementally: bool
    should_auto_install: bool
    should_disable_cache: bool
    should_profile: bool
    should_patch_console: bool
    log_level: LogLevel
    hmr_options: HMROptions | None
    serve_options: ServeOptions | None
    additional_reporters: tuple[Any, ...]
    config: str | None = None
    default_config: str | None = None
    targets: Any = None
    detailed_report: int | None = None
