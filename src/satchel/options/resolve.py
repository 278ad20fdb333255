"""
Turning `InitialOptions` into the immutable `Options` every other part of the
build reads.

Everything here is deterministic given the injected `environ`, `clock`,
`random` and `load_env`, except `instance_id`, which is meant to differ on
every call.
"""

from __future__ import annotations

import hashlib
import logging
import os
import random as _random
import time
from collections.abc import Callable, Mapping, Sequence
from pathlib import Path
from types import MappingProxyType
from typing import TypeVar

from satchel.cache import Cache, FSCache, LMDBCache
from satchel.env import DotEnvLoader, load_dot_env
from satchel.errors import ConfigurationError
from satchel.fs import FileSystem, NativeFileSystem, StrPath, resolve_path
from satchel.options.defaults import (
    DEFAULT_CACHE_DIRNAME,
    DEFAULT_LOG_LEVEL,
    DEFAULT_MODE,
    DEFAULT_PUBLIC_URL,
    DEFAULT_SERVE_DIST_DIRNAME,
    PRODUCTION_MODE,
)
from satchel.options.project_root import find_project_root, get_root_dir
from satchel.options.types import (
    InitialOptions,
    InitialTargetOptions,
    Options,
    ServeOptions,
    TargetOptions,
)
from satchel.package_manager import NodePackageManager

logger = logging.getLogger(__name__)

_T = TypeVar("_T")


def generate_instance_id(entries: Sequence[Path], now: float, rand: float) -> str:
    """Hash of the entries, the time and a random number. Changes on every run."""
    seed = f"{','.join(str(entry) for entry in entries)}-{int(now * 1000)}-{rand}"
    return hashlib.sha256(seed.encode("utf-8")).hexdigest()


def normalize_entries(entries: StrPath | Sequence[StrPath] | None, cwd: Path) -> list[Path]:
    """`None` or `""` gives no entries; one path or a list is resolved against `cwd`."""
    if entries is None or entries == "":
        return []
    if isinstance(entries, (str, os.PathLike)):
        return [resolve_path(cwd, entries)]
    return [resolve_path(cwd, entry) for entry in entries]


def resolve_options(
    initial: InitialOptions | None = None,
    *,
    environ: Mapping[str, str] | None = None,
    clock: Callable[[], float] = time.time,
    random: Callable[[], float] = _random.random,
    load_env: DotEnvLoader = load_dot_env,
) -> Options:
    """
    Fill in every option the caller left unset.

    Raises `ConfigurationError` up front when lazy bundling and content hashing
    are both enabled. Every other combination of inputs resolves.
    """
    initial = initial or InitialOptions()
    environ = os.environ if environ is None else environ
    target_initial = initial.default_target_options or InitialTargetOptions()

    is_production = initial.mode == PRODUCTION_MODE
    should_build_lazily = _default(initial.should_build_lazily, False)
    should_content_hash = _default(initial.should_content_hash, is_production)
    if should_build_lazily and should_content_hash:
        raise ConfigurationError("Lazy bundling does not work with content hashing")

    input_fs = initial.input_fs if initial.input_fs is not None else NativeFileSystem()
    output_fs = initial.output_fs if initial.output_fs is not None else NativeFileSystem()
    input_cwd = input_fs.cwd()
    output_cwd = output_fs.cwd()

    entries = normalize_entries(initial.entries, input_cwd)
    entry_root = (
        resolve_path(input_cwd, initial.entry_root)
        if initial.entry_root is not None
        else get_root_dir(entries, input_cwd)
    )

    project = find_project_root(input_fs, entry_root, input_cwd)
    project_root = project.root

    package_manager = initial.package_manager
    if package_manager is None:
        package_manager = NodePackageManager(input_fs, project_root)

    # An explicit cache dir is relative to where the build writes, the default
    # lives in the project.
    cache_dir = (
        resolve_path(output_cwd, initial.cache_dir)
        if initial.cache_dir is not None
        else project_root / DEFAULT_CACHE_DIRNAME
    )
    cache = initial.cache if initial.cache is not None else _default_cache(output_fs, cache_dir)

    mode = _default(initial.mode, DEFAULT_MODE)
    should_optimize = _default(target_initial.should_optimize, mode == PRODUCTION_MODE)
    public_url = _default(target_initial.public_url, DEFAULT_PUBLIC_URL)
    dist_dir = (
        resolve_path(input_cwd, target_initial.dist_dir)
        if target_initial.dist_dir is not None
        else None
    )

    explicit_env = dict(initial.env or {})
    env = {
        **environ,
        **explicit_env,
        **load_env(explicit_env, input_fs, project_root, project_root),
    }

    serve_options = None
    if initial.serve_options is not None:
        serve = initial.serve_options
        serve_options = ServeOptions(
            dist_dir=output_cwd / DEFAULT_SERVE_DIST_DIRNAME if dist_dir is None else dist_dir,
            port=serve.port,
            host=serve.host,
            https=serve.https,
            public_url=serve.public_url,
        )

    logger.debug(
        "Resolved options: mode=%s, project_root=%s, cache_dir=%s, cache=%s",
        mode,
        project_root,
        cache_dir,
        type(cache).__name__,
    )

    return Options(
        entries=tuple(entries),
        entry_root=entry_root,
        project_root=project_root,
        lock_file=project.lock_file,
        cache_dir=cache_dir,
        cache=cache,
        input_fs=input_fs,
        output_fs=output_fs,
        package_manager=package_manager,
        env=MappingProxyType(env),
        mode=mode,
        instance_id=generate_instance_id(entries, clock(), random()),
        default_target_options=TargetOptions(
            should_optimize=should_optimize,
            should_scope_hoist=_default(target_initial.should_scope_hoist, is_production),
            source_maps=_default(target_initial.source_maps, True),
            public_url=public_url,
            dist_dir=dist_dir,
            engines=(
                MappingProxyType(dict(target_initial.engines))
                if target_initial.engines is not None
                else None
            ),
            output_format=target_initial.output_format,
        ),
        should_build_lazily=should_build_lazily,
        should_content_hash=should_content_hash,
        should_bundle_incrementally=_default(initial.should_bundle_incrementally, False),
        should_auto_install=_default(initial.should_auto_install, False),
        should_disable_cache=_default(initial.should_disable_cache, False),
        should_profile=_default(initial.should_profile, False),
        should_patch_console=_default(
            initial.should_patch_console, environ.get("NODE_ENV") != "test"
        ),
        log_level=_default(initial.log_level, DEFAULT_LOG_LEVEL),
        hmr_options=initial.hmr_options,
        serve_options=serve_options,
        additional_reporters=tuple(initial.additional_reporters or ()),
        config=initial.config,
        default_config=initial.default_config,
        targets=initial.targets,
        detailed_report=initial.detailed_report,
    )


def _default(value: _T | None, default: _T) -> _T:
    return default if value is None else value


def _default_cache(output_fs: FileSystem, cache_dir: Path) -> Cache:
    if isinstance(output_fs, NativeFileSystem):
        return LMDBCache(cache_dir)
    return FSCache(output_fs, cache_dir)
