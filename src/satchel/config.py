"""
TOML-based config file loading for satchel.

Searches for `.satchel.toml`, `satchel.toml`, or `pyproject.toml [tool.satchel]`
walking up from a start directory. Config values are merged with explicitly
passed options using three-way precedence: explicit options > config file >
built-in defaults (applied later by `resolve_options`).
"""

from __future__ import annotations

import logging
import tomllib
from dataclasses import fields, replace
from pathlib import Path
from typing import Any, cast

from satchel.fs import FileSystem, NativeFileSystem, StrPath, find_ancestor_file, resolve_path
from satchel.options import InitialOptions, InitialTargetOptions

logger = logging.getLogger(__name__)

# Config file search order (first match wins within each directory level)
_CONFIG_FILENAMES = [".satchel.toml", "satchel.toml", "pyproject.toml"]

# Tables kept as mappings rather than flattened into the top level.
_MAPPING_KEYS = {"env", "engines"}

_OPTION_FIELDS = {f.name for f in fields(InitialOptions)}
_TARGET_FIELDS = {f.name for f in fields(InitialTargetOptions)}

# Options whose values are paths, resolved against the config file's directory.
_PATH_FIELDS = {"entry_root", "cache_dir", "dist_dir"}


def find_config_file(start_dir: StrPath, fs: FileSystem | None = None) -> Path | None:
    """
    Nearest config file at or above `start_dir`, or `None`. Within a directory
    `.satchel.toml` wins over `satchel.toml`, which wins over a `pyproject.toml`
    with a `[tool.satchel]` table. A `pyproject.toml` without one is passed over.
    """
    fs = fs or NativeFileSystem()
    current = resolve_path(fs.cwd(), start_dir)
    while True:
        found = find_ancestor_file(fs, current, _CONFIG_FILENAMES)
        if found is None:
            return None
        if found.name != "pyproject.toml" or _pyproject_has_satchel_section(fs, found):
            return found
        if found.parent.parent == found.parent:
            return None
        current = found.parent.parent


def _pyproject_has_satchel_section(fs: FileSystem, path: Path) -> bool:
    try:
        data = tomllib.loads(fs.read_file(path))
    except (tomllib.TOMLDecodeError, UnicodeDecodeError, OSError):
        return False
    return "satchel" in data.get("tool", {})


def load_config(config_path: StrPath, fs: FileSystem | None = None) -> InitialOptions:
    """
    Load `InitialOptions` from a TOML file. Supports both standalone
    `satchel.toml` / `.satchel.toml` and `pyproject.toml` (extracts
    `[tool.satchel]`). Kebab-case keys map to snake_case; unknown keys are
    ignored. Relative paths are relative to the config file.

    A malformed file is reported and treated as empty rather than failing the build.
    """
    fs = fs or NativeFileSystem()
    config_path = resolve_path(fs.cwd(), config_path)
    try:
        data = tomllib.loads(fs.read_file(config_path))
    except tomllib.TOMLDecodeError as err:
        logger.warning("Ignoring malformed config file %s: %s", config_path, err)
        return InitialOptions()

    if config_path.name == "pyproject.toml":
        data = data.get("tool", {}).get("satchel", {})

    return _parse_config_data(data, config_path.parent)


def _parse_config_data(data: dict[str, Any], base_dir: Path) -> InitialOptions:
    """Parse a flat or sectioned TOML dict into `InitialOptions`."""
    # Flatten sections such as [build] and [target] into the top level.
    flat: dict[str, Any] = {}
    for key, value in data.items():
        snake_key = key.replace("-", "_")
        if isinstance(value, dict) and snake_key not in _MAPPING_KEYS:
            for sub_key, sub_value in cast(dict[str, Any], value).items():
                flat[sub_key.replace("-", "_")] = sub_value
        else:
            flat[snake_key] = value

    options: dict[str, Any] = {}
    target: dict[str, Any] = {}
    for key, value in flat.items():
        if key in _PATH_FIELDS:
            value = resolve_path(base_dir, value)
        if key == "entries":
            value = _resolve_entries(value, base_dir)

        if key in _TARGET_FIELDS:
            target[key] = value
        elif key in _OPTION_FIELDS:
            options[key] = value
        else:
            logger.warning("Ignoring unrecognized config key %r", key)

    if target:
        options["default_target_options"] = InitialTargetOptions(**target)
    return InitialOptions(**options)


def _resolve_entries(value: str | list[str], base_dir: Path) -> Path | list[Path]:
    if isinstance(value, str):
        return resolve_path(base_dir, value)
    return [resolve_path(base_dir, entry) for entry in value]


def merge_initial_options(
    explicit: InitialOptions | None, config: InitialOptions | None
) -> InitialOptions:
    """
    Merge explicitly passed options over config file options. A field counts
    as set when it is not `None`; target options merge field by field.
    """
    if config is None:
        return explicit or InitialOptions()
    if explicit is None:
        return config

    merged = replace(config)
    for option_field in fields(InitialOptions):
        value = getattr(explicit, option_field.name)
        if value is not None:
            setattr(merged, option_field.name, value)

    if explicit.default_target_options and config.default_target_options:
        target = replace(config.default_target_options)
        for target_field in fields(InitialTargetOptions):
            value = getattr(explicit.default_target_options, target_field.name)
            if value is not None:
                setattr(target, target_field.name, value)
        merged.default_target_options = target

    return merged


def load_initial_options(
    start_dir: StrPath,
    explicit: InitialOptions | None = None,
    fs: FileSystem | None = None,
) -> InitialOptions:
    """Find the nearest config file above `start_dir` and merge `explicit` over it."""
    fs = fs or NativeFileSystem()
    config_path = find_config_file(start_dir, fs)
    if config_path is None:
        return explicit or InitialOptions()
    logger.debug("Using config file %s", config_path)
    return merge_initial_options(explicit, load_config(config_path, fs))
