"""Loading `.env` files between a directory and the project root."""

from __future__ import annotations

import io
import logging
from collections.abc import Mapping
from pathlib import Path
from typing import Protocol

from dotenv import dotenv_values

from satchel.fs import FileSystem, find_ancestor_file

logger = logging.getLogger(__name__)


class DotEnvLoader(Protocol):
    def __call__(
        self, env: Mapping[str, str], fs: FileSystem, start_dir: Path, project_root: Path
    ) -> dict[str, str]: ...


def dotenv_filenames(node_env: str) -> list[str]:
    """Files to load, lowest precedence first. `.env.local` is skipped in tests."""
    names = [".env"]
    if node_env != "test":
        names.append(".env.local")
    names += [f".env.{node_env}", f".env.{node_env}.local"]
    return names


def load_dot_env(
    env: Mapping[str, str], fs: FileSystem, start_dir: Path, project_root: Path
) -> dict[str, str]:
    """
    Merge the dotenv files found from `start_dir` up to `project_root`, later
    files winning. `NODE_ENV` comes from `env`, defaulting to `development`.
    Keys declared without a value are dropped.
    """
    node_env = env.get("NODE_ENV", "development")
    merged: dict[str, str] = {}
    for name in dotenv_filenames(node_env):
        env_path = find_ancestor_file(fs, start_dir, [name], project_root)
        if env_path is None:
            continue
        values = dotenv_values(stream=io.StringIO(fs.read_file(env_path)), interpolate=True)
        logger.debug("Loaded %d variables from %s", len(values), env_path)
        merged.update({key: value for key, value in values.items() if value is not None})
    return merged
