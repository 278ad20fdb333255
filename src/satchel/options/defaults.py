"""Literal defaults used when resolving options."""

from __future__ import annotations

DEFAULT_CACHE_DIRNAME = ".satchel-cache"

# Lockfiles mark the project root and are recorded as `Options.lock_file`.
LOCK_FILE_NAMES: list[str] = ["yarn.lock", "package-lock.json", "pnpm-lock.yaml"]

# Markers searched for, in order, in each directory above the entry root.
PROJECT_ROOT_MARKERS: list[str] = [*LOCK_FILE_NAMES, ".git", ".hg"]

DEFAULT_MODE = "development"
PRODUCTION_MODE = "production"
DEFAULT_LOG_LEVEL = "info"
DEFAULT_PUBLIC_URL = "/"
DEFAULT_SERVE_DIST_DIRNAME = "dist"
