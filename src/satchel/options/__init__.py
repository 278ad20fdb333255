"""
Options resolution: a partially filled `InitialOptions` in, a complete and
immutable `Options` out.
"""

from satchel.options.defaults import (
    DEFAULT_CACHE_DIRNAME,
    LOCK_FILE_NAMES,
    PROJECT_ROOT_MARKERS,
)
from satchel.options.project_root import ProjectRoot, find_project_root, get_root_dir
from satchel.options.resolve import generate_instance_id, normalize_entries, resolve_options
from satchel.options.types import (
    HMROptions,
    InitialOptions,
    InitialServeOptions,
    InitialTargetOptions,
    LogLevel,
    Options,
    ServeOptions,
    TargetOptions,
)

__all__ = [
    "DEFAULT_CACHE_DIRNAME",
    "HMROptions",
    "InitialOptions",
    "InitialServeOptions",
    "InitialTargetOptions",
    "LOCK_FILE_NAMES",
    "LogLevel",
    "Options",
    "PROJECT_ROOT_MARKERS",
    "ProjectRoot",
    "ServeOptions",
    "TargetOptions",
    "find_project_root",
    "generate_instance_id",
    "get_root_dir",
    "normalize_entries",
    "resolve_options",
]
