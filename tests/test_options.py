"""Tests for options resolution."""

from __future__ import annotations

import dataclasses
from collections.abc import Mapping
from pathlib import Path
from unittest.mock import Mock

import pytest

from satchel.cache import FSCache, LMDBCache
from satchel.errors import ConfigurationError
from satchel.fs import FileSystem, MemoryFileSystem, NativeFileSystem
from satchel.options import (
    HMROptions,
    InitialOptions,
    InitialServeOptions,
    InitialTargetOptions,
    Options,
    generate_instance_id,
    normalize_entries,
    resolve_options,
)
from satchel.package_manager import NodePackageManager


def _no_env(env: Mapping[str, str], fs: FileSystem, start_dir: Path, project_root: Path):
    return {}


def _resolve(fs: MemoryFileSystem | None = None, **kwargs) -> Options:
    fs = fs or MemoryFileSystem("/project")
    kwargs.setdefault("input_fs", fs)
    kwargs.setdefault("output_fs", fs)
    return resolve_options(InitialOptions(**kwargs), environ={}, load_env=_no_env)


def test_defaults_development_mode():
    options = _resolve()
    assert options.mode == "development"
    assert options.default_target_options.should_optimize is False
    assert options.default_target_options.should_scope_hoist is False
    assert options.default_target_options.source_maps is True
    assert options.default_target_options.public_url == "/"
    assert options.default_target_options.dist_dir is None
    assert options.should_content_hash is False
    assert options.should_build_lazily is False
    assert options.should_bundle_incrementally is False
    assert options.should_auto_install is False
    assert options.should_disable_cache is False
    assert options.should_profile is False
    assert options.log_level == "info"
    assert options.hmr_options is None
    assert options.serve_options is None
    assert options.additional_reporters == ()
    assert options.entries == ()


def test_production_mode_defaults():
    options = _resolve(mode="production")
    assert options.default_target_options.should_optimize is True
    assert options.default_target_options.should_scope_hoist is True
    assert options.should_content_hash is True


def test_explicit_values_win_over_mode_defaults():
    options = _resolve(
        mode="production",
        should_content_hash=False,
        default_target_options=InitialTargetOptions(
            should_optimize=False, should_scope_hoist=False, source_maps=False
        ),
    )
    assert options.should_content_hash is False
    assert options.default_target_options.should_optimize is False
    assert options.default_target_options.should_scope_hoist is False
    assert options.default_target_options.source_maps is False


def test_lazy_with_explicit_content_hash_is_rejected():
    with pytest.raises(ConfigurationError, match="Lazy bundling does not work"):
        _resolve(should_build_lazily=True, should_content_hash=True)


def test_lazy_in_production_is_rejected():
    with pytest.raises(ConfigurationError):
        _resolve(should_build_lazily=True, mode="production")


def test_lazy_in_production_without_content_hash_is_allowed():
    options = _resolve(should_build_lazily=True, mode="production", should_content_hash=False)
    assert options.should_build_lazily is True
    assert options.should_content_hash is False


def test_lazy_content_hash_check_happens_before_filesystem_access():
    fs = Mock()
    fs.cwd.side_effect = AssertionError("filesystem touched")
    with pytest.raises(ConfigurationError):
        resolve_options(
            InitialOptions(
                input_fs=fs, output_fs=fs, should_build_lazily=True, should_content_hash=True
            ),
            environ={},
        )


def test_normalize_entries():
    cwd = Path("/project")
    assert normalize_entries(None, cwd) == []
    assert normalize_entries("", cwd) == []
    assert normalize_entries("src/index.js", cwd) == [Path("/project/src/index.js")]
    assert normalize_entries(Path("/abs/index.js"), cwd) == [Path("/abs/index.js")]
    assert normalize_entries(["a.js", "../b.js"], cwd) == [Path("/project/a.js"), Path("/b.js")]
    assert normalize_entries([], cwd) == []


def test_entries_and_entry_root():
    options = _resolve(entries=["src/a/index.js", "src/b/index.js"])
    assert options.entries == (Path("/project/src/a/index.js"), Path("/project/src/b/index.js"))
    assert options.entry_root == Path("/project/src")


def test_entry_root_of_glob_entry_is_glob_base():
    options = _resolve(entries="src/**/*.html")
    assert options.entry_root == Path("/project/src")


def test_explicit_entry_root():
    options = _resolve(entries=["src/index.js"], entry_root="lib")
    assert options.entry_root == Path("/project/lib")


def test_entry_root_without_entries_is_cwd():
    assert _resolve().entry_root == Path("/project")


def test_project_root_from_lockfile():
    fs = MemoryFileSystem("/project")
    fs.write_file("yarn.lock", "")
    fs.write_file("src/index.js", "")

    options = _resolve(fs, entries=["src/index.js"])
    assert options.project_root == Path("/project")
    assert options.lock_file == Path("/project/yarn.lock")


def test_project_root_from_vcs_marker_has_no_lockfile():
    fs = MemoryFileSystem("/repo/app")
    fs.mkdirp("/repo/.git")
    fs.write_file("src/index.js", "")

    options = _resolve(fs, entries=["src/index.js"])
    assert options.project_root == Path("/repo")
    assert options.lock_file is None


def test_project_root_nearest_marker_wins():
    fs = MemoryFileSystem("/repo")
    fs.mkdirp("/repo/.git")
    fs.write_file("/repo/packages/app/package-lock.json", "{}")
    fs.write_file("/repo/packages/app/src/index.js", "")

    options = _resolve(fs, entries=["packages/app/src/index.js"])
    assert options.project_root == Path("/repo/packages/app")
    assert options.lock_file == Path("/repo/packages/app/package-lock.json")


def test_project_root_falls_back_to_input_cwd():
    fs = MemoryFileSystem("/work")
    fs.write_file("/elsewhere/src/index.js", "")

    options = _resolve(fs, entries=["/elsewhere/src/index.js"])
    assert options.entry_root == Path("/elsewhere/src")
    assert options.project_root == Path("/work")
    assert options.lock_file is None


def test_default_package_manager_is_scoped_to_project_root():
    fs = MemoryFileSystem("/project")
    fs.write_file("pnpm-lock.yaml", "")
    options = _resolve(fs)
    assert isinstance(options.package_manager, NodePackageManager)
    assert options.package_manager.project_root == Path("/project")


def test_explicit_package_manager_is_kept():
    manager = Mock()
    assert _resolve(package_manager=manager).package_manager is manager


def test_default_cache_dir_is_in_project_root():
    fs = MemoryFileSystem("/project")
    fs.write_file("yarn.lock", "")
    fs.mkdirp("src")
    options = _resolve(fs, entries=["src"])
    assert options.cache_dir == Path("/project/.satchel-cache")


def test_explicit_cache_dir_is_relative_to_output_cwd():
    options = _resolve(output_fs=MemoryFileSystem("/out"), cache_dir="cache")
    assert options.cache_dir == Path("/out/cache")


def test_cache_backend_for_non_native_output_is_fs_cache():
    out = MemoryFileSystem("/out")
    options = _resolve(output_fs=out)
    assert isinstance(options.cache, FSCache)
    assert options.cache.fs is out
    assert options.cache.cache_dir == options.cache_dir


def test_cache_backend_for_native_output_is_lmdb(tmp_path: Path):
    options = _resolve(output_fs=NativeFileSystem(), cache_dir=tmp_path / "cache")
    assert isinstance(options.cache, LMDBCache)
    assert options.cache.cache_dir == tmp_path / "cache"
    # Opening is deferred until first use.
    assert not (tmp_path / "cache").exists()


def test_explicit_cache_is_kept():
    cache = Mock()
    assert _resolve(cache=cache).cache is cache


def test_default_filesystems_are_native():
    options = resolve_options(environ={}, load_env=_no_env)
    assert isinstance(options.input_fs, NativeFileSystem)
    assert isinstance(options.output_fs, NativeFileSystem)


def test_dist_dir_and_public_url():
    options = _resolve(
        default_target_options=InitialTargetOptions(dist_dir="build", public_url="/static/")
    )
    assert options.default_target_options.dist_dir == Path("/project/build")
    assert options.default_target_options.public_url == "/static/"


def test_serve_options_default_dist_dir_is_under_output_cwd():
    options = _resolve(
        output_fs=MemoryFileSystem("/out"), serve_options=InitialServeOptions(port=1234)
    )
    assert options.serve_options is not None
    assert options.serve_options.port == 1234
    assert options.serve_options.dist_dir == Path("/out/dist")


def test_serve_options_use_target_dist_dir():
    options = _resolve(
        serve_options=InitialServeOptions(port=1234, host="localhost"),
        default_target_options=InitialTargetOptions(dist_dir="public"),
    )
    assert options.serve_options is not None
    assert options.serve_options.dist_dir == Path("/project/public")
    assert options.serve_options.host == "localhost"


def test_pass_through_fields():
    hmr = HMROptions(port=4321)
    reporter = object()
    options = _resolve(
        hmr_options=hmr,
        log_level="verbose",
        should_auto_install=True,
        should_profile=True,
        should_disable_cache=True,
        additional_reporters=[reporter],
        config="@satchel/config-default",
        detailed_report=10,
        targets={"main": {}},
    )
    assert options.hmr_options is hmr
    assert options.log_level == "verbose"
    assert options.should_auto_install is True
    assert options.should_profile is True
    assert options.should_disable_cache is True
    assert options.additional_reporters == (reporter,)
    assert options.config == "@satchel/config-default"
    assert options.detailed_report == 10
    assert options.targets == {"main": {}}


def test_env_precedence():
    fs = MemoryFileSystem("/project")
    calls = []

    def fake_load_env(env, fs, start_dir, project_root):
        calls.append((dict(env), start_dir, project_root))
        return {"C": "dotenv"}

    options = resolve_options(
        InitialOptions(input_fs=fs, output_fs=fs, env={"B": "explicit", "C": "explicit"}),
        environ={"A": "ambient", "B": "ambient", "C": "ambient"},
        load_env=fake_load_env,
    )
    assert dict(options.env) == {"A": "ambient", "B": "explicit", "C": "dotenv"}
    assert calls == [({"B": "explicit", "C": "explicit"}, Path("/project"), Path("/project"))]


def test_env_loads_dotenv_files_from_project_root():
    fs = MemoryFileSystem("/project")
    fs.write_file("yarn.lock", "")
    fs.write_file(".env", "API_URL=https://example.test\n")

    options = resolve_options(InitialOptions(input_fs=fs, output_fs=fs), environ={})
    assert options.env["API_URL"] == "https://example.test"


def test_should_patch_console_follows_node_env():
    fs = MemoryFileSystem("/project")
    initial = InitialOptions(input_fs=fs, output_fs=fs)
    assert resolve_options(initial, environ={}, load_env=_no_env).should_patch_console is True
    testing = resolve_options(initial, environ={"NODE_ENV": "test"}, load_env=_no_env)
    assert testing.should_patch_console is False


def test_instance_id_differs_between_calls():
    assert _resolve(entries=["index.js"]).instance_id != _resolve(entries=["index.js"]).instance_id


def test_instance_id_is_reproducible_with_fixed_sources():
    fs = MemoryFileSystem("/project")
    initial = InitialOptions(entries=["index.js"], input_fs=fs, output_fs=fs)
    first = resolve_options(
        initial, environ={}, clock=lambda: 1000.0, random=lambda: 0.5, load_env=_no_env
    )
    second = resolve_options(
        initial, environ={}, clock=lambda: 1000.0, random=lambda: 0.5, load_env=_no_env
    )
    assert first.instance_id == second.instance_id
    assert first.instance_id == generate_instance_id([Path("/project/index.js")], 1000.0, 0.5)


def test_options_are_immutable():
    options = _resolve()
    with pytest.raises(dataclasses.FrozenInstanceError):
        options.mode = "production"  # type: ignore[misc]
    with pytest.raises(TypeError):
        options.env["NEW"] = "value"  # type: ignore[index]


def test_target_engines_are_frozen_copies():
    engines = {"browsers": "> 0.5%"}
    options = _resolve(default_target_options=InitialTargetOptions(engines=engines))
    assert options.default_target_options.engines == {"browsers": "> 0.5%"}
    with pytest.raises(TypeError):
        options.default_target_options.engines["node"] = ">= 18"  # type: ignore[index]
    engines["node"] = ">= 18"
    assert "node" not in options.default_target_options.engines
