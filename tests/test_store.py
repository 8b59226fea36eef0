"""Tests for config path resolution, load and save.

The home directory and XDG/WEZTERM env vars are redirected into tmp_path
so nothing touches the real ~/.config.
"""

from __future__ import annotations

import os

import pytest

from wezterm_settings.models import ConfigModel
from wezterm_settings.store import (
    BACKUP_SUFFIX,
    CONFIG_FILE_NAME,
    DEFAULT_CONFIG,
    ConfigDirError,
    ConfigStore,
)
from wezterm_settings import store as store_mod


@pytest.fixture()
def home(tmp_path, monkeypatch):
    """Fake home directory with no WezTerm config anywhere."""
    home = tmp_path / "home"
    home.mkdir()
    monkeypatch.setenv("HOME", str(home))
    monkeypatch.delenv("XDG_CONFIG_HOME", raising=False)
    monkeypatch.delenv("WEZTERM_CONFIG_FILE", raising=False)
    monkeypatch.setattr(store_mod.Path, "home", classmethod(lambda cls: home))
    return home


# ---------------------------------------------------------------------------
# Path resolution
# ---------------------------------------------------------------------------

class TestResolution:

    def test_creates_default_dir(self, home):
        d = ConfigStore().config_dir()
        assert d == home / ".config" / "wezterm"
        assert d.is_dir()

    def test_no_create(self, home):
        d = ConfigStore().config_dir(create=False)
        assert not d.exists()

    def test_xdg_dir_preferred(self, home, tmp_path, monkeypatch):
        xdg = tmp_path / "xdg"
        (xdg / "wezterm").mkdir(parents=True)
        (home / ".config" / "wezterm").mkdir(parents=True)
        monkeypatch.setenv("XDG_CONFIG_HOME", str(xdg))
        assert ConfigStore().config_dir() == xdg / "wezterm"

    def test_env_file_override(self, home, tmp_path, monkeypatch):
        target = tmp_path / "elsewhere" / "custom.lua"
        target.parent.mkdir()
        target.write_text("config.max_fps = 30\n")
        monkeypatch.setenv("WEZTERM_CONFIG_FILE", str(target))
        store = ConfigStore()
        assert store.config_dir() == target.parent
        assert store.config_file() == target
        assert store.load().config.gpu.max_fps == 30

    def test_explicit_dir_skips_search(self, home, tmp_path):
        explicit = tmp_path / "mine"
        store = ConfigStore(explicit)
        assert store.config_dir() == explicit
        assert store.config_file() == explicit / CONFIG_FILE_NAME

    def test_legacy_home_file(self, home):
        (home / ".wezterm.lua").write_text("config.initial_cols = 100\n")
        store = ConfigStore()
        assert store.config_file() == home / ".wezterm.lua"
        assert store.load().config.general.initial_cols == 100

    def test_no_home_is_hard_error(self, monkeypatch):
        monkeypatch.delenv("XDG_CONFIG_HOME", raising=False)
        monkeypatch.delenv("WEZTERM_CONFIG_FILE", raising=False)

        def no_home(cls):
            raise RuntimeError("no home")

        monkeypatch.setattr(store_mod.Path, "home", classmethod(no_home))
        with pytest.raises(ConfigDirError):
            ConfigStore().config_dir()


# ---------------------------------------------------------------------------
# Load
# ---------------------------------------------------------------------------

class TestLoad:

    def test_missing_file_gives_defaults(self, home):
        result = ConfigStore().load()
        assert result.config == ConfigModel()
        assert result.config_exists is False
        assert result.parse_errors == []

    def test_reads_existing(self, home):
        d = home / ".config" / "wezterm"
        d.mkdir(parents=True)
        (d / CONFIG_FILE_NAME).write_text("config.font_size = 15\n")
        result = ConfigStore().load()
        assert result.config_exists is True
        assert result.config.fonts.size == 15.0
        assert result.raw_content == "config.font_size = 15\n"

    def test_unreadable_file_falls_back(self, home, tmp_path):
        explicit = tmp_path / "cfg"
        explicit.mkdir()
        # a directory where the file should be makes open() fail
        (explicit / CONFIG_FILE_NAME).mkdir()
        result = ConfigStore(explicit).load()
        assert result.config == ConfigModel()
        assert result.config_exists is True
        assert len(result.parse_errors) == 1
        assert result.parse_errors[0].startswith("Failed to read config file:")

    def test_non_utf8_file_falls_back(self, home, tmp_path):
        explicit = tmp_path / "cfg"
        explicit.mkdir()
        (explicit / CONFIG_FILE_NAME).write_bytes(b"-- caf\xe9\nconfig.font_size = 14\n")
        result = ConfigStore(explicit).load()
        assert result.config == ConfigModel()
        assert result.config_exists is True
        assert result.parse_errors[0].startswith("Failed to read config file:")


# ---------------------------------------------------------------------------
# Save
# ---------------------------------------------------------------------------

class TestSave:

    def test_save_creates_file(self, home, tmp_path):
        explicit = tmp_path / "new" / "dir"
        m = ConfigModel()
        m.fonts.size = 17.0
        result = ConfigStore(explicit).save(m)
        path = explicit / CONFIG_FILE_NAME
        assert result.success
        assert result.files_written == [str(path)]
        assert result.backups_created == []
        assert ConfigStore(explicit).load().config.fonts.size == 17.0

    def test_save_backs_up_previous(self, home, tmp_path):
        explicit = tmp_path / "cfg"
        explicit.mkdir()
        path = explicit / CONFIG_FILE_NAME
        path.write_text("-- hand written\n")
        result = ConfigStore(explicit).save(ConfigModel())
        backup = explicit / (CONFIG_FILE_NAME + BACKUP_SUFFIX)
        assert result.backups_created == [str(backup)]
        assert backup.read_text() == "-- hand written\n"
        assert not (explicit / (CONFIG_FILE_NAME + ".tmp")).exists()

    def test_save_over_non_utf8_file(self, home, tmp_path):
        explicit = tmp_path / "cfg"
        explicit.mkdir()
        (explicit / CONFIG_FILE_NAME).write_bytes(b"-- caf\xe9\n")
        result = ConfigStore(explicit).save(ConfigModel())
        backup = explicit / (CONFIG_FILE_NAME + BACKUP_SUFFIX)
        assert result.success
        assert result.backups_created == [str(backup)]
        assert backup.read_bytes() == b"-- caf\xe9\n"
        assert ConfigStore(explicit).load().parse_errors == []

    def test_unchanged_save_is_noop(self, home, tmp_path):
        store = ConfigStore(tmp_path / "cfg")
        store.save(ConfigModel())
        result = store.save(ConfigModel())
        assert result.success
        assert result.files_written == []
        assert result.backups_created == []

    def test_write_failure_raises(self, home, tmp_path, monkeypatch):
        store = ConfigStore(tmp_path / "cfg")

        def fail(*args, **kwargs):
            raise PermissionError("read-only")

        monkeypatch.setattr(store_mod.os, "replace", fail)
        with pytest.raises(OSError):
            store.save(ConfigModel())


class TestEnsureExists:

    def test_creates_default(self, home, tmp_path):
        store = ConfigStore(tmp_path / "cfg")
        path = store.ensure_config_exists()
        assert path.read_text() == DEFAULT_CONFIG

    def test_keeps_existing(self, home, tmp_path):
        d = tmp_path / "cfg"
        d.mkdir()
        (d / CONFIG_FILE_NAME).write_text("config.max_fps = 1\n")
        path = ConfigStore(d).ensure_config_exists()
        assert path.read_text() == "config.max_fps = 1\n"
