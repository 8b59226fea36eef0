"""Locate wezterm.lua, load it into a ConfigModel, and write it back.

Directory search follows WezTerm's own order:

1. the directory of ``$WEZTERM_CONFIG_FILE``
2. ``$XDG_CONFIG_HOME/wezterm``
3. ``~/.config/wezterm``
4. ``~/.wezterm`` (Windows only)

If none exists the default is created.  An explicit ``config_dir`` (the
``--config-dir`` flag) skips the search.
"""

from __future__ import annotations

import logging
import os
import shutil
import sys
from dataclasses import dataclass, field
from pathlib import Path
from typing import Optional

from .logging import log_context
from .lua.generator import generate_lua
from .lua.parser import parse_wezterm_config
from .models import ConfigModel

log = logging.getLogger("wezterm-settings.store")

CONFIG_FILE_NAME = "wezterm.lua"
LEGACY_FILE_NAME = ".wezterm.lua"
BACKUP_SUFFIX = ".bak"

DEFAULT_CONFIG = """\
local wezterm = require 'wezterm'
local config = wezterm.config_builder()

-- Add your configuration here

return config
"""


class ConfigDirError(RuntimeError):
    """No usable config directory: no home directory or it can't be created."""


@dataclass
class LoadResult:
    config: ConfigModel
    config_path: Path
    config_exists: bool
    raw_content: Optional[str] = None
    parse_errors: list[str] = field(default_factory=list)


@dataclass
class SaveResult:
    success: bool
    files_written: list[str] = field(default_factory=list)
    backups_created: list[str] = field(default_factory=list)
    config_dir: str = ""


def _home() -> Path:
    try:
        home = Path.home()
    except RuntimeError as e:
        raise ConfigDirError(f"Could not determine home directory: {e}") from e
    if not str(home) or str(home) == "~":
        raise ConfigDirError("Could not determine home directory")
    return home


def config_candidates() -> list[Path]:
    """Candidate directories in search order (env override not included)."""
    candidates = []
    xdg = os.environ.get("XDG_CONFIG_HOME")
    if xdg:
        candidates.append(Path(xdg) / "wezterm")
    home = _home()
    candidates.append(home / ".config" / "wezterm")
    if sys.platform == "win32":
        candidates.append(home / ".wezterm")
    return candidates


def default_config_dir() -> Path:
    xdg = os.environ.get("XDG_CONFIG_HOME")
    if sys.platform.startswith("linux") and xdg:
        return Path(xdg) / "wezterm"
    return _home() / ".config" / "wezterm"


class ConfigStore:
    """Resolves paths and performs load/save for one config location."""

    def __init__(self, config_dir: str | os.PathLike | None = None) -> None:
        self.explicit_dir = Path(config_dir).expanduser() if config_dir else None

    # ─── Path resolution ──────────────────────────────────────────

    def config_dir(self, create: bool = True) -> Path:
        if self.explicit_dir is not None:
            return self.explicit_dir

        override = os.environ.get("WEZTERM_CONFIG_FILE")
        if override:
            parent = Path(override).expanduser().parent
            if parent.is_dir():
                return parent

        for candidate in config_candidates():
            if candidate.is_dir():
                return candidate

        default = default_config_dir()
        if create:
            try:
                default.mkdir(parents=True, exist_ok=True)
            except OSError as e:
                raise ConfigDirError(f"Failed to create config directory {default}: {e}") from e
            log.info("Created config directory %s", default)
        return default

    def config_file(self) -> Path:
        if self.explicit_dir is None:
            override = os.environ.get("WEZTERM_CONFIG_FILE")
            if override and Path(override).expanduser().is_file():
                return Path(override).expanduser()

        standard = self.config_dir() / CONFIG_FILE_NAME
        if standard.exists() or self.explicit_dir is not None:
            return standard

        legacy = _home() / LEGACY_FILE_NAME
        if legacy.is_file():
            return legacy
        return standard

    # ─── Load / save ──────────────────────────────────────────────

    def load(self) -> LoadResult:
        path = self.config_file()
        if not path.exists():
            log.info("No config at %s, using defaults", path)
            return LoadResult(config=ConfigModel(), config_path=path, config_exists=False)

        try:
            result = parse_wezterm_config(path)
        except (OSError, UnicodeDecodeError) as e:
            log.error(
                "Failed to read config", exc_info=True,
                extra={"context": log_context(path=str(path))},
            )
            return LoadResult(
                config=ConfigModel(),
                config_path=path,
                config_exists=True,
                parse_errors=[f"Failed to read config file: {e}"],
            )

        for err in result.parse_errors:
            log.warning("Config parse warning: %s", err, extra={"context": log_context(path=str(path))})
        log.info("Loaded config from %s", path)
        return LoadResult(
            config=result.config,
            config_path=path,
            config_exists=True,
            raw_content=result.raw_content,
            parse_errors=result.parse_errors,
        )

    def save(self, model: ConfigModel) -> SaveResult:
        """Write *model* as Lua.  Raises ``OSError`` when the write fails."""
        path = self.config_file()
        path.parent.mkdir(parents=True, exist_ok=True)
        text = generate_lua(model)
        result = SaveResult(success=False, config_dir=str(path.parent))

        if path.exists():
            # compared as bytes; a file that is not UTF-8 counts as changed
            if path.read_bytes() == text.encode("utf-8"):
                log.info("Config at %s already up to date", path)
                result.success = True
                return result
            backup = path.with_name(path.name + BACKUP_SUFFIX)
            shutil.copy2(path, backup)
            result.backups_created.append(str(backup))

        tmp = path.with_name(path.name + ".tmp")
        tmp.write_bytes(text.encode("utf-8"))
        os.replace(tmp, path)
        result.files_written.append(str(path))
        result.success = True
        log.info("Saved config to %s", path, extra={"context": log_context(path=str(path))})
        return result

    def ensure_config_exists(self) -> Path:
        """Create a minimal wezterm.lua if there is none; return its path."""
        path = self.config_file()
        if not path.exists():
            path.parent.mkdir(parents=True, exist_ok=True)
            path.write_text(DEFAULT_CONFIG, encoding="utf-8")
            log.info("Created default config at %s", path)
        return path
