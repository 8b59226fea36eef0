"""Plain-function command surface over the store and catalogs.

These are the operations a host layer (a GUI shell, a script, the CLI)
needs without driving the interactive editor.  Each accepts an optional
``config_dir`` that bypasses the directory search.
"""

from __future__ import annotations

import logging
import os
import shutil
import sys
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

from .catalog import BUILTIN_SCHEMES, COMMON_FONTS, SchemeInfo
from .models import ConfigModel
from .store import CONFIG_FILE_NAME, ConfigStore, LoadResult, SaveResult

log = logging.getLogger("wezterm-settings.commands")

IMAGE_EXTENSIONS = frozenset({
    "jpg", "jpeg", "png", "gif", "bmp", "ico", "tiff", "pnm", "dds", "tga", "webp",
})


@dataclass(frozen=True)
class BackdropImage:
    filename: str
    path: str


@dataclass(frozen=True)
class SystemInfo:
    platform: str  # "linux" | "macos" | "windows"
    config_dir: str
    config_exists: bool
    wezterm_installed: bool


# ─── Config ────────────────────────────────────────────────────────────────

def get_config_path(config_dir: Optional[str] = None) -> str:
    return str(ConfigStore(config_dir).config_dir())


def ensure_config_exists(config_dir: Optional[str] = None) -> str:
    return str(ConfigStore(config_dir).ensure_config_exists())


def load_config(config_dir: Optional[str] = None) -> LoadResult:
    return ConfigStore(config_dir).load()


def save_config(model: ConfigModel, config_dir: Optional[str] = None) -> SaveResult:
    return ConfigStore(config_dir).save(model)


# ─── Catalogs ──────────────────────────────────────────────────────────────

def get_builtin_color_schemes() -> list[SchemeInfo]:
    return list(BUILTIN_SCHEMES)


def get_common_fonts() -> list[str]:
    return list(COMMON_FONTS)


def list_backdrop_images(directory: str | os.PathLike) -> list[BackdropImage]:
    """Image files directly inside *directory*, sorted by file name.

    A missing directory yields an empty list; a path that exists but is not
    a directory raises ``NotADirectoryError``.
    """
    path = Path(directory).expanduser()
    if not path.exists():
        return []
    if not path.is_dir():
        raise NotADirectoryError(f"{directory} is not a directory")

    images = [
        BackdropImage(filename=entry.name, path=str(entry))
        for entry in path.iterdir()
        if entry.is_file() and entry.suffix[1:].lower() in IMAGE_EXTENSIONS
    ]
    images.sort(key=lambda img: img.filename)
    log.debug("Found %d backdrop images in %s", len(images), path)
    return images


# ─── System ────────────────────────────────────────────────────────────────

def _platform() -> str:
    if sys.platform == "win32":
        return "windows"
    if sys.platform == "darwin":
        return "macos"
    return "linux"


def get_system_info(config_dir: Optional[str] = None) -> SystemInfo:
    resolved = ConfigStore(config_dir).config_dir()
    return SystemInfo(
        platform=_platform(),
        config_dir=str(resolved),
        config_exists=(resolved / CONFIG_FILE_NAME).is_file(),
        wezterm_installed=shutil.which("wezterm") is not None,
    )
