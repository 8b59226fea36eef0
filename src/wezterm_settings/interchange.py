"""Export and import a ConfigModel as YAML or JSON.

YAML is the default, in the same plain block style used for the app's
other config files.  JSON is kept for scripts and for files produced by
older releases.  Enum fields are written as their Lua literals, so an
exported file reads like the wezterm.lua it came from.
"""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Optional

import yaml

from .models import ConfigModel

log = logging.getLogger("wezterm-settings.interchange")

FORMATS = ("yaml", "json")

_SUFFIXES = {".yaml": "yaml", ".yml": "yaml", ".json": "json"}


class InterchangeError(ValueError):
    """An exported document could not be decoded into a ConfigModel."""


def format_for_path(path: str | Path, default: str = "yaml") -> str:
    return _SUFFIXES.get(Path(path).suffix.lower(), default)


def export_config(model: ConfigModel, fmt: str = "yaml") -> str:
    data = model.to_dict()
    if fmt == "json":
        return json.dumps(data, indent=2) + "\n"
    if fmt == "yaml":
        return yaml.safe_dump(data, sort_keys=False, default_flow_style=False, allow_unicode=True)
    raise ValueError(f"Unknown format {fmt!r}, expected one of {', '.join(FORMATS)}")


def import_config(text: str, fmt: Optional[str] = None) -> ConfigModel:
    """Decode *text* into a model.

    With no *fmt*, JSON is tried when the document starts with ``{`` and
    YAML otherwise (YAML is a superset of JSON, so either works).
    """
    if fmt is None:
        fmt = "json" if text.lstrip().startswith("{") else "yaml"
    try:
        if fmt == "json":
            data = json.loads(text)
        elif fmt == "yaml":
            data = yaml.safe_load(text)
        else:
            raise InterchangeError(f"Unknown format {fmt!r}, expected one of {', '.join(FORMATS)}")
    except (json.JSONDecodeError, yaml.YAMLError) as e:
        raise InterchangeError(f"Could not parse {fmt.upper()}: {e}") from e

    if data is None:
        data = {}
    if not isinstance(data, dict):
        raise InterchangeError(f"Expected a mapping at the top level, got {type(data).__name__}")
    try:
        model = ConfigModel.from_dict(data)
    except ValueError as e:
        raise InterchangeError(str(e)) from e
    log.info("Imported config (%s)", fmt)
    return model


def read_config_file(path: str | Path) -> ConfigModel:
    """Read an exported file, picking the format from its suffix."""
    path = Path(path)
    try:
        text = path.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as e:
        raise InterchangeError(f"Could not read {path}: {e}") from e
    fmt = _SUFFIXES.get(path.suffix.lower())
    return import_config(text, fmt)
