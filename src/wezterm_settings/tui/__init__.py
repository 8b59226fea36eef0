"""Textual front end for the settings editor.

Modules:
    themes   color schemes and CSS generation
    render   pure Editor-state to Rich markup functions
    widgets  EditorView (key routing) and the _safe_action decorator
    app      SettingsApp, the main Textual App
"""

from .themes import COLOR_SCHEMES, DEFAULT_SCHEME, get_scheme, build_css
from .widgets import EditorView, _safe_action
from .app import SettingsApp

__all__ = [
    "COLOR_SCHEMES",
    "DEFAULT_SCHEME",
    "get_scheme",
    "build_css",
    "EditorView",
    "_safe_action",
    "SettingsApp",
]
