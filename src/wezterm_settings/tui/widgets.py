"""Widgets for the settings TUI.

Contains the focusable EditorView that turns Textual key events into
Editor key tokens, and the _safe_action decorator.
"""

from __future__ import annotations

import functools
from typing import Callable, Optional

from textual.widgets import Static

from ..editor import Editor
from ..logging import LOG_FILE, get_logger, log_context

_log = get_logger("wezterm-settings.tui.widgets", LOG_FILE)


# ─── Safe action decorator ────────────────────────────────────────────────

def _safe_action(fn):
    """Decorator that catches exceptions in TUI key handlers.

    Logs the error and shows it in the status bar instead of crashing the
    app and leaving the terminal in raw mode.
    """

    @functools.wraps(fn)
    def wrapper(self, *args, **kwargs):
        try:
            return fn(self, *args, **kwargs)
        except Exception as exc:
            err = f"{type(exc).__name__}: {str(exc)[:100]}"
            _log.error(
                "Error in %s: %s", fn.__name__, err,
                exc_info=True,
                extra={"context": log_context(action=fn.__name__)},
            )
            editor = getattr(self, "editor", None)
            if editor is not None:
                editor.status = f"Error: {err}"
    return wrapper


def key_token(event) -> str:
    """Editor token for a Textual key event.

    Printable characters are passed through as themselves so ``?`` and
    ``/`` arrive as typed; everything else uses Textual's key name.
    """
    char = event.character
    if event.is_printable and char and len(char) == 1:
        return char
    return event.key


# ─── Editor view ──────────────────────────────────────────────────────────

class EditorView(Static, can_focus=True):
    """Panel body.  Holds focus and feeds every key press to the Editor."""

    def __init__(
        self,
        editor: Editor,
        on_change: Optional[Callable[[], None]] = None,
        **kwargs,
    ) -> None:
        super().__init__("", **kwargs)
        self.editor = editor
        self._on_change = on_change

    def on_key(self, event) -> None:
        event.prevent_default()
        event.stop()
        self.feed(key_token(event))
        if self._on_change is not None:
            self._on_change()

    @_safe_action
    def feed(self, token: str) -> None:
        self.editor.handle_key(token)
