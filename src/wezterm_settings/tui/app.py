"""Main TUI application for wezterm-settings-tui.

SettingsApp lays out the title bar, sidebar, panel and status bar, and
repaints them from Editor state after every key and on a short timer.
"""

from __future__ import annotations

from textual.app import App, ComposeResult
from textual.binding import Binding
from textual.containers import Horizontal
from textual.widgets import Static

from ..editor import Editor, InputMode
from ..logging import LOG_FILE, get_logger, log_context
from .render import (
    APP_TITLE,
    render_confirm,
    render_help,
    render_panel,
    render_sidebar,
    render_status,
    render_title,
)
from .themes import DEFAULT_SCHEME, build_css
from .widgets import EditorView

_log = get_logger("wezterm-settings.tui", LOG_FILE)

# Seconds between repaints; the edit cursor flips every BLINK_TICKS of them.
TICK_INTERVAL = 0.1
BLINK_TICKS = 5


# ─── Main TUI App ───────────────────────────────────────────────────────────

class SettingsApp(App):
    """Textual front end for one Editor."""

    CSS = build_css(DEFAULT_SCHEME)

    BINDINGS = [
        Binding("ctrl+q", "quit", "Quit", show=False, priority=True),
    ]

    def __init__(self, editor: Editor, *, scheme: str = DEFAULT_SCHEME, **kwargs) -> None:
        self.__class__.CSS = build_css(scheme)
        super().__init__(**kwargs)
        self.editor = editor
        self._scheme = scheme
        self._ticks = 0
        self._blink_on = True

    # ─── Widget composition ────────────────────────────────────────

    def compose(self) -> ComposeResult:
        yield Static("", id="title-bar")
        with Horizontal(id="body"):
            yield Static("", id="sidebar")
            yield EditorView(self.editor, on_change=self.refresh_view, id="panel")
        yield Static("", id="status-bar")
        yield Static("", id="overlay")

    def on_mount(self) -> None:
        self.title = APP_TITLE
        self.query_one("#panel", EditorView).focus()
        self.refresh_view()
        self._tick_timer = self.set_interval(TICK_INTERVAL, self._tick)
        _log.info(
            "TUI started",
            extra={"context": log_context(path=self.editor.config_path, panel=self.editor.panel.value)},
        )

    # ─── Rendering ─────────────────────────────────────────────────

    def _tick(self) -> None:
        self._ticks += 1
        if self._ticks % BLINK_TICKS == 0:
            self._blink_on = not self._blink_on
            if self.editor.mode is InputMode.EDITING:
                self.refresh_view()

    def refresh_view(self) -> None:
        """Repaint every region from the editor, or exit if it asked to quit."""
        editor = self.editor
        if editor.should_quit:
            _log.info("Quit requested", extra={"context": log_context(path=editor.config_path)})
            self.exit()
            return

        self.query_one("#title-bar", Static).update(render_title(editor))
        sidebar = self.query_one("#sidebar", Static)
        sidebar.update(render_sidebar(editor, self._scheme))
        sidebar.set_class(editor.field_index == 0, "focused")
        self.query_one("#panel", EditorView).update(
            render_panel(editor, blink_on=self._blink_on, scheme=self._scheme)
        )
        self.query_one("#status-bar", Static).update(render_status(editor, self._scheme))

        overlay = self.query_one("#overlay", Static)
        if editor.mode is InputMode.HELP:
            overlay.update(render_help(self._scheme))
            overlay.remove_class("confirm")
            overlay.display = True
        elif editor.mode is InputMode.CONFIRM:
            overlay.update(render_confirm(editor, self._scheme))
            overlay.add_class("confirm")
            overlay.display = True
        else:
            overlay.display = False
