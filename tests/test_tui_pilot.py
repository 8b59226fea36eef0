"""Textual pilot tests for the settings TUI.

Drives SettingsApp with real key presses and checks the Editor state and
which regions are shown.  Saving goes to a recorder, never to disk.
"""

import pytest

from textual.widgets import Static

from wezterm_settings.editor import Editor, InputMode, Panel
from wezterm_settings.models import ConfigModel
from wezterm_settings.tui.app import SettingsApp
from wezterm_settings.tui.themes import COLOR_SCHEMES, DEFAULT_SCHEME, build_css
from wezterm_settings.tui.widgets import EditorView


class RecordingSave:
    def __init__(self):
        self.saved = []

    def __call__(self, model):
        self.saved.append(model.copy())


def make_app(panel: Panel = Panel.COLORS, save=None, **kwargs) -> SettingsApp:
    """Create a SettingsApp over a default config."""
    editor = Editor(
        ConfigModel(),
        save or RecordingSave(),
        initial_panel=panel,
        config_path="/tmp/wezterm/wezterm.lua",
        themes=["Nord", "Dracula"],
        fonts=["Hack", "Iosevka"],
    )
    return SettingsApp(editor, **kwargs)


@pytest.mark.asyncio
async def test_app_starts():
    """App mounts with the panel focused and no overlay."""
    app = make_app()
    async with app.run_test() as pilot:
        await pilot.pause(0.1)
        assert isinstance(app.focused, EditorView)
        assert app.query_one("#overlay", Static).display is False
        assert app.query_one("#sidebar", Static).has_class("focused")


@pytest.mark.asyncio
async def test_sidebar_and_field_navigation():
    app = make_app()
    async with app.run_test() as pilot:
        await pilot.press("j")
        await pilot.pause(0.1)
        assert app.editor.panel is Panel.FONTS

        await pilot.press("l")
        await pilot.pause(0.1)
        assert app.editor.field_index == 1
        assert not app.query_one("#sidebar", Static).has_class("focused")

        await pilot.press("h")
        await pilot.pause(0.1)
        assert app.editor.field_index == 0


@pytest.mark.asyncio
async def test_help_overlay():
    app = make_app()
    async with app.run_test() as pilot:
        await pilot.press("question_mark")
        await pilot.pause(0.1)
        overlay = app.query_one("#overlay", Static)
        assert app.editor.mode is InputMode.HELP
        assert overlay.display is True

        await pilot.press("x")
        await pilot.pause(0.1)
        assert overlay.display is False


@pytest.mark.asyncio
async def test_theme_filter_typing():
    """Typed characters reach the filter, including '/' itself."""
    app = make_app(Panel.THEMES)
    async with app.run_test() as pilot:
        await pilot.press("l", "slash", "d", "r", "a")
        await pilot.pause(0.1)
        assert app.editor.mode is InputMode.EDITING
        assert app.editor.themes.filtered == ["Dracula"]

        await pilot.press("enter", "enter")
        await pilot.pause(0.1)
        assert app.editor.config.color_scheme == "Dracula"
        assert app.editor.dirty


@pytest.mark.asyncio
async def test_ctrl_s_saves():
    save = RecordingSave()
    app = make_app(Panel.GPU, save=save)
    async with app.run_test() as pilot:
        app.editor.config.gpu.max_fps = 30
        app.editor.dirty = True
        await pilot.press("ctrl+s")
        await pilot.pause(0.1)
        assert len(save.saved) == 1
        assert save.saved[0].gpu.max_fps == 30
        assert app.editor.status == "Config saved successfully!"


@pytest.mark.asyncio
async def test_quit_with_unsaved_changes_asks():
    app = make_app()
    async with app.run_test() as pilot:
        app.editor.dirty = True
        await pilot.press("q")
        await pilot.pause(0.1)
        overlay = app.query_one("#overlay", Static)
        assert app.editor.mode is InputMode.CONFIRM
        assert overlay.display is True
        assert overlay.has_class("confirm")

        await pilot.press("n")
        await pilot.pause(0.1)
        assert app.editor.mode is InputMode.NORMAL
        assert overlay.display is False
        assert not app.editor.should_quit


@pytest.mark.asyncio
async def test_quit_when_clean():
    app = make_app()
    async with app.run_test() as pilot:
        await pilot.press("q")
        await pilot.pause(0.1)
        assert app.editor.should_quit


@pytest.mark.asyncio
async def test_handler_error_goes_to_status(monkeypatch):
    """A crash inside the editor is shown, not raised."""
    app = make_app()
    async with app.run_test() as pilot:
        def boom(key):
            raise RuntimeError("kaboom")

        monkeypatch.setattr(app.editor, "handle_key", boom)
        await pilot.press("j")
        await pilot.pause(0.1)
        assert app.editor.status == "Error: RuntimeError: kaboom"
        assert app.is_running


def test_scheme_sets_css():
    make_app(scheme="nord")
    assert COLOR_SCHEMES["nord"]["bg"] in SettingsApp.CSS
    make_app()
    assert SettingsApp.CSS == build_css(DEFAULT_SCHEME)
