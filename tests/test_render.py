"""Tests for the pure markup renderers used by the TUI."""

from __future__ import annotations

from rich.markup import escape

from wezterm_settings.editor import Editor, InputMode, Panel, Selector
from wezterm_settings.models import ConfigModel
from wezterm_settings.tui.render import (
    APP_TITLE,
    SELECTOR_WINDOW,
    render_confirm,
    render_help,
    render_panel,
    render_selector,
    render_sidebar,
    render_status,
    render_title,
)
from wezterm_settings.tui.themes import COLOR_SCHEMES, build_css, get_scheme


def make_editor(panel: Panel = Panel.COLORS, **kwargs) -> Editor:
    return Editor(
        ConfigModel(), lambda m: None, initial_panel=panel,
        themes=["Nord", "Dracula"], fonts=["Hack", "JetBrainsMono Nerd Font"], **kwargs,
    )


class TestTitleAndSidebar:

    def test_title(self):
        ed = make_editor(config_path="/home/me/.config/wezterm/wezterm.lua")
        text = render_title(ed)
        assert APP_TITLE in text
        assert "wezterm.lua" in text
        assert "modified" not in text
        ed.dirty = True
        assert "\\[modified]" in render_title(ed)

    def test_sidebar_marks_current_panel(self):
        ed = make_editor(Panel.GPU)
        lines = render_sidebar(ed).splitlines()
        assert len(lines) == len(Panel)
        assert sum("▸" in line for line in lines) == 1
        assert "▸ GPU" in next(line for line in lines if "▸" in line)


class TestSelector:

    def test_count_and_current_mark(self):
        sel = Selector(["Nord", "Dracula"], on_apply=lambda _: None)
        text = render_selector(sel, title="Themes", active=True, editing=False, current="Dracula")
        assert "2 of 2" in text
        assert "Dracula ✓" in text
        assert "▸ Nord" in text

    def test_no_matches(self):
        sel = Selector(["Nord"], on_apply=lambda _: None)
        sel.set_filter("zzz")
        text = render_selector(sel, title="Themes", active=True, editing=True, blink_on=True)
        assert "Filter: zzz█" in text
        assert "No matches" in text

    def test_window_follows_index(self):
        items = [f"Scheme {i:03d}" for i in range(100)]
        sel = Selector(items, on_apply=lambda _: None)
        sel.move(60)
        text = render_selector(sel, title="Themes", active=True, editing=False)
        shown = [line for line in text.splitlines() if "Scheme" in line]
        assert len(shown) == SELECTOR_WINDOW
        assert any("▸ Scheme 060" in line for line in shown)
        assert "Scheme 000" not in text


class TestPanel:

    def test_field_values(self):
        ed = make_editor(Panel.FONTS)
        text = render_panel(ed)
        assert "JetBrainsMono Nerd Font" in text
        assert "(default)" in text  # weight unset
        assert "Font list" in text

    def test_toggles(self):
        ed = make_editor(Panel.KEYBINDINGS)
        assert escape("[✓]") in render_panel(ed)

    def test_editing_shows_buffer(self):
        ed = make_editor(Panel.FONTS)
        ed.handle_key("l")
        ed.handle_key("j")
        ed.handle_key("enter")
        assert "12█" in render_panel(ed, blink_on=True)
        assert "12█" not in render_panel(ed, blink_on=False)

    def test_themes_title(self):
        ed = make_editor(Panel.THEMES)
        assert "Themes (current: none)" in render_panel(ed)
        ed.config.color_scheme = "Nord"
        assert "Themes (current: Nord)" in render_panel(ed)


class TestStatusAndOverlays:

    def test_hints_when_no_message(self):
        ed = make_editor()
        text = render_status(ed)
        assert " NORMAL " in text
        assert "Ctrl+S save" in text

    def test_error_tinted(self):
        s = get_scheme()
        ed = make_editor(status="Error saving config: disk full")
        assert s["error"] in render_status(ed)
        ed.status = "Config saved successfully!"
        assert s["success"] in render_status(ed)

    def test_mode_badge(self):
        ed = make_editor()
        ed.mode = InputMode.CONFIRM
        assert " CONFIRM " in render_status(ed)

    def test_help(self):
        assert "Ctrl+S" in render_help()

    def test_confirm_lists_changes(self):
        ed = make_editor()
        ed.config.gpu.max_fps = 30
        ed.config.fonts.size = 20.0
        text = render_confirm(ed)
        assert "gpu.max_fps" in text
        assert "fonts.size" in text

    def test_confirm_truncates(self):
        ed = make_editor()
        for i, name in enumerate(
            ["foreground", "background", "cursor_bg", "cursor_border", "cursor_fg",
             "selection_bg", "selection_fg", "visual_bell", "scrollbar_thumb", "split"]
        ):
            setattr(ed.config.colors, name, f"#00000{i}")
        text = render_confirm(ed)
        assert "colors.foreground" in text
        assert "colors.split" not in text
        assert "… and 2 more" in text


class TestThemes:

    def test_unknown_scheme_falls_back(self):
        assert get_scheme("nope") == COLOR_SCHEMES["catppuccin"]

    def test_css_uses_scheme(self):
        css = build_css("nord")
        assert COLOR_SCHEMES["nord"]["bg"] in css
        assert "#overlay" in css
