"""Key-driven editing state machine, independent of any UI toolkit.

One ``Editor`` instance holds all interactive state.  The UI feeds it key
tokens through ``handle_key`` and renders whatever it exposes afterwards.

Key tokens use Textual's names: ``"up"``, ``"down"``, ``"left"``,
``"right"``, ``"enter"``, ``"escape"``, ``"tab"``, ``"shift+tab"``,
``"backspace"``, ``"ctrl+s"``; any other single character is passed as
itself.

Modes::

    NORMAL ──/ or Enter on a field──▶ EDITING ──Enter/Esc──▶ NORMAL
    NORMAL ──?──▶ HELP ──any key──▶ NORMAL
    NORMAL ──q/Esc (dirty)──▶ CONFIRM ──y / s / n──▶ quit / save+quit / NORMAL
"""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Callable, Optional

from .catalog import COMMON_FONTS, scheme_names
from .codecs import codec_for
from .logging import log_context
from .models import (
    ConfigModel,
    CursorStyle,
    EaseFunction,
    FontWeight,
    FreetypeTarget,
    FrontEnd,
    PowerPreference,
    WindowDecorations,
    get_path,
    set_path,
)

log = logging.getLogger("wezterm-settings.editor")


class Panel(Enum):
    THEMES = "themes"
    COLORS = "colors"
    FONTS = "fonts"
    WINDOW = "window"
    CURSOR = "cursor"
    GPU = "gpu"
    KEYBINDINGS = "keybindings"

    @property
    def title(self) -> str:
        return _PANEL_TITLES[self]

    @classmethod
    def from_name(cls, name: str) -> Optional[Panel]:
        return _PANEL_ALIASES.get(name.strip().lower())


_PANEL_TITLES = {
    Panel.THEMES: "Themes",
    Panel.COLORS: "Colors",
    Panel.FONTS: "Fonts",
    Panel.WINDOW: "Window",
    Panel.CURSOR: "Cursor",
    Panel.GPU: "GPU",
    Panel.KEYBINDINGS: "Commands",
}

_PANEL_ALIASES = {p.value: p for p in Panel}
_PANEL_ALIASES.update({"keys": Panel.KEYBINDINGS, "commands": Panel.KEYBINDINGS})

PANELS: list[Panel] = list(Panel)

PANEL_NAMES: list[str] = sorted(_PANEL_ALIASES)


class InputMode(Enum):
    NORMAL = "NORMAL"
    EDITING = "EDIT"
    HELP = "HELP"
    CONFIRM = "CONFIRM"


# ─── Searchable selector ──────────────────────────────────────────────────


@dataclass
class Selector:
    """Filterable list with a selection cursor, shared by themes and fonts."""
    items: list[str]
    on_apply: Callable[[str], None]
    filter: str = ""
    index: int = 0
    filtered: list[str] = field(init=False)

    def __post_init__(self) -> None:
        self.filtered = list(self.items)

    def set_filter(self, text: str) -> None:
        self.filter = text
        needle = text.lower()
        self.filtered = [item for item in self.items if needle in item.lower()]
        self.index = 0

    def move(self, delta: int) -> None:
        if not self.filtered:
            self.index = 0
            return
        self.index = min(max(self.index + delta, 0), len(self.filtered) - 1)

    @property
    def selected(self) -> Optional[str]:
        if 0 <= self.index < len(self.filtered):
            return self.filtered[self.index]
        return None

    def apply(self) -> bool:
        item = self.selected
        if item is None:
            return False
        self.on_apply(item)
        return True


# ─── Field tables ─────────────────────────────────────────────────────────

_TRUE = {"true", "yes", "on", "1", "y"}
_FALSE = {"false", "no", "off", "0", "n"}


@dataclass(frozen=True)
class FieldSpec:
    """One editable row: how to show it and how to parse a typed value."""
    label: str
    path: str
    kind: str  # text | float | int | bool | enum | font | toggle
    enum: Optional[type[Enum]] = None
    index: Optional[int] = None
    optional: bool = False

    def get(self, model: ConfigModel) -> Any:
        value = get_path(model, self.path)
        return value[self.index] if self.index is not None else value

    def set(self, model: ConfigModel, value: Any) -> None:
        if self.index is not None:
            get_path(model, self.path)[self.index] = value
        else:
            set_path(model, self.path, value)

    def display(self, model: ConfigModel) -> str:
        return format_value(self.get(model))

    def parse(self, text: str) -> Any:
        """Convert typed text to a field value.  ``ValueError`` if invalid."""
        text = text.strip()
        if self.kind == "enum":
            if self.optional and text.lower() in ("", "none"):
                return None
            codec = codec_for(self.enum)
            found = codec.lookup(text)
            if found is None:
                raise ValueError(f"expected one of {', '.join(codec.choices())}")
            return found
        if self.kind in ("bool", "toggle"):
            if text.lower() in _TRUE:
                return True
            if text.lower() in _FALSE:
                return False
            raise ValueError("expected true or false")
        if self.kind == "float":
            number = float(text)
            if not math.isfinite(number) or number < 0:
                raise ValueError("expected a non-negative number")
            return number
        if self.kind == "int":
            number = int(text)
            if number < 0:
                raise ValueError("expected a non-negative integer")
            return number
        if not text:
            raise ValueError("value cannot be empty")
        return text


def format_value(value: Any) -> str:
    if value is None:
        return ""
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, Enum):
        return value.value
    if isinstance(value, float):
        return str(int(value)) if value.is_integer() else repr(value)
    return str(value)


_ANSI_NAMES = ("black", "red", "green", "yellow", "blue", "magenta", "cyan", "white")

PANEL_FIELDS: dict[Panel, list[FieldSpec]] = {
    Panel.THEMES: [],
    Panel.COLORS: [
        FieldSpec("Foreground", "colors.foreground", "text"),
        FieldSpec("Background", "colors.background", "text"),
        FieldSpec("Cursor BG", "colors.cursor_bg", "text"),
        FieldSpec("Cursor Border", "colors.cursor_border", "text"),
        FieldSpec("Cursor FG", "colors.cursor_fg", "text"),
        FieldSpec("Selection BG", "colors.selection_bg", "text"),
        FieldSpec("Selection FG", "colors.selection_fg", "text"),
        *[FieldSpec(f"ANSI {i} ({n})", "colors.ansi", "text", index=i) for i, n in enumerate(_ANSI_NAMES)],
        *[FieldSpec(f"Bright {i} ({n})", "colors.brights", "text", index=i) for i, n in enumerate(_ANSI_NAMES)],
    ],
    Panel.FONTS: [
        FieldSpec("Font Family", "fonts.family", "font"),
        FieldSpec("Font Size", "fonts.size", "float"),
        FieldSpec("Weight", "fonts.weight", "enum", FontWeight, optional=True),
        FieldSpec("Load Target", "fonts.freetype_load_target", "enum", FreetypeTarget, optional=True),
        FieldSpec("Render Target", "fonts.freetype_render_target", "enum", FreetypeTarget, optional=True),
    ],
    Panel.WINDOW: [
        FieldSpec("Background Opacity", "window.window_background_opacity", "float"),
        FieldSpec("Padding Left", "window.window_padding.left", "float"),
        FieldSpec("Padding Right", "window.window_padding.right", "float"),
        FieldSpec("Padding Top", "window.window_padding.top", "float"),
        FieldSpec("Padding Bottom", "window.window_padding.bottom", "float"),
        FieldSpec("Decorations", "window.window_decorations", "enum", WindowDecorations),
        FieldSpec("Enable Tab Bar", "window.enable_tab_bar", "bool"),
        FieldSpec("Hide Tab Bar If One Tab", "window.hide_tab_bar_if_only_one_tab", "bool"),
        FieldSpec("Fancy Tab Bar", "window.use_fancy_tab_bar", "bool"),
        FieldSpec("Tab Max Width", "window.tab_max_width", "int"),
    ],
    Panel.CURSOR: [
        FieldSpec("Cursor Style", "cursor.default_cursor_style", "enum", CursorStyle),
        FieldSpec("Blink Rate (ms)", "cursor.cursor_blink_rate", "int"),
        FieldSpec("Blink Ease In", "cursor.cursor_blink_ease_in", "enum", EaseFunction),
        FieldSpec("Blink Ease Out", "cursor.cursor_blink_ease_out", "enum", EaseFunction),
        FieldSpec("Animation FPS", "cursor.animation_fps", "int"),
    ],
    Panel.GPU: [
        FieldSpec("Front End", "gpu.front_end", "enum", FrontEnd),
        FieldSpec("Power Preference", "gpu.webgpu_power_preference", "enum", PowerPreference),
        FieldSpec("Max FPS", "gpu.max_fps", "int"),
    ],
    Panel.KEYBINDINGS: [
        FieldSpec("Settings-TUI in command palette", "keybindings.custom_commands.settings_tui", "toggle"),
        FieldSpec("Rename Tab in command palette", "keybindings.custom_commands.rename_tab", "toggle"),
        FieldSpec("Ctrl+Click open link", "keybindings.mouse.ctrl_click_open_link", "toggle"),
        FieldSpec("Right-click command palette", "keybindings.mouse.right_click_command_palette", "toggle"),
        FieldSpec("Disable default keybindings", "keybindings.disable_defaults", "toggle"),
        FieldSpec("Leader key", "keybindings.leader.enabled", "toggle"),
    ],
}

# Field index of the font list, one past the last font setting.
FONT_SELECTOR_FIELD = len(PANEL_FIELDS[Panel.FONTS]) + 1


# ─── Editor ───────────────────────────────────────────────────────────────

SaveFn = Callable[[ConfigModel], Any]


class Editor:
    """All interactive state plus the single ``handle_key`` entry point.

    *save* is called with the live model and must raise on failure;
    ``ConfigStore.save`` fits.
    """

    def __init__(
        self,
        config: ConfigModel,
        save: SaveFn,
        *,
        initial_panel: Panel = Panel.COLORS,
        themes: Optional[list[str]] = None,
        fonts: Optional[list[str]] = None,
        status: Optional[str] = None,
        config_path: str = "",
    ) -> None:
        self.config = config
        self.baseline = config.copy()
        self._save = save
        self.config_path = config_path

        self.panel = initial_panel
        self.field_index = 0
        self.mode = InputMode.NORMAL
        self.dirty = False
        self.status: Optional[str] = status
        self.should_quit = False
        self.buffer = ""

        self.themes = Selector(list(themes if themes is not None else scheme_names()), self._apply_theme)
        self.fonts = Selector(list(fonts if fonts is not None else COMMON_FONTS), self._apply_font)

    # ─── Derived state ────────────────────────────────────────────

    @property
    def sidebar_index(self) -> int:
        return PANELS.index(self.panel)

    def field_count(self, panel: Optional[Panel] = None) -> int:
        panel = panel or self.panel
        if panel is Panel.THEMES:
            return max(len(self.themes.filtered), 1)
        return len(PANEL_FIELDS[panel])

    @property
    def current_field(self) -> Optional[FieldSpec]:
        fields = PANEL_FIELDS[self.panel]
        if 1 <= self.field_index <= len(fields):
            return fields[self.field_index - 1]
        return None

    @property
    def active_selector(self) -> Optional[Selector]:
        """The selector that currently owns list keys, if any."""
        if self.panel is Panel.THEMES and self.field_index > 0:
            return self.themes
        if self.panel is Panel.FONTS and self.field_index >= FONT_SELECTOR_FIELD:
            return self.fonts
        return None

    def unsaved_changes(self) -> list[str]:
        return self.config.diff(self.baseline)

    # ─── Event entry point ────────────────────────────────────────

    def handle_key(self, key: str) -> None:
        self.status = None
        if self.mode is InputMode.NORMAL:
            self._normal_key(key)
        elif self.mode is InputMode.EDITING:
            self._editing_key(key)
        elif self.mode is InputMode.HELP:
            self.mode = InputMode.NORMAL
        elif self.mode is InputMode.CONFIRM:
            self._confirm_key(key)

    # ─── Normal mode ──────────────────────────────────────────────

    def _normal_key(self, key: str) -> None:
        selector = self.active_selector
        if selector is not None and self._selector_key(selector, key):
            return

        if key in ("q", "escape"):
            self.request_quit()
        elif key == "ctrl+s":
            self.save()
        elif key == "?":
            self.mode = InputMode.HELP
        elif key in ("k", "up"):
            self.navigate(-1)
        elif key in ("j", "down"):
            self.navigate(1)
        elif key in ("h", "left"):
            self.field_index = 0
        elif key in ("l", "right", "enter"):
            self.activate()
        elif key == "tab":
            self.next_field()
        elif key == "shift+tab":
            self.prev_field()

    def _selector_key(self, selector: Selector, key: str) -> bool:
        if key == "/":
            self.mode = InputMode.EDITING
            self.buffer = selector.filter
        elif key in ("k", "up"):
            selector.move(-1)
        elif key in ("j", "down"):
            selector.move(1)
        elif key in ("enter", "l", "right"):
            selector.apply()
        elif key in ("h", "left"):
            # from the font list, back to the font settings
            self.field_index = 1 if selector is self.fonts else 0
        else:
            return False
        return True

    def navigate(self, delta: int) -> None:
        if self.field_index == 0:
            index = min(max(self.sidebar_index + delta, 0), len(PANELS) - 1)
            self.panel = PANELS[index]
        else:
            self.field_index = min(max(self.field_index + delta, 1), self.field_count())

    def next_field(self) -> None:
        if self.field_index < self.field_count():
            self.field_index += 1
        else:
            self.field_index = 1

    def prev_field(self) -> None:
        if self.field_index > 1:
            self.field_index -= 1
        else:
            self.field_index = self.field_count()

    def activate(self) -> None:
        if self.field_index == 0:
            self.field_index = 1
            return
        spec = self.current_field
        if spec is None:
            return
        if spec.kind == "font":
            self.field_index = FONT_SELECTOR_FIELD
        elif spec.kind == "toggle":
            self.toggle(spec)
        else:
            self.buffer = spec.display(self.config)
            self.mode = InputMode.EDITING

    def toggle(self, spec: FieldSpec) -> None:
        value = not spec.get(self.config)
        spec.set(self.config, value)
        self.dirty = True
        self.status = f"{spec.label} {'enabled' if value else 'disabled'}"

    # ─── Editing mode ─────────────────────────────────────────────

    def _editing_key(self, key: str) -> None:
        selector = self.active_selector
        if key == "escape":
            self.mode = InputMode.NORMAL
            self.buffer = ""
            return
        if key == "enter":
            if selector is None:
                self.commit_buffer()
            self.mode = InputMode.NORMAL
            self.buffer = ""
            return
        if key == "backspace":
            self.buffer = self.buffer[:-1]
        elif len(key) == 1:
            self.buffer += key
        else:
            return
        if selector is not None:
            selector.set_filter(self.buffer)
            if selector is self.themes:
                # the theme panel's field count follows the filtered list
                self.field_index = min(self.field_index, self.field_count())

    def commit_buffer(self) -> None:
        spec = self.current_field
        if spec is None:
            return
        try:
            value = spec.parse(self.buffer)
        except ValueError as e:
            self.status = f"Invalid value for {spec.label}: {e}"
            return
        spec.set(self.config, value)
        self.dirty = True
        self.status = f"{spec.label} set to {format_value(value) or 'none'}"

    # ─── Selectors ────────────────────────────────────────────────

    def _apply_theme(self, name: str) -> None:
        self.config.color_scheme = name
        self.dirty = True
        self.status = f"Theme set to: {name}"

    def _apply_font(self, name: str) -> None:
        self.config.fonts.family = name
        self.dirty = True
        self.status = f"Font set to: {name}"

    # ─── Save / quit ──────────────────────────────────────────────

    def save(self) -> bool:
        try:
            self._save(self.config)
        except Exception as e:
            log.error(
                "Save failed", exc_info=True,
                extra={"context": log_context(path=self.config_path, panel=self.panel.value)},
            )
            self.status = f"Error saving config: {e}"
            return False
        self.dirty = False
        self.baseline = self.config.copy()
        self.status = "Config saved successfully!"
        return True

    def request_quit(self) -> None:
        if self.dirty:
            self.mode = InputMode.CONFIRM
        else:
            self.should_quit = True

    def _confirm_key(self, key: str) -> None:
        if key in ("y", "Y"):
            self.should_quit = True
        elif key in ("n", "N", "escape"):
            self.mode = InputMode.NORMAL
        elif key in ("s", "S"):
            if self.save():
                self.should_quit = True
            else:
                self.mode = InputMode.NORMAL
