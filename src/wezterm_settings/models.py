"""Typed snapshot of the WezTerm settings this tool understands.

Every record is a dataclass with a complete set of defaults, so a fresh
``ConfigModel()`` is always fully populated.  The Lua extractor overwrites
individual fields when it finds them; the editor mutates the same instance
in place; a deep copy kept alongside serves as the "saved" baseline.

Enumerations carry their Lua literal as the member value, which is also
the form used by ``to_dict`` / ``from_dict``.
"""

from __future__ import annotations

import copy
import logging
from dataclasses import dataclass, field, fields, is_dataclass
from enum import Enum
from typing import Any, Optional, Union, get_args, get_origin, get_type_hints

log = logging.getLogger("wezterm-settings.models")


# ─── Enumerations ─────────────────────────────────────────────────────────


class FontWeight(Enum):
    THIN = "Thin"
    EXTRA_LIGHT = "ExtraLight"
    LIGHT = "Light"
    REGULAR = "Regular"
    MEDIUM = "Medium"
    DEMI_BOLD = "DemiBold"
    BOLD = "Bold"
    EXTRA_BOLD = "ExtraBold"
    BLACK = "Black"


class FreetypeTarget(Enum):
    NORMAL = "Normal"
    LIGHT = "Light"
    MONO = "Mono"
    HORIZONTAL_LCD = "HorizontalLcd"


class WindowDecorations(Enum):
    FULL = "FULL"
    RESIZE = "RESIZE"
    NONE = "NONE"
    TITLE = "TITLE"
    INTEGRATED_BUTTONS_RESIZE = "INTEGRATED_BUTTONS|RESIZE"


class CloseConfirmation(Enum):
    ALWAYS_PROMPT = "AlwaysPrompt"
    NEVER_PROMPT = "NeverPrompt"


class CursorStyle(Enum):
    STEADY_BLOCK = "SteadyBlock"
    BLINKING_BLOCK = "BlinkingBlock"
    STEADY_UNDERLINE = "SteadyUnderline"
    BLINKING_UNDERLINE = "BlinkingUnderline"
    STEADY_BAR = "SteadyBar"
    BLINKING_BAR = "BlinkingBar"


class EaseFunction(Enum):
    LINEAR = "Linear"
    EASE_IN = "EaseIn"
    EASE_OUT = "EaseOut"
    EASE_IN_OUT = "EaseInOut"
    CONSTANT = "Constant"


class FrontEnd(Enum):
    WEBGPU = "WebGpu"
    OPENGL = "OpenGL"
    SOFTWARE = "Software"


class PowerPreference(Enum):
    LOW_POWER = "LowPower"
    HIGH_PERFORMANCE = "HighPerformance"


class ExitBehavior(Enum):
    CLOSE = "Close"
    CLOSE_ON_CLEAN_EXIT = "CloseOnCleanExit"
    HOLD = "Hold"


class AudibleBell(Enum):
    SYSTEM_BEEP = "SystemBeep"
    DISABLED = "Disabled"


# ─── Colors ───────────────────────────────────────────────────────────────

ANSI_SIZE = 8

DEFAULT_ANSI = [
    "#0C0C0C", "#C50F1F", "#13A10E", "#C19C00",
    "#0037DA", "#881798", "#3A96DD", "#CCCCCC",
]
DEFAULT_BRIGHTS = [
    "#767676", "#E74856", "#16C60C", "#F9F1A5",
    "#3B78FF", "#B4009E", "#61D6D6", "#F2F2F2",
]


@dataclass
class TabColors:
    bg_color: str = "#313244"
    fg_color: str = "#cdd6f4"
    italic: Optional[bool] = None


def _tab(bg: str, fg: str, italic: Optional[bool] = None):
    return field(default_factory=lambda: TabColors(bg, fg, italic))


@dataclass
class TabBarColors:
    background: str = "rgba(0, 0, 0, 0.4)"
    active_tab: TabColors = _tab("#585b70", "#cdd6f4")
    inactive_tab: TabColors = _tab("#313244", "#bac2de")
    inactive_tab_hover: TabColors = _tab("#313244", "#cdd6f4")
    new_tab: TabColors = _tab("#1f1f28", "#cdd6f4")
    new_tab_hover: TabColors = _tab("#181825", "#cdd6f4", True)


@dataclass
class ColorScheme:
    """Explicit palette written to ``config.colors``."""
    foreground: str = "#cdd6f4"
    background: str = "#1f1f28"
    cursor_bg: str = "#f5e0dc"
    cursor_border: str = "#f5e0dc"
    cursor_fg: str = "#11111b"
    selection_bg: str = "#585b70"
    selection_fg: str = "#cdd6f4"
    ansi: list[str] = field(default_factory=lambda: list(DEFAULT_ANSI))
    brights: list[str] = field(default_factory=lambda: list(DEFAULT_BRIGHTS))
    tab_bar: TabBarColors = field(default_factory=TabBarColors)
    visual_bell: Optional[str] = None
    scrollbar_thumb: Optional[str] = None
    split: Optional[str] = None

    def __post_init__(self) -> None:
        for name in ("ansi", "brights"):
            palette = getattr(self, name)
            if len(palette) != ANSI_SIZE:
                raise ValueError(
                    f"colors.{name} must hold exactly {ANSI_SIZE} colors, got {len(palette)}"
                )


# ─── Fonts / window / cursor ──────────────────────────────────────────────


@dataclass
class FontSettings:
    family: str = "JetBrainsMono Nerd Font"
    size: float = 12.0
    weight: Optional[FontWeight] = None
    freetype_load_target: Optional[FreetypeTarget] = FreetypeTarget.NORMAL
    freetype_render_target: Optional[FreetypeTarget] = FreetypeTarget.NORMAL


@dataclass
class Padding:
    left: float = 0.0
    right: float = 0.0
    top: float = 10.0
    bottom: float = 7.5


@dataclass
class HSB:
    hue: float = 1.0
    saturation: float = 1.0
    brightness: float = 1.0


@dataclass
class WindowSettings:
    window_padding: Padding = field(default_factory=Padding)
    window_background_opacity: float = 1.0  # fraction, not clamped
    window_decorations: WindowDecorations = WindowDecorations.INTEGRATED_BUTTONS_RESIZE
    enable_tab_bar: bool = True
    hide_tab_bar_if_only_one_tab: bool = False
    use_fancy_tab_bar: bool = True
    tab_max_width: int = 25
    show_tab_index_in_tab_bar: bool = False
    inactive_pane_hsb: HSB = field(default_factory=HSB)
    window_close_confirmation: CloseConfirmation = CloseConfirmation.NEVER_PROMPT


@dataclass
class CursorSettings:
    default_cursor_style: CursorStyle = CursorStyle.BLINKING_BLOCK
    cursor_blink_rate: int = 650
    cursor_blink_ease_in: EaseFunction = EaseFunction.EASE_OUT
    cursor_blink_ease_out: EaseFunction = EaseFunction.EASE_OUT
    animation_fps: int = 120


@dataclass
class BackdropSettings:
    enabled: bool = False
    images_dir: str = ""
    images: list[str] = field(default_factory=list)
    current_index: int = 0
    focus_color: str = "#1f1f28"
    overlay_opacity: float = 0.96
    random_on_start: bool = False


@dataclass
class GpuSettings:
    front_end: FrontEnd = FrontEnd.WEBGPU
    webgpu_power_preference: PowerPreference = PowerPreference.HIGH_PERFORMANCE
    max_fps: int = 120


@dataclass
class GeneralSettings:
    automatically_reload_config: bool = True
    scrollback_lines: int = 3500
    initial_rows: int = 24
    initial_cols: int = 80
    exit_behavior: ExitBehavior = ExitBehavior.CLOSE_ON_CLEAN_EXIT
    audible_bell: AudibleBell = AudibleBell.DISABLED
    enable_scroll_bar: bool = False
    switch_to_last_active_tab_when_closing_tab: bool = True
    adjust_window_size_when_changing_font_size: bool = True


@dataclass
class CommandPaletteSettings:
    fg_color: str = "#cdd6f4"
    bg_color: str = "#1e1e2e"
    font_size: float = 14.0


@dataclass
class VisualBellSettings:
    fade_in_duration_ms: int = 75
    fade_out_duration_ms: int = 150
    fade_in_function: EaseFunction = EaseFunction.EASE_IN
    fade_out_function: EaseFunction = EaseFunction.EASE_OUT
    target: str = "BackgroundColor"


# ─── Keybindings ──────────────────────────────────────────────────────────


@dataclass
class KeyBinding:
    key: str = ""
    mods: str = "NONE"  # e.g. "CTRL|SHIFT", "ALT", "LEADER"
    enabled: bool = True


def _kb(key: str, mods: str = "NONE"):
    return field(default_factory=lambda: KeyBinding(key, mods))


@dataclass
class LeaderKey:
    enabled: bool = True
    key: str = "Space"
    mods: str = "ALT|CTRL"
    timeout_ms: int = 1000


@dataclass
class MiscBindings:
    copy_mode: KeyBinding = _kb("F1")
    command_palette: KeyBinding = _kb("F2")
    command_palette_alt: KeyBinding = _kb("p", "CTRL|SHIFT")
    show_launcher: KeyBinding = _kb("F3")
    show_tab_launcher: KeyBinding = _kb("F4")
    show_workspace_launcher: KeyBinding = _kb("F5")
    toggle_fullscreen: KeyBinding = _kb("F11")
    show_debug_overlay: KeyBinding = _kb("F12")
    search: KeyBinding = _kb("f", "ALT")
    quick_select_url: KeyBinding = _kb("u", "ALT|CTRL")


@dataclass
class CopyPasteBindings:
    copy: KeyBinding = _kb("c", "CTRL|SHIFT")
    paste: KeyBinding = _kb("v", "CTRL|SHIFT")
    copy_simple: KeyBinding = _kb("c", "CTRL")
    paste_simple: KeyBinding = _kb("v", "CTRL")


@dataclass
class TabBindings:
    spawn_tab: KeyBinding = _kb("t", "ALT")
    spawn_tab_wsl: KeyBinding = _kb("t", "ALT|CTRL")
    close_tab: KeyBinding = _kb("w", "ALT|CTRL")
    next_tab: KeyBinding = _kb("]", "ALT")
    prev_tab: KeyBinding = _kb("[", "ALT")
    move_tab_forward: KeyBinding = _kb("]", "ALT|CTRL")
    move_tab_back: KeyBinding = _kb("[", "ALT|CTRL")
    rename_tab: KeyBinding = _kb("r", "ALT|CTRL")
    manual_update_title: KeyBinding = _kb("0", "ALT")
    reset_title: KeyBinding = _kb("0", "ALT|CTRL")
    toggle_tab_bar: KeyBinding = _kb("9", "ALT")


@dataclass
class WindowBindings:
    spawn_window: KeyBinding = _kb("n", "ALT")
    shrink_window: KeyBinding = _kb("-", "ALT")
    grow_window: KeyBinding = _kb("=", "ALT")
    maximize_window: KeyBinding = _kb("Enter", "ALT|CTRL")


@dataclass
class PaneBindings:
    split_vertical: KeyBinding = _kb("\\", "ALT")
    split_horizontal: KeyBinding = _kb("\\", "ALT|CTRL")
    toggle_zoom: KeyBinding = _kb("Enter", "ALT")
    close_pane: KeyBinding = _kb("w", "ALT")
    nav_up: KeyBinding = _kb("k", "ALT|CTRL")
    nav_down: KeyBinding = _kb("j", "ALT|CTRL")
    nav_left: KeyBinding = _kb("h", "ALT|CTRL")
    nav_right: KeyBinding = _kb("l", "ALT|CTRL")
    swap_pane: KeyBinding = _kb("p", "ALT|CTRL")
    scroll_up: KeyBinding = _kb("u", "ALT")
    scroll_down: KeyBinding = _kb("d", "ALT")
    page_up: KeyBinding = _kb("PageUp")
    page_down: KeyBinding = _kb("PageDown")


@dataclass
class BackdropBindings:
    random: KeyBinding = _kb("/", "ALT")
    cycle_back: KeyBinding = _kb(",", "ALT")
    cycle_forward: KeyBinding = _kb(".", "ALT")
    select: KeyBinding = _kb("/", "ALT|CTRL")
    toggle_focus: KeyBinding = _kb("b", "ALT")


@dataclass
class CursorBindings:
    home: KeyBinding = _kb("LeftArrow", "ALT")
    end: KeyBinding = _kb("RightArrow", "ALT")
    delete_line: KeyBinding = _kb("Backspace", "ALT")
    newline: KeyBinding = _kb("Enter", "SHIFT")


@dataclass
class KeyTableBindings:
    resize_font_mode: KeyBinding = _kb("f", "LEADER")
    resize_pane_mode: KeyBinding = _kb("p", "LEADER")


@dataclass
class MouseBindings:
    ctrl_click_open_link: bool = True
    right_click_command_palette: bool = True


@dataclass
class CustomCommands:
    settings_tui: bool = True
    rename_tab: bool = True


@dataclass
class KeybindingsSettings:
    disable_defaults: bool = True
    leader: LeaderKey = field(default_factory=LeaderKey)
    misc: MiscBindings = field(default_factory=MiscBindings)
    copy_paste: CopyPasteBindings = field(default_factory=CopyPasteBindings)
    tabs: TabBindings = field(default_factory=TabBindings)
    windows: WindowBindings = field(default_factory=WindowBindings)
    panes: PaneBindings = field(default_factory=PaneBindings)
    backdrops: BackdropBindings = field(default_factory=BackdropBindings)
    cursor: CursorBindings = field(default_factory=CursorBindings)
    key_tables: KeyTableBindings = field(default_factory=KeyTableBindings)
    mouse: MouseBindings = field(default_factory=MouseBindings)
    custom_commands: CustomCommands = field(default_factory=CustomCommands)


# ─── Root aggregate ───────────────────────────────────────────────────────


@dataclass
class ConfigModel:
    """Everything the editor can show, change and write back.

    ``color_scheme`` names a built-in WezTerm scheme; when set it wins over
    the explicit ``colors`` palette.
    """
    color_scheme: Optional[str] = None
    colors: ColorScheme = field(default_factory=ColorScheme)
    fonts: FontSettings = field(default_factory=FontSettings)
    window: WindowSettings = field(default_factory=WindowSettings)
    cursor: CursorSettings = field(default_factory=CursorSettings)
    backdrop: BackdropSettings = field(default_factory=BackdropSettings)
    gpu: GpuSettings = field(default_factory=GpuSettings)
    general: GeneralSettings = field(default_factory=GeneralSettings)
    command_palette: CommandPaletteSettings = field(default_factory=CommandPaletteSettings)
    visual_bell: VisualBellSettings = field(default_factory=VisualBellSettings)
    keybindings: KeybindingsSettings = field(default_factory=KeybindingsSettings)

    def copy(self) -> ConfigModel:
        return copy.deepcopy(self)

    def diff(self, other: ConfigModel) -> list[str]:
        """Dotted paths of every leaf that differs from *other*."""
        changed: list[str] = []
        _diff_plain(self.to_dict(), other.to_dict(), "", changed)
        return changed

    def to_dict(self) -> dict[str, Any]:
        return _to_plain(self)

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> ConfigModel:
        """Rebuild a model from ``to_dict`` output.

        Missing keys keep their defaults.  Raises ``ValueError`` on unknown
        keys, wrong value types, unknown enum literals or a palette that is
        not exactly eight colors long.
        """
        return _from_plain(cls, data, "config")


# ─── Path helpers ─────────────────────────────────────────────────────────


def get_path(obj: Any, path: str) -> Any:
    """Read a dotted attribute path, e.g. ``"window.window_padding.top"``."""
    for part in path.split("."):
        obj = getattr(obj, part)
    return obj


def set_path(obj: Any, path: str, value: Any) -> None:
    """Assign *value* at a dotted attribute path."""
    *parents, leaf = path.split(".")
    for part in parents:
        obj = getattr(obj, part)
    if not hasattr(obj, leaf):
        raise AttributeError(f"{type(obj).__name__} has no field '{leaf}'")
    setattr(obj, leaf, value)


# ─── Plain-dict conversion ────────────────────────────────────────────────


def _to_plain(value: Any) -> Any:
    if is_dataclass(value):
        return {f.name: _to_plain(getattr(value, f.name)) for f in fields(value)}
    if isinstance(value, Enum):
        return value.value
    if isinstance(value, list):
        return [_to_plain(v) for v in value]
    return value


def _from_plain(tp: Any, data: Any, path: str) -> Any:
    origin = get_origin(tp)

    if origin is Union:
        if data is None:
            return None
        inner = [a for a in get_args(tp) if a is not type(None)]
        return _from_plain(inner[0], data, path)

    if origin is list:
        if not isinstance(data, list):
            raise ValueError(f"{path}: expected a list, got {type(data).__name__}")
        (item_tp,) = get_args(tp)
        return [_from_plain(item_tp, v, f"{path}[{i}]") for i, v in enumerate(data)]

    if isinstance(tp, type) and is_dataclass(tp):
        if not isinstance(data, dict):
            raise ValueError(f"{path}: expected a mapping, got {type(data).__name__}")
        hints = get_type_hints(tp)
        names = [f.name for f in fields(tp)]
        unknown = [k for k in data if k not in names]
        if unknown:
            raise ValueError(f"{path}: unknown key '{unknown[0]}'")
        kwargs = {
            name: _from_plain(hints[name], data[name], f"{path}.{name}")
            for name in names
            if name in data
        }
        return tp(**kwargs)

    if isinstance(tp, type) and issubclass(tp, Enum):
        try:
            return tp(data)
        except ValueError:
            allowed = ", ".join(m.value for m in tp)
            raise ValueError(f"{path}: {data!r} is not one of {allowed}") from None

    if tp is bool:
        if not isinstance(data, bool):
            raise ValueError(f"{path}: expected true/false, got {data!r}")
        return data
    if tp is float:
        if isinstance(data, bool) or not isinstance(data, (int, float)):
            raise ValueError(f"{path}: expected a number, got {data!r}")
        return float(data)
    if tp is int:
        if isinstance(data, bool) or not isinstance(data, int):
            raise ValueError(f"{path}: expected an integer, got {data!r}")
        return data
    if tp is str:
        if not isinstance(data, str):
            raise ValueError(f"{path}: expected a string, got {data!r}")
        return data

    raise TypeError(f"{path}: unsupported field type {tp!r}")


def _diff_plain(a: Any, b: Any, prefix: str, out: list[str]) -> None:
    if isinstance(a, dict) and isinstance(b, dict):
        for key in a:
            _diff_plain(a[key], b.get(key), f"{prefix}.{key}" if prefix else key, out)
    elif a != b:
        out.append(prefix)
