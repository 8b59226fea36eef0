"""Render a ``ConfigModel`` as a complete wezterm.lua.

The file is regenerated from scratch on every save: comments and custom
logic from the previous file are not carried over (the store keeps the
previous file as ``wezterm.lua.bak``).  Sections are always written in the
same order and the same model always yields the same text, so saving twice
without edits is a no-op on disk.

Everything ``lua.parser`` extracts is written in a shape it reads back.
"""

from __future__ import annotations

from enum import Enum
from typing import Optional

from ..models import (
    BackdropSettings,
    ColorScheme,
    ConfigModel,
    KeyBinding,
    KeybindingsSettings,
    TabColors,
)

HEADER = "-- Generated by wezterm-settings-tui. Edits outside the editor are replaced on save."

TUI_BINARY = "wezterm-settings-tui"

INDENT = "  "

# Toggles written only as the presence of a block, keyed by model path,
# with the text that marks the block.  lua.parser reads them back from any
# file that starts with HEADER.
BLOCK_TOGGLES: dict[str, str] = {
    "keybindings.leader.enabled": "config.leader = ",
    "keybindings.mouse.ctrl_click_open_link": "act.OpenLinkAtMouseCursor",
    "keybindings.mouse.right_click_command_palette": 'button = "Right"',
    "keybindings.custom_commands.settings_tui": '"Settings: Open WezTerm Settings"',
    "keybindings.custom_commands.rename_tab": 'brief = "Rename Tab"',
}


# ─── Literals ─────────────────────────────────────────────────────────────


def lua_string(value: str) -> str:
    escaped = value.replace("\\", "\\\\").replace('"', '\\"').replace("\n", "\\n")
    return f'"{escaped}"'


def lua_number(value: float | int) -> str:
    if isinstance(value, bool):
        raise TypeError("booleans are not numbers")
    if isinstance(value, int):
        return str(value)
    if value.is_integer():
        return str(int(value))
    text = repr(value)
    if "e" in text or "E" in text:
        text = f"{value:.12f}".rstrip("0").rstrip(".")
    return text


def lua_value(value) -> str:
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, Enum):
        return lua_string(value.value)
    if isinstance(value, (int, float)):
        return lua_number(value)
    if isinstance(value, str):
        return lua_string(value)
    raise TypeError(f"cannot render {type(value).__name__} as Lua")


def lua_inline_table(pairs: list[tuple[str, object]]) -> str:
    body = ", ".join(f"{k} = {lua_value(v)}" for k, v in pairs if v is not None)
    return f"{{ {body} }}"


def _assign(key: str, value) -> str:
    return f"config.{key} = {lua_value(value)}"


# ─── Sections ─────────────────────────────────────────────────────────────


def _tab_colors(name: str, tab: TabColors) -> str:
    return f"{name} = " + lua_inline_table([
        ("bg_color", tab.bg_color),
        ("fg_color", tab.fg_color),
        ("italic", tab.italic),
    ])


def _palette(name: str, colors: list[str]) -> str:
    return f"{name} = {{ " + ", ".join(lua_string(c) for c in colors) + " }"


def colors_section(model: ConfigModel) -> list[str]:
    colors: ColorScheme = model.colors
    lines = ["-- Colors"]
    if model.color_scheme:
        lines.append(_assign("color_scheme", model.color_scheme))
    lines.append("config.colors = {")
    for key in (
        "foreground", "background", "cursor_bg", "cursor_border",
        "cursor_fg", "selection_bg", "selection_fg",
    ):
        lines.append(f"{INDENT}{key} = {lua_string(getattr(colors, key))},")
    lines.append(f"{INDENT}{_palette('ansi', colors.ansi)},")
    lines.append(f"{INDENT}{_palette('brights', colors.brights)},")
    for key in ("visual_bell", "scrollbar_thumb", "split"):
        value: Optional[str] = getattr(colors, key)
        if value is not None:
            lines.append(f"{INDENT}{key} = {lua_string(value)},")
    tab_bar = colors.tab_bar
    lines.append(f"{INDENT}tab_bar = {{")
    lines.append(f"{INDENT * 2}background = {lua_string(tab_bar.background)},")
    for name in ("active_tab", "inactive_tab", "inactive_tab_hover", "new_tab", "new_tab_hover"):
        lines.append(f"{INDENT * 2}{_tab_colors(name, getattr(tab_bar, name))},")
    lines.append(f"{INDENT}}},")
    lines.append("}")
    return lines


def fonts_section(model: ConfigModel) -> list[str]:
    fonts = model.fonts
    font = lua_inline_table([("family", fonts.family), ("weight", fonts.weight)])
    lines = [
        "-- Fonts",
        f"config.font = wezterm.font({font})",
        _assign("font_size", fonts.size),
    ]
    if fonts.freetype_load_target is not None:
        lines.append(_assign("freetype_load_target", fonts.freetype_load_target))
    if fonts.freetype_render_target is not None:
        lines.append(_assign("freetype_render_target", fonts.freetype_render_target))
    return lines


def window_section(model: ConfigModel) -> list[str]:
    w = model.window
    pad = w.window_padding
    hsb = w.inactive_pane_hsb
    return [
        "-- Window",
        _assign("window_background_opacity", w.window_background_opacity),
        _assign("window_decorations", w.window_decorations),
        "config.window_padding = " + lua_inline_table([
            ("left", pad.left), ("right", pad.right), ("top", pad.top), ("bottom", pad.bottom),
        ]),
        _assign("enable_tab_bar", w.enable_tab_bar),
        _assign("hide_tab_bar_if_only_one_tab", w.hide_tab_bar_if_only_one_tab),
        _assign("use_fancy_tab_bar", w.use_fancy_tab_bar),
        _assign("tab_max_width", w.tab_max_width),
        _assign("show_tab_index_in_tab_bar", w.show_tab_index_in_tab_bar),
        "config.inactive_pane_hsb = " + lua_inline_table([
            ("hue", hsb.hue), ("saturation", hsb.saturation), ("brightness", hsb.brightness),
        ]),
        _assign("window_close_confirmation", w.window_close_confirmation),
    ]


def cursor_section(model: ConfigModel) -> list[str]:
    c = model.cursor
    return [
        "-- Cursor",
        _assign("default_cursor_style", c.default_cursor_style),
        _assign("cursor_blink_rate", c.cursor_blink_rate),
        _assign("cursor_blink_ease_in", c.cursor_blink_ease_in),
        _assign("cursor_blink_ease_out", c.cursor_blink_ease_out),
        _assign("animation_fps", c.animation_fps),
    ]


def gpu_section(model: ConfigModel) -> list[str]:
    g = model.gpu
    return [
        "-- GPU",
        _assign("front_end", g.front_end),
        _assign("webgpu_power_preference", g.webgpu_power_preference),
        _assign("max_fps", g.max_fps),
    ]


def general_section(model: ConfigModel) -> list[str]:
    g = model.general
    return [
        "-- General",
        _assign("automatically_reload_config", g.automatically_reload_config),
        _assign("scrollback_lines", g.scrollback_lines),
        _assign("initial_rows", g.initial_rows),
        _assign("initial_cols", g.initial_cols),
        _assign("exit_behavior", g.exit_behavior),
        _assign("audible_bell", g.audible_bell),
        _assign("enable_scroll_bar", g.enable_scroll_bar),
        _assign("switch_to_last_active_tab_when_closing_tab", g.switch_to_last_active_tab_when_closing_tab),
        _assign("adjust_window_size_when_changing_font_size", g.adjust_window_size_when_changing_font_size),
    ]


def command_palette_section(model: ConfigModel) -> list[str]:
    p = model.command_palette
    return [
        "-- Command palette",
        _assign("command_palette_fg_color", p.fg_color),
        _assign("command_palette_bg_color", p.bg_color),
        _assign("command_palette_font_size", p.font_size),
    ]


def visual_bell_section(model: ConfigModel) -> list[str]:
    b = model.visual_bell
    return [
        "-- Visual bell",
        "config.visual_bell = {",
        f"{INDENT}fade_in_duration_ms = {lua_number(b.fade_in_duration_ms)},",
        f"{INDENT}fade_out_duration_ms = {lua_number(b.fade_out_duration_ms)},",
        f"{INDENT}fade_in_function = {lua_value(b.fade_in_function)},",
        f"{INDENT}fade_out_function = {lua_value(b.fade_out_function)},",
        f"{INDENT}target = {lua_string(b.target)},",
        "}",
    ]


def _backdrop_paths(backdrop: BackdropSettings) -> list[str]:
    base = backdrop.images_dir.rstrip("/\\")
    return [f"{base}/{name}" if base else name for name in backdrop.images]


def backdrop_section(model: ConfigModel) -> list[str]:
    backdrop = model.backdrop
    paths = _backdrop_paths(backdrop)
    if not backdrop.enabled or not paths:
        return []
    index = min(max(backdrop.current_index, 0), len(paths) - 1)
    focus = lua_string(backdrop.focus_color)
    opacity = lua_number(backdrop.overlay_opacity)
    lines = [
        "-- Backdrops",
        "local backdrop_images = {",
        *[f"{INDENT}{lua_string(p)}," for p in paths],
        "}",
        f"local backdrop_index = {index + 1}",
        "local backdrop_focus = false",
        "",
        "local function backdrop_layers(index)",
        f"{INDENT}if backdrop_focus then",
        f"{INDENT * 2}return {{ {{ source = {{ Color = {focus} }}, width = \"100%\", height = \"100%\" }} }}",
        f"{INDENT}end",
        f"{INDENT}return {{",
        f"{INDENT * 2}{{ source = {{ File = backdrop_images[index] }} }},",
        f"{INDENT * 2}{{ source = {{ Color = {focus} }}, width = \"100%\", height = \"100%\", opacity = {opacity} }},",
        f"{INDENT}}}",
        "end",
        "",
        "local function show_backdrop(window, index)",
        f"{INDENT}backdrop_index = index",
        f"{INDENT}local overrides = window:get_config_overrides() or {{}}",
        f"{INDENT}overrides.background = backdrop_layers(index)",
        f"{INDENT}window:set_config_overrides(overrides)",
        "end",
        "",
        'wezterm.on("backdrops.random", function(window, _pane)',
        f"{INDENT}show_backdrop(window, math.random(#backdrop_images))",
        "end)",
        'wezterm.on("backdrops.cycle-back", function(window, _pane)',
        f"{INDENT}show_backdrop(window, (backdrop_index - 2) % #backdrop_images + 1)",
        "end)",
        'wezterm.on("backdrops.cycle-forward", function(window, _pane)',
        f"{INDENT}show_backdrop(window, backdrop_index % #backdrop_images + 1)",
        "end)",
        'wezterm.on("backdrops.toggle-focus", function(window, _pane)',
        f"{INDENT}backdrop_focus = not backdrop_focus",
        f"{INDENT}show_backdrop(window, backdrop_index)",
        "end)",
        "",
    ]
    if backdrop.random_on_start:
        lines.append("backdrop_index = math.random(#backdrop_images)")
    lines.append("config.background = backdrop_layers(backdrop_index)")
    return lines


# ─── Keybindings ──────────────────────────────────────────────────────────

_RENAME_TAB = (
    'act.PromptInputLine({ description = "Enter new name for tab", '
    "action = wezterm.action_callback(function(window, _pane, line) "
    "if line then window:active_tab():set_title(line) end end) })"
)


def _resize_window(delta: int) -> str:
    return (
        "wezterm.action_callback(function(window, _pane) "
        "local d = window:get_dimensions() "
        f"window:set_inner_size(d.pixel_width + {delta}, d.pixel_height + {delta}) end)"
    )


# (category, binding, action); order is the order written to config.keys
KEY_ACTIONS: list[tuple[str, str, str]] = [
    ("misc", "copy_mode", "act.ActivateCopyMode"),
    ("misc", "command_palette", "act.ActivateCommandPalette"),
    ("misc", "command_palette_alt", "act.ActivateCommandPalette"),
    ("misc", "show_launcher", "act.ShowLauncher"),
    ("misc", "show_tab_launcher", 'act.ShowLauncherArgs({ flags = "FUZZY|TABS" })'),
    ("misc", "show_workspace_launcher", 'act.ShowLauncherArgs({ flags = "FUZZY|WORKSPACES" })'),
    ("misc", "toggle_fullscreen", "act.ToggleFullScreen"),
    ("misc", "show_debug_overlay", "act.ShowDebugOverlay"),
    ("misc", "search", 'act.Search({ CaseInSensitiveString = "" })'),
    ("misc", "quick_select_url", (
        'act.QuickSelectArgs({ label = "open url", patterns = { "https?://\\\\S+" }, '
        "action = wezterm.action_callback(function(window, pane) "
        "wezterm.open_with(window:get_selection_text_for_pane(pane)) end) })"
    )),
    ("copy_paste", "copy", 'act.CopyTo("Clipboard")'),
    ("copy_paste", "paste", 'act.PasteFrom("Clipboard")'),
    ("copy_paste", "copy_simple", 'act.CopyTo("Clipboard")'),
    ("copy_paste", "paste_simple", 'act.PasteFrom("Clipboard")'),
    ("tabs", "spawn_tab", 'act.SpawnTab("DefaultDomain")'),
    ("tabs", "spawn_tab_wsl", 'act.SpawnTab({ DomainName = "WSL:Ubuntu" })'),
    ("tabs", "close_tab", "act.CloseCurrentTab({ confirm = false })"),
    ("tabs", "next_tab", "act.ActivateTabRelative(1)"),
    ("tabs", "prev_tab", "act.ActivateTabRelative(-1)"),
    ("tabs", "move_tab_forward", "act.MoveTabRelative(1)"),
    ("tabs", "move_tab_back", "act.MoveTabRelative(-1)"),
    ("tabs", "rename_tab", _RENAME_TAB),
    ("tabs", "manual_update_title", 'act.EmitEvent("tabs.manual-update-tab-title")'),
    ("tabs", "reset_title", 'act.EmitEvent("tabs.reset-tab-title")'),
    ("tabs", "toggle_tab_bar", 'act.EmitEvent("tabs.toggle-tab-bar")'),
    ("windows", "spawn_window", "act.SpawnWindow"),
    ("windows", "shrink_window", _resize_window(-50)),
    ("windows", "grow_window", _resize_window(50)),
    ("windows", "maximize_window", "wezterm.action_callback(function(window, _pane) window:maximize() end)"),
    ("panes", "split_vertical", 'act.SplitVertical({ domain = "CurrentPaneDomain" })'),
    ("panes", "split_horizontal", 'act.SplitHorizontal({ domain = "CurrentPaneDomain" })'),
    ("panes", "toggle_zoom", "act.TogglePaneZoomState"),
    ("panes", "close_pane", "act.CloseCurrentPane({ confirm = false })"),
    ("panes", "nav_up", 'act.ActivatePaneDirection("Up")'),
    ("panes", "nav_down", 'act.ActivatePaneDirection("Down")'),
    ("panes", "nav_left", 'act.ActivatePaneDirection("Left")'),
    ("panes", "nav_right", 'act.ActivatePaneDirection("Right")'),
    ("panes", "swap_pane", 'act.PaneSelect({ alphabet = "1234567890", mode = "SwapWithActiveKeepFocus" })'),
    ("panes", "scroll_up", "act.ScrollByLine(-5)"),
    ("panes", "scroll_down", "act.ScrollByLine(5)"),
    ("panes", "page_up", "act.ScrollByPage(-0.75)"),
    ("panes", "page_down", "act.ScrollByPage(0.75)"),
    ("backdrops", "random", 'act.EmitEvent("backdrops.random")'),
    ("backdrops", "cycle_back", 'act.EmitEvent("backdrops.cycle-back")'),
    ("backdrops", "cycle_forward", 'act.EmitEvent("backdrops.cycle-forward")'),
    ("backdrops", "select", (
        "wezterm.action_callback(function(window, pane) "
        "local choices = {} "
        "for i, path in ipairs(backdrop_images) do table.insert(choices, { id = tostring(i), label = path }) end "
        "window:perform_action(act.InputSelector({ title = \"Select backdrop\", choices = choices, "
        "action = wezterm.action_callback(function(w, _p, id) if id then show_backdrop(w, tonumber(id)) end end) }), pane) "
        "end)"
    )),
    ("backdrops", "toggle_focus", 'act.EmitEvent("backdrops.toggle-focus")'),
    ("cursor", "home", 'act.SendKey({ key = "Home" })'),
    ("cursor", "end", 'act.SendKey({ key = "End" })'),
    ("cursor", "delete_line", 'act.SendKey({ key = "u", mods = "CTRL" })'),
    ("cursor", "newline", 'act.SendString("\\n")'),
    ("key_tables", "resize_font_mode", (
        'act.ActivateKeyTable({ name = "resize_font", one_shot = false, timeout_milliseconds = 1000 })'
    )),
    ("key_tables", "resize_pane_mode", (
        'act.ActivateKeyTable({ name = "resize_pane", one_shot = false, timeout_milliseconds = 1000 })'
    )),
]

KEY_TABLES: dict[str, list[tuple[str, str]]] = {
    "resize_font": [
        ("k", "act.IncreaseFontSize"),
        ("j", "act.DecreaseFontSize"),
        ("r", "act.ResetFontSize"),
        ("Escape", '"PopKeyTable"'),
        ("q", '"PopKeyTable"'),
    ],
    "resize_pane": [
        ("k", 'act.AdjustPaneSize({ "Up", 1 })'),
        ("j", 'act.AdjustPaneSize({ "Down", 1 })'),
        ("h", 'act.AdjustPaneSize({ "Left", 1 })'),
        ("l", 'act.AdjustPaneSize({ "Right", 1 })'),
        ("Escape", '"PopKeyTable"'),
        ("q", '"PopKeyTable"'),
    ],
}

_KEY_TABLE_ACTIVATORS = {"resize_font": "resize_font_mode", "resize_pane": "resize_pane_mode"}


def active_bindings(model: ConfigModel) -> list[tuple[str, str, KeyBinding, str]]:
    """Enabled bindings in write order, minus LEADER ones when the leader is off."""
    kb: KeybindingsSettings = model.keybindings
    backdrops_live = model.backdrop.enabled and bool(model.backdrop.images)
    result = []
    for category, name, action in KEY_ACTIONS:
        binding: KeyBinding = getattr(getattr(kb, category), name)
        if not binding.enabled:
            continue
        if "LEADER" in binding.mods.upper() and not kb.leader.enabled:
            continue
        if category == "backdrops" and not backdrops_live:
            continue
        result.append((category, name, binding, action))
    return result


def keybindings_section(model: ConfigModel) -> list[str]:
    kb = model.keybindings
    bindings = active_bindings(model)
    lines = ["-- Keybindings", _assign("disable_default_key_bindings", kb.disable_defaults)]
    if kb.leader.enabled:
        lines.append("config.leader = " + lua_inline_table([
            ("key", kb.leader.key),
            ("mods", kb.leader.mods),
            ("timeout_milliseconds", kb.leader.timeout_ms),
        ]))

    lines.append("config.keys = {")
    for _, _, binding, action in bindings:
        lines.append(
            f"{INDENT}{{ key = {lua_string(binding.key)}, mods = {lua_string(binding.mods)}, "
            f"action = {action} }},"
        )
    lines.append("}")

    used = {name for _, name, _, _ in bindings}
    tables = [t for t, activator in _KEY_TABLE_ACTIVATORS.items() if activator in used]
    if tables:
        lines.append("config.key_tables = {")
        for table in tables:
            lines.append(f"{INDENT}{table} = {{")
            for key, action in KEY_TABLES[table]:
                lines.append(f"{INDENT * 2}{{ key = {lua_string(key)}, action = {action} }},")
            lines.append(f"{INDENT}}},")
        lines.append("}")

    if {"manual_update_title", "reset_title", "toggle_tab_bar"} & used:
        lines += _tab_event_handlers()
    return lines


def _tab_event_handlers() -> list[str]:
    return [
        'wezterm.on("tabs.manual-update-tab-title", function(window, pane)',
        f"{INDENT}window:perform_action({_RENAME_TAB}, pane)",
        "end)",
        'wezterm.on("tabs.reset-tab-title", function(window, _pane)',
        f'{INDENT}window:active_tab():set_title("")',
        "end)",
        'wezterm.on("tabs.toggle-tab-bar", function(window, _pane)',
        f"{INDENT}local overrides = window:get_config_overrides() or {{}}",
        f"{INDENT}overrides.enable_tab_bar = not window:effective_config().enable_tab_bar",
        f"{INDENT}window:set_config_overrides(overrides)",
        "end)",
    ]


def mouse_section(model: ConfigModel) -> list[str]:
    mouse = model.keybindings.mouse
    entries = []
    if mouse.ctrl_click_open_link:
        entries.append(
            '{ event = { Up = { streak = 1, button = "Left" } }, mods = "CTRL", '
            "action = act.OpenLinkAtMouseCursor }"
        )
    if mouse.right_click_command_palette:
        entries.append(
            '{ event = { Down = { streak = 1, button = "Right" } }, mods = "NONE", '
            "action = act.ActivateCommandPalette }"
        )
    if not entries:
        return []
    return ["-- Mouse", "config.mouse_bindings = {", *[f"{INDENT}{e}," for e in entries], "}"]


def command_palette_commands(model: ConfigModel) -> list[str]:
    custom = model.keybindings.custom_commands
    commands = []
    if custom.settings_tui:
        commands.append(
            '{ brief = "Settings: Open WezTerm Settings", icon = "md_cog", '
            f"action = act.SpawnCommandInNewTab({{ args = {{ {lua_string(TUI_BINARY)} }} }}) }}"
        )
    if custom.rename_tab:
        commands.append(f'{{ brief = "Rename Tab", icon = "md_rename_box", action = {_RENAME_TAB} }}')
    if not commands:
        return []
    return [
        'wezterm.on("augment-command-palette", function(_window, _pane)',
        f"{INDENT}return {{",
        *[f"{INDENT * 2}{c}," for c in commands],
        f"{INDENT}}}",
        "end)",
    ]


# ─── Entry point ──────────────────────────────────────────────────────────

SECTIONS = (
    colors_section,
    fonts_section,
    window_section,
    cursor_section,
    gpu_section,
    general_section,
    command_palette_section,
    visual_bell_section,
    backdrop_section,
    keybindings_section,
    mouse_section,
    command_palette_commands,
)


def generate_lua(model: ConfigModel) -> str:
    """Complete wezterm.lua text for *model*."""
    blocks = [[
        HEADER,
        "local wezterm = require 'wezterm'",
        "local act = wezterm.action",
        "local config = wezterm.config_builder()",
    ]]
    for section in SECTIONS:
        lines = section(model)
        if lines:
            blocks.append(lines)
    blocks.append(["return config"])
    return "\n\n".join("\n".join(block) for block in blocks) + "\n"
