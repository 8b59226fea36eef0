"""Rich-markup rendering of Editor state.

Every function here is pure: it reads an ``Editor`` and returns a markup
string for one region of the screen.  The app only decides where each
string goes, which keeps these testable without a running terminal.
"""

from __future__ import annotations

from rich.markup import escape

from ..editor import (
    FONT_SELECTOR_FIELD,
    PANEL_FIELDS,
    PANELS,
    Editor,
    InputMode,
    Panel,
    Selector,
)
from .themes import DEFAULT_SCHEME, get_scheme

APP_TITLE = "WezTerm Settings"

# Rows of a selector list shown at once.
SELECTOR_WINDOW = 15

_MODE_COLORS = {
    InputMode.NORMAL: "accent",
    InputMode.EDITING: "warning",
    InputMode.HELP: "purple",
    InputMode.CONFIRM: "error",
}

_HINTS = {
    InputMode.NORMAL: "j/k move · h/l sidebar/fields · Enter edit · Tab next · / filter · Ctrl+S save · ? help · q quit",
    InputMode.EDITING: "Enter confirm · Esc cancel · Backspace delete",
    InputMode.HELP: "press any key to close",
    InputMode.CONFIRM: "y quit without saving · s save and quit · n cancel",
}

HELP_LINES = [
    ("Navigation", [
        ("j / ↓", "Move down"),
        ("k / ↑", "Move up"),
        ("h / ←", "Back to sidebar"),
        ("l / → / Enter", "Into panel / edit field"),
        ("Tab / Shift+Tab", "Next / previous field"),
    ]),
    ("Selectors", [
        ("/", "Filter themes or fonts"),
        ("Enter", "Apply highlighted entry"),
    ]),
    ("File", [
        ("Ctrl+S", "Save wezterm.lua"),
        ("q / Esc", "Quit (asks if unsaved)"),
        ("?", "Toggle this help"),
    ]),
]


def render_title(editor: Editor) -> str:
    text = f"[b]{APP_TITLE}[/b]"
    if editor.config_path:
        text += f"  {escape(editor.config_path)}"
    if editor.dirty:
        text += "  [b]\\[modified][/b]"
    return text


def render_sidebar(editor: Editor, scheme: str = DEFAULT_SCHEME) -> str:
    s = get_scheme(scheme)
    lines = []
    for panel in PANELS:
        if panel is editor.panel:
            color = s["accent"] if editor.field_index == 0 else s["fg"]
            lines.append(f"[bold {color}]▸ {panel.title}[/]")
        else:
            lines.append(f"[{s['fg_dim']}]  {panel.title}[/]")
    return "\n".join(lines)


def _cursor(blink_on: bool) -> str:
    return "█" if blink_on else " "


def render_selector(
    selector: Selector,
    *,
    title: str,
    active: bool,
    editing: bool,
    current: str = "",
    blink_on: bool = True,
    scheme: str = DEFAULT_SCHEME,
) -> str:
    s = get_scheme(scheme)
    lines = [f"[bold]{escape(title)}[/bold]"]
    if editing:
        lines.append(f"Filter: {escape(selector.filter)}{_cursor(blink_on)}")
    elif selector.filter:
        lines.append(f"[{s['fg_dim']}]Filter: {escape(selector.filter)}[/]")
    else:
        lines.append(f"[{s['fg_dim']}]Press / to filter[/]")
    lines.append("")

    if not selector.filtered:
        lines.append(f"[{s['fg_dim']}]No matches[/]")
        return "\n".join(lines)

    start = max(0, min(selector.index - SELECTOR_WINDOW // 2, len(selector.filtered) - SELECTOR_WINDOW))
    for i, item in enumerate(selector.filtered[start:start + SELECTOR_WINDOW], start=start):
        mark = " ✓" if item == current else ""
        if active and i == selector.index:
            lines.append(f"[bold {s['accent']}]▸ {escape(item)}{mark}[/]")
        else:
            lines.append(f"  {escape(item)}{mark}")
    lines.append("")
    lines.append(f"[{s['fg_dim']}]{len(selector.filtered)} of {len(selector.items)}[/]")
    return "\n".join(lines)


def render_fields(editor: Editor, *, blink_on: bool = True, scheme: str = DEFAULT_SCHEME) -> str:
    s = get_scheme(scheme)
    lines = [f"[bold]{editor.panel.title}[/bold]", ""]
    fields = PANEL_FIELDS[editor.panel]
    width = max(len(f.label) for f in fields)
    for i, spec in enumerate(fields, start=1):
        label = spec.label.ljust(width)
        selected = i == editor.field_index
        if selected and editor.mode is InputMode.EDITING:
            value = f"[{s['warning']}]{escape(editor.buffer)}{_cursor(blink_on)}[/]"
        elif spec.kind == "toggle":
            value = "[✓]" if spec.get(editor.config) else "[ ]"
            value = escape(value)
        else:
            value = escape(spec.display(editor.config)) or f"[{s['fg_dim']}](default)[/]"
        if selected:
            lines.append(f"[bold {s['accent']}]▸ {escape(label)}[/]  {value}")
        else:
            lines.append(f"  {escape(label)}  {value}")
    return "\n".join(lines)


def render_panel(editor: Editor, *, blink_on: bool = True, scheme: str = DEFAULT_SCHEME) -> str:
    """Body of the right-hand pane for the current panel."""
    editing = editor.mode is InputMode.EDITING
    if editor.panel is Panel.THEMES:
        return render_selector(
            editor.themes,
            title=f"Themes (current: {editor.config.color_scheme or 'none'})",
            active=editor.field_index > 0,
            editing=editing and editor.active_selector is editor.themes,
            current=editor.config.color_scheme or "",
            blink_on=blink_on,
            scheme=scheme,
        )
    text = render_fields(editor, blink_on=blink_on, scheme=scheme)
    if editor.panel is Panel.FONTS:
        text += "\n\n" + render_selector(
            editor.fonts,
            title="Font list",
            active=editor.field_index >= FONT_SELECTOR_FIELD,
            editing=editing and editor.active_selector is editor.fonts,
            current=editor.config.fonts.family,
            blink_on=blink_on,
            scheme=scheme,
        )
    return text


def render_status(editor: Editor, scheme: str = DEFAULT_SCHEME) -> str:
    s = get_scheme(scheme)
    color = s[_MODE_COLORS[editor.mode]]
    badge = f"[bold {s['bg']} on {color}] {editor.mode.value} [/]"
    if editor.status:
        tint = s["error"] if editor.status.startswith(("Error", "Invalid")) else s["success"]
        return f"{badge} [{tint}]{escape(editor.status)}[/]"
    return f"{badge} {_HINTS[editor.mode]}"


def render_help(scheme: str = DEFAULT_SCHEME) -> str:
    s = get_scheme(scheme)
    lines = ["[bold]Keyboard shortcuts[/bold]", ""]
    for section, rows in HELP_LINES:
        lines.append(f"[bold {s['accent']}]{section}[/]")
        for keys, action in rows:
            lines.append(f"  {keys.ljust(18)}{action}")
        lines.append("")
    lines.append(f"[{s['fg_dim']}]Press any key to close[/]")
    return "\n".join(lines)


def render_confirm(editor: Editor, scheme: str = DEFAULT_SCHEME) -> str:
    s = get_scheme(scheme)
    lines = [f"[bold {s['warning']}]Unsaved changes[/]", ""]
    changes = editor.unsaved_changes()
    for path in changes[:8]:
        lines.append(f"  • {escape(path)}")
    if len(changes) > 8:
        lines.append(f"  … and {len(changes) - 8} more")
    lines.append("")
    lines.append("[b]y[/b] quit without saving   [b]s[/b] save and quit   [b]n[/b] cancel")
    return "\n".join(lines)
