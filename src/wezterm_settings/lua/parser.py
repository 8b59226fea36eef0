"""Best-effort extraction of known settings from a wezterm.lua file.

WezTerm configs are arbitrary Lua programs, so this is deliberately not a
Lua parser.  Each section is a table of ``FieldRule`` entries naming a key
path in the Lua source and a dotted field on ``ConfigModel``; one generic
matcher walks every rule and overwrites the field when it finds a value.
Anything not matched keeps its default.

Three source shapes are recognised for a key path:

    config.font_size = 14                              -- plain assignment
    config.colors.tab_bar["active_tab"].bg_color = "#585b70"   -- indexing
    config.colors = { tab_bar = { active_tab = { bg_color = "#585b70" } } }

The first occurrence in the file wins.  Comments are blanked out before
matching so a commented-out assignment is never picked up.
"""

from __future__ import annotations

import logging
import os
import re
from dataclasses import dataclass, field
from typing import Iterator, Optional

from ..codecs import (
    AUDIBLE_BELL,
    CLOSE_CONFIRMATION,
    CURSOR_STYLE,
    EASE_FUNCTION,
    EXIT_BEHAVIOR,
    FONT_WEIGHT,
    FREETYPE_TARGET,
    FRONT_END,
    POWER_PREFERENCE,
    WINDOW_DECORATIONS,
    EnumCodec,
)
from ..models import ANSI_SIZE, ConfigModel, set_path
from .generator import BLOCK_TOGGLES, HEADER

log = logging.getLogger("wezterm-settings.parser")


# ─── Value patterns ───────────────────────────────────────────────────────

# Each quote style has its own capture group and honours backslash escapes.
STRING = r"""(?:"((?:[^"\\\n]|\\.)*)"|'((?:[^'\\\n]|\\.)*)')"""
NUMBER = r"(\d+(?:\.\d+)?)"
INTEGER = r"(\d+)"
BOOL = r"(true|false)"

_VALUE_PATTERNS = {
    "string": STRING,
    "number": NUMBER,
    "integer": INTEGER,
    "bool": BOOL,
    "enum": STRING,
}

# Separator allowed between segments of an indexed path: . [ ] " '
_INDEX_SEP = r"""\s*[\.\[\]"']*\s*"""

# wezterm.font("X"), wezterm.font { family = "X" }, wezterm.font({ family = "X" }),
# wezterm.font_with_fallback({ "X", ... }) and { { family = "X" }, ... }
FONT_CALL = (
    r"""wezterm\.font(?:_with_fallback)?\s*\(?\s*(?:\{\s*)*(?:family\s*=\s*)?"""
    + STRING
)

_ESCAPES = {"n": "\n", "t": "\t", "r": "\r"}


@dataclass(frozen=True)
class FieldRule:
    """One extractable setting.

    ``lua`` is the key path in the source; each segment is a regex
    fragment, so ``"(?:weight|font_weight)"`` matches either spelling.
    ``pattern`` replaces path matching entirely when a setting is written
    as a function call rather than an assignment.
    """
    lua: tuple[str, ...]
    target: str
    kind: str
    codec: Optional[EnumCodec] = None
    pattern: Optional[str] = None


@dataclass
class ParseResult:
    config: ConfigModel
    raw_content: str
    parse_errors: list[str] = field(default_factory=list)


# ─── Rule tables ──────────────────────────────────────────────────────────


def _colors_rules() -> list[FieldRule]:
    rules = [FieldRule(("color_scheme",), "color_scheme", "string")]
    for key in (
        "foreground", "background", "cursor_bg", "cursor_border",
        "cursor_fg", "selection_bg", "selection_fg",
    ):
        rules.append(FieldRule(("colors", key), f"colors.{key}", "string"))
    rules += [
        FieldRule(("ansi",), "colors.ansi", "palette"),
        FieldRule(("brights",), "colors.brights", "palette"),
        FieldRule(("colors", "tab_bar", "background"), "colors.tab_bar.background", "string"),
    ]
    for tab in ("active_tab", "inactive_tab", "inactive_tab_hover", "new_tab", "new_tab_hover"):
        for key, kind in (("bg_color", "string"), ("fg_color", "string"), ("italic", "bool")):
            rules.append(FieldRule(
                ("colors", "tab_bar", tab, key), f"colors.tab_bar.{tab}.{key}", kind,
            ))
    for key in ("visual_bell", "scrollbar_thumb", "split"):
        rules.append(FieldRule(("colors", key), f"colors.{key}", "string"))
    return rules


FONT_RULES = [
    FieldRule(("font_size",), "fonts.size", "number"),
    FieldRule((), "fonts.family", "string", pattern=FONT_CALL),
    FieldRule(("(?:weight|font_weight)",), "fonts.weight", "enum", FONT_WEIGHT),
    FieldRule(("freetype_load_target",), "fonts.freetype_load_target", "enum", FREETYPE_TARGET),
    FieldRule(("freetype_render_target",), "fonts.freetype_render_target", "enum", FREETYPE_TARGET),
]

WINDOW_RULES = [
    FieldRule(("window_background_opacity",), "window.window_background_opacity", "number"),
    FieldRule(("window_decorations",), "window.window_decorations", "enum", WINDOW_DECORATIONS),
    FieldRule(("enable_tab_bar",), "window.enable_tab_bar", "bool"),
    FieldRule(("hide_tab_bar_if_only_one_tab",), "window.hide_tab_bar_if_only_one_tab", "bool"),
    FieldRule(("use_fancy_tab_bar",), "window.use_fancy_tab_bar", "bool"),
    FieldRule(("tab_max_width",), "window.tab_max_width", "integer"),
    FieldRule(("show_tab_index_in_tab_bar",), "window.show_tab_index_in_tab_bar", "bool"),
    *[
        FieldRule(("window_padding", side), f"window.window_padding.{side}", "number")
        for side in ("left", "right", "top", "bottom")
    ],
    *[
        FieldRule(("inactive_pane_hsb", part), f"window.inactive_pane_hsb.{part}", "number")
        for part in ("hue", "saturation", "brightness")
    ],
    FieldRule(("window_close_confirmation",), "window.window_close_confirmation", "enum", CLOSE_CONFIRMATION),
]

CURSOR_RULES = [
    FieldRule(("default_cursor_style",), "cursor.default_cursor_style", "enum", CURSOR_STYLE),
    FieldRule(("cursor_blink_rate",), "cursor.cursor_blink_rate", "integer"),
    FieldRule(("cursor_blink_ease_in",), "cursor.cursor_blink_ease_in", "enum", EASE_FUNCTION),
    FieldRule(("cursor_blink_ease_out",), "cursor.cursor_blink_ease_out", "enum", EASE_FUNCTION),
    FieldRule(("animation_fps",), "cursor.animation_fps", "integer"),
]

GPU_RULES = [
    FieldRule(("front_end",), "gpu.front_end", "enum", FRONT_END),
    FieldRule(("webgpu_power_preference",), "gpu.webgpu_power_preference", "enum", POWER_PREFERENCE),
    FieldRule(("max_fps",), "gpu.max_fps", "integer"),
]

GENERAL_RULES = [
    FieldRule(("automatically_reload_config",), "general.automatically_reload_config", "bool"),
    FieldRule(("scrollback_lines",), "general.scrollback_lines", "integer"),
    FieldRule(("initial_rows",), "general.initial_rows", "integer"),
    FieldRule(("initial_cols",), "general.initial_cols", "integer"),
    FieldRule(("exit_behavior",), "general.exit_behavior", "enum", EXIT_BEHAVIOR),
    FieldRule(("audible_bell",), "general.audible_bell", "enum", AUDIBLE_BELL),
    FieldRule(("enable_scroll_bar",), "general.enable_scroll_bar", "bool"),
    FieldRule(
        ("switch_to_last_active_tab_when_closing_tab",),
        "general.switch_to_last_active_tab_when_closing_tab", "bool",
    ),
    FieldRule(
        ("adjust_window_size_when_changing_font_size",),
        "general.adjust_window_size_when_changing_font_size", "bool",
    ),
]

COMMAND_PALETTE_RULES = [
    FieldRule(("command_palette_fg_color",), "command_palette.fg_color", "string"),
    FieldRule(("command_palette_bg_color",), "command_palette.bg_color", "string"),
    FieldRule(("command_palette_font_size",), "command_palette.font_size", "number"),
]

VISUAL_BELL_RULES = [
    FieldRule(("visual_bell", "fade_in_duration_ms"), "visual_bell.fade_in_duration_ms", "integer"),
    FieldRule(("visual_bell", "fade_out_duration_ms"), "visual_bell.fade_out_duration_ms", "integer"),
    FieldRule(("visual_bell", "fade_in_function"), "visual_bell.fade_in_function", "enum", EASE_FUNCTION),
    FieldRule(("visual_bell", "fade_out_function"), "visual_bell.fade_out_function", "enum", EASE_FUNCTION),
    FieldRule(("visual_bell", "target"), "visual_bell.target", "string"),
]

KEYBINDING_RULES = [
    FieldRule(("disable_default_key_bindings",), "keybindings.disable_defaults", "bool"),
    FieldRule(("leader", "key"), "keybindings.leader.key", "string"),
    FieldRule(("leader", "mods"), "keybindings.leader.mods", "string"),
    FieldRule(("leader", "timeout_milliseconds"), "keybindings.leader.timeout_ms", "integer"),
]

SECTIONS: list[tuple[str, list[FieldRule]]] = [
    ("Colors", _colors_rules()),
    ("Fonts", FONT_RULES),
    ("Window", WINDOW_RULES),
    ("Cursor", CURSOR_RULES),
    ("GPU", GPU_RULES),
    ("General", GENERAL_RULES),
    ("Command palette", COMMAND_PALETTE_RULES),
    ("Visual bell", VISUAL_BELL_RULES),
    ("Keybindings", KEYBINDING_RULES),
]

# Every model field the extractor can populate.
EXTRACTED_FIELDS: list[str] = [rule.target for _, rules in SECTIONS for rule in rules]


# ─── Public API ───────────────────────────────────────────────────────────


def parse_wezterm_config(path: str | os.PathLike) -> ParseResult:
    """Read *path* and extract what we can.  ``OSError`` if unreadable."""
    with open(path, "r", encoding="utf-8") as f:
        content = f.read()
    return parse_lua_content(content)


def parse_lua_content(content: str) -> ParseResult:
    """Extract known settings from Lua source.  Never raises on bad input."""
    config = ConfigModel()
    errors: list[str] = []
    code = strip_comments(content)

    for name, rules in SECTIONS:
        try:
            _apply_rules(code, rules, config)
        except Exception as e:
            log.warning("Section %s failed: %s", name, e)
            errors.append(f"{name}: {e}")

    if content.startswith(HEADER):
        apply_block_toggles(code, config)

    return ParseResult(config=config, raw_content=content, parse_errors=errors)


def _apply_rules(code: str, rules: list[FieldRule], config: ConfigModel) -> None:
    for rule in rules:
        if rule.kind == "palette":
            colors = extract_color_array(code, rule.lua[0])
            if colors is not None and len(colors) == ANSI_SIZE:
                set_path(config, rule.target, colors)
            elif colors:
                log.debug("Ignoring %s with %d colors", rule.lua[0], len(colors))
            continue

        raw = _find_value(code, rule)
        if raw is None:
            continue
        set_path(config, rule.target, _convert(rule, raw))


def apply_block_toggles(code: str, config: ConfigModel) -> None:
    """Set each block-presence toggle from whether its block is in *code*."""
    for target, marker in BLOCK_TOGGLES.items():
        set_path(config, target, marker in code)


def _convert(rule: FieldRule, raw: str):
    if rule.kind == "number":
        return float(raw)
    if rule.kind == "integer":
        return int(raw)
    if rule.kind == "bool":
        return raw == "true"
    if rule.kind == "enum":
        return rule.codec.decode(unescape(raw))
    return unescape(raw)


def unescape(text: str) -> str:
    """Undo Lua backslash escapes in the body of a short string."""
    return re.sub(r"\\(.)", lambda m: _ESCAPES.get(m.group(1), m.group(1)), text)


# ─── Matching ─────────────────────────────────────────────────────────────


def _captured(m: Optional[re.Match]) -> Optional[str]:
    # STRING has one group per quote style; whichever matched is the value
    if m is None:
        return None
    return next((g for g in m.groups() if g is not None), None)


def _find_value(code: str, rule: FieldRule) -> Optional[str]:
    if rule.pattern is not None:
        return _captured(re.search(rule.pattern, code))

    value = _VALUE_PATTERNS[rule.kind]
    if len(rule.lua) == 1:
        return _captured(re.search(rf"\b{rule.lua[0]}\s*=\s*{value}", code))

    path = _INDEX_SEP.join(rule.lua)
    m = re.search(rf"\b{path}\s*=\s*{value}", code)
    if m:
        return _captured(m)
    return _find_in_constructor(code, rule.lua, value)


def extract_color_array(code: str, name: str) -> Optional[list[str]]:
    """Quoted strings from ``name = { "...", ... }``, or None if absent."""
    m = re.search(rf"\b{name}\s*=\s*\{{\s*([^}}]+)\s*\}}", code)
    if not m:
        return None
    colors = [_captured(s) for s in re.finditer(STRING, m.group(1))]
    return [unescape(c) for c in colors] or None


def _key(segment: str) -> str:
    # bare ``key =`` or bracketed ``["key"] =`` inside a table constructor
    return rf"""\b{segment}["']?\]?\s*="""


def _find_in_constructor(code: str, segments: tuple[str, ...], value: str) -> Optional[str]:
    head, *rest = segments
    for m in re.finditer(rf"{_key(head)}\s*\{{", code):
        body = _table_body(code, m.end() - 1)
        if body is None:
            continue
        found = _search_table(body, rest, value)
        if found is not None:
            return found
    return None


def _search_table(body: str, segments: list[str], value: str) -> Optional[str]:
    own = _top_level(body)
    key, *rest = segments
    if not rest:
        return _captured(re.search(rf"{_key(key)}\s*{value}", own))
    for m in re.finditer(rf"{_key(key)}\s*\{{", own):
        inner = _table_body(body, m.end() - 1)
        if inner is None:
            continue
        found = _search_table(inner, rest, value)
        if found is not None:
            return found
    return None


def _scan(text: str) -> Iterator[tuple[int, str, bool]]:
    """Yield ``(index, char, quoted)``, tracking Lua short strings."""
    quote: Optional[str] = None
    escaped = False
    for i, ch in enumerate(text):
        if quote:
            if escaped:
                escaped = False
            elif ch == "\\":
                escaped = True
            elif ch == quote or ch == "\n":
                quote = None
            yield i, ch, True
        elif ch in "\"'":
            quote = ch
            yield i, ch, True
        else:
            yield i, ch, False


def _table_body(text: str, start: int) -> Optional[str]:
    """Contents of the table whose ``{`` is at *start*; None if unbalanced."""
    depth = 0
    for i, ch, quoted in _scan(text[start:]):
        if quoted:
            continue
        if ch == "{":
            depth += 1
        elif ch == "}":
            depth -= 1
            if depth == 0:
                return text[start + 1:start + i]
    return None


def _top_level(body: str) -> str:
    """*body* with nested table contents blanked, positions preserved."""
    out: list[str] = []
    depth = 0
    for _, ch, quoted in _scan(body):
        if not quoted and ch == "}":
            depth -= 1
        out.append(ch if depth <= 0 or ch == "\n" else " ")
        if not quoted and ch == "{":
            depth += 1
    return "".join(out)


# ─── Comments ─────────────────────────────────────────────────────────────

_LONG_BRACKET = re.compile(r"\[(=*)\[")


def strip_comments(text: str) -> str:
    """Blank out ``--`` and ``--[[ ]]`` comments, keeping offsets and newlines.

    Quoted strings and ``[[ ]]`` long strings are left alone.
    """
    out = list(text)
    n = len(text)
    i = 0
    quote: Optional[str] = None
    while i < n:
        ch = text[i]
        if quote:
            if ch == "\\":
                i += 2
                continue
            if ch == quote or ch == "\n":
                quote = None
            i += 1
            continue
        if ch in "\"'":
            quote = ch
            i += 1
            continue
        if ch == "[":
            long_string = _LONG_BRACKET.match(text, i)
            if long_string:
                i = _long_end(text, long_string)
                continue
        if text.startswith("--", i):
            block = _LONG_BRACKET.match(text, i + 2)
            if block:
                end = _long_end(text, block)
            else:
                end = text.find("\n", i)
                end = n if end == -1 else end
            for j in range(i, end):
                if out[j] != "\n":
                    out[j] = " "
            i = end
            continue
        i += 1
    return "".join(out)


def _long_end(text: str, opener: re.Match) -> int:
    close = "]" + opener.group(1) + "]"
    end = text.find(close, opener.end())
    return len(text) if end == -1 else end + len(close)
