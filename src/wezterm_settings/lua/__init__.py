"""Reading and writing wezterm.lua."""

from .generator import generate_lua
from .parser import ParseResult, parse_lua_content, parse_wezterm_config

__all__ = ["generate_lua", "ParseResult", "parse_lua_content", "parse_wezterm_config"]
