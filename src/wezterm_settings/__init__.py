"""wezterm-settings-tui: keyboard-driven editor for WezTerm's wezterm.lua."""

__version__ = "0.3.0"
