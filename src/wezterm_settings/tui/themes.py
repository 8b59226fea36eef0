"""Color schemes and CSS generation for the settings TUI.

These style the editor itself, not WezTerm.  Catppuccin is the default
since it matches the WezTerm defaults the editor starts from.
"""

from __future__ import annotations


# ─── Color Schemes ────────────────────────────────────────────────────────

COLOR_SCHEMES: dict[str, dict[str, str]] = {
    "catppuccin": {
        "bg": "#1e1e2e",
        "bg_alt": "#313244",
        "fg": "#cdd6f4",
        "fg_dim": "#6c7086",
        "accent": "#89b4fa",
        "success": "#a6e3a1",
        "warning": "#f9e2af",
        "error": "#f38ba8",
        "purple": "#cba6f7",
        "highlight_bg": "#45475a",
        "border": "#585b70",
    },
    "nord": {
        "bg": "#2e3440",
        "bg_alt": "#3b4252",
        "fg": "#eceff4",
        "fg_dim": "#616e88",
        "accent": "#88c0d0",
        "success": "#a3be8c",
        "warning": "#ebcb8b",
        "error": "#bf616a",
        "purple": "#b48ead",
        "highlight_bg": "#434c5e",
        "border": "#4c566a",
    },
}

DEFAULT_SCHEME = "catppuccin"


def get_scheme(name: str = DEFAULT_SCHEME) -> dict[str, str]:
    """Get a color scheme by name, with fallback to default."""
    return COLOR_SCHEMES.get(name, COLOR_SCHEMES[DEFAULT_SCHEME])


def build_css(scheme_name: str = DEFAULT_SCHEME) -> str:
    """Build the Textual CSS using a named color scheme."""
    s = get_scheme(scheme_name)
    return f"""
    Screen {{
        background: {s['bg']};
        color: {s['fg']};
        layers: base overlay;
    }}

    /* ─── Title bar ──────────────────────────────────────────── */

    #title-bar {{
        dock: top;
        height: 1;
        width: 1fr;
        background: {s['bg_alt']};
        color: {s['accent']};
        padding: 0 1;
        text-style: bold;
    }}

    /* ─── Sidebar + panel ────────────────────────────────────── */

    #body {{
        layout: horizontal;
        height: 1fr;
        width: 1fr;
    }}

    #sidebar {{
        width: 18;
        height: 1fr;
        padding: 1 1;
        border-right: tall {s['border']};
        background: {s['bg']};
    }}

    #sidebar.focused {{
        border-right: tall {s['accent']};
    }}

    #panel {{
        width: 1fr;
        height: 1fr;
        padding: 1 2;
        overflow-y: auto;
    }}

    /* ─── Status bar ─────────────────────────────────────────── */

    #status-bar {{
        dock: bottom;
        height: 1;
        width: 1fr;
        background: {s['bg_alt']};
        color: {s['fg_dim']};
        padding: 0 1;
    }}

    /* ─── Modal overlays ─────────────────────────────────────── */

    #overlay {{
        layer: overlay;
        display: none;
        width: 64;
        height: auto;
        offset: 8 3;
        padding: 1 2;
        background: {s['bg_alt']};
        border: round {s['accent']};
        color: {s['fg']};
    }}

    #overlay.confirm {{
        border: round {s['warning']};
    }}
    """
