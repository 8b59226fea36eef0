"""
wezterm-settings-tui: keyboard-driven editor for wezterm.lua.

Usage:
    wezterm-settings-tui                      # Open the editor on the Colors panel
    wezterm-settings-tui fonts                # Open on a given panel
    wezterm-settings-tui -c ~/dotfiles/wez    # Use an explicit config directory
    wezterm-settings-tui --export             # Print the parsed config as YAML
    wezterm-settings-tui --export --format json
    wezterm-settings-tui --import saved.yaml  # Write a saved config to wezterm.lua
    wezterm-settings-tui check-update         # Compare with the latest release
    wezterm-settings-tui update               # pip install --upgrade
"""

from __future__ import annotations

import argparse
import logging
import os
import sys
from typing import Optional

from . import __version__
from .editor import PANEL_NAMES, Editor, Panel
from .interchange import FORMATS, InterchangeError, export_config, read_config_file
from .logging import LOG_FILE, ROOT_LOGGER, get_logger, log_context
from .store import ConfigDirError, ConfigStore
from .tui import COLOR_SCHEMES, DEFAULT_SCHEME, SettingsApp

log = logging.getLogger("wezterm-settings.main")

SUBCOMMANDS = ("check-update", "update")


# ─── "Did you mean" ───────────────────────────────────────────────────────

def _closest_match(key: str, valid_keys: list[str], max_distance: int = 3) -> str | None:
    """Find the closest match for a key in a list of valid keys.

    Uses Levenshtein-style edit distance to suggest typo corrections.
    Returns None if no match is close enough (within max_distance edits).
    """
    best_match = None
    best_dist = max_distance + 1
    key_lower = key.lower()
    for candidate in valid_keys:
        cand_lower = candidate.lower()
        if key_lower == cand_lower:
            return candidate
        if abs(len(key_lower) - len(cand_lower)) > max_distance:
            continue
        dist = _edit_distance(key_lower, cand_lower)
        if dist < best_dist:
            best_dist = dist
            best_match = candidate
    return best_match if best_dist <= max_distance else None


def _edit_distance(a: str, b: str) -> int:
    """Compute Levenshtein edit distance between two strings."""
    if len(a) > len(b):
        a, b = b, a
    prev = list(range(len(a) + 1))
    for j in range(1, len(b) + 1):
        curr = [j] + [0] * len(a)
        for i in range(1, len(a) + 1):
            cost = 0 if a[i - 1] == b[j - 1] else 1
            curr[i] = min(curr[i - 1] + 1, prev[i] + 1, prev[i - 1] + cost)
        prev = curr
    return prev[len(a)]


# ─── Argument parsing ─────────────────────────────────────────────────────

def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="wezterm-settings-tui",
        description="Browse and edit WezTerm's wezterm.lua from the terminal",
    )
    parser.add_argument(
        "panel", nargs="?", default=None, metavar="PANEL",
        help=f"Panel to open on ({', '.join(p.value for p in Panel)})",
    )
    parser.add_argument("-c", "--config-dir", default=None, metavar="DIR",
                        help="Config directory to use instead of searching")
    parser.add_argument("--export", action="store_true",
                        help="Print the parsed config and exit")
    parser.add_argument("--format", choices=FORMATS, default=None,
                        help="Format for --export (default: yaml)")
    parser.add_argument("--import", dest="import_file", default=None, metavar="FILE",
                        help="Save a previously exported config and exit")
    parser.add_argument("--ui-theme", choices=sorted(COLOR_SCHEMES), default=DEFAULT_SCHEME,
                        help=f"Colors of the editor itself (default: {DEFAULT_SCHEME})")
    parser.add_argument("--log-format", choices=["json", "plain"], default="json",
                        help=f"Log line format (log file: {LOG_FILE})")
    parser.add_argument("--debug", action="store_true", help="Log at DEBUG level")
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    return parser


def _resolve_panel(name: Optional[str]) -> Panel:
    if name is None:
        return Panel.COLORS
    panel = Panel.from_name(name)
    if panel is not None:
        return panel
    hint = _closest_match(name, PANEL_NAMES)
    msg = f"Unknown panel '{name}'"
    if hint:
        msg += f" (did you mean '{hint}'?)"
    msg += f". Valid panels: {', '.join(p.value for p in Panel)}"
    print(msg, file=sys.stderr)
    sys.exit(2)


# ─── Non-interactive commands ─────────────────────────────────────────────

def _run_subcommand(name: str) -> int:
    from . import update

    if name == "check-update":
        return update.print_update_status()
    return update.run_update()


def _export(store: ConfigStore, fmt: str) -> int:
    result = store.load()
    for err in result.parse_errors:
        print(f"warning: {err}", file=sys.stderr)
    sys.stdout.write(export_config(result.config, fmt))
    return 0


def _import(store: ConfigStore, path: str) -> int:
    model = read_config_file(path)
    result = store.save(model)
    target = result.files_written[0] if result.files_written else store.config_file()
    print(f"Config imported successfully ({target})")
    if result.backups_created:
        print(f"Previous config backed up to {result.backups_created[0]}")
    return 0


# ─── Editor ───────────────────────────────────────────────────────────────

def _run_tui(store: ConfigStore, panel: Panel, ui_theme: str) -> int:
    # tmux and screen strip COLORTERM; the CSS is all hex colors.
    if not os.environ.get("COLORTERM"):
        os.environ["COLORTERM"] = "truecolor"

    loaded = store.load()
    status = None
    if loaded.parse_errors:
        status = f"Loaded with {len(loaded.parse_errors)} warning(s): {loaded.parse_errors[0]}"
    elif not loaded.config_exists:
        status = "No wezterm.lua found, starting from defaults"

    editor = Editor(
        loaded.config,
        store.save,
        initial_panel=panel,
        status=status,
        config_path=str(loaded.config_path),
    )
    SettingsApp(editor, scheme=ui_theme).run()
    return 0


def main(argv: Optional[list[str]] = None) -> None:
    argv = list(sys.argv[1:] if argv is None else argv)

    if argv and argv[0] in SUBCOMMANDS:
        code = _run_subcommand(argv[0])
        if code:
            sys.exit(code)
        return

    args = build_parser().parse_args(argv)
    get_logger(
        ROOT_LOGGER,
        LOG_FILE,
        logging.DEBUG if args.debug else logging.INFO,
        json_format=args.log_format == "json",
    )
    panel = _resolve_panel(args.panel)
    store = ConfigStore(args.config_dir)
    log.info("Starting", extra={"context": log_context(path=args.config_dir or "", panel=panel.value)})

    try:
        if args.import_file:
            code = _import(store, args.import_file)
        elif args.export:
            code = _export(store, args.format or "yaml")
        else:
            code = _run_tui(store, panel, args.ui_theme)
    except (ConfigDirError, InterchangeError) as e:
        log.error("%s", e, extra={"context": log_context(path=args.config_dir or "")})
        print(f"Error: {e}", file=sys.stderr)
        sys.exit(1)
    except OSError as e:
        log.error("I/O failure", exc_info=True)
        print(f"Error: {e}", file=sys.stderr)
        sys.exit(1)
    if code:
        sys.exit(code)


if __name__ == "__main__":
    main()
