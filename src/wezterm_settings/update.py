"""Release checks against GitHub and self-update via pip.

``check-update`` prints the comparison; ``update`` runs pip when a newer
release exists.  Network failures are reported, never raised, so the
commands are safe to run offline.
"""

from __future__ import annotations

import json
import logging
import re
import subprocess
import sys
import urllib.error
import urllib.request
from dataclasses import dataclass
from typing import Optional

from . import __version__

log = logging.getLogger("wezterm-settings.update")

GITHUB_API_URL = "https://api.github.com/repos/jms830/wezterm-settings-ui/releases/latest"
REPO_URL = "https://github.com/jms830/wezterm-settings-ui"
PACKAGE_NAME = "wezterm-settings-tui"

TIMEOUT = 3
NOTES_LIMIT = 500


class UpdateError(RuntimeError):
    pass


@dataclass
class UpdateCheck:
    current_version: str
    latest_version: str
    update_available: bool
    release_url: str
    release_notes: Optional[str] = None


def parse_version(text: str) -> tuple[int, ...]:
    """``"v1.2.3"`` → ``(1, 2, 3)``.  Unparseable parts count as 0."""
    parts = []
    for piece in text.strip().lstrip("vV").split("."):
        m = re.match(r"\d+", piece)
        parts.append(int(m.group()) if m else 0)
    return tuple(parts) or (0,)


def _fetch_latest(timeout: float = TIMEOUT) -> dict:
    req = urllib.request.Request(
        GITHUB_API_URL,
        headers={
            "Accept": "application/vnd.github.v3+json",
            "User-Agent": f"{PACKAGE_NAME}/{__version__}",
        },
    )
    try:
        with urllib.request.urlopen(req, timeout=timeout) as resp:
            return json.loads(resp.read())
    except (urllib.error.URLError, OSError) as e:
        raise UpdateError(f"Failed to check for updates: {e}") from e
    except json.JSONDecodeError as e:
        raise UpdateError(f"Failed to parse release info: {e}") from e


def check_for_updates(current: str = __version__) -> UpdateCheck:
    release = _fetch_latest()
    latest = str(release.get("tag_name", "")).lstrip("vV")
    return UpdateCheck(
        current_version=current,
        latest_version=latest,
        update_available=parse_version(latest) > parse_version(current),
        release_url=release.get("html_url", f"{REPO_URL}/releases"),
        release_notes=release.get("body"),
    )


def print_update_status() -> int:
    print("Checking for updates...\n")
    try:
        check = check_for_updates()
    except UpdateError as e:
        log.warning("Update check failed: %s", e)
        print(f"Could not check for updates: {e}\n")
        print(f"You can manually check at: {REPO_URL}/releases")
        return 0

    print(f"Current version: {check.current_version}")
    print(f"Latest version:  {check.latest_version}\n")
    if not check.update_available:
        print("You're running the latest version!")
        return 0

    print("A new version is available!\n")
    print("To update, run:")
    print(f"  {PACKAGE_NAME} update\n")
    print(f"Or view release: {check.release_url}")
    if check.release_notes:
        print("\nRelease notes:")
        print(check.release_notes[:NOTES_LIMIT])
        if len(check.release_notes) > NOTES_LIMIT:
            print(f"... (see full notes at {check.release_url})")
    return 0


def run_update() -> int:
    print(f"Updating {PACKAGE_NAME}...\n")
    try:
        check = check_for_updates()
    except UpdateError as e:
        log.warning("Update check failed, installing anyway: %s", e)
    else:
        if not check.update_available:
            print(f"Already at latest version ({check.current_version})")
            return 0
        print(f"Updating from {check.current_version} to {check.latest_version}...\n")

    cmd = [sys.executable, "-m", "pip", "install", "--upgrade", PACKAGE_NAME]
    try:
        proc = subprocess.run(cmd)
    except OSError as e:
        log.error("Failed to run pip", exc_info=True)
        print(f"Failed to run pip: {e}", file=sys.stderr)
        return 1

    if proc.returncode != 0:
        print(f"Update failed. Please try manually:\n  {' '.join(cmd)}", file=sys.stderr)
        return 1
    print("\nUpdate complete!\n")
    print("To update the WezTerm plugin, open WezTerm's debug overlay")
    print("(Ctrl+Shift+L) and run: wezterm.plugin.update_all()")
    return 0
