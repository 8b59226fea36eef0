"""Structured logging for wezterm-settings-tui.

The TUI owns the terminal, so nothing may be printed while it runs.
Everything goes to a rotating log file instead:

* **RotatingFileHandler** – 5 MB max, 3 backups.
* **Structured JSON** – each line is a JSON object with ``timestamp``,
  ``level``, ``logger``, ``message``, and optional ``context`` fields.
* **Log-level differentiation** – DEBUG for fallback enum decodes, INFO for
  loads and saves, WARNING for extraction warnings, ERROR for I/O failures.

Library modules use ``logging.getLogger("wezterm-settings.<area>")`` and
propagate to the ``wezterm-settings`` logger, which the entry point wires
to the file handler via ``get_logger``.
"""

from __future__ import annotations

import json
import logging
import os
import tempfile
from logging.handlers import RotatingFileHandler
from typing import Any


ROOT_LOGGER = "wezterm-settings"

LOG_FILE = os.path.join(tempfile.gettempdir(), "wezterm-settings-tui.log")

# ── Rotation settings ────────────────────────────────────────────────

MAX_BYTES = 5 * 1024 * 1024  # 5 MB
BACKUP_COUNT = 3


class _JsonFormatter(logging.Formatter):
    """Emit each log record as a single-line JSON object.

    Fields:
        timestamp  – ISO-8601 with milliseconds
        level      – DEBUG / INFO / WARNING / ERROR / CRITICAL
        logger     – logger name
        message    – the log message
        context    – optional dict (config path, panel, section, ...)
    """

    def format(self, record: logging.LogRecord) -> str:
        entry: dict[str, Any] = {
            "timestamp": self.formatTime(record, datefmt="%Y-%m-%dT%H:%M:%S.") + f"{int(record.msecs):03d}",
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }
        ctx = getattr(record, "context", None)
        if ctx:
            entry["context"] = ctx
        if record.exc_info and record.exc_info[0] is not None:
            entry["exception"] = self.formatException(record.exc_info)
        return json.dumps(entry, default=str)


class _PlainFormatter(logging.Formatter):
    """Simple one-line formatter, used when ``--log-format plain`` is given."""

    def format(self, record: logging.LogRecord) -> str:
        ts = self.formatTime(record, datefmt="%Y-%m-%d %H:%M:%S")
        return f"[{ts}] {record.levelname} {record.name}: {record.getMessage()}"


def _make_handler(
    path: str,
    formatter: logging.Formatter,
    max_bytes: int = MAX_BYTES,
    backup_count: int = BACKUP_COUNT,
) -> RotatingFileHandler:
    """Create a RotatingFileHandler that writes to *path*."""
    os.makedirs(os.path.dirname(path) or tempfile.gettempdir(), exist_ok=True)
    handler = RotatingFileHandler(
        path, maxBytes=max_bytes, backupCount=backup_count, encoding="utf-8"
    )
    handler.setFormatter(formatter)
    return handler


# ── Public helpers ────────────────────────────────────────────────────

_configured: set[str] = set()


def get_logger(
    name: str = ROOT_LOGGER,
    log_file: str = LOG_FILE,
    level: int = logging.INFO,
    *,
    json_format: bool = True,
) -> logging.Logger:
    """Return a logger that writes to *log_file*.

    Calling this repeatedly with the same *name* and *log_file* adds the
    handler only once.

    Parameters
    ----------
    name:
        Logger name.  Defaults to the package root so every
        ``wezterm-settings.*`` child logger is captured.
    log_file:
        Path to the log file.  Defaults to a file in the temp directory.
    level:
        Minimum level for this logger.
    json_format:
        ``True`` → JSON lines (default, machine-parseable).
        ``False`` → plain-text lines.
    """
    logger = logging.getLogger(name)
    key = f"{name}:{log_file}"
    if key not in _configured:
        fmt = _JsonFormatter() if json_format else _PlainFormatter()
        handler = _make_handler(log_file, fmt)
        handler.setLevel(level)
        logger.addHandler(handler)
        logger.setLevel(level)
        logger.propagate = False
        _configured.add(key)
    return logger


def log_context(
    *,
    path: str = "",
    section: str = "",
    panel: str = "",
    **extra: Any,
) -> dict[str, Any]:
    """Build a context dict for structured log entries.

    Usage::

        log.warning("extraction warning", extra={"context": log_context(
            path="/home/me/.config/wezterm/wezterm.lua", section="Colors"
        )})
    """
    ctx: dict[str, Any] = {}
    if path:
        ctx["path"] = path
    if section:
        ctx["section"] = section
    if panel:
        ctx["panel"] = panel
    ctx.update(extra)
    return ctx
