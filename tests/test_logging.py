"""Tests for the wezterm-settings logging module.

Covers:
- _JsonFormatter: structured JSON output with context and exception fields
- _PlainFormatter: simple one-line text output
- _make_handler: RotatingFileHandler creation
- get_logger(): level, handler registration, idempotence, no propagation
- log_context(): builds context dicts with extras
"""

from __future__ import annotations

import json
import logging
import sys
from logging.handlers import RotatingFileHandler

import pytest

from wezterm_settings.logging import (
    BACKUP_COUNT,
    MAX_BYTES,
    ROOT_LOGGER,
    _JsonFormatter,
    _PlainFormatter,
    _configured,
    _make_handler,
    get_logger,
    log_context,
)


def make_record(msg="test message", level=logging.INFO, name="test.logger", **kwargs):
    record = logging.LogRecord(
        name=name, level=level, pathname="test.py", lineno=42,
        msg=msg, args=(), exc_info=kwargs.pop("exc_info", None),
    )
    for k, v in kwargs.items():
        setattr(record, k, v)
    return record


@pytest.fixture()
def fresh_logger(tmp_path):
    """Yield a unique logger name and file; remove handlers afterwards."""
    name = f"wezterm-settings.test.{tmp_path.name}"
    path = str(tmp_path / "logs" / "test.log")
    yield name, path
    logger = logging.getLogger(name)
    for h in list(logger.handlers):
        h.close()
        logger.removeHandler(h)
    _configured.discard(f"{name}:{path}")


class TestRotationSettings:

    def test_constants(self):
        assert MAX_BYTES == 5 * 1024 * 1024
        assert BACKUP_COUNT == 3
        assert ROOT_LOGGER == "wezterm-settings"


# ---------------------------------------------------------------------------
# Formatters
# ---------------------------------------------------------------------------

class TestJsonFormatter:

    def setup_method(self):
        self.fmt = _JsonFormatter()

    def test_basic_json_output(self):
        parsed = json.loads(self.fmt.format(make_record("hello world")))
        assert parsed["level"] == "INFO"
        assert parsed["logger"] == "test.logger"
        assert parsed["message"] == "hello world"
        # 2026-03-01T12:34:56.789
        assert "T" in parsed["timestamp"]
        assert "." in parsed["timestamp"]

    def test_context_included(self):
        record = make_record(context={"path": "/x/wezterm.lua", "section": "Colors"})
        parsed = json.loads(self.fmt.format(record))
        assert parsed["context"] == {"path": "/x/wezterm.lua", "section": "Colors"}

    def test_empty_context_not_included(self):
        parsed = json.loads(self.fmt.format(make_record(context={})))
        assert "context" not in parsed

    def test_exception_included(self):
        try:
            raise ValueError("bad value")
        except ValueError:
            record = make_record("failed", level=logging.ERROR, exc_info=sys.exc_info())
        parsed = json.loads(self.fmt.format(record))
        assert "ValueError: bad value" in parsed["exception"]

    def test_non_serializable_context(self):
        record = make_record(context={"obj": object()})
        parsed = json.loads(self.fmt.format(record))
        assert "object" in parsed["context"]["obj"]


class TestPlainFormatter:

    def test_format(self):
        out = _PlainFormatter().format(make_record("saved", level=logging.WARNING))
        assert out.startswith("[")
        assert "WARNING test.logger: saved" in out


# ---------------------------------------------------------------------------
# Handlers and loggers
# ---------------------------------------------------------------------------

class TestMakeHandler:

    def test_creates_parent_dir(self, tmp_path):
        path = tmp_path / "deep" / "dir" / "x.log"
        handler = _make_handler(str(path), _PlainFormatter())
        try:
            assert isinstance(handler, RotatingFileHandler)
            assert handler.maxBytes == MAX_BYTES
            assert handler.backupCount == BACKUP_COUNT
            assert path.parent.is_dir()
        finally:
            handler.close()


class TestGetLogger:

    def test_writes_json_lines(self, fresh_logger):
        name, path = fresh_logger
        logger = get_logger(name, path, logging.DEBUG)
        logger.info("loaded", extra={"context": log_context(path="/cfg")})
        for h in logger.handlers:
            h.flush()
        with open(path) as f:
            entry = json.loads(f.readline())
        assert entry["message"] == "loaded"
        assert entry["context"] == {"path": "/cfg"}
        assert logger.level == logging.DEBUG
        assert logger.propagate is False

    def test_plain_format(self, fresh_logger):
        name, path = fresh_logger
        logger = get_logger(name, path, json_format=False)
        logger.warning("careful")
        for h in logger.handlers:
            h.flush()
        with open(path) as f:
            assert "WARNING" in f.read()

    def test_idempotent(self, fresh_logger):
        name, path = fresh_logger
        get_logger(name, path)
        logger = get_logger(name, path)
        assert len(logger.handlers) == 1


class TestLogContext:

    def test_empty(self):
        assert log_context() == {}

    def test_fields_and_extras(self):
        ctx = log_context(path="/a", section="Fonts", panel="fonts", count=2)
        assert ctx == {"path": "/a", "section": "Fonts", "panel": "fonts", "count": 2}

    def test_empty_strings_dropped(self):
        assert log_context(path="", panel="gpu") == {"panel": "gpu"}
