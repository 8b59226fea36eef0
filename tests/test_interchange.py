"""Tests for YAML/JSON export and import of ConfigModel."""

from __future__ import annotations

import json

import pytest
import yaml

from wezterm_settings.interchange import (
    InterchangeError,
    export_config,
    format_for_path,
    import_config,
    read_config_file,
)
from wezterm_settings.models import ConfigModel, CursorStyle


def sample() -> ConfigModel:
    m = ConfigModel()
    m.color_scheme = "Nord"
    m.fonts.size = 15.0
    m.cursor.default_cursor_style = CursorStyle.STEADY_UNDERLINE
    m.keybindings.leader.enabled = False
    return m


class TestExport:

    def test_yaml_is_block_style_in_field_order(self):
        text = export_config(sample())
        data = yaml.safe_load(text)
        assert list(data)[:3] == ["color_scheme", "colors", "fonts"]
        assert data["cursor"]["default_cursor_style"] == "SteadyUnderline"
        assert "{" not in text

    def test_json(self):
        data = json.loads(export_config(sample(), "json"))
        assert data["fonts"]["size"] == 15.0

    def test_unknown_format(self):
        with pytest.raises(ValueError):
            export_config(sample(), "toml")


class TestImport:

    @pytest.mark.parametrize("fmt", ["yaml", "json"])
    def test_export_then_import_is_identical(self, fmt):
        m = sample()
        assert import_config(export_config(m, fmt), fmt) == m

    def test_format_sniffed(self):
        m = sample()
        assert import_config(export_config(m, "json")) == m
        assert import_config(export_config(m, "yaml")) == m

    def test_empty_document_is_defaults(self):
        assert import_config("", "yaml") == ConfigModel()

    def test_partial_document(self):
        m = import_config("window:\n  enable_tab_bar: false\n")
        assert m.window.enable_tab_bar is False

    def test_syntax_error(self):
        with pytest.raises(InterchangeError, match="Could not parse JSON"):
            import_config("{not json", "json")

    def test_not_a_mapping(self):
        with pytest.raises(InterchangeError, match="mapping"):
            import_config("- a\n- b\n")

    def test_bad_value(self):
        with pytest.raises(InterchangeError, match="default_cursor_style"):
            import_config("cursor:\n  default_cursor_style: Wobbly\n")


class TestFiles:

    def test_format_for_path(self):
        assert format_for_path("x.json") == "json"
        assert format_for_path("x.YML") == "yaml"
        assert format_for_path("x.txt") == "yaml"

    def test_read_config_file(self, tmp_path):
        path = tmp_path / "saved.json"
        path.write_text(export_config(sample(), "json"))
        assert read_config_file(path) == sample()

    def test_read_missing_file(self, tmp_path):
        with pytest.raises(InterchangeError, match="Could not read"):
            read_config_file(tmp_path / "nope.yaml")

    def test_read_non_utf8_file(self, tmp_path):
        path = tmp_path / "saved.yaml"
        path.write_bytes(b"color_scheme: caf\xe9\n")
        with pytest.raises(InterchangeError, match="Could not read"):
            read_config_file(path)
