"""Tests for release checks and self-update (network and pip mocked)."""

from __future__ import annotations

import json
import unittest.mock as mock
import urllib.error

import pytest

from wezterm_settings import update


def fake_response(payload: dict):
    resp = mock.MagicMock()
    resp.read.return_value = json.dumps(payload).encode()
    resp.__enter__.return_value = resp
    return resp


class TestParseVersion:

    @pytest.mark.parametrize("text, expected", [
        ("v1.2.3", (1, 2, 3)),
        ("0.10.0", (0, 10, 0)),
        ("2.0.0-rc1", (2, 0, 0)),
        ("junk", (0,)),
    ])
    def test_parse(self, text, expected):
        assert update.parse_version(text) == expected

    def test_numeric_not_lexical(self):
        assert update.parse_version("0.10.0") > update.parse_version("0.9.9")


class TestCheck:

    def test_newer_release(self):
        payload = {"tag_name": "v9.0.0", "html_url": "https://example/rel", "body": "notes"}
        with mock.patch("urllib.request.urlopen", return_value=fake_response(payload)) as m:
            check = update.check_for_updates("0.3.0")
        assert check.update_available
        assert check.latest_version == "9.0.0"
        assert m.call_args.kwargs["timeout"] == update.TIMEOUT

    def test_same_release(self):
        payload = {"tag_name": "v0.3.0", "html_url": "u"}
        with mock.patch("urllib.request.urlopen", return_value=fake_response(payload)):
            assert not update.check_for_updates("0.3.0").update_available

    def test_network_error(self):
        with mock.patch("urllib.request.urlopen", side_effect=urllib.error.URLError("offline")):
            with pytest.raises(update.UpdateError):
                update.check_for_updates("0.3.0")

    def test_print_status_offline(self, capsys):
        with mock.patch("urllib.request.urlopen", side_effect=urllib.error.URLError("offline")):
            assert update.print_update_status() == 0
        out = capsys.readouterr().out
        assert "Could not check for updates" in out
        assert update.REPO_URL in out

    def test_print_status_truncates_notes(self, capsys):
        payload = {"tag_name": "v99.0.0", "html_url": "https://example/rel", "body": "x" * 600}
        with mock.patch("urllib.request.urlopen", return_value=fake_response(payload)):
            update.print_update_status()
        out = capsys.readouterr().out
        assert "A new version is available!" in out
        assert "see full notes at https://example/rel" in out


class TestRunUpdate:

    def test_already_latest_skips_pip(self, capsys):
        payload = {"tag_name": f"v{update.__version__}", "html_url": "u"}
        with mock.patch("urllib.request.urlopen", return_value=fake_response(payload)):
            with mock.patch("subprocess.run") as run:
                assert update.run_update() == 0
        run.assert_not_called()
        assert "Already at latest version" in capsys.readouterr().out

    def test_runs_pip(self):
        payload = {"tag_name": "v99.0.0", "html_url": "u"}
        with mock.patch("urllib.request.urlopen", return_value=fake_response(payload)):
            with mock.patch("subprocess.run", return_value=mock.Mock(returncode=0)) as run:
                assert update.run_update() == 0
        cmd = run.call_args.args[0]
        assert cmd[-3:] == ["install", "--upgrade", update.PACKAGE_NAME]

    def test_pip_failure(self):
        with mock.patch("urllib.request.urlopen", side_effect=urllib.error.URLError("offline")):
            with mock.patch("subprocess.run", return_value=mock.Mock(returncode=1)):
                assert update.run_update() == 1
