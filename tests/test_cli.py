"""Tests for the terminal front-end."""

import argparse
import json

import pytest
from pytest_httpx import HTTPXMock

from skycast.cli import build_parser, main, parse_coords, render_state
from skycast.core.config import settings
from skycast.core.errors import NotFoundError
from skycast.models.dashboard import DashboardState, Notice, PipelineStatus

from conftest import BASE_URL


@pytest.fixture
def configured(monkeypatch):
    monkeypatch.setattr(settings, "OPENWEATHER_API_KEY", "test-key")
    monkeypatch.setattr(settings, "OPENWEATHER_BASE_URL", BASE_URL)


class TestParseCoords:
    def test_valid(self):
        assert parse_coords("48.85, 2.35") == (48.85, 2.35)

    @pytest.mark.parametrize("value", ["48.85", "a,b", "1,2,3", "91,0", "0,-181"])
    def test_invalid(self, value):
        with pytest.raises(argparse.ArgumentTypeError):
            parse_coords(value)


def test_parser_defaults():
    args = build_parser().parse_args(["Paris"])

    assert args.city == "Paris"
    assert args.locate is False
    assert args.coords is None
    assert args.json is False
    assert args.log_level is None


def test_log_level_is_case_insensitive():
    assert build_parser().parse_args(["Paris", "--log-level", "debug"]).log_level == "DEBUG"


def test_unknown_log_level_is_a_usage_error(httpx_mock: HTTPXMock, capsys):
    with pytest.raises(SystemExit) as exc_info:
        main(["Paris", "--log-level", "foo"])

    assert exc_info.value.code == 2
    assert "--log-level" in capsys.readouterr().err
    assert httpx_mock.get_requests() == []


class TestRenderState:
    """Test text rendering of dashboard states."""

    def test_idle_is_empty(self):
        assert render_state(DashboardState()) == ""

    def test_error_notice(self):
        error = NotFoundError.for_query("Atlantis")
        state = DashboardState(
            status=PipelineStatus.FAILED,
            error=error,
            notice=Notice(kind="error", message=error.message),
        )

        assert render_state(state) == f"✖ {error.message}"

    def test_error_after_notice_dismissed(self):
        error = NotFoundError.for_query("Atlantis")
        state = DashboardState(status=PipelineStatus.FAILED, error=error)

        assert "Atlantis" in render_state(state)


@pytest.mark.integration
class TestMain:
    """Run the console entry point against the mocked API."""

    def test_search_prints_dashboard(self, httpx_mock: HTTPXMock, configured, mock_weather, tmp_path, capsys):
        mock_weather(name="Paris")
        history_file = tmp_path / "history.json"

        code = main(["Paris", "--history-file", str(history_file)])

        out = capsys.readouterr().out
        assert code == 0
        assert "Paris, FR" in out
        assert "Next hours" in out
        assert "Coming days" in out
        assert json.loads(history_file.read_text(encoding="utf-8")) == {"searchHistory": ["Paris"]}

    def test_json_output(self, configured, mock_weather, tmp_path, capsys):
        mock_weather(name="Paris", count=16)

        code = main(["Paris", "--json", "--history-file", str(tmp_path / "h.json")])

        snapshot = json.loads(capsys.readouterr().out)
        assert code == 0
        assert snapshot["current"]["location_name"] == "Paris"
        assert len(snapshot["forecast"]["hourly"]) == 16
        assert len(snapshot["forecast"]["daily"]) == 2

    def test_blank_city_fails(self, httpx_mock: HTTPXMock, configured, tmp_path, capsys):
        code = main(["   ", "--history-file", str(tmp_path / "h.json")])

        captured = capsys.readouterr()
        assert code == 1
        assert "Please enter a city name" in captured.err
        assert httpx_mock.get_requests() == []

    def test_missing_key_fails(self, httpx_mock: HTTPXMock, monkeypatch, tmp_path, capsys):
        monkeypatch.setattr(settings, "OPENWEATHER_API_KEY", None)

        code = main(["Paris", "--history-file", str(tmp_path / "h.json")])

        assert code == 1
        assert "API key" in capsys.readouterr().err
        assert httpx_mock.get_requests() == []

    def test_api_key_never_logged(self, configured, mock_weather, tmp_path, capsys):
        mock_weather()

        main(["Paris", "--log-level", "DEBUG", "--history-file", str(tmp_path / "h.json")])

        captured = capsys.readouterr()
        assert "test-key" not in captured.out
        assert "test-key" not in captured.err
