"""Tests for configuration management."""

from pathlib import Path

import pytest
from pydantic import ValidationError

from skycast.core.config import Settings


@pytest.fixture
def clean_env(monkeypatch):
    """Remove environment overrides so defaults are observable."""
    for name in Settings.model_fields:
        monkeypatch.delenv(name, raising=False)


class TestSettings:
    """Test configuration settings."""

    def test_default_values(self, clean_env):
        """Test that default values are loaded correctly."""
        settings = Settings(_env_file=None)

        assert settings.OPENWEATHER_API_KEY is None
        assert settings.OPENWEATHER_BASE_URL == "https://api.openweathermap.org"
        assert settings.UPSTREAM_TIMEOUT == 10.0
        assert settings.UNITS == "metric"
        assert settings.HOURLY_WINDOW == 24
        assert settings.DAILY_STRIDE == 8
        assert settings.DAILY_LIMIT == 7
        assert settings.HISTORY_LIMIT == 5
        assert settings.NOTICE_TTL == 4.0
        assert settings.HISTORY_FILE == Path("~/.skycast/history.json")
        assert settings.LOG_LEVEL == "WARNING"

    def test_api_key_from_environment(self, clean_env, monkeypatch):
        """Test that the API key is read from the environment."""
        monkeypatch.setenv("OPENWEATHER_API_KEY", "env-key-123")

        assert Settings(_env_file=None).OPENWEATHER_API_KEY == "env-key-123"

    def test_blank_api_key_counts_as_missing(self, clean_env):
        """Test that an empty or whitespace key is treated as not configured."""
        assert Settings(_env_file=None, OPENWEATHER_API_KEY="").OPENWEATHER_API_KEY is None
        assert Settings(_env_file=None, OPENWEATHER_API_KEY="   ").OPENWEATHER_API_KEY is None
        assert Settings(_env_file=None, OPENWEATHER_API_KEY=" k ").OPENWEATHER_API_KEY == "k"

    def test_log_level_validation(self):
        """Test that log level is validated and normalized."""
        assert Settings(LOG_LEVEL="DEBUG").LOG_LEVEL == "DEBUG"
        assert Settings(LOG_LEVEL="info").LOG_LEVEL == "INFO"
        assert Settings(LOG_LEVEL="error").LOG_LEVEL == "ERROR"

        with pytest.raises(ValidationError, match="LOG_LEVEL must be one of"):
            Settings(LOG_LEVEL="INVALID")

    def test_base_url_validation(self):
        """Test that base URL is validated and normalized."""
        settings = Settings(OPENWEATHER_BASE_URL="https://api.example.com/")
        assert settings.OPENWEATHER_BASE_URL == "https://api.example.com"

        settings = Settings(OPENWEATHER_BASE_URL="http://localhost:8080")
        assert settings.OPENWEATHER_BASE_URL == "http://localhost:8080"

        with pytest.raises(ValidationError, match="must start with http"):
            Settings(OPENWEATHER_BASE_URL="api.example.com")

    def test_units_validation(self):
        """Test that the unit system is validated."""
        assert Settings(UNITS="METRIC").UNITS == "metric"

        with pytest.raises(ValidationError, match="UNITS must be"):
            Settings(UNITS="kelvin")

    def test_numeric_constraints(self):
        """Test that numeric constraints are enforced."""
        Settings(UPSTREAM_TIMEOUT=0.5)
        Settings(HISTORY_LIMIT=10)
        Settings(NOTICE_TTL=1.5)

        with pytest.raises(ValidationError):
            Settings(UPSTREAM_TIMEOUT=0.05)  # Too low

        with pytest.raises(ValidationError):
            Settings(HISTORY_LIMIT=0)

        with pytest.raises(ValidationError):
            Settings(NOTICE_TTL=0)
