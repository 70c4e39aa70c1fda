"""Application configuration using Pydantic Settings."""

from pathlib import Path

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")


class Settings(BaseSettings):
    """Application settings loaded from environment variables.

    All settings except the API key have sensible defaults. A missing API key
    is not a startup error: every pipeline run checks for it before issuing
    any request and fails with a MissingCredential error instead.

    Example:
        >>> settings = Settings()
        >>> settings.UPSTREAM_TIMEOUT
        10.0
        >>> settings.HISTORY_LIMIT
        5
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=True,
        extra="ignore",
    )

    # Upstream API Configuration
    OPENWEATHER_API_KEY: str | None = Field(
        default=None,
        description="OpenWeatherMap API key (required for every query)",
    )
    OPENWEATHER_BASE_URL: str = Field(
        default="https://api.openweathermap.org",
        description="Base URL for the OpenWeatherMap geocoding and data APIs",
    )
    UPSTREAM_TIMEOUT: float = Field(
        default=10.0,
        description="Timeout for every outbound request in seconds",
        ge=0.1,
        le=60.0,
    )
    UNITS: str = Field(
        default="metric",
        description="Unit system requested from OpenWeatherMap",
    )

    # Forecast shaping
    HOURLY_WINDOW: int = Field(
        default=24,
        description="Number of 3-hour forecast entries kept as hourly points",
        ge=1,
        le=40,
    )
    DAILY_STRIDE: int = Field(
        default=8,
        description="Stride through the 3-hour feed used to sample one point per day",
        ge=1,
        le=40,
    )
    DAILY_LIMIT: int = Field(
        default=7,
        description="Maximum number of daily points",
        ge=1,
        le=16,
    )

    # Search history
    HISTORY_FILE: Path = Field(
        default=Path("~/.skycast/history.json"),
        description="JSON key-value file holding the recent searches",
    )
    HISTORY_LIMIT: int = Field(
        default=5,
        description="Maximum number of recent searches kept",
        ge=1,
        le=50,
    )

    # Notices
    NOTICE_TTL: float = Field(
        default=4.0,
        description="Seconds before an error/success notice is dismissed",
        gt=0.0,
        le=60.0,
    )

    # Device location
    LOCATION_URL: str = Field(
        default="http://ip-api.com/json/",
        description="IP geolocation endpoint used when no coordinates are given",
    )

    # Logging Configuration
    LOG_LEVEL: str = Field(
        default="WARNING",
        description="Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL)",
    )

    # Environment Configuration
    ENVIRONMENT: str = Field(
        default="development",
        description="Environment (development, staging, production)",
    )

    @field_validator("LOG_LEVEL")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        """Validate that LOG_LEVEL is a valid logging level.

        Example:
            >>> Settings(LOG_LEVEL="info").LOG_LEVEL
            'INFO'
        """
        v_upper = v.upper()
        if v_upper not in LOG_LEVELS:
            raise ValueError(f"LOG_LEVEL must be one of {LOG_LEVELS}, got {v}")
        return v_upper

    @field_validator("OPENWEATHER_BASE_URL", "LOCATION_URL")
    @classmethod
    def validate_url(cls, v: str) -> str:
        """Validate that a URL setting is properly formatted.

        Args:
            v: The URL string to validate

        Returns:
            The URL string without trailing slash

        Raises:
            ValueError: If the URL is invalid

        Example:
            >>> Settings(OPENWEATHER_BASE_URL="https://api.example.com/").OPENWEATHER_BASE_URL
            'https://api.example.com'
        """
        if not v.startswith(("http://", "https://")):
            raise ValueError("URL settings must start with http:// or https://")
        return v.rstrip("/")

    @field_validator("UNITS")
    @classmethod
    def validate_units(cls, v: str) -> str:
        """Validate the unit system name."""
        v_lower = v.lower()
        if v_lower not in {"metric", "imperial", "standard"}:
            raise ValueError(f"UNITS must be metric, imperial or standard, got {v}")
        return v_lower

    @field_validator("OPENWEATHER_API_KEY")
    @classmethod
    def blank_key_is_missing(cls, v: str | None) -> str | None:
        """Treat an empty or whitespace-only key as not configured."""
        if v is None or not v.strip():
            return None
        return v.strip()


# Global settings instance
settings = Settings()
