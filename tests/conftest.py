"""Pytest configuration and fixtures."""

import re
from datetime import datetime, timezone

import pytest

from skycast.services.openweather import OpenWeatherClient

BASE_URL = "https://api.openweather.test"
FEED_START = 1700000000  # 2023-11-14 22:13:20 UTC

GEOCODE_URL = re.compile(re.escape(BASE_URL) + r"/geo/1\.0/direct\?.*")
REVERSE_URL = re.compile(re.escape(BASE_URL) + r"/geo/1\.0/reverse\?.*")
CURRENT_URL = re.compile(re.escape(BASE_URL) + r"/data/2\.5/weather\?.*")
FORECAST_URL = re.compile(re.escape(BASE_URL) + r"/data/2\.5/forecast\?.*")


def _geocode(name="Paris", lat=48.8589, lon=2.32, country="FR"):
    return [{"name": name, "lat": lat, "lon": lon, "country": country}]


def _current(name="Paris", temp=11.2, country="FR", condition="Clouds"):
    return {
        "name": name,
        "sys": {"country": country, "sunrise": 1699944000, "sunset": 1699978000},
        "main": {
            "temp": temp,
            "feels_like": temp - 1.1,
            "temp_min": temp - 1.4,
            "temp_max": temp + 1.2,
            "humidity": 81,
            "pressure": 1012,
        },
        "weather": [{"main": condition, "description": "broken clouds", "icon": "04d"}],
        "wind": {"speed": 4.1},
        "visibility": 10000,
    }


def _forecast(count=40, base_temp=10.0, start=FEED_START):
    return {
        "cod": "200",
        "cnt": count,
        "list": [
            {
                "dt": start + i * 10800,
                "main": {
                    "temp": base_temp + i,
                    "temp_min": base_temp + i - 0.5,
                    "temp_max": base_temp + i + 0.5,
                    "humidity": 60 + i % 10,
                },
                "weather": [{"main": "Rain" if i % 2 else "Clear", "description": "desc", "icon": "10d"}],
                "wind": {"speed": 2.0 + i / 10},
                "pop": (i % 5) / 10,
            }
            for i in range(count)
        ],
    }


@pytest.fixture
def geocode_payload():
    """Factory for direct/reverse geocoding responses."""
    return _geocode


@pytest.fixture
def current_payload():
    """Factory for /data/2.5/weather responses."""
    return _current


@pytest.fixture
def forecast_payload():
    """Factory for /data/2.5/forecast responses (3-hour slots)."""
    return _forecast


@pytest.fixture
def client_factory():
    """Build clients pointing at the mocked base URL with a test key."""

    def factory():
        return OpenWeatherClient(api_key="test-key", base_url=BASE_URL, timeout=1.0)

    return factory


@pytest.fixture
def fixed_clock():
    return lambda: datetime(2026, 1, 20, 15, 30, tzinfo=timezone.utc)


@pytest.fixture
def mock_weather(httpx_mock, geocode_payload, current_payload, forecast_payload):
    """Register one successful geocode + current + forecast cycle per call."""

    def register(name="Paris", count=40, base_temp=10.0):
        httpx_mock.add_response(url=GEOCODE_URL, json=geocode_payload(name=name))
        httpx_mock.add_response(url=CURRENT_URL, json=current_payload(name=name))
        httpx_mock.add_response(
            url=FORECAST_URL, json=forecast_payload(count=count, base_temp=base_temp)
        )

    return register
