"""Device location providers."""

from typing import Protocol

import httpx
from loguru import logger

from ..core.config import settings


class LocationUnavailableError(Exception):
    """Raised when the device location cannot be determined."""

    pass


class LocationProvider(Protocol):
    async def current(self) -> tuple[float, float]:
        """Return (latitude, longitude) of the device."""
        ...


class StaticLocationProvider:
    """Provider returning fixed coordinates, e.g. from the command line."""

    def __init__(self, latitude: float, longitude: float):
        if not -90.0 <= latitude <= 90.0 or not -180.0 <= longitude <= 180.0:
            raise ValueError(f"Coordinates out of range: {latitude}, {longitude}")
        self._coords = (latitude, longitude)

    async def current(self) -> tuple[float, float]:
        return self._coords


class IpLocationProvider:
    """Approximate device location from the public IP address.

    Queries an ip-api.com compatible endpoint that answers with
    ``{"status": "success", "lat": ..., "lon": ..., "city": ...}``.
    """

    def __init__(self, url: str | None = None, timeout: float | None = None):
        self._url = url or settings.LOCATION_URL
        self._timeout = timeout or settings.UPSTREAM_TIMEOUT

    async def current(self) -> tuple[float, float]:
        try:
            async with httpx.AsyncClient(timeout=httpx.Timeout(self._timeout)) as client:
                response = await client.get(self._url)
                response.raise_for_status()
                data = response.json()
        except (httpx.HTTPError, ValueError) as e:
            logger.warning("IP geolocation failed", error=str(e))
            raise LocationUnavailableError("IP geolocation request failed") from e

        if not isinstance(data, dict) or data.get("status", "success") != "success":
            raise LocationUnavailableError("IP geolocation returned no location")
        try:
            latitude, longitude = float(data["lat"]), float(data["lon"])
        except (KeyError, TypeError, ValueError) as e:
            raise LocationUnavailableError("IP geolocation returned no coordinates") from e

        logger.info("Location detected", city=data.get("city"))
        return latitude, longitude
