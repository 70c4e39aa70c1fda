"""OpenWeatherMap API client with error classification."""

from typing import Any, TypeVar

import httpx
from loguru import logger
from pydantic import BaseModel, TypeAdapter, ValidationError

from ..core.config import settings
from ..core.errors import (
    MissingCredentialError,
    NetworkUnreachableError,
    NotFoundError,
    RateLimitedError,
    UnauthorizedError,
    UnknownQueryError,
    UpstreamMalformedError,
)
from ..models.weather import CurrentWeatherPayload, ForecastPayload, GeocodeEntry

GEOCODE_DIRECT_PATH = "/geo/1.0/direct"
GEOCODE_REVERSE_PATH = "/geo/1.0/reverse"
CURRENT_PATH = "/data/2.5/weather"
FORECAST_PATH = "/data/2.5/forecast"

_geocode_results = TypeAdapter(list[GeocodeEntry])

ModelT = TypeVar("ModelT", bound=BaseModel)


class OpenWeatherClient:
    """Client for the OpenWeatherMap geocoding, current-weather and forecast APIs.

    Uses httpx for async HTTP requests. Every request carries the API key and the
    configured timeout; failures are raised as QueryError subclasses. No request
    is retried.

    Example:
        >>> async def example():
        ...     async with OpenWeatherClient(api_key="secret") as client:
        ...         matches = await client.geocode("Paris")
        ...         return matches[0].name
    """

    def __init__(
        self,
        api_key: str | None = None,
        base_url: str | None = None,
        timeout: float | None = None,
        units: str | None = None,
    ):
        """Initialize the client, falling back to settings for every argument."""
        self._client: httpx.AsyncClient | None = None
        self._api_key = api_key if api_key is not None else settings.OPENWEATHER_API_KEY
        self._base_url = (base_url or settings.OPENWEATHER_BASE_URL).rstrip("/")
        self._timeout = timeout or settings.UPSTREAM_TIMEOUT
        self._units = units or settings.UNITS

    async def __aenter__(self):
        """Async context manager entry."""
        self._client = httpx.AsyncClient(
            timeout=httpx.Timeout(self._timeout),
            headers={"Accept": "application/json"},
            follow_redirects=True,
        )
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        """Async context manager exit."""
        if self._client:
            await self._client.aclose()
            self._client = None

    @property
    def has_credential(self) -> bool:
        return bool(self._api_key)

    def require_credential(self) -> None:
        """Raise MissingCredentialError if no API key is configured."""
        if not self.has_credential:
            raise MissingCredentialError()

    async def geocode(self, query: str, limit: int = 1) -> list[GeocodeEntry]:
        """Look up coordinates for a place name.

        Args:
            query: Cleaned city name
            limit: Maximum number of matches requested

        Returns:
            Matches in geocoder order, possibly empty
        """
        data = await self._get_json(GEOCODE_DIRECT_PATH, {"q": query, "limit": limit})
        return self._parse_geocode(data)

    async def reverse_geocode(
        self, latitude: float, longitude: float, limit: int = 1
    ) -> list[GeocodeEntry]:
        """Look up place names for coordinates."""
        data = await self._get_json(
            GEOCODE_REVERSE_PATH,
            {"lat": latitude, "lon": longitude, "limit": limit},
        )
        return self._parse_geocode(data)

    async def get_current(self, latitude: float, longitude: float) -> CurrentWeatherPayload:
        """Fetch current conditions for coordinates."""
        data = await self._get_json(
            CURRENT_PATH,
            {"lat": latitude, "lon": longitude, "units": self._units},
        )
        return self._parse_payload(CurrentWeatherPayload, data, "current weather")

    async def get_forecast(self, latitude: float, longitude: float) -> ForecastPayload:
        """Fetch the 3-hour forecast feed for coordinates."""
        data = await self._get_json(
            FORECAST_PATH,
            {"lat": latitude, "lon": longitude, "units": self._units},
        )
        return self._parse_payload(ForecastPayload, data, "forecast")

    async def _get_json(self, path: str, params: dict[str, Any]) -> Any:
        """Issue a GET request and return the decoded JSON body.

        Status codes are classified as follows:
        - 401: UnauthorizedError (body ignored)
        - 404: NotFoundError
        - 429: RateLimitedError
        - any other non-2xx: UnknownQueryError with the upstream message
        - no response at all: NetworkUnreachableError

        Raises:
            MissingCredentialError: If no API key is configured (no request is sent)
            UpstreamMalformedError: If the body is missing or not JSON
        """
        if not self._client:
            raise RuntimeError("Client not initialized. Use async context manager.")
        self.require_credential()

        query = {**params, "appid": self._api_key}

        try:
            logger.debug("Requesting OpenWeatherMap", path=path)
            response = await self._client.get(f"{self._base_url}{path}", params=query)

        except httpx.TimeoutException as e:
            logger.warning("OpenWeatherMap request timed out", path=path)
            raise NetworkUnreachableError() from e

        except httpx.HTTPError as e:
            logger.warning("OpenWeatherMap request failed", path=path, error=type(e).__name__)
            raise NetworkUnreachableError() from e

        if response.status_code == 401:
            logger.error("OpenWeatherMap rejected the API key", path=path)
            raise UnauthorizedError()

        if response.status_code == 404:
            logger.info("OpenWeatherMap returned 404", path=path)
            raise NotFoundError()

        if response.status_code == 429:
            logger.warning("OpenWeatherMap rate limit hit", path=path)
            raise RateLimitedError()

        if not response.is_success:
            detail = self._upstream_message(response)
            logger.warning(
                "OpenWeatherMap returned an error",
                path=path,
                status_code=response.status_code,
                detail=detail,
            )
            raise UnknownQueryError(detail)

        if not response.content:
            logger.warning("OpenWeatherMap returned an empty body", path=path)
            raise UpstreamMalformedError()

        try:
            return response.json()
        except ValueError as e:
            logger.warning("OpenWeatherMap returned a non-JSON body", path=path)
            raise UpstreamMalformedError() from e

    @staticmethod
    def _upstream_message(response: httpx.Response) -> str | None:
        try:
            body = response.json()
        except ValueError:
            return None
        if isinstance(body, dict) and body.get("message"):
            return str(body["message"])
        return None

    @staticmethod
    def _parse_geocode(data: Any) -> list[GeocodeEntry]:
        try:
            return _geocode_results.validate_python(data)
        except ValidationError as e:
            logger.warning("Unexpected geocoding payload", errors=e.error_count())
            raise UpstreamMalformedError() from e

    @staticmethod
    def _parse_payload(model: type[ModelT], data: Any, what: str) -> ModelT:
        if not data:
            logger.warning("OpenWeatherMap returned no data", payload=what)
            raise UpstreamMalformedError()
        try:
            return model.model_validate(data)
        except ValidationError as e:
            logger.warning("Unexpected payload shape", payload=what, errors=e.error_count())
            raise UpstreamMalformedError() from e
