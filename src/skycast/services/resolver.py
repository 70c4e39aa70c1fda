"""Location resolution through the geocoding API."""

from loguru import logger

from ..core.errors import NotFoundError
from ..models.weather import Location
from .openweather import OpenWeatherClient


class LocationResolver:
    """Resolves city names to coordinates, and coordinates back to city names.

    Example:
        >>> async def example():
        ...     async with OpenWeatherClient() as client:
        ...         location = await LocationResolver(client).resolve("Paris")
        ...         return location.resolved_name
    """

    def __init__(self, client: OpenWeatherClient):
        self._client = client

    async def resolve(self, cleaned_name: str, raw_query: str | None = None) -> Location:
        """Resolve a cleaned city name to a Location.

        Args:
            cleaned_name: Output of normalize_city
            raw_query: The string as originally typed, kept for display

        Returns:
            Location whose resolved_name is the geocoder's name for the place

        Raises:
            MissingCredentialError: If no API key is configured (checked first)
            NotFoundError: If the geocoder has no match; the message names the query
            NetworkUnreachableError: If the geocoder does not answer in time
        """
        self._client.require_credential()

        matches = await self._client.geocode(cleaned_name, limit=1)
        if not matches:
            logger.info("No geocoding match", query=cleaned_name)
            raise NotFoundError.for_query(cleaned_name)

        match = matches[0]
        logger.debug("Resolved location", query=cleaned_name, resolved=match.name)
        return Location(
            raw_query=raw_query if raw_query is not None else cleaned_name,
            cleaned_name=cleaned_name,
            latitude=match.lat,
            longitude=match.lon,
            resolved_name=match.name,
        )

    async def reverse(self, latitude: float, longitude: float) -> str:
        """Resolve device coordinates to a city name.

        Raises:
            NotFoundError: If no place is known at the coordinates
        """
        self._client.require_credential()

        matches = await self._client.reverse_geocode(latitude, longitude, limit=1)
        if not matches:
            logger.info("No reverse geocoding match")
            raise NotFoundError("Unable to get city name from location")
        return matches[0].name
