"""Concurrent retrieval of current conditions and forecast."""

import asyncio

from loguru import logger

from ..models.weather import CurrentWeatherPayload, ForecastPayload, Location
from .openweather import OpenWeatherClient


async def fetch_conditions(
    client: OpenWeatherClient,
    location: Location,
) -> tuple[CurrentWeatherPayload, ForecastPayload]:
    """Fetch current conditions and the forecast feed for a location.

    Both requests are issued together. The stage succeeds only if both do; the
    first failure cancels the other request and is re-raised unchanged.

    Args:
        client: Open OpenWeatherClient
        location: Resolved location

    Returns:
        Tuple of (current payload, forecast payload) from the same fetch cycle

    Raises:
        QueryError: The error of whichever request failed first
    """
    current_task = asyncio.ensure_future(
        client.get_current(location.latitude, location.longitude)
    )
    forecast_task = asyncio.ensure_future(
        client.get_forecast(location.latitude, location.longitude)
    )
    tasks = {current_task, forecast_task}

    try:
        done, pending = await asyncio.wait(tasks, return_when=asyncio.FIRST_EXCEPTION)
    except asyncio.CancelledError:
        for task in tasks:
            task.cancel()
        raise

    failed = [task for task in done if task.exception() is not None]
    if failed:
        for task in pending:
            task.cancel()
        if pending:
            await asyncio.gather(*pending, return_exceptions=True)
        # Both may have failed in the same tick; report the current-conditions one first
        first = current_task if current_task in failed else failed[0]
        logger.debug("Fetch stage failed", error=type(first.exception()).__name__)
        raise first.exception()

    return current_task.result(), forecast_task.result()
