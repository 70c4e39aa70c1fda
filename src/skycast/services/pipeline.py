"""Weather query pipeline and dashboard state machine."""

import asyncio
from datetime import datetime, tzinfo
from typing import Callable

from loguru import logger
from pydantic import ValidationError

from ..core.errors import (
    InvalidInputError,
    QueryError,
    UnknownQueryError,
    UpstreamMalformedError,
)
from ..models.dashboard import DashboardState, Notice, PipelineStatus
from ..models.weather import (
    CurrentWeatherPayload,
    ForecastPayload,
    Location,
    WeatherSnapshot,
)
from .fetcher import fetch_conditions
from .history import HistoryStore, MemoryHistoryStore, push_city, remove_city
from .location import LocationProvider, LocationUnavailableError
from .normalizer import normalize_city
from .notifier import NoticeTimer
from .openweather import OpenWeatherClient
from .resolver import LocationResolver
from .transformer import build_current_conditions, build_forecast, build_insights

REFRESH_SUCCESS_MESSAGE = "Weather data refreshed successfully!"
EMPTY_SEARCH_MESSAGE = "Please enter a city name"
NOTHING_TO_REFRESH_MESSAGE = "No location to refresh. Please search for a city first."
LOCATION_FAILED_MESSAGE = "Unable to get your location. Please search for a city instead."

StateListener = Callable[[DashboardState], None]


class WeatherDashboard:
    """Controller owning the displayed weather state.

    Transitions: IDLE -> LOADING -> SUCCESS | FAILED, restarting at LOADING on
    the next search, refresh or locate. Each run publishes either a complete
    WeatherSnapshot or an error; a failure keeps the previously displayed
    snapshot.

    Only the most recent run may change the displayed state. Starting a run
    cancels the one in flight, and a run that finishes after being superseded
    is discarded, so the snapshot on display always comes from one run. A
    blank search or a refresh with nothing to refresh is rejected on the spot
    and leaves the run in flight alone.

    Example:
        >>> async def example():
        ...     dashboard = WeatherDashboard()
        ...     state = await dashboard.search("Paris, FR")
        ...     return state.snapshot.current.location_name
    """

    def __init__(
        self,
        client_factory: Callable[[], OpenWeatherClient] = OpenWeatherClient,
        history_store: HistoryStore | None = None,
        location_provider: LocationProvider | None = None,
        clock: Callable[[], datetime] | None = None,
        tz: tzinfo | None = None,
        notice_ttl: float | None = None,
    ):
        """Initialize the dashboard.

        Args:
            client_factory: Builds an (unopened) OpenWeatherClient per run
            history_store: Persistence for recent searches (read once here)
            location_provider: Source of device coordinates for locate()
            clock: Returns the moment of a fetch, used for the display time
            tz: Timezone for time labels; None means the local timezone
            notice_ttl: Seconds before a notice is dismissed
        """
        self._client_factory = client_factory
        self._history_store = history_store or MemoryHistoryStore()
        self._location_provider = location_provider
        self._clock = clock or (lambda: datetime.now().astimezone())
        self._tz = tz
        self._notices = NoticeTimer(self._dismiss_notice, ttl=notice_ttl)
        self._listeners: list[StateListener] = []
        self._latest_run = 0
        self._active: asyncio.Task | None = None
        self._state = DashboardState(history=self._history_store.load())

    @property
    def state(self) -> DashboardState:
        return self._state

    def subscribe(self, listener: StateListener) -> Callable[[], None]:
        """Register a listener called with every new state; returns an unsubscribe callable."""
        self._listeners.append(listener)

        def unsubscribe():
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    async def search(self, raw_city: str) -> DashboardState:
        """Run the pipeline for a city typed by the user.

        The raw string is recorded in the search history before the run, as
        long as it is not blank.
        """
        if not isinstance(raw_city, str) or not raw_city.strip():
            self._reject(InvalidInputError(EMPTY_SEARCH_MESSAGE))
            return self._state

        history = push_city(self._state.history, raw_city)
        self._history_store.save(history)
        self._publish(history=history)

        return await self._run(raw_city, refresh=False)

    async def refresh(self) -> DashboardState:
        """Re-run the pipeline for the last successfully resolved city."""
        city = self._state.last_resolved_city
        if not city:
            self._reject(InvalidInputError(NOTHING_TO_REFRESH_MESSAGE))
            return self._state

        logger.info("Refreshing weather", city=city)
        return await self._run(city, refresh=True)

    async def locate(self) -> DashboardState:
        """Search for the city at the device location.

        Device coordinates come from the location provider and are reverse
        geocoded to a city name, which is then searched like typed input
        (without being added to the history). Every failure is published as
        a QueryError; nothing is raised to the caller.
        """
        run_id = self._begin()

        try:
            if self._location_provider is None:
                raise LocationUnavailableError("No location provider configured")
            latitude, longitude = await self._location_provider.current()

        except LocationUnavailableError as e:
            logger.warning("Device location unavailable", reason=str(e))
            self._fail(run_id, UnknownQueryError(LOCATION_FAILED_MESSAGE))
            return self._state

        except Exception:
            logger.exception("Unexpected error from location provider")
            self._fail(run_id, UnknownQueryError(LOCATION_FAILED_MESSAGE))
            return self._state

        try:
            client = self._client_factory()
            async with client:
                city = await LocationResolver(client).reverse(latitude, longitude)

        except QueryError as e:
            self._fail(run_id, e)
            return self._state

        except Exception:
            logger.exception("Unexpected error during reverse geocoding")
            self._fail(run_id, UnknownQueryError("Unable to get city name from location"))
            return self._state

        if run_id != self._latest_run:
            logger.debug("Location lookup superseded", run_id=run_id)
            return self._state

        return await self._run(city, refresh=False)

    def forget(self, city: str) -> DashboardState:
        """Remove a city from the search history."""
        history = remove_city(self._state.history, city)
        self._history_store.save(history)
        self._publish(history=history)
        return self._state

    async def close(self) -> None:
        """Cancel the run in flight and any pending notice dismissal.

        A run cancelled here leaves the dashboard IDLE, keeping the snapshot on
        display.
        """
        self._notices.cancel()
        if self._active is not None and not self._active.done():
            self._active.cancel()
            await asyncio.gather(self._active, return_exceptions=True)
            self._publish(status=PipelineStatus.IDLE)
        self._active = None

    async def _run(self, query: str, refresh: bool) -> DashboardState:
        run_id = self._begin()
        task = asyncio.ensure_future(self._execute(run_id, query, refresh))
        self._active = task

        try:
            await task
        except asyncio.CancelledError:
            if run_id == self._latest_run:
                raise
            logger.debug("Run superseded", run_id=run_id)
        finally:
            if self._active is task:
                self._active = None

        return self._state

    async def _execute(self, run_id: int, query: str, refresh: bool) -> None:
        try:
            client = self._client_factory()
            client.require_credential()
            cleaned = normalize_city(query)

            async with client:
                location = await LocationResolver(client).resolve(cleaned, raw_query=query)
                current, forecast = await fetch_conditions(client, location)

            snapshot = self._shape(run_id, location, current, forecast)

        except QueryError as e:
            logger.info("Weather query failed", kind=e.kind.value)
            self._fail(run_id, e)

        except Exception as e:
            logger.exception("Unexpected error in weather pipeline")
            self._fail(run_id, UnknownQueryError(str(e) or None))

        else:
            logger.info(
                "Weather query succeeded",
                city=location.resolved_name,
                hourly=len(snapshot.forecast.hourly),
                daily=len(snapshot.forecast.daily),
            )
            self._succeed(run_id, snapshot, refresh)

    def _shape(
        self,
        run_id: int,
        location: Location,
        current: CurrentWeatherPayload,
        forecast: ForecastPayload,
    ) -> WeatherSnapshot:
        try:
            conditions = build_current_conditions(current)
            bundle = build_forecast(
                current,
                forecast,
                now=self._clock(),
                tz=self._tz,
            )
            return WeatherSnapshot(
                run_id=run_id,
                location=location,
                current=conditions,
                forecast=bundle,
                insights=build_insights(bundle, conditions),
            )
        except ValidationError as e:
            logger.warning("Payload could not be shaped", errors=e.error_count())
            raise UpstreamMalformedError() from e

    def _begin(self) -> int:
        self._latest_run += 1
        if self._active is not None and not self._active.done():
            logger.info("Cancelling superseded run")
            self._active.cancel()
        self._active = None
        self._notices.cancel()
        self._publish(status=PipelineStatus.LOADING, error=None, notice=None)
        return self._latest_run

    def _succeed(self, run_id: int, snapshot: WeatherSnapshot, refresh: bool) -> None:
        if run_id != self._latest_run:
            logger.debug("Discarding result of superseded run", run_id=run_id)
            return

        notice = Notice(kind="success", message=REFRESH_SUCCESS_MESSAGE) if refresh else None
        self._publish(
            status=PipelineStatus.SUCCESS,
            snapshot=snapshot,
            error=None,
            notice=notice,
            last_resolved_city=snapshot.location.resolved_name,
        )
        if notice is not None:
            self._notices.schedule(notice)

    def _fail(self, run_id: int, error: QueryError) -> None:
        if run_id != self._latest_run:
            logger.debug("Discarding error of superseded run", run_id=run_id)
            return

        self._reject(error)

    def _reject(self, error: QueryError) -> None:
        """Publish an error without superseding the run in flight."""
        notice = Notice(kind="error", message=error.message)
        self._publish(status=PipelineStatus.FAILED, error=error, notice=notice)
        self._notices.schedule(notice)

    def _dismiss_notice(self, notice: Notice) -> None:
        if self._state.notice is notice:
            self._publish(notice=None)

    def _publish(self, **changes) -> None:
        self._state = self._state.model_copy(update=changes)
        for listener in list(self._listeners):
            listener(self._state)
