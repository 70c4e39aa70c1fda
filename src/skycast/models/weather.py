"""Weather data models: raw OpenWeatherMap payloads and the dashboard view-model."""

from pydantic import BaseModel, ConfigDict, Field


class _Frozen(BaseModel):
    model_config = ConfigDict(frozen=True)


# Raw OpenWeatherMap payloads


class GeocodeEntry(_Frozen):
    """One match from the direct or reverse geocoding endpoint.

    Example:
        >>> GeocodeEntry(lat=48.8589, lon=2.32, name="Paris", country="FR").name
        'Paris'
    """

    lat: float
    lon: float
    name: str
    country: str | None = None
    state: str | None = None


class WeatherCondition(_Frozen):
    """Weather condition object (``weather[0]`` in every payload)."""

    main: str
    description: str = ""
    icon: str = ""


class Wind(_Frozen):
    speed: float = 0.0


class CurrentMain(_Frozen):
    temp: float
    feels_like: float
    temp_min: float
    temp_max: float
    humidity: int
    pressure: int


class CurrentSys(_Frozen):
    country: str | None = None
    sunrise: int
    sunset: int


class CurrentWeatherPayload(_Frozen):
    """Response of ``/data/2.5/weather``.

    Example:
        >>> payload = CurrentWeatherPayload(
        ...     name="Paris",
        ...     sys={"country": "FR", "sunrise": 1700000000, "sunset": 1700030000},
        ...     main={"temp": 11.2, "feels_like": 10.1, "temp_min": 9.8,
        ...           "temp_max": 12.4, "humidity": 81, "pressure": 1012},
        ...     weather=[{"main": "Clouds", "description": "broken clouds", "icon": "04d"}],
        ...     wind={"speed": 4.1},
        ...     visibility=10000,
        ... )
        >>> payload.weather[0].main
        'Clouds'
    """

    name: str
    sys: CurrentSys
    main: CurrentMain
    weather: list[WeatherCondition] = Field(..., min_length=1)
    wind: Wind = Wind()
    visibility: int | None = None


class ForecastMain(_Frozen):
    temp: float
    temp_min: float
    temp_max: float
    humidity: int
    uvi: float | None = None


class ForecastEntry(_Frozen):
    """One 3-hour slot of the forecast feed."""

    dt: int
    main: ForecastMain
    weather: list[WeatherCondition] = Field(..., min_length=1)
    wind: Wind = Wind()
    pop: float | None = None


class ForecastPayload(_Frozen):
    """Response of ``/data/2.5/forecast``; ``list`` is the 3-hour feed."""

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    entries: list[ForecastEntry] = Field(..., alias="list")


# Dashboard view-model


class Location(_Frozen):
    """A resolved query location.

    Example:
        >>> loc = Location(raw_query=" paris, fr", cleaned_name="paris",
        ...                latitude=48.8589, longitude=2.32, resolved_name="Paris")
        >>> loc.resolved_name
        'Paris'
    """

    raw_query: str = Field(..., description="String as typed by the user")
    cleaned_name: str = Field(..., description="Normalized query sent to the geocoder")
    latitude: float = Field(..., ge=-90.0, le=90.0)
    longitude: float = Field(..., ge=-180.0, le=180.0)
    resolved_name: str = Field(..., description="Authoritative display name from the geocoder")


class CurrentConditions(_Frozen):
    """Current conditions, derived 1:1 from the current-weather payload."""

    location_name: str
    country_code: str | None = None
    temperature_c: float
    feels_like_c: float
    min_c: float
    max_c: float
    humidity_pct: int
    wind_speed: float
    pressure: int
    visibility_m: int | None = None
    sunrise_epoch: int
    sunset_epoch: int
    condition_main: str
    condition_description: str
    condition_icon: str


class HourlyPoint(_Frozen):
    """One entry of the hourly window."""

    epoch: int
    time_label: str = Field(..., description="Local time of the slot, e.g. '03:00 PM'")
    temperature_c: float
    condition: WeatherCondition
    probability_of_precipitation: float = Field(0.0, ge=0.0, le=1.0)
    uv_index: float = 0.0
    humidity_pct: int
    wind_speed: float


class DailyPoint(_Frozen):
    """One sampled day. Temperatures are the sample's instantaneous values."""

    epoch: int
    temp_day: float
    temp_min: float
    temp_max: float
    condition_main: str
    condition_description: str
    condition_icon: str
    humidity_pct: int
    wind_speed: float


class ForecastBundle(_Frozen):
    """Hourly and daily forecast plus the current display time."""

    hourly: tuple[HourlyPoint, ...]
    daily: tuple[DailyPoint, ...]
    current_display_time: str
    sunrise_epoch: int
    sunset_epoch: int


class ForecastInsights(_Frozen):
    """Summary cards computed over the first hours of the forecast."""

    uv_average: float
    uv_max: float
    uv_level: str
    rain_chance_average_pct: int
    rain_chance_max_pct: int
    rain_status: str
    glyph: str


class WeatherSnapshot(_Frozen):
    """Everything one successful pipeline run publishes, as one unit."""

    run_id: int
    location: Location
    current: CurrentConditions
    forecast: ForecastBundle
    insights: ForecastInsights
