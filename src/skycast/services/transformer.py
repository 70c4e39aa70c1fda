"""Shaping of raw OpenWeatherMap payloads into the dashboard view-model.

Everything in this module is pure: the same payloads, ``now`` and ``tz`` always
produce equal results, and inputs are never modified.
"""

from datetime import datetime, tzinfo

from ..core.config import settings
from ..models.weather import (
    CurrentConditions,
    CurrentWeatherPayload,
    DailyPoint,
    ForecastBundle,
    ForecastEntry,
    ForecastInsights,
    ForecastPayload,
    HourlyPoint,
)

INSIGHT_HOURS = 6

TIME_FORMAT = "%I:%M %p"

CONDITION_GLYPHS = {
    "Clear": "☀️",
    "Clouds": "⛅",
    "Rain": "🌧️",
    "Drizzle": "🌦️",
    "Thunderstorm": "⛈️",
    "Snow": "❄️",
    "Mist": "🌫️",
    "Fog": "🌫️",
    "Haze": "🌫️",
}
DEFAULT_GLYPH = "🌤️"


def format_time(epoch: int | float, tz: tzinfo | None = None) -> str:
    """Format a Unix timestamp as a 12-hour clock label.

    Example:
        >>> from datetime import timezone
        >>> format_time(1700000000, timezone.utc)
        '10:13 PM'
    """
    return datetime.fromtimestamp(epoch, tz).strftime(TIME_FORMAT)


def build_current_conditions(current: CurrentWeatherPayload) -> CurrentConditions:
    """Map the current-weather payload field for field."""
    condition = current.weather[0]
    return CurrentConditions(
        location_name=current.name,
        country_code=current.sys.country,
        temperature_c=current.main.temp,
        feels_like_c=current.main.feels_like,
        min_c=current.main.temp_min,
        max_c=current.main.temp_max,
        humidity_pct=current.main.humidity,
        wind_speed=current.wind.speed,
        pressure=current.main.pressure,
        visibility_m=current.visibility,
        sunrise_epoch=current.sys.sunrise,
        sunset_epoch=current.sys.sunset,
        condition_main=condition.main,
        condition_description=condition.description,
        condition_icon=condition.icon,
    )


def _hourly_point(entry: ForecastEntry, tz: tzinfo | None) -> HourlyPoint:
    return HourlyPoint(
        epoch=entry.dt,
        time_label=format_time(entry.dt, tz),
        temperature_c=entry.main.temp,
        condition=entry.weather[0],
        probability_of_precipitation=entry.pop or 0.0,
        # The 3-hour feed carries no UV data; uvi is only read if present
        uv_index=entry.main.uvi or 0.0,
        humidity_pct=entry.main.humidity,
        wind_speed=entry.wind.speed,
    )


def _daily_point(entry: ForecastEntry) -> DailyPoint:
    condition = entry.weather[0]
    return DailyPoint(
        epoch=entry.dt,
        temp_day=entry.main.temp,
        temp_min=entry.main.temp_min,
        temp_max=entry.main.temp_max,
        condition_main=condition.main,
        condition_description=condition.description,
        condition_icon=condition.icon,
        humidity_pct=entry.main.humidity,
        wind_speed=entry.wind.speed,
    )


def build_forecast(
    current: CurrentWeatherPayload,
    forecast: ForecastPayload,
    now: datetime,
    tz: tzinfo | None = None,
    hourly_window: int | None = None,
    daily_stride: int | None = None,
    daily_limit: int | None = None,
) -> ForecastBundle:
    """Build the forecast bundle from one fetch cycle.

    Hourly points are the first ``hourly_window`` feed entries in feed order.
    Daily points are the entries at indices 0, stride, 2*stride, ... capped at
    ``daily_limit``; each keeps the sample's own temperatures rather than a
    true daily aggregate. The feed has 3-hour slots, so the default stride of 8
    is one sample per day.

    Args:
        current: Current-weather payload (source of sunrise/sunset)
        forecast: Forecast payload from the same cycle
        now: Moment of the fetch, shown as the current display time
        tz: Timezone for time labels; None means the local timezone
        hourly_window: Defaults to settings.HOURLY_WINDOW
        daily_stride: Defaults to settings.DAILY_STRIDE
        daily_limit: Defaults to settings.DAILY_LIMIT

    Returns:
        ForecastBundle

    Example:
        >>> # len(bundle.hourly) == min(24, len(feed))
        >>> # bundle.daily[i].epoch == feed[i * 8].dt
    """
    hourly_window = hourly_window or settings.HOURLY_WINDOW
    daily_stride = daily_stride or settings.DAILY_STRIDE
    daily_limit = daily_limit or settings.DAILY_LIMIT

    entries = forecast.entries
    hourly = tuple(_hourly_point(entry, tz) for entry in entries[:hourly_window])
    daily = tuple(_daily_point(entry) for entry in entries[::daily_stride][:daily_limit])

    current_time = now.astimezone(tz) if now.tzinfo is not None else now

    return ForecastBundle(
        hourly=hourly,
        daily=daily,
        current_display_time=current_time.strftime(TIME_FORMAT),
        sunrise_epoch=current.sys.sunrise,
        sunset_epoch=current.sys.sunset,
    )


def uv_level(value: float) -> str:
    """Name the UV exposure band.

    Example:
        >>> uv_level(0), uv_level(6.5), uv_level(11)
        ('Low', 'High', 'Extreme')
    """
    if value <= 2:
        return "Low"
    if value <= 5:
        return "Moderate"
    if value <= 7:
        return "High"
    if value <= 10:
        return "Very High"
    return "Extreme"


def precipitation_status(percent: float) -> str:
    if percent == 0:
        return "No precipitation"
    if percent < 20:
        return "Light precipitation"
    if percent < 50:
        return "Moderate precipitation"
    return "Heavy precipitation"


def condition_glyph(condition_main: str) -> str:
    return CONDITION_GLYPHS.get(condition_main, DEFAULT_GLYPH)


def build_insights(
    forecast: ForecastBundle,
    current: CurrentConditions,
    hours: int = INSIGHT_HOURS,
) -> ForecastInsights:
    """Summarize UV and rain chance over the first ``hours`` hourly points."""
    window = forecast.hourly[:hours]
    uv_values = [point.uv_index for point in window]
    rain_values = [point.probability_of_precipitation * 100 for point in window]

    uv_average = round(sum(uv_values) / len(uv_values), 1) if uv_values else 0.0
    rain_average = round(sum(rain_values) / len(rain_values)) if rain_values else 0

    return ForecastInsights(
        uv_average=uv_average,
        uv_max=max(uv_values, default=0.0),
        uv_level=uv_level(uv_average),
        rain_chance_average_pct=rain_average,
        rain_chance_max_pct=round(max(rain_values, default=0)),
        rain_status=precipitation_status(rain_average),
        glyph=condition_glyph(current.condition_main),
    )
