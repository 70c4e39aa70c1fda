"""Terminal front-end for the weather dashboard."""

import argparse
import asyncio
import sys
from datetime import datetime

from loguru import logger

from .core.config import LOG_LEVELS, settings
from .core.logging import setup_logging
from .models.dashboard import DashboardState, PipelineStatus
from .services.history import JsonFileHistoryStore
from .services.location import IpLocationProvider, StaticLocationProvider
from .services.pipeline import WeatherDashboard
from .services.transformer import format_time

HOURLY_ROWS = 6

HELP_TEXT = """Commands:
  <city> | search <city>   show the weather for a city
  refresh | r              reload the last city
  locate                   show the weather at your location
  history                  list recent searches
  forget <city>            remove a city from the history
  help                     show this text
  quit | exit              leave"""


def parse_coords(value: str) -> tuple[float, float]:
    """Parse ``LAT,LON`` into a coordinate pair.

    Example:
        >>> parse_coords("48.85, 2.35")
        (48.85, 2.35)
    """
    try:
        lat, lon = (float(part) for part in value.split(","))
    except ValueError as e:
        raise argparse.ArgumentTypeError(f"expected LAT,LON, got {value!r}") from e
    if not -90.0 <= lat <= 90.0 or not -180.0 <= lon <= 180.0:
        raise argparse.ArgumentTypeError(f"coordinates out of range: {value!r}")
    return lat, lon


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="skycast",
        description="Current conditions and short-term forecast from OpenWeatherMap",
    )
    parser.add_argument("city", nargs="?", help="City to look up (e.g. 'Paris, FR')")
    parser.add_argument(
        "--locate",
        action="store_true",
        help="Look up the weather at the current location (IP based unless --coords is given)",
    )
    parser.add_argument(
        "--coords",
        type=parse_coords,
        metavar="LAT,LON",
        help="Device coordinates used for --locate",
    )
    parser.add_argument(
        "-i",
        "--interactive",
        action="store_true",
        help="Start an interactive session (default when no city is given)",
    )
    parser.add_argument(
        "--no-locate",
        action="store_true",
        help="Do not look up the current location when an interactive session starts",
    )
    parser.add_argument("--json", action="store_true", help="Print the snapshot as JSON")
    parser.add_argument("--history-file", default=None, help="Path of the search history file")
    parser.add_argument(
        "--log-level",
        default=None,
        type=str.upper,
        choices=LOG_LEVELS,
        help="Override LOG_LEVEL",
    )
    return parser


def render_state(state: DashboardState, as_json: bool = False) -> str:
    """Render the dashboard state as text."""
    lines: list[str] = []

    if state.notice is not None:
        marker = "✔" if state.notice.kind == "success" else "✖"
        lines.append(f"{marker} {state.notice.message}")
    elif state.status is PipelineStatus.FAILED and state.error is not None:
        lines.append(f"✖ {state.error.message}")

    snapshot = state.snapshot
    if snapshot is None:
        return "\n".join(lines)

    if as_json:
        lines.append(snapshot.model_dump_json(indent=2))
        return "\n".join(lines)

    current = snapshot.current
    forecast = snapshot.forecast
    insights = snapshot.insights
    place = current.location_name
    if current.country_code:
        place = f"{place}, {current.country_code}"

    lines.append(f"{insights.glyph}  {place}  ({forecast.current_display_time})")
    lines.append(
        f"   {round(current.temperature_c)}°C  {current.condition_description or current.condition_main}"
        f"  feels like {round(current.feels_like_c)}°"
    )
    lines.append(f"   High {round(current.max_c)}° / Low {round(current.min_c)}°")
    lines.append(
        f"   Humidity {current.humidity_pct}%  Wind {current.wind_speed:g} m/s"
        f"  Pressure {current.pressure} hPa"
    )
    if current.visibility_m is not None:
        lines.append(f"   Visibility {current.visibility_m / 1000:.1f} km")
    lines.append(
        f"   Sunrise {format_time(current.sunrise_epoch)}  Sunset {format_time(current.sunset_epoch)}"
    )
    lines.append(
        f"   UV {insights.uv_average:g} ({insights.uv_level})"
        f"  Rain {insights.rain_chance_average_pct}% ({insights.rain_status})"
    )

    if forecast.hourly:
        lines.append("")
        lines.append("Next hours")
        for point in forecast.hourly[:HOURLY_ROWS]:
            lines.append(
                f"   {point.time_label}  {round(point.temperature_c):>4}°  "
                f"{round(point.probability_of_precipitation * 100):>3}%  {point.condition.main}"
            )

    if forecast.daily:
        lines.append("")
        lines.append("Coming days")
        for day in forecast.daily:
            label = datetime.fromtimestamp(day.epoch).strftime("%a %d %b")
            lines.append(f"   {label}  {round(day.temp_day):>4}°  {day.condition_main}")

    return "\n".join(lines)


def _location_provider(args: argparse.Namespace):
    if args.coords is not None:
        return StaticLocationProvider(*args.coords)
    return IpLocationProvider()


async def _interactive(dashboard: WeatherDashboard, args: argparse.Namespace) -> int:
    print(HELP_TEXT)
    if not args.no_locate:
        print(render_state(await dashboard.locate(), args.json))

    while True:
        try:
            line = (await asyncio.to_thread(input, "skycast> ")).strip()
        except EOFError:
            print()
            return 0

        if not line:
            continue
        command, _, rest = line.partition(" ")
        command = command.lower()
        rest = rest.strip()

        if command in {"quit", "exit"}:
            return 0
        if command == "help":
            print(HELP_TEXT)
        elif command in {"refresh", "r"}:
            print(render_state(await dashboard.refresh(), args.json))
        elif command == "locate":
            print(render_state(await dashboard.locate(), args.json))
        elif command == "history":
            print("\n".join(dashboard.state.history) or "No recent searches")
        elif command == "forget":
            dashboard.forget(rest)
            print("\n".join(dashboard.state.history) or "No recent searches")
        elif command == "search":
            print(render_state(await dashboard.search(rest), args.json))
        else:
            print(render_state(await dashboard.search(line), args.json))


async def run(args: argparse.Namespace) -> int:
    """Run the command described by parsed arguments; returns the exit code."""
    history_file = args.history_file or settings.HISTORY_FILE
    dashboard = WeatherDashboard(
        history_store=JsonFileHistoryStore(history_file, limit=settings.HISTORY_LIMIT),
        location_provider=_location_provider(args),
    )

    try:
        if args.interactive or (args.city is None and not args.locate):
            return await _interactive(dashboard, args)

        if args.city is not None:
            state = await dashboard.search(args.city)
        else:
            state = await dashboard.locate()

        output = render_state(state, args.json)
        if state.status is PipelineStatus.SUCCESS:
            print(output)
            return 0
        print(output, file=sys.stderr)
        return 1
    finally:
        await dashboard.close()


def main(argv: list[str] | None = None) -> int:
    """Console entry point."""
    args = build_parser().parse_args(argv)
    setup_logging(args.log_level)

    logger.debug(
        "Configuration loaded",
        base_url=settings.OPENWEATHER_BASE_URL,
        timeout=settings.UPSTREAM_TIMEOUT,
        units=settings.UNITS,
        api_key_configured=settings.OPENWEATHER_API_KEY is not None,
        # Do NOT log the API key
    )

    try:
        return asyncio.run(run(args))
    except KeyboardInterrupt:
        return 130


if __name__ == "__main__":
    sys.exit(main())
