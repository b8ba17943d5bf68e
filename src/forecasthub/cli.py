# connects input (city names) to the service and prints current conditions and the forecast

from __future__ import annotations
import argparse
import logging
import sys
from datetime import date
from typing import Any, Dict, List, Optional
from .client import OpenWeatherClient, WeatherAPIError
from .config import ConfigError, load_settings
from .models import MalformedSampleError, icon_url, round_half_up
from .service import fetch_many


def _temp(value: Any) -> str:
    return "-" if value is None else f"{round_half_up(value)}°"


def format_day(day: Dict[str, Any], icons: bool = False) -> str:
    # "Thu Aug 28   25° /  20°  clear sky"
    label = date.fromisoformat(day["date"]).strftime("%a %b %d")
    line = f"{label}  {_temp(day['maxTemp']):>4} / {_temp(day['minTemp']):>4}  {day['description']}"
    url = icon_url(day.get("icon")) if icons else None
    return f"{line}  {url}" if url else line


def format_weather(data: Dict[str, Any], icons: bool = False) -> List[str]:
    main = data.get("main") or {}
    weather = (data.get("weather") or [{}])[0]
    wind = (data.get("wind") or {}).get("speed")
    clouds = (data.get("clouds") or {}).get("all", "-")

    name = data.get("name", "?")
    country = (data.get("sys") or {}).get("country")
    place = f"{name}, {country}" if country else name

    lines = [
        f"{place}: {_temp(main.get('temp'))}C, {weather.get('description', '')}",
        f"  feels like {_temp(main.get('feels_like'))}C, humidity {main.get('humidity', '-')}%, "
        f"wind {'-' if wind is None else wind} m/s, clouds {clouds}%",
    ]
    forecast = data.get("forecast") or []
    if not forecast:
        lines.append("  5-day forecast not available")
    for day in forecast:
        lines.append("  " + format_day(day, icons))
    return lines


def main(argv: Optional[List[str]] = None) -> int:
    parser = argparse.ArgumentParser(prog="forecasthub", description="Current weather and a 5-day forecast.")
    parser.add_argument("cities", nargs="*", help="city names (default: FORECASTHUB_DEFAULT_CITY or Lagos)")
    parser.add_argument("--icons", action="store_true", help="print forecast icon URLs")
    parser.add_argument("-v", "--verbose", action="store_true", help="debug logging")
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    try:
        settings = load_settings()
        with OpenWeatherClient(settings.api_key, timeout=settings.timeout, units=settings.units) as client:
            results = fetch_many(client, args.cities or [settings.default_city])
    except (ConfigError, WeatherAPIError, MalformedSampleError) as exc:
        print(f"error: {exc}", file=sys.stderr)
        return 1

    for data in results:
        print("\n".join(format_weather(data, args.icons)))
    return 0


if __name__ == "__main__":
    sys.exit(main())
