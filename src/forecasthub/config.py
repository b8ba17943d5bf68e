# the only place that reads the process environment
# values are resolved once and handed to the client and cli explicitly

from __future__ import annotations
import os
from dataclasses import dataclass
from typing import Mapping, Optional
from dotenv import load_dotenv

DEFAULT_CITY = "Lagos"
DEFAULT_TIMEOUT = 10.0
DEFAULT_UNITS = "metric"


class ConfigError(RuntimeError):
    pass


@dataclass(frozen=True)
class Settings:
    api_key: str
    default_city: str = DEFAULT_CITY
    timeout: float = DEFAULT_TIMEOUT
    units: str = DEFAULT_UNITS


def load_settings(environ: Optional[Mapping[str, str]] = None) -> Settings:
    if environ is None:
        load_dotenv()  # in production the variables come from the deployment environment
        environ = os.environ

    api_key = environ.get("OPENWEATHER_API_KEY", "").strip()
    if not api_key:
        raise ConfigError("Missing OpenWeather API key (set OPENWEATHER_API_KEY)")

    raw_timeout = environ.get("FORECASTHUB_TIMEOUT", str(DEFAULT_TIMEOUT))
    try:
        timeout = float(raw_timeout)
    except ValueError as exc:
        raise ConfigError(f"FORECASTHUB_TIMEOUT must be a number (got {raw_timeout!r})") from exc
    if timeout <= 0:
        raise ConfigError(f"FORECASTHUB_TIMEOUT must be positive (got {timeout})")

    return Settings(
        api_key=api_key,
        default_city=environ.get("FORECASTHUB_DEFAULT_CITY") or DEFAULT_CITY,
        timeout=timeout,
        units=environ.get("FORECASTHUB_UNITS") or DEFAULT_UNITS,
    )
