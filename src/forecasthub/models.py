# models and small numeric helpers that keep forecast data shapes explicit

from __future__ import annotations
import math
from dataclasses import dataclass
from typing import Any, Dict, Optional


class MalformedSampleError(ValueError):
    # raised when a raw forecast sample breaks the provider contract
    pass


@dataclass(frozen=True)
class Condition:
    main: str
    icon: str
    description: str

    @property
    def key(self) -> tuple:
        return (self.main, self.icon, self.description)


@dataclass(frozen=True)
class ForecastSample:
    # one 3-hour interval from the forecast endpoint
    timestamp_text: str
    temperature: Optional[float]
    humidity: Optional[float]
    condition: Condition

    @property
    def date(self) -> str:
        # "2025-08-27 12:00:00" -> "2025-08-27"
        return self.timestamp_text[:10]

    @classmethod
    def from_payload(cls, item: Dict[str, Any]) -> "ForecastSample":
        # openweather shape: item["dt_txt"], item["main"]["temp"], item["weather"][0]["icon"]
        weather = item.get("weather")
        if not weather:
            raise MalformedSampleError(f"Forecast sample without weather conditions: {item.get('dt_txt')!r}")
        try:
            timestamp_text = item["dt_txt"]
        except KeyError as exc:
            raise MalformedSampleError("Forecast sample without dt_txt") from exc

        main = item.get("main") or {}
        temp = main.get("temp")
        humidity = main.get("humidity")
        first = weather[0]
        return cls(
            timestamp_text=timestamp_text,
            temperature=float(temp) if _is_number(temp) else None,
            humidity=float(humidity) if _is_number(humidity) else None,
            condition=Condition(
                main=first.get("main", ""),
                icon=first.get("icon", ""),
                description=first.get("description", ""),
            ),
        )


@dataclass(frozen=True)
class DailySummary:
    # output value object, one per forecast day
    date: str
    min_temp: Optional[int]
    max_temp: Optional[int]
    humidity: Optional[int]
    main: str
    icon: str
    description: str

    def to_dict(self) -> Dict[str, Any]:
        return {
            "date": self.date,
            "minTemp": self.min_temp,
            "maxTemp": self.max_temp,
            "humidity": self.humidity,
            "main": self.main,
            "icon": self.icon,
            "description": self.description,
        }


def _is_number(value: Any) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool)


def round_half_up(value: Optional[float]) -> Optional[int]:
    # halves go toward +inf: 2.5 -> 3, -2.5 -> -2
    if value is None or not math.isfinite(value):
        return None
    floor = math.floor(value)
    # value - floor is exact, value + 0.5 can round up just below a half
    return floor + 1 if value - floor >= 0.5 else floor


def icon_url(icon: Optional[str]) -> Optional[str]:
    if not icon:
        return None
    return f"https://openweathermap.org/img/wn/{icon}@2x.png"
