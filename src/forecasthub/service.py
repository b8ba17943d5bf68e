# orchestration and business rules
# pure functions (bucketize, summarize, build_forecast) turn raw 3-hour samples into daily summaries
# fetch_weather runs the two network calls concurrently and tolerates a failed forecast request

from __future__ import annotations
import logging
from collections import OrderedDict
from concurrent.futures import Executor, Future, ThreadPoolExecutor
from datetime import datetime, timezone
from typing import Any, Dict, Iterable, List, Optional, Sequence
from .models import DailySummary, ForecastSample, round_half_up
from .client import OpenWeatherClient, WeatherAPIError

logger = logging.getLogger(__name__)

FORECAST_DAYS = 5


def parse_samples(items: Optional[Iterable[Dict[str, Any]]]) -> List[ForecastSample]:
    # MalformedSampleError propagates, a sample without conditions is an upstream bug
    return [ForecastSample.from_payload(item) for item in items or []]


def today_from_current(current: Dict[str, Any]) -> str:
    # observation time is unix seconds, the day is taken in UTC like dt_txt
    return datetime.fromtimestamp(current["dt"], tz=timezone.utc).strftime("%Y-%m-%d")


def bucketize(samples: Sequence[ForecastSample], today_date: str) -> "OrderedDict[str, List[ForecastSample]]":
    groups: Dict[str, List[ForecastSample]] = {}
    for sample in samples:
        groups.setdefault(sample.date, []).append(sample)

    # YYYY-MM-DD sorts lexicographically in calendar order
    dates = sorted(d for d in groups if d != today_date)[:FORECAST_DAYS]
    return OrderedDict((d, groups[d]) for d in dates)


def summarize(date: str, samples: Sequence[ForecastSample]) -> DailySummary:
    if not samples:
        return DailySummary(date=date, min_temp=None, max_temp=None, humidity=None,
                            main="", icon="", description="")

    temps = [s.temperature for s in samples if s.temperature is not None]
    # missing humidity counts as 0 but still counts toward the divisor
    humidity_sum = sum(s.humidity or 0 for s in samples)

    counts: Dict[tuple, int] = {}
    conditions = {}
    for s in samples:
        key = s.condition.key
        counts[key] = counts.get(key, 0) + 1
        conditions.setdefault(key, s.condition)

    # dicts keep insertion order and max() returns the first maximal key, so ties go to the first seen
    predominant = conditions[max(counts, key=counts.get)]

    return DailySummary(
        date=date,
        min_temp=round_half_up(min(temps)) if temps else None,
        max_temp=round_half_up(max(temps)) if temps else None,
        humidity=round_half_up(humidity_sum / len(samples)),
        main=predominant.main,
        icon=predominant.icon,
        description=predominant.description,
    )


def build_forecast(current: Dict[str, Any], forecast_list: Optional[Iterable[Dict[str, Any]]]) -> List[DailySummary]:
    samples = parse_samples(forecast_list)
    if not samples:
        return []
    buckets = bucketize(samples, today_from_current(current))
    return [summarize(date, day_samples) for date, day_samples in buckets.items()]


def attach_forecast(current: Dict[str, Any], forecast: List[DailySummary]) -> Dict[str, Any]:
    # the current payload passes through unchanged apart from the forecast key
    result = dict(current)
    result["forecast"] = [day.to_dict() for day in forecast]
    return result


def _collect(city: str, current_fut: Future, forecast_fut: Future) -> Dict[str, Any]:
    # current conditions are required, let their error propagate
    current = current_fut.result()
    try:
        forecast_payload = forecast_fut.result()
    except WeatherAPIError as exc:
        logger.warning("Forecast unavailable for %r, returning current conditions only: %s", city, exc)
        return attach_forecast(current, [])

    forecast = build_forecast(current, forecast_payload.get("list"))
    logger.debug("Built %d forecast days for %r", len(forecast), city)
    return attach_forecast(current, forecast)


# single city path: fetch both -> bucket -> summarize -> attach
def fetch_weather(client: OpenWeatherClient, city: str, executor: Optional[Executor] = None) -> Dict[str, Any]:
    if executor is not None:
        return _collect(city, executor.submit(client.get_current, city), executor.submit(client.get_forecast, city))
    with ThreadPoolExecutor(max_workers=2) as pool:
        return fetch_weather(client, city, pool)


# reuse a single client and pool, each worker keeps its own thread-local http session across cities
def fetch_many(client: OpenWeatherClient, cities: Sequence[str], max_workers: int = 3) -> List[Dict[str, Any]]:
    with ThreadPoolExecutor(max_workers=max_workers) as pool:
        # every request is queued up front, results are collected here in the caller's order
        pending = [(city, pool.submit(client.get_current, city), pool.submit(client.get_forecast, city))
                   for city in cities]
        return [_collect(city, current_fut, forecast_fut) for city, current_fut, forecast_fut in pending]
