# OOP boundary for external i/o
# all http and auth details live here, so the aggregation code stays pure and testable
# each ThreadPoolExecutor worker gets its own thread-local session

from __future__ import annotations
import logging
import threading
from typing import Any, Dict, List
import requests

logger = logging.getLogger(__name__)


class WeatherAPIError(RuntimeError):
    # single error type used to propagate clear messages from this layer
    pass


class CityNotFoundError(WeatherAPIError):
    pass


class OpenWeatherClient:
    # provider details: base URL, params, auth
    BASE_URL = "https://api.openweathermap.org/data/2.5"
    DEFAULT_TIMEOUT = 10.0

    def __init__(
        self,
        api_key: str,
        timeout: float = DEFAULT_TIMEOUT,
        units: str = "metric",
        user_agent: str = "forecasthub/0.1",
    ):
        if not api_key:
            raise WeatherAPIError("Missing OpenWeather API key")

        self.api_key = api_key
        self.timeout = timeout
        self.units = units
        self.user_agent = user_agent

        # each worker thread lazily obtains its own session through _session()
        self._local = threading.local()
        # every session built by any thread, so close() can release them all
        self._sessions: List[requests.Session] = []
        self._lock = threading.Lock()

    def __enter__(self) -> "OpenWeatherClient":
        return self

    def __exit__(self, *exc_info) -> None:
        self.close()

    def close(self) -> None:
        with self._lock:
            sessions, self._sessions = self._sessions, []
        for s in sessions:
            s.close()
        self._local = threading.local()

    def _build_session(self) -> requests.Session:
        s = requests.Session()
        s.headers.update({"User-Agent": self.user_agent})
        return s

    def _session(self) -> requests.Session:
        sess = getattr(self._local, "session", None)
        if sess is None:
            sess = self._build_session()
            self._local.session = sess
            with self._lock:
                self._sessions.append(sess)
        return sess

    def _get(self, endpoint: str, city: str) -> Dict[str, Any]:
        params = {"q": city, "appid": self.api_key, "units": self.units}
        url = f"{self.BASE_URL}/{endpoint}"
        logger.debug("GET %s q=%r units=%s", url, city, self.units)

        try:
            resp = self._session().get(url, params=params, timeout=self.timeout)
        except requests.RequestException as exc:
            raise WeatherAPIError(f"Request error for {city!r} ({endpoint}): {exc}") from exc

        if resp.status_code == 404:
            raise CityNotFoundError(f"City not found: {city!r}")
        if resp.status_code >= 400:
            # short body snippet speeds up triage
            snippet = (resp.text or "")[:300]
            raise WeatherAPIError(f"HTTP {resp.status_code} for {city!r} ({endpoint}). Body: {snippet}")

        try:
            data = resp.json()
        except ValueError as exc:
            raise WeatherAPIError(f"Invalid JSON for {city!r} ({endpoint}): {exc}") from exc

        if not isinstance(data, dict):
            raise WeatherAPIError(f"Unexpected API shape for {city!r} ({endpoint}): expected an object")
        return data

    def get_current(self, city: str) -> Dict[str, Any]:
        data = self._get("weather", city)
        # the forecast day selection needs the observation time
        if not isinstance(data.get("dt"), (int, float)):
            raise WeatherAPIError("Unexpected API shape: missing dt in current conditions")
        return data

    def get_forecast(self, city: str) -> Dict[str, Any]:
        data = self._get("forecast", city)
        if not isinstance(data.get("list", []), list):
            raise WeatherAPIError("Unexpected API shape: forecast list is not an array")
        return data
