"""WeatherAPI.com forecast client with an in-memory, per-place cache."""
from __future__ import annotations

import asyncio
import logging

import httpx
from pydantic import ValidationError

from forecastpanel.cache import ForecastCache
from forecastpanel.config import settings
from forecastpanel.models import ForecastResult

log = logging.getLogger(__name__)

DEFAULT_EXPIRE_MS = 10 * 60 * 1000


class ForecastError(Exception):
    """Base class for errors raised by this module itself."""


class MalformedForecastError(ForecastError):
    """Upstream answered 2xx but the body is not a forecast payload."""

    def __init__(self, place: str, reason: str) -> None:
        super().__init__(f"Malformed forecast for {place!r}: {reason}")
        self.place = place


class ForecastClient:
    """Fetch forecasts for a place, serving repeats from the cache.

    A fresh cache hit returns the stored ``ForecastResult`` itself without any
    network I/O.  A miss issues exactly one ``forecast.json`` request; only a
    successful, schema-valid response is cached.  Errors propagate unchanged
    (``httpx.RequestError``, ``httpx.HTTPStatusError``) except a bad body,
    which raises ``MalformedForecastError``.

    With ``single_flight`` on, concurrent misses for one place share a single
    request; otherwise each caller fetches and the last completion wins.
    """

    def __init__(
        self,
        client: httpx.AsyncClient,
        *,
        api_key: str | None = None,
        base_url: str | None = None,
        expire_time_ms: int = DEFAULT_EXPIRE_MS,
        cache: ForecastCache | None = None,
        single_flight: bool = False,
    ) -> None:
        self._client = client
        self.api_key = settings.WEATHER_API_KEY if api_key is None else api_key
        self.base_url = base_url or settings.WEATHER_API_BASE_URL
        if not self.base_url.endswith("/"):
            self.base_url += "/"
        self.expire_time_ms = expire_time_ms
        self.cache = cache if cache is not None else ForecastCache()
        self.single_flight = single_flight
        self._inflight: dict[str, asyncio.Task[ForecastResult]] = {}

    @property
    def forecast_url(self) -> str:
        return f"{self.base_url}forecast.json"

    async def fetch_forecast(
        self, place: str, *, expire_time_ms: int | None = None
    ) -> ForecastResult:
        """Return the forecast for *place* from cache or upstream."""
        expire = self.expire_time_ms if expire_time_ms is None else expire_time_ms
        if expire < 0:
            raise ValueError("expire_time_ms must be >= 0")

        entry = self.cache.get_fresh(place, expire)
        if entry is not None:
            log.debug("Cache hit for %r (age %d ms)", place, entry.age_ms(self.cache.clock()))
            return entry.data

        if not self.single_flight:
            return await self._fetch_and_store(place)

        task = self._inflight.get(place)
        if task is None:
            task = asyncio.ensure_future(self._fetch_and_store(place))
            self._inflight[place] = task
            task.add_done_callback(lambda t, p=place: self._forget(p, t))
        else:
            log.debug("Joining in-flight request for %r", place)
        # Callers that give up must not cancel the request others wait on
        return await asyncio.shield(task)

    def clear_cache(self) -> int:
        return self.cache.clear()

    def describe_error(self, exc: Exception) -> str:
        """Loggable summary of *exc* that never contains the API key."""
        if isinstance(exc, httpx.HTTPStatusError):
            text = f"HTTP {exc.response.status_code} {exc.response.reason_phrase}"
        else:
            text = f"{type(exc).__name__}: {exc}"
        if self.api_key:
            text = text.replace(self.api_key, "***")
        return text

    def _forget(self, place: str, task: asyncio.Task[ForecastResult]) -> None:
        if self._inflight.get(place) is task:
            del self._inflight[place]
        # every waiter may have been cancelled; mark the outcome as seen
        if not task.cancelled():
            task.exception()

    async def _fetch_and_store(self, place: str) -> ForecastResult:
        params = {"key": self.api_key, "q": place}
        log.debug("Fetching forecast for %r", place)
        resp = await self._client.get(self.forecast_url, params=params)
        try:
            resp.raise_for_status()
        except httpx.HTTPStatusError:
            log.warning(
                "Forecast for %r failed: HTTP %d %s",
                place, resp.status_code, resp.text[:200],
            )
            raise

        try:
            data = ForecastResult.model_validate(resp.json())
        except ValueError as e:
            # covers both JSON decode errors and ValidationError
            log.warning("Forecast for %r has an unexpected shape: %s", place, e)
            reason = (
                f"{e.error_count()} validation error(s)"
                if isinstance(e, ValidationError)
                else "body is not JSON"
            )
            raise MalformedForecastError(place, reason) from e

        self.cache.set(place, data)
        log.info("Cached forecast for %r (%d day(s))", place, len(data.forecast.forecastday))
        return data
