"""ForecastPanel — cached WeatherAPI.com forecasts over a small local API."""
from __future__ import annotations

import asyncio
import logging
from contextlib import asynccontextmanager

import httpx
from fastapi import Depends, FastAPI

from forecastpanel.auth import verify_api_key
from forecastpanel.cache import ForecastCache
from forecastpanel.config import Settings, settings
from forecastpanel.routes import forecast as forecast_routes
from forecastpanel.routes import health
from forecastpanel.services.weatherapi import ForecastClient

logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)
log = logging.getLogger("forecastpanel")


async def _warm_loop(
    client: ForecastClient,
    place: str,
    interval: int,
    initial_delay: float = 0.0,
):
    """Keep *place* cached: fetch through the normal cache path every *interval* s."""
    if initial_delay:
        await asyncio.sleep(initial_delay)
    while True:
        try:
            await client.fetch_forecast(place)
            log.debug("Warmed %s", place)
        except asyncio.CancelledError:
            break
        except Exception as e:
            log.warning("Warm-up for %s failed: %s", place, client.describe_error(e))
        await asyncio.sleep(interval)


@asynccontextmanager
async def lifespan(app: FastAPI):
    Settings.validate()

    http = httpx.AsyncClient(timeout=httpx.Timeout(settings.HTTP_TIMEOUT))
    forecast = ForecastClient(
        http,
        api_key=settings.WEATHER_API_KEY,
        base_url=settings.WEATHER_API_BASE_URL,
        expire_time_ms=settings.FORECAST_EXPIRE_MS,
        cache=ForecastCache(max_entries=settings.FORECAST_CACHE_MAX_ENTRIES),
        single_flight=settings.FORECAST_SINGLE_FLIGHT,
    )
    app.state.http = http
    app.state.forecast = forecast

    # Stagger startup slightly so not every place hits at t=0
    tasks = [
        asyncio.create_task(
            _warm_loop(forecast, place, settings.REFRESH_FORECAST, initial_delay=i)
        )
        for i, place in enumerate(settings.FORECAST_WARM_PLACES)
    ]

    log.info(
        "ForecastPanel started — %d warm place(s), port %s",
        len(tasks),
        settings.PORT,
    )
    yield

    for t in tasks:
        t.cancel()
    await asyncio.gather(*tasks, return_exceptions=True)
    await http.aclose()
    log.info("ForecastPanel shutdown complete")


app = FastAPI(
    title="ForecastPanel",
    version="0.1.0",
    lifespan=lifespan,
    dependencies=[Depends(verify_api_key)],
)

app.include_router(health.router)
app.include_router(forecast_routes.router)


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "forecastpanel.main:app",
        host=settings.HOST,
        port=settings.PORT,
        log_level="info",
    )
