from __future__ import annotations

import logging

import httpx
from fastapi import APIRouter, HTTPException, Query, Request

from forecastpanel.services.weatherapi import ForecastClient, MalformedForecastError

router = APIRouter(prefix="/api")
log = logging.getLogger(__name__)


def _forecast_client(request: Request) -> ForecastClient:
    return request.app.state.forecast


@router.get("/forecast")
async def get_forecast(
    request: Request,
    place: str = Query(..., description="Free-form place: city, 'lat,lon', postcode..."),
    expire_ms: int | None = Query(None, ge=0),
):
    client = _forecast_client(request)
    try:
        result = await client.fetch_forecast(place, expire_time_ms=expire_ms)
    except httpx.HTTPStatusError as e:
        raise HTTPException(
            status_code=502,
            detail={
                "upstream_status": e.response.status_code,
                "upstream_body": e.response.text,
            },
        )
    except httpx.RequestError as e:
        raise HTTPException(
            status_code=504,
            detail=f"Weather API unreachable: {client.describe_error(e)}",
        )
    except MalformedForecastError as e:
        raise HTTPException(status_code=502, detail=str(e))
    return result.model_dump(mode="json")


@router.delete("/forecast/cache")
async def clear_forecast_cache(request: Request):
    cleared = _forecast_client(request).clear_cache()
    log.info("Forecast cache cleared (%d entries)", cleared)
    return {"cleared": cleared}
