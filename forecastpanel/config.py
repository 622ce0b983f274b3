from __future__ import annotations

import logging
import os

from dotenv import load_dotenv

load_dotenv()

log = logging.getLogger(__name__)


def _csv_list(key: str) -> list[str]:
    raw = os.getenv(key, "")
    return [x.strip() for x in raw.split(",") if x.strip()]


def _env(primary: str, *fallbacks: str, default: str = "") -> str:
    """Read env var with fallback aliases."""
    val = os.getenv(primary)
    if val is not None:
        return val
    for fb in fallbacks:
        val = os.getenv(fb)
        if val is not None:
            return val
    return default


def _flag(key: str, default: str = "false") -> bool:
    return os.getenv(key, default).lower() in ("true", "1", "yes")


class Settings:
    # --- Auth / Server ---
    API_KEY: str = os.getenv("FORECASTPANEL_API_KEY", "")
    HOST: str = os.getenv("FORECASTPANEL_HOST", "0.0.0.0")
    PORT: int = int(os.getenv("FORECASTPANEL_PORT", "8100"))

    # --- WeatherAPI.com ---
    WEATHER_API_KEY: str = _env("WEATHER_API_KEY", "REACT_APP_WEATHER_API_KEY")
    WEATHER_API_BASE_URL: str = os.getenv(
        "WEATHER_API_BASE_URL", "http://api.weatherapi.com/v1/"
    )
    HTTP_TIMEOUT: float = float(os.getenv("HTTP_TIMEOUT", "10.0"))

    # --- Forecast cache ---
    FORECAST_EXPIRE_MS: int = int(os.getenv("FORECAST_EXPIRE_MS", "600000"))
    # 0 keeps every place ever requested
    FORECAST_CACHE_MAX_ENTRIES: int = int(os.getenv("FORECAST_CACHE_MAX_ENTRIES", "0"))
    FORECAST_SINGLE_FLIGHT: bool = _flag("FORECAST_SINGLE_FLIGHT")

    # --- Background warm-up (seconds) ---
    FORECAST_WARM_PLACES: list[str] = _csv_list("FORECAST_WARM_PLACES")
    REFRESH_FORECAST: int = int(os.getenv("REFRESH_FORECAST", "600"))

    @classmethod
    def validate(cls) -> None:
        """Log warnings for missing or suspicious env vars."""
        if not cls.WEATHER_API_KEY:
            log.warning(
                "Missing env var WEATHER_API_KEY — upstream will reject forecast requests"
            )
        if cls.FORECAST_EXPIRE_MS < 0:
            log.warning(
                "FORECAST_EXPIRE_MS=%d is negative; every call will fail",
                cls.FORECAST_EXPIRE_MS,
            )
        if cls.FORECAST_CACHE_MAX_ENTRIES == 0:
            log.info("Forecast cache is unbounded (FORECAST_CACHE_MAX_ENTRIES=0)")


settings = Settings()
