"""Shared test fixtures."""
from __future__ import annotations

import pytest
import respx

from forecastpanel.cache import ForecastCache

BASE_URL = "https://weather.test/v1/"
FORECAST_URL = BASE_URL + "forecast.json"

_CONDITION = {
    "text": "Partly cloudy",
    "icon": "//cdn.weatherapi.com/weather/64x64/day/116.png",
    "code": 1003,
}


def _measurements(temp_c: float) -> dict:
    return {
        "temp_c": temp_c,
        "temp_f": round(temp_c * 9 / 5 + 32, 1),
        "is_day": 1,
        "condition": dict(_CONDITION),
        "wind_mph": 8.1,
        "wind_kph": 13.0,
        "wind_degree": 240,
        "wind_dir": "WSW",
        "pressure_mb": 1015.0,
        "pressure_in": 29.97,
        "precip_mm": 0.0,
        "precip_in": 0.0,
        "humidity": 72,
        "cloud": 50,
        "feelslike_c": temp_c - 1,
        "feelslike_f": round((temp_c - 1) * 9 / 5 + 32, 1),
        "vis_km": 10.0,
        "vis_miles": 6.0,
        "uv": 4.0,
        "gust_mph": 11.4,
        "gust_kph": 18.4,
    }


def _hour(date: str, h: int, temp_c: float) -> dict:
    return {
        "time_epoch": 1718409600 + h * 3600,
        "time": f"{date} {h:02d}:00",
        **_measurements(temp_c),
        "windchill_c": temp_c - 2,
        "windchill_f": round((temp_c - 2) * 9 / 5 + 32, 1),
        "heatindex_c": temp_c,
        "heatindex_f": round(temp_c * 9 / 5 + 32, 1),
        "dewpoint_c": 9.5,
        "dewpoint_f": 49.1,
        "will_it_rain": 0,
        "chance_of_rain": 12,
        "will_it_snow": 0,
        "chance_of_snow": 0,
    }


def make_payload(
    name: str = "London", temp_c: float = 15.0, hours: int = 24
) -> dict:
    """A forecast.json body shaped like WeatherAPI.com's, one forecast day."""
    date = "2024-06-15"
    return {
        "location": {
            "name": name,
            "region": "City of London, Greater London",
            "country": "United Kingdom",
            "lat": 51.52,
            "lon": -0.11,
            "tz_id": "Europe/London",
            "localtime_epoch": 1718449200,
            "localtime": f"{date} 12:00",
        },
        "current": {
            "last_updated_epoch": 1718448300,
            "last_updated": f"{date} 11:45",
            **_measurements(temp_c),
        },
        "forecast": {
            "forecastday": [
                {
                    "date": date,
                    "date_epoch": 1718409600,
                    "day": {
                        "maxtemp_c": temp_c + 4,
                        "maxtemp_f": round((temp_c + 4) * 9 / 5 + 32, 1),
                        "mintemp_c": temp_c - 5,
                        "mintemp_f": round((temp_c - 5) * 9 / 5 + 32, 1),
                        "avgtemp_c": temp_c,
                        "avgtemp_f": round(temp_c * 9 / 5 + 32, 1),
                        "maxwind_mph": 12.3,
                        "maxwind_kph": 19.8,
                        "totalprecip_mm": 0.4,
                        "totalprecip_in": 0.02,
                        "avgvis_km": 9.8,
                        "avgvis_miles": 6.0,
                        "avghumidity": 70,
                        "daily_will_it_rain": 1,
                        "daily_chance_of_rain": 83,
                        "daily_will_it_snow": 0,
                        "daily_chance_of_snow": 0,
                        "condition": dict(_CONDITION),
                        "uv": 5.0,
                    },
                    "astro": {
                        "sunrise": "04:43 AM",
                        "sunset": "09:19 PM",
                        "moonrise": "01:22 PM",
                        "moonset": "01:07 AM",
                        "moon_phase": "Waxing Gibbous",
                        "moon_illumination": "64",
                    },
                    "hour": [_hour(date, h, temp_c) for h in range(hours)],
                }
            ]
        },
    }


class FakeClock:
    """Millisecond clock the tests move by hand."""

    def __init__(self, start: int = 1_718_448_000_000) -> None:
        self.now = start

    def __call__(self) -> int:
        return self.now

    def advance(self, ms: int) -> None:
        self.now += ms


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def cache(clock: FakeClock) -> ForecastCache:
    return ForecastCache(clock=clock)


@pytest.fixture
def london() -> dict:
    return make_payload("London", temp_c=15.0)


@pytest.fixture
def upstream():
    with respx.mock(assert_all_called=False) as mock:
        yield mock
