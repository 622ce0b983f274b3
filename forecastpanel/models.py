"""WeatherAPI.com ``forecast.json`` response schema.

Field names mirror the upstream payload exactly, including the paired unit
suffixes (``_c``/``_f``, ``_mm``/``_in``, ``_kph``/``_mph``, ``_km``/``_miles``).
Unknown upstream fields are kept as extras so nothing in the payload is lost.
"""
from __future__ import annotations

from pydantic import BaseModel, ConfigDict, field_validator

HOURS_PER_DAY = 24


class _Payload(BaseModel):
    # upstream sends some text fields (moon_illumination) as bare numbers
    model_config = ConfigDict(frozen=True, extra="allow", coerce_numbers_to_str=True)


class Location(_Payload):
    name: str
    region: str
    country: str
    lat: float
    lon: float
    tz_id: str
    localtime_epoch: int
    localtime: str


class Condition(_Payload):
    text: str
    icon: str
    code: int


class _Conditions(_Payload):
    """Measurements shared by ``current`` and each ``hour`` entry."""

    temp_c: float
    temp_f: float
    is_day: int
    condition: Condition
    wind_mph: float
    wind_kph: float
    wind_degree: int
    wind_dir: str
    pressure_mb: float
    pressure_in: float
    precip_mm: float
    precip_in: float
    humidity: int
    cloud: int
    feelslike_c: float
    feelslike_f: float
    vis_km: float
    vis_miles: float
    uv: float
    gust_mph: float
    gust_kph: float


class Current(_Conditions):
    last_updated_epoch: int
    last_updated: str


class Day(_Payload):
    maxtemp_c: float
    maxtemp_f: float
    mintemp_c: float
    mintemp_f: float
    avgtemp_c: float
    avgtemp_f: float
    maxwind_mph: float
    maxwind_kph: float
    totalprecip_mm: float
    totalprecip_in: float
    avgvis_km: float
    avgvis_miles: float
    avghumidity: float
    daily_will_it_rain: int
    daily_chance_of_rain: int
    daily_will_it_snow: int
    daily_chance_of_snow: int
    condition: Condition
    uv: float


class Astro(_Payload):
    sunrise: str
    sunset: str
    moonrise: str
    moonset: str
    moon_phase: str
    moon_illumination: str


class Hour(_Conditions):
    time_epoch: int
    time: str
    windchill_c: float
    windchill_f: float
    heatindex_c: float
    heatindex_f: float
    dewpoint_c: float
    dewpoint_f: float
    will_it_rain: int
    chance_of_rain: int
    will_it_snow: int
    chance_of_snow: int


class Forecastday(_Payload):
    date: str
    date_epoch: int
    day: Day
    astro: Astro
    hour: tuple[Hour, ...]

    @field_validator("hour")
    @classmethod
    def _full_day(cls, v: tuple[Hour, ...]) -> tuple[Hour, ...]:
        if len(v) != HOURS_PER_DAY:
            raise ValueError(f"expected {HOURS_PER_DAY} hourly entries, got {len(v)}")
        return v


class Forecast(_Payload):
    forecastday: tuple[Forecastday, ...]


class ForecastResult(_Payload):
    """Full forecast payload for one place."""

    location: Location
    current: Current
    forecast: Forecast
