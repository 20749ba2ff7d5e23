# src/weather_dashboard/models.py
"""
Canonical, provider-independent weather model.

Every provider module projects its raw JSON into these types. Instances are
frozen: a refresh replaces them wholesale.

Units
-----
- temperatures: integer degrees Fahrenheit
- pressure: inches of mercury, formatted to 2 decimals ("30.15")
- visibility: miles, formatted to 1 decimal ("10.0") or VISIBILITY_UNAVAILABLE
- wind speed: integer mph
"""

from __future__ import annotations

import datetime as dt
from enum import Enum
from typing import FrozenSet, Optional, Tuple

from pydantic import BaseModel, ConfigDict, Field

VISIBILITY_UNAVAILABLE = "N/A"


class Severity(str, Enum):
    MINOR = "minor"
    MODERATE = "moderate"
    SEVERE = "severe"


class AlertOrigin(str, Enum):
    LIVE = "live"
    SYNTHETIC = "synthetic"


class _Frozen(BaseModel):
    model_config = ConfigDict(frozen=True)


class Location(_Frozen):
    name: str
    region: str = ""  # state for US cities, otherwise region/country
    country: str = ""
    lat: float
    lon: float


class CurrentWeather(_Frozen):
    location: Location
    temperature: int
    feels_like: int
    humidity: int
    pressure_in_hg: str
    visibility_miles: str = VISIBILITY_UNAVAILABLE
    wind_speed_mph: int
    wind_direction_deg: Optional[int] = None
    description: str = ""
    icon_id: str = ""
    weather_code: int = 0
    is_day: bool = True
    timestamp: dt.datetime


class ForecastDay(_Frozen):
    date: dt.date
    high: int
    low: int
    description: str = ""
    icon_id: str = ""
    weather_code: int = 0


class Alert(_Frozen):
    title: str
    description: str = ""
    severity: Severity = Severity.MINOR
    start: Optional[dt.datetime] = None
    end: Optional[dt.datetime] = None
    areas: FrozenSet[str] = Field(default_factory=frozenset)
    tags: Tuple[str, ...] = ()
    origin: AlertOrigin = AlertOrigin.LIVE

    @property
    def is_synthetic(self) -> bool:
        return self.origin is AlertOrigin.SYNTHETIC
