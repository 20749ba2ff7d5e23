# src/weather_dashboard/display.py
"""Formatting helpers exposed to the rendering layer."""

from __future__ import annotations

from enum import Enum
from typing import Optional

from .models import Location


class IconCategory(str, Enum):
    THUNDERSTORM = "thunderstorm"
    RAIN = "drizzle/rain"
    SNOW = "snow"
    FOG = "fog/haze"
    CLEAR_DAY = "clear-day"
    CLEAR_NIGHT = "clear-night"
    CLOUDY = "cloudy"
    UNKNOWN = "unknown"


def weather_icon_category(code: Optional[int], is_day: bool = True) -> IconCategory:
    """Bucket an OpenWeatherMap-style condition id (2xx..8xx)."""
    if code is None:
        return IconCategory.UNKNOWN
    if 200 <= code < 300:
        return IconCategory.THUNDERSTORM
    if 300 <= code < 400 or 500 <= code < 600:
        return IconCategory.RAIN
    if 600 <= code < 700:
        return IconCategory.SNOW
    if 700 <= code < 800:
        return IconCategory.FOG
    if code == 800:
        return IconCategory.CLEAR_DAY if is_day else IconCategory.CLEAR_NIGHT
    if 800 < code < 900:
        return IconCategory.CLOUDY
    return IconCategory.UNKNOWN


def format_location_display(location: Optional[Location]) -> str:
    if location is None:
        return "Unknown location"
    if location.name and location.region:
        return f"{location.name}, {location.region}"
    if location.name:
        return location.name
    return f"{location.lat:.4f}, {location.lon:.4f}"
