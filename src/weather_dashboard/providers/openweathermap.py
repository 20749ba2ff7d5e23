# src/weather_dashboard/providers/openweathermap.py
"""
OpenWeatherMap provider (alternate schema).

Strategy
--------
- Current conditions: /data/2.5/weather, by "city,US" or lat/lon.
- Forecast: /data/2.5/forecast returns 3-hourly slots; we group them by
  calendar date in the city's local time (city.timezone offset) and keep
  max/min temperature per date, first 5 dates only.
- Alerts: One Call /data/3.0/onecall with everything but alerts excluded.
  No `alerts` key means "no active alerts" (empty list); failures raise and
  the classifier decides what to do.
- Units: requests carry `units` from settings; temperatures and wind are
  converted back to Fahrenheit/mph when metric or standard was requested.
  Pressure is always hPa and visibility always meters.
"""

from __future__ import annotations

import logging
from datetime import date, datetime, timezone
from typing import Any, Dict, List, Optional, Tuple

from ..alerts import classify_severity
from ..models import Alert, AlertOrigin, CurrentWeather, ForecastDay, Location, VISIBILITY_UNAVAILABLE
from ..settings import ApiConfig
from .common import hpa_to_inhg, meters_to_miles, to_fahrenheit, to_mph

log = logging.getLogger("providers.openweathermap")

NAME = "openweathermap"
BASE_URL = "https://api.openweathermap.org/data/2.5"
ONECALL_URL = "https://api.openweathermap.org/data/3.0/onecall"

Request = Tuple[str, Dict[str, Any]]


def _epoch(value: Any) -> Optional[datetime]:
    if not isinstance(value, (int, float)):
        return None
    return datetime.fromtimestamp(value, tz=timezone.utc)


def local_date(ts: float, tz_offset: Optional[int] = None) -> date:
    """Calendar date of an epoch timestamp, in the location's local time."""
    if tz_offset is None:
        return datetime.fromtimestamp(ts).date()
    return datetime.fromtimestamp(ts + tz_offset, tz=timezone.utc).date()


# ------------------------ requests ------------------------


def city_request(api: ApiConfig, name: str) -> Request:
    return f"{BASE_URL}/weather", {"q": f"{name},US", "appid": api.key, "units": api.units}


def coords_request(api: ApiConfig, lat: float, lon: float) -> Request:
    return f"{BASE_URL}/weather", {"lat": lat, "lon": lon, "appid": api.key, "units": api.units}


def forecast_request(api: ApiConfig, lat: float, lon: float, days: int = 5) -> Request:
    # 8 three-hour slots per day
    params = {"lat": lat, "lon": lon, "appid": api.key, "units": api.units, "cnt": days * 8}
    return f"{BASE_URL}/forecast", params


def alerts_request(api: ApiConfig, lat: float, lon: float) -> Request:
    params = {
        "lat": lat,
        "lon": lon,
        "appid": api.key,
        "exclude": "current,minutely,hourly,daily",
    }
    return ONECALL_URL, params


# ------------------------ normalization ------------------------


def normalize_current(raw: Dict[str, Any], units: str = "imperial") -> CurrentWeather:
    main = raw["main"]
    weather = raw["weather"][0]
    wind = raw.get("wind") or {}
    coord = raw["coord"]
    icon = weather.get("icon") or ""
    wind_dir = wind.get("deg")
    return CurrentWeather(
        location=Location(
            name=raw["name"],
            region=(raw.get("sys") or {}).get("country") or "",
            country=(raw.get("sys") or {}).get("country") or "",
            lat=float(coord["lat"]),
            lon=float(coord["lon"]),
        ),
        temperature=to_fahrenheit(main["temp"], units),
        feels_like=to_fahrenheit(main.get("feels_like", main["temp"]), units),
        humidity=int(main.get("humidity") or 0),
        pressure_in_hg=hpa_to_inhg(main["pressure"]),
        visibility_miles=meters_to_miles(raw.get("visibility")) or VISIBILITY_UNAVAILABLE,
        wind_speed_mph=to_mph(wind.get("speed") or 0, units),
        wind_direction_deg=int(wind_dir) if wind_dir is not None else None,
        description=weather.get("description") or "",
        icon_id=icon,
        weather_code=int(weather.get("id") or 0),
        is_day=not icon.endswith("n"),
        timestamp=datetime.now(timezone.utc),
    )


def normalize_forecast(raw: Dict[str, Any], units: str = "imperial", days: int = 5) -> List[ForecastDay]:
    tz_offset = (raw.get("city") or {}).get("timezone")
    if not isinstance(tz_offset, int):
        tz_offset = None

    grouped: Dict[date, Dict[str, Any]] = {}
    for slot in raw["list"]:
        d = local_date(slot["dt"], tz_offset)
        bucket = grouped.setdefault(d, {"temps": [], "weather": slot["weather"][0]})
        bucket["temps"].append(float(slot["main"]["temp"]))

    out: List[ForecastDay] = []
    for d in sorted(grouped)[:days]:
        temps = grouped[d]["temps"]
        weather = grouped[d]["weather"]
        out.append(
            ForecastDay(
                date=d,
                high=to_fahrenheit(max(temps), units),
                low=to_fahrenheit(min(temps), units),
                description=weather.get("description") or "",
                icon_id=weather.get("icon") or "",
                weather_code=int(weather.get("id") or 0),
            )
        )
    return out


def normalize_alerts(raw: Dict[str, Any]) -> Optional[List[Alert]]:
    items = raw.get("alerts") or []
    out: List[Alert] = []
    for a in items:
        tags = [t for t in (a.get("tags") or []) if isinstance(t, str)]
        areas = a.get("areas") if isinstance(a.get("areas"), list) else []
        out.append(
            Alert(
                title=a.get("event") or "(Weather Alert)",
                description=a.get("description") or "",
                severity=classify_severity(tags),
                start=_epoch(a.get("start")),
                end=_epoch(a.get("end")),
                areas=frozenset(str(x) for x in areas),
                tags=tuple(tags),
                origin=AlertOrigin.LIVE,
            )
        )
    return out
