# src/weather_dashboard/providers/weatherapi.py
"""
WeatherAPI.com provider.

Builds requests for the v1 REST API and maps its responses to the canonical
model in `models.py`.

Notes
-----
- WeatherAPI already reports imperial fields (temp_f, pressure_in, vis_miles,
  wind_mph) so the `units` setting is ignored; values are only rounded/formatted.
- Forecast comes as native daily aggregates (forecast.forecastday[].day).
- Alerts live in the forecast endpoint (`alerts=yes`). A payload with no
  `alerts.alert` block at all yields None so the classifier can fall back.
- Condition codes (1000-1282) are translated to OpenWeatherMap-style ids so one
  icon mapper serves both providers.
- Fields used:
    location      -> name, region, country, lat, lon
    current       -> temp_f, feelslike_f, humidity, pressure_in, vis_miles,
                     wind_mph, wind_degree, is_day, condition{text,icon,code}
    forecastday   -> date, day{maxtemp_f, mintemp_f, condition}
    alerts.alert  -> headline, desc, severity, certainty, effective, expires, areas
"""

from __future__ import annotations

import logging
from datetime import date, datetime, timezone
from typing import Any, Dict, List, Optional, Tuple

from ..alerts import classify_severity
from ..models import Alert, AlertOrigin, CurrentWeather, ForecastDay, Location, VISIBILITY_UNAVAILABLE
from ..settings import ApiConfig
from .common import format_inhg, format_miles, to_fahrenheit, to_mph

log = logging.getLogger("providers.weatherapi")

NAME = "weatherapi"
BASE_URL = "https://api.weatherapi.com/v1"

Request = Tuple[str, Dict[str, Any]]

# WeatherAPI condition code -> OpenWeatherMap condition id
_CONDITION_CODES: Dict[int, int] = {
    1000: 800,  # sunny / clear
    1003: 802,  # partly cloudy
    1006: 803,  # cloudy
    1009: 804,  # overcast
    1030: 701,  # mist
    1063: 500,  # patchy rain possible
    1066: 600,  # patchy snow possible
    1069: 611,  # patchy sleet possible
    1072: 301,  # patchy freezing drizzle
    1087: 200,  # thundery outbreaks
    1114: 601,  # blowing snow
    1117: 602,  # blizzard
    1135: 741,  # fog
    1147: 741,  # freezing fog
    1150: 300,
    1153: 300,
    1168: 311,
    1171: 312,
    1180: 500,
    1183: 500,
    1186: 501,
    1189: 501,
    1192: 502,
    1195: 502,
    1198: 511,
    1201: 511,
    1204: 611,
    1207: 612,
    1210: 600,
    1213: 600,
    1216: 601,
    1219: 601,
    1222: 602,
    1225: 602,
    1237: 611,
    1240: 520,
    1243: 521,
    1246: 522,
    1249: 613,
    1252: 613,
    1255: 620,
    1258: 621,
    1261: 611,
    1264: 611,
    1273: 200,
    1276: 201,
    1279: 200,
    1282: 202,
}


def condition_id(code: Any) -> int:
    """Translate a WeatherAPI condition code; unknown codes map to 0."""
    try:
        return _CONDITION_CODES.get(int(code), 0)
    except (TypeError, ValueError):
        return 0


def _parse_time(value: Any) -> Optional[datetime]:
    if not isinstance(value, str) or not value:
        return None
    try:
        return datetime.fromisoformat(value.replace("Z", "+00:00"))
    except ValueError:
        log.debug("Unparseable alert time %r", value)
        return None


# ------------------------ requests ------------------------


def city_request(api: ApiConfig, name: str) -> Request:
    return f"{BASE_URL}/current.json", {"key": api.key, "q": f"{name},US", "aqi": "no"}


def coords_request(api: ApiConfig, lat: float, lon: float) -> Request:
    return f"{BASE_URL}/current.json", {"key": api.key, "q": f"{lat},{lon}", "aqi": "no"}


def forecast_request(api: ApiConfig, lat: float, lon: float, days: int = 5) -> Request:
    params = {"key": api.key, "q": f"{lat},{lon}", "days": days, "aqi": "no", "alerts": "no"}
    return f"{BASE_URL}/forecast.json", params


def alerts_request(api: ApiConfig, lat: float, lon: float) -> Request:
    params = {"key": api.key, "q": f"{lat},{lon}", "days": 1, "aqi": "no", "alerts": "yes"}
    return f"{BASE_URL}/forecast.json", params


# ------------------------ normalization ------------------------


def normalize_location(loc: Dict[str, Any]) -> Location:
    return Location(
        name=loc["name"],
        region=loc.get("region") or "",
        country=loc.get("country") or "",
        lat=float(loc["lat"]),
        lon=float(loc["lon"]),
    )


def normalize_current(raw: Dict[str, Any], units: str = "imperial") -> CurrentWeather:
    cur = raw["current"]
    cond = cur.get("condition") or {}
    wind_dir = cur.get("wind_degree")
    return CurrentWeather(
        location=normalize_location(raw["location"]),
        temperature=to_fahrenheit(cur["temp_f"]),
        feels_like=to_fahrenheit(cur.get("feelslike_f", cur["temp_f"])),
        humidity=int(cur.get("humidity") or 0),
        pressure_in_hg=format_inhg(cur["pressure_in"]),
        visibility_miles=format_miles(cur.get("vis_miles")) or VISIBILITY_UNAVAILABLE,
        wind_speed_mph=to_mph(cur.get("wind_mph") or 0),
        wind_direction_deg=int(wind_dir) if wind_dir is not None else None,
        description=cond.get("text") or "",
        icon_id=cond.get("icon") or "",
        weather_code=condition_id(cond.get("code")),
        is_day=bool(cur.get("is_day", 1)),
        timestamp=datetime.now(timezone.utc),
    )


def normalize_forecast(raw: Dict[str, Any], units: str = "imperial", days: int = 5) -> List[ForecastDay]:
    out: List[ForecastDay] = []
    for entry in raw["forecast"]["forecastday"][:days]:
        day = entry["day"]
        cond = day.get("condition") or {}
        out.append(
            ForecastDay(
                date=date.fromisoformat(entry["date"]),
                high=to_fahrenheit(day["maxtemp_f"]),
                low=to_fahrenheit(day["mintemp_f"]),
                description=cond.get("text") or "",
                icon_id=cond.get("icon") or "",
                weather_code=condition_id(cond.get("code")),
            )
        )
    return out


def normalize_alerts(raw: Dict[str, Any]) -> Optional[List[Alert]]:
    block = raw.get("alerts")
    items = block.get("alert") if isinstance(block, dict) else None
    if items is None:
        return None

    out: List[Alert] = []
    for a in items:
        severity = a.get("severity") if isinstance(a.get("severity"), str) else None
        areas = a.get("areas") or ""
        out.append(
            Alert(
                title=a.get("headline") or a.get("event") or "(Weather Alert)",
                description=a.get("desc") or "",
                severity=classify_severity(severity),
                start=_parse_time(a.get("effective")),
                end=_parse_time(a.get("expires")),
                areas=frozenset(s.strip() for s in areas.split(";") if s.strip()),
                tags=tuple(t for t in (severity, a.get("certainty")) if t),
                origin=AlertOrigin.LIVE,
            )
        )
    return out
