# src/weather_dashboard/demo.py
"""Built-in demonstration data shown when the default location cannot be loaded."""

from __future__ import annotations

from datetime import date, datetime, timedelta, timezone
from typing import List, Optional

from .models import CurrentWeather, ForecastDay, Location

DEMO_LOCATION = Location(name="Demo City", region="US", country="US", lat=40.7128, lon=-74.0060)

# (high, low, description, condition id) for the next five days
_DEMO_DAYS = (
    (75, 62, "sunny", 800),
    (78, 65, "partly cloudy", 801),
    (73, 59, "light rain", 500),
    (69, 55, "cloudy", 804),
    (71, 58, "partly cloudy", 802),
)


def demo_weather(now: Optional[datetime] = None) -> CurrentWeather:
    return CurrentWeather(
        location=DEMO_LOCATION,
        temperature=72,
        feels_like=75,
        humidity=65,
        pressure_in_hg="30.15",
        visibility_miles="10.0",
        wind_speed_mph=8,
        wind_direction_deg=None,
        description="partly cloudy",
        weather_code=801,
        timestamp=now or datetime.now(timezone.utc),
    )


def demo_forecast(today: Optional[date] = None) -> List[ForecastDay]:
    today = today or date.today()
    return [
        ForecastDay(
            date=today + timedelta(days=i),
            high=high,
            low=low,
            description=desc,
            weather_code=code,
        )
        for i, (high, low, desc, code) in enumerate(_DEMO_DAYS, start=1)
    ]
