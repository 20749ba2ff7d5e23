# src/weather_dashboard/alerts.py
"""
Alert classification and synthetic fallback alerts.

Public API
----------
classify_severity(label: str | Sequence[str] | None) -> Severity
is_in_tornado_alley(lat, lon) -> bool
is_in_hurricane_zone(lat, lon) -> bool
synthesize_alerts(lat, lon, now=None) -> list[Alert]
AlertClassifier(gateway).fetch_or_synthesize_alerts(lat, lon) -> list[Alert]

Both providers funnel their severity vocabulary (free-text strings for
WeatherAPI, tag arrays for OpenWeatherMap) through `classify_severity`.
Synthetic alerts are demo data for when live data is unavailable; they are
tagged with origin=SYNTHETIC.
"""

from __future__ import annotations

import logging
from datetime import datetime, timedelta, timezone
from typing import TYPE_CHECKING, List, Optional, Sequence, Tuple, Union

from .errors import WeatherDashboardError
from .models import Alert, AlertOrigin, Severity

if TYPE_CHECKING:
    from .gateway import WeatherGateway

log = logging.getLogger("alerts")

# (lat_min, lat_max, lon_min, lon_max)
Box = Tuple[float, float, float, float]

TORNADO_ALLEY: Box = (32.0, 40.0, -103.0, -94.0)  # Texas to Kansas
HURRICANE_ZONES: Tuple[Box, ...] = (
    (25.0, 35.0, -85.0, -75.0),  # southeast Atlantic coast
    (25.0, 30.0, -95.0, -85.0),  # Gulf coast
)

TORNADO_VALIDITY = timedelta(hours=6)
HURRICANE_VALIDITY = timedelta(hours=48)


def _in_box(lat: float, lon: float, box: Box) -> bool:
    lat_min, lat_max, lon_min, lon_max = box
    return lat_min <= lat <= lat_max and lon_min <= lon <= lon_max


def classify_severity(label: Union[str, Sequence[str], None]) -> Severity:
    """
    Map a provider severity label (or list of tags) to one of three buckets.

    Case-insensitive substring match: "extreme"/"severe" -> SEVERE,
    "moderate" -> MODERATE, anything else (or nothing) -> MINOR.
    """
    if not label:
        return Severity.MINOR
    if isinstance(label, str):
        text = label.lower()
    else:
        text = " ".join(str(t) for t in label if t).lower()
    if "extreme" in text or "severe" in text:
        return Severity.SEVERE
    if "moderate" in text:
        return Severity.MODERATE
    return Severity.MINOR


def is_in_tornado_alley(lat: float, lon: float) -> bool:
    return _in_box(lat, lon, TORNADO_ALLEY)


def is_in_hurricane_zone(lat: float, lon: float) -> bool:
    return any(_in_box(lat, lon, box) for box in HURRICANE_ZONES)


def synthesize_alerts(lat: float, lon: float, now: Optional[datetime] = None) -> List[Alert]:
    """Build sample alerts from geographic heuristics. Zones are checked independently."""
    now = now or datetime.now(timezone.utc)
    alerts: List[Alert] = []

    if is_in_tornado_alley(lat, lon):
        alerts.append(
            Alert(
                title="Tornado Watch",
                description=(
                    "Conditions are favorable for tornado development. "
                    "Stay alert and be prepared to take shelter."
                ),
                severity=Severity.SEVERE,
                start=now,
                end=now + TORNADO_VALIDITY,
                areas=frozenset({"Central Plains"}),
                tags=("Severe", "Tornado"),
                origin=AlertOrigin.SYNTHETIC,
            )
        )

    if is_in_hurricane_zone(lat, lon):
        alerts.append(
            Alert(
                title="Hurricane Watch",
                description=(
                    "Hurricane conditions possible within 48 hours. "
                    "Prepare for strong winds and heavy rain."
                ),
                severity=Severity.SEVERE,
                start=now,
                end=now + HURRICANE_VALIDITY,
                areas=frozenset({"Atlantic Coast"}),
                tags=("Severe", "Hurricane"),
                origin=AlertOrigin.SYNTHETIC,
            )
        )

    return alerts


class AlertClassifier:
    """Live alerts from the gateway, falling back to synthetic ones."""

    def __init__(self, gateway: "WeatherGateway") -> None:
        self.gateway = gateway

    def fetch_or_synthesize_alerts(self, lat: float, lon: float) -> List[Alert]:
        if not self.gateway.is_configured():
            return synthesize_alerts(lat, lon)
        try:
            alerts = self.gateway.fetch_alerts(lat, lon)
        except WeatherDashboardError as e:
            log.warning("Live alerts unavailable (%s); using sample alerts", e)
            return synthesize_alerts(lat, lon)
        except Exception as e:
            log.error("Alert fetch crashed (%s: %s); using sample alerts", type(e).__name__, e)
            return synthesize_alerts(lat, lon)
        if alerts is None:
            log.info("Provider returned no alert block; using sample alerts")
            return synthesize_alerts(lat, lon)
        return alerts
