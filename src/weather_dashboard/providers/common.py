# src/weather_dashboard/providers/common.py
"""
Shared HTTP helper and unit conversions for provider modules.

Design goals
------------
- One GET per call, sane timeout, no retries.
- Consistent User-Agent so public APIs can identify the app.
- Typed failures: callers get NotFound / ProviderUnavailable / NetworkFailure /
  ParseFailure instead of an empty payload.
"""

from __future__ import annotations

import json
import logging
import math
from typing import Any, Dict, Optional

import requests

from ..errors import NetworkFailure, NotFound, ParseFailure, ProviderUnavailable

log = logging.getLogger("providers.common")

DEFAULT_TIMEOUT = 10  # seconds

# Statuses meaning "the query matched nothing" rather than "provider is broken".
NOT_FOUND_STATUSES = frozenset({400, 404})

HPA_TO_INHG = 0.02953
METERS_TO_MILES = 0.000621371
MPS_TO_MPH = 2.23694


def user_agent() -> str:
    return "weather-dashboard/0.1 (+https://example.invalid)"


def get_json(
    url: str,
    params: Optional[Dict[str, Any]] = None,
    query: str = "",
    timeout: float = DEFAULT_TIMEOUT,
) -> Dict[str, Any]:
    """
    GET a JSON endpoint once and return the decoded object.

    `query` is the human-readable request (city name or "lat,lon") carried by
    any raised error so callers can report what failed.
    """
    h = {"User-Agent": user_agent(), "Accept": "application/json"}
    try:
        resp = requests.get(url, params=params, headers=h, timeout=timeout)
    except requests.RequestException as e:
        log.warning("GET %s failed: %s", url, e)
        raise NetworkFailure(f"Weather provider unreachable: {e}", query) from e

    if resp.status_code in NOT_FOUND_STATUSES:
        log.info("GET %s -> %s (no match for %r)", url, resp.status_code, query)
        raise NotFound(query, resp.status_code)
    if not 200 <= resp.status_code < 300:
        log.warning("GET %s -> %s", url, resp.status_code)
        raise ProviderUnavailable(query, resp.status_code)

    try:
        data = resp.json()
    except (json.JSONDecodeError, ValueError) as e:
        log.error("Failed to decode JSON from %s", url)
        raise ParseFailure(f"Invalid JSON from weather provider for {query!r}", query) from e
    if not isinstance(data, dict):
        raise ParseFailure(f"Unexpected payload type from weather provider for {query!r}", query)
    log.debug("GET %s -> %s", url, resp.status_code)
    return data


# ------------------------ unit conversions ------------------------


def round_half_up(value: float) -> int:
    """Nearest integer with .5 going up (72.5 -> 73, -0.5 -> 0)."""
    return int(math.floor(float(value) + 0.5))


def to_fahrenheit(value: float, units: str = "imperial") -> int:
    """Round a provider temperature to whole degrees Fahrenheit."""
    v = float(value)
    if units == "metric":
        v = v * 9 / 5 + 32
    elif units == "standard":
        v = (v - 273.15) * 9 / 5 + 32
    return round_half_up(v)


def to_mph(value: float, units: str = "imperial") -> int:
    v = float(value)
    if units in ("metric", "standard"):
        v = v * MPS_TO_MPH
    return round_half_up(v)


def hpa_to_inhg(hpa: float) -> str:
    return f"{float(hpa) * HPA_TO_INHG:.2f}"


def format_inhg(inhg: float) -> str:
    return f"{float(inhg):.2f}"


def meters_to_miles(meters: Optional[float]) -> Optional[str]:
    if meters is None:
        return None
    return f"{float(meters) * METERS_TO_MILES:.1f}"


def format_miles(miles: Optional[float]) -> Optional[str]:
    if miles is None:
        return None
    return f"{float(miles):.1f}"
