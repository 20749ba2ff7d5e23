# src/weather_dashboard/gateway.py
"""
Weather Gateway: one HTTP GET per fetch, normalized into the canonical model.

Provider modules (dispatched by `settings.app.provider`)
--------------------------------------------------------
Each module under `weather_dashboard.providers` implements:

    city_request(api, name)               -> (url, params)
    coords_request(api, lat, lon)         -> (url, params)
    forecast_request(api, lat, lon, days) -> (url, params)
    alerts_request(api, lat, lon)         -> (url, params)
    normalize_current(raw, units)         -> CurrentWeather
    normalize_forecast(raw, units, days)  -> list[ForecastDay]
    normalize_alerts(raw)                 -> list[Alert] | None

The gateway never branches on payload fields itself; the provider tag picks
the normalizer and any schema mismatch becomes ParseFailure.
"""

from __future__ import annotations

import importlib
import logging
from types import ModuleType
from typing import Any, Callable, Dict, List, Optional, TypeVar

from pydantic import ValidationError

from .errors import ParseFailure, Unconfigured
from .models import Alert, CurrentWeather, ForecastDay
from .providers.common import get_json
from .settings import Settings

log = logging.getLogger("gateway")

T = TypeVar("T")

_PROVIDER_MODULES = {
    "weatherapi": "weather_dashboard.providers.weatherapi",
    "openweathermap": "weather_dashboard.providers.openweathermap",
}

CANARY_CITY = "New York"
FORECAST_DAYS = 5

_SCHEMA_ERRORS = (
    KeyError,
    IndexError,
    TypeError,
    ValueError,
    AttributeError,
    OverflowError,
    OSError,
    ValidationError,
)


def load_provider(name: str) -> ModuleType:
    mod_name = _PROVIDER_MODULES.get(name)
    if not mod_name:
        raise RuntimeError(f"Unknown weather provider '{name}'")
    return importlib.import_module(mod_name)


class WeatherGateway:
    def __init__(self, settings: Settings) -> None:
        self.settings = settings
        self.provider = load_provider(settings.app.provider)
        self.online: Optional[bool] = None

    @property
    def provider_name(self) -> str:
        return self.settings.app.provider

    # ------------------------ internals ------------------------

    def _require_key(self) -> None:
        if not self.is_configured():
            raise Unconfigured(
                "Weather API key is not configured; set WEATHER_API_KEY to fetch live data"
            )

    def _get(self, request: tuple, query: str) -> Dict[str, Any]:
        url, params = request
        return get_json(url, params=params, query=query, timeout=self.settings.app.api.timeout_seconds)

    def _normalize(self, fn: Callable[..., T], raw: Dict[str, Any], query: str, *args: Any) -> T:
        try:
            return fn(raw, *args)
        except _SCHEMA_ERRORS as e:
            log.error("Unexpected %s payload for %r: %s", self.provider_name, query, e)
            raise ParseFailure(f"Unexpected response from weather provider for {query!r}", query) from e

    # ------------------------ public API ------------------------

    def is_configured(self) -> bool:
        return self.settings.is_configured

    def fetch_current_by_city(self, name: str) -> CurrentWeather:
        self._require_key()
        api = self.settings.app.api
        raw = self._get(self.provider.city_request(api, name), name)
        return self._normalize(self.provider.normalize_current, raw, name, api.units)

    def fetch_current_by_coords(self, lat: float, lon: float) -> CurrentWeather:
        self._require_key()
        api = self.settings.app.api
        query = f"{lat},{lon}"
        raw = self._get(self.provider.coords_request(api, lat, lon), query)
        return self._normalize(self.provider.normalize_current, raw, query, api.units)

    def fetch_forecast(self, lat: float, lon: float, days: int = FORECAST_DAYS) -> List[ForecastDay]:
        self._require_key()
        api = self.settings.app.api
        query = f"{lat},{lon}"
        raw = self._get(self.provider.forecast_request(api, lat, lon, days), query)
        return self._normalize(self.provider.normalize_forecast, raw, query, api.units, days)

    def fetch_alerts(self, lat: float, lon: float) -> Optional[List[Alert]]:
        """Live alerts, or None when the provider sent no alert block at all."""
        self._require_key()
        api = self.settings.app.api
        query = f"{lat},{lon}"
        raw = self._get(self.provider.alerts_request(api, lat, lon), query)
        return self._normalize(self.provider.normalize_alerts, raw, query)

    def check_reachability(self) -> bool:
        """Canary request for a fixed city. Never raises."""
        try:
            self.fetch_current_by_city(CANARY_CITY)
            self.online = True
        except Exception as e:
            log.warning("Weather provider reachability check failed: %s", e)
            self.online = False
        return self.online
