# src/weather_dashboard/controller.py
"""
Presentation controller: resolve → fetch current → show location/weather →
forecast + alerts (settle-all) → render.

This module wires the dashboard. Collaborators are passed in explicitly (see
`build_controller`) so tests can substitute fakes.

Interfaces used here
--------------------
gateway     WeatherGateway-like: is_configured, check_reachability,
            fetch_current_by_city, fetch_current_by_coords, fetch_forecast
resolver    LocationResolver-like: match_city, resolve_by_coords
classifier  AlertClassifier-like: fetch_or_synthesize_alerts
view        DashboardView (callbacks below)
geolocator  Geolocator (async get_current_position -> (lat, lon))

Concurrency
-----------
Single event loop, cooperative. Blocking gateway calls run through
`asyncio.to_thread`. Every load takes a new in-flight token: user-triggered
loads supersede the one in flight (its late results are dropped), while
`refresh()` no-ops whenever a load is in flight. No public coroutine raises.
"""

from __future__ import annotations

import asyncio
import contextlib
import logging
from dataclasses import dataclass, replace
from typing import Any, Callable, List, Optional, Protocol, Tuple, TypeVar

from .alerts import AlertClassifier
from .demo import DEMO_LOCATION, demo_forecast, demo_weather
from .errors import (
    GeolocationUnavailable,
    NotFound,
    OutOfServiceArea,
    PermissionDenied,
    Unconfigured,
    WeatherDashboardError,
)
from .gateway import WeatherGateway
from .location import LocationResolver
from .models import Alert, CurrentWeather, ForecastDay, Location
from .settings import Settings

log = logging.getLogger("controller")

T = TypeVar("T")

_LEVELS = {"info": logging.INFO, "warning": logging.WARNING, "error": logging.ERROR}

SIGNUP_URLS = {
    "weatherapi": "https://www.weatherapi.com/",
    "openweathermap": "https://openweathermap.org/api",
}


def setup_guidance(provider: str) -> str:
    url = SIGNUP_URLS.get(provider, "your weather provider's website")
    return (
        "Live weather needs an API key. "
        f"1) Sign up for a free key at {url}. "
        "2) Set WEATHER_API_KEY in your environment or .env file. "
        "3) Restart the dashboard."
    )


class DashboardView(Protocol):
    def show_loading(self, message: str) -> None: ...

    def hide_loading(self) -> None: ...

    def show_location(self, location: Location) -> None: ...

    def show_weather(self, weather: CurrentWeather) -> None: ...

    def show_forecast(self, days: List[ForecastDay]) -> None: ...

    def show_alerts(self, alerts: List[Alert]) -> None: ...

    def show_message(self, text: str, level: str = "info") -> None: ...

    def show_status(self, online: bool) -> None: ...


class Geolocator(Protocol):
    async def get_current_position(self) -> Tuple[float, float]:
        """Single-shot fix; raises PermissionDenied or GeolocationUnavailable."""
        ...


@dataclass(frozen=True)
class DashboardState:
    location: Optional[Location] = None
    weather: Optional[CurrentWeather] = None
    forecast: Optional[List[ForecastDay]] = None
    alerts: Optional[List[Alert]] = None
    demo: bool = False


class DashboardController:
    def __init__(
        self,
        gateway: WeatherGateway,
        resolver: LocationResolver,
        classifier: AlertClassifier,
        view: DashboardView,
        default_city: str = "New York",
    ) -> None:
        self.gateway = gateway
        self.resolver = resolver
        self.classifier = classifier
        self.view = view
        self.default_city = default_city
        self.state = DashboardState()
        self.last_error: Optional[BaseException] = None
        self._token = 0
        self._inflight: Optional[int] = None

    # ------------------------ in-flight tracking ------------------------

    @property
    def busy(self) -> bool:
        return self._inflight is not None

    def _begin(self, message: Optional[str] = None) -> int:
        if self._inflight is not None:
            log.debug("Superseding in-flight request #%d", self._inflight)
        self._token += 1
        self._inflight = self._token
        if message:
            self.view.show_loading(message)
        return self._token

    def _current(self, token: int) -> bool:
        return token == self._token

    def _end(self, token: int) -> None:
        if self._inflight == token:
            self._inflight = None
            self.view.hide_loading()

    @staticmethod
    async def _call(fn: Callable[..., T], *args: Any) -> T:
        return await asyncio.to_thread(fn, *args)

    def _notify(self, text: str, level: str = "info") -> None:
        log.log(_LEVELS.get(level, logging.INFO), text)
        self.view.show_message(text, level)

    # ------------------------ rendering steps ------------------------

    def _apply_current(self, location: Location, weather: CurrentWeather) -> None:
        # new location/weather replaces forecast and alerts too
        self.state = DashboardState(location=location, weather=weather)
        self.view.show_location(location)
        self.view.show_weather(weather)

    async def _load_forecast_and_alerts(self, token: int, lat: float, lon: float) -> None:
        forecast, alerts = await asyncio.gather(
            self._call(self.gateway.fetch_forecast, lat, lon),
            self._call(self.classifier.fetch_or_synthesize_alerts, lat, lon),
            return_exceptions=True,
        )
        if not self._current(token):
            return

        if isinstance(forecast, BaseException):
            log.error("Forecast fetch failed: %s", forecast)
            self.view.show_message("Forecast is unavailable right now", "error")
        else:
            self.state = replace(self.state, forecast=forecast)
            self.view.show_forecast(forecast)

        if isinstance(alerts, BaseException):
            log.error("Alert fetch failed: %s", alerts)
        else:
            self.state = replace(self.state, alerts=alerts)
            self.view.show_alerts(alerts)

    def _show_demo(self) -> None:
        weather = demo_weather()
        forecast = demo_forecast()
        self.state = DashboardState(
            location=DEMO_LOCATION, weather=weather, forecast=forecast, demo=True
        )
        self.view.show_location(DEMO_LOCATION)
        self.view.show_weather(weather)
        self.view.show_forecast(forecast)
        self._notify("Showing demonstration data; configure an API key for live weather", "info")

    def _report_failure(self, e: BaseException, query: str) -> None:
        self.last_error = e
        if isinstance(e, Unconfigured):
            self._notify(setup_guidance(self.gateway.provider_name), "warning")
        elif isinstance(e, NotFound):
            self._notify(f'Could not find weather for "{e.query or query}"', "error")
        elif isinstance(e, (PermissionDenied, GeolocationUnavailable, OutOfServiceArea)):
            self._notify(str(e), "warning")
        elif isinstance(e, WeatherDashboardError):
            self._notify(f"Unable to load weather for {query}: {e}", "error")
        else:
            log.exception("Unexpected failure loading %s", query)
            self.view.show_message(f"Unexpected error loading weather for {query}", "error")

    # ------------------------ public entry points ------------------------

    async def check_status(self) -> bool:
        online = await self._call(self.gateway.check_reachability)
        self.view.show_status(online)
        return online

    async def load_default(self) -> bool:
        """Initial load; falls back to demonstration data on any failure."""
        if not self.gateway.is_configured():
            self._notify(setup_guidance(self.gateway.provider_name), "warning")
            self.view.show_status(False)
            self._show_demo()
            return False
        await self.check_status()
        started = self._token
        if await self.search_city(self.default_city):
            return True
        if self._token != started + 1:
            # superseded by a newer load
            return False
        self._show_demo()
        return False

    async def search_city(self, city_name: str) -> bool:
        query = (city_name or "").strip()
        if not query:
            self._notify("Please enter a city name", "warning")
            return False

        token = self._begin(f"Loading weather for {query}...")
        try:
            location = self.resolver.match_city(query)
            if location is not None:
                weather = await self._call(
                    self.gateway.fetch_current_by_coords, location.lat, location.lon
                )
            else:
                weather = await self._call(self.gateway.fetch_current_by_city, query)
                location = weather.location
            if not self._current(token):
                return False
            self._apply_current(location, weather)
            await self._load_forecast_and_alerts(token, location.lat, location.lon)
            return self._current(token)
        except Exception as e:
            if self._current(token):
                self._report_failure(e, query)
            return False
        finally:
            self._end(token)

    async def use_gps(self, geolocator: Optional[Geolocator]) -> bool:
        if geolocator is None:
            self._notify("GPS location is not supported here", "error")
            return False

        token = self._begin("Getting your location...")
        query = "your location"
        try:
            lat, lon = await geolocator.get_current_position()
            query = f"{lat:.4f}, {lon:.4f}"
            # rejects out-of-area fixes before any request
            location = self.resolver.resolve_by_coords(lat, lon)
            weather = await self._call(self.gateway.fetch_current_by_coords, lat, lon)
            if not self._current(token):
                return False
            self._apply_current(location, weather)
            await self._load_forecast_and_alerts(token, lat, lon)
            return self._current(token)
        except Exception as e:
            if self._current(token):
                self._report_failure(e, query)
            return False
        finally:
            self._end(token)

    async def refresh(self) -> bool:
        """Re-fetch the shown location. No-op while a load is in flight."""
        if self.busy:
            log.debug("Refresh skipped; request #%d in flight", self._inflight)
            return False
        location = self.state.location
        if location is None or not self.gateway.is_configured():
            return False

        token = self._begin()
        query = location.name
        try:
            weather = await self._call(self.gateway.fetch_current_by_coords, location.lat, location.lon)
            if not self._current(token):
                return False
            shown = location if not self.state.demo else weather.location
            self._apply_current(shown, weather)
            await self._load_forecast_and_alerts(token, location.lat, location.lon)
            return self._current(token)
        except Exception as e:
            if self._current(token):
                self._report_failure(e, query)
            return False
        finally:
            self._end(token)


class RefreshScheduler:
    """Cancellable periodic refresh plus a visibility-change trigger."""

    def __init__(self, controller: DashboardController, interval_minutes: float = 30.0) -> None:
        self.controller = controller
        self.interval_seconds = interval_minutes * 60
        self._task: Optional[asyncio.Task] = None

    @property
    def running(self) -> bool:
        return self._task is not None and not self._task.done()

    def start(self) -> None:
        if self.running:
            return
        self._task = asyncio.get_running_loop().create_task(self._run())

    async def stop(self) -> None:
        task, self._task = self._task, None
        if task is None:
            return
        task.cancel()
        with contextlib.suppress(asyncio.CancelledError):
            await task

    async def on_visibility_change(self, visible: bool) -> bool:
        if not visible:
            return False
        return await self.controller.refresh()

    async def _run(self) -> None:
        while True:
            await asyncio.sleep(self.interval_seconds)
            await self.controller.refresh()


def build_controller(settings: Settings, view: DashboardView) -> DashboardController:
    """Construct gateway, resolver and classifier explicitly and wire them up."""
    gateway = WeatherGateway(settings)
    resolver = LocationResolver(
        gateway, max_nearest_degrees=settings.app.location.max_nearest_degrees
    )
    classifier = AlertClassifier(gateway)
    return DashboardController(
        gateway, resolver, classifier, view, default_city=settings.app.default_city
    )
