# src/weather_dashboard/cli.py
"""
Command-line entrypoint for weather-dashboard.

Goals
-----
- Zero-config happy path: `python -m weather_dashboard` loads the default city
  (or demonstration data when no API key is set).
- Useful flags:
    --city NAME            Search a city
    --lat LAT --lon LON    Use a fixed GPS position
    --suggest QUERY        Print city suggestions from the built-in table and exit
    --watch                Keep running and refresh periodically
    --check                Report whether the weather provider is reachable and exit
    --config-dir PATH      Override ./config (also via WEATHER_DASHBOARD_CONFIG_DIR)
    --root PATH            Override repo root (also via WEATHER_DASHBOARD_ROOT)
    --print-settings       Dump effective settings (redact secrets) and exit
    --version              Print version and exit

Exit codes
----------
0  success
1  configuration error (missing/invalid config or API key when needed)
2  runtime/provider error
"""

from __future__ import annotations

import argparse
import asyncio
import json
import logging
import os
import sys
from pathlib import Path
from typing import Any, Dict, List, Optional, Tuple

from . import __version__ as PKG_VERSION
from .controller import DashboardController, RefreshScheduler, build_controller
from .display import format_location_display, weather_icon_category
from .errors import GeolocationUnavailable
from .location import LocationResolver
from .models import Alert, CurrentWeather, ForecastDay, Location
from .settings import Settings


def setup_logging(level: str) -> None:
    logging.basicConfig(
        level=getattr(logging, level, logging.INFO),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )


class ConsoleView:
    """Renders dashboard callbacks as plain text."""

    def __init__(self, out=None) -> None:
        self.out = out or sys.stdout

    def _print(self, text: str = "") -> None:
        print(text, file=self.out)

    def show_loading(self, message: str) -> None:
        self._print(f"... {message}")

    def hide_loading(self) -> None:
        pass

    def show_location(self, location: Location) -> None:
        self._print(f"@ {format_location_display(location)}")

    def show_weather(self, weather: CurrentWeather) -> None:
        icon = weather_icon_category(weather.weather_code, weather.is_day).value
        self._print(f"  {weather.temperature}°F (feels like {weather.feels_like}°F), {weather.description} [{icon}]")
        self._print(
            f"  humidity {weather.humidity}%  pressure {weather.pressure_in_hg} inHg  "
            f"visibility {weather.visibility_miles} mi  wind {weather.wind_speed_mph} mph"
        )

    def show_forecast(self, days: List[ForecastDay]) -> None:
        self._print("  Forecast:")
        for day in days:
            icon = weather_icon_category(day.weather_code).value
            self._print(f"    {day.date:%a %b %d}  {day.high}°/{day.low}°  {day.description} [{icon}]")

    def show_alerts(self, alerts: List[Alert]) -> None:
        if not alerts:
            self._print("  No active alerts")
            return
        self._print("  Alerts:")
        for a in alerts:
            sample = " (sample)" if a.is_synthetic else ""
            until = f" until {a.end:%Y-%m-%d %H:%M}" if a.end else ""
            self._print(f"    [{a.severity.value.upper()}] {a.title}{sample}{until}")

    def show_message(self, text: str, level: str = "info") -> None:
        self._print(f"[{level}] {text}")

    def show_status(self, online: bool) -> None:
        self._print("API Online" if online else "API Offline")


class StaticGeolocator:
    """Geolocation capability backed by a fixed position."""

    def __init__(self, lat: Optional[float], lon: Optional[float]) -> None:
        self.lat = lat
        self.lon = lon

    async def get_current_position(self) -> Tuple[float, float]:
        if self.lat is None or self.lon is None:
            raise GeolocationUnavailable("Both --lat and --lon are required for a position")
        return self.lat, self.lon


def _parse_args(argv: list[str]) -> argparse.Namespace:
    p = argparse.ArgumentParser(
        prog="weather-dashboard",
        description="Current conditions, 5-day forecast and alerts for US cities.",
    )
    p.add_argument("--city", help="City to look up (e.g. 'Denver' or 'Austin, TX').")
    p.add_argument("--lat", type=float, help="Latitude of a GPS position.")
    p.add_argument("--lon", type=float, help="Longitude of a GPS position.")
    p.add_argument("--suggest", metavar="QUERY", help="Print matching known cities and exit.")
    p.add_argument(
        "--watch",
        action="store_true",
        help="Keep running and refresh every refresh_interval_minutes.",
    )
    p.add_argument(
        "--check",
        action="store_true",
        help="Check weather provider reachability and exit.",
    )
    p.add_argument(
        "--config-dir",
        type=Path,
        help="Override config directory (default: ./config or $WEATHER_DASHBOARD_CONFIG_DIR)",
    )
    p.add_argument(
        "--root",
        type=Path,
        help="Override repo root (default: inferred from package or $WEATHER_DASHBOARD_ROOT)",
    )
    p.add_argument(
        "--print-settings",
        action="store_true",
        help="Print effective settings (with secrets redacted) and exit.",
    )
    p.add_argument("--version", action="store_true", help="Print version and exit.")
    return p.parse_args(argv)


def _as_dict(settings: Settings) -> Dict[str, Any]:
    data = settings.model_dump(mode="json")
    api = data["app"]["api"]
    if settings.is_configured:
        api["key"] = "********"
    data["configured"] = settings.is_configured
    return data


async def _load(controller: DashboardController, ns: argparse.Namespace) -> bool:
    if ns.lat is not None or ns.lon is not None:
        return await controller.use_gps(StaticGeolocator(ns.lat, ns.lon))
    if ns.city:
        return await controller.search_city(ns.city)
    await controller.load_default()
    return True


async def _run(controller: DashboardController, ns: argparse.Namespace, interval: float) -> bool:
    ok = await _load(controller, ns)
    if not ns.watch:
        return ok
    scheduler = RefreshScheduler(controller, interval)
    scheduler.start()
    try:
        await asyncio.Event().wait()
    finally:
        await scheduler.stop()
    return ok


def main(argv: list[str] | None = None) -> int:
    ns = _parse_args(sys.argv[1:] if argv is None else argv)

    if ns.version:
        print(f"weather-dashboard {PKG_VERSION}")
        return 0

    # Environment overrides (allow CLI to take precedence)
    if ns.root:
        os.environ["WEATHER_DASHBOARD_ROOT"] = str(ns.root.expanduser())
    if ns.config_dir:
        os.environ["WEATHER_DASHBOARD_CONFIG_DIR"] = str(ns.config_dir.expanduser())

    try:
        settings = Settings.load(root=ns.root.expanduser() if ns.root else None)
    except Exception as e:
        print(f"[config] {e}", file=sys.stderr)
        return 1

    setup_logging(settings.app.log_level)

    if ns.print_settings:
        print(json.dumps(_as_dict(settings), indent=2, ensure_ascii=False))
        return 0

    if ns.suggest is not None:
        for city in LocationResolver().search_cities(ns.suggest):
            print(format_location_display(city))
        return 0

    view = ConsoleView()
    try:
        controller = build_controller(settings, view)
    except Exception as e:
        print(f"[config] {e}", file=sys.stderr)
        return 1

    if ns.check:
        try:
            settings.require_api_key()
        except RuntimeError as e:
            print(f"[config] {e}", file=sys.stderr)
            return 1
        return 0 if asyncio.run(controller.check_status()) else 2

    try:
        ok = asyncio.run(_run(controller, ns, settings.app.refresh_interval_minutes))
    except KeyboardInterrupt:
        return 0
    except Exception as e:
        print(f"[runtime] {e}", file=sys.stderr)
        return 2
    return 0 if ok else 2


if __name__ == "__main__":
    raise SystemExit(main())
