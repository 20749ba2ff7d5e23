from __future__ import annotations

from pathlib import Path
from typing import Any, Callable, Dict, List, Tuple

import pytest

from weather_dashboard.settings import ApiConfig, AppConfig, Paths, Settings

# --------------------------- temp repo layout ---------------------------


@pytest.fixture
def tmp_repo(tmp_path: Path) -> Path:
    (tmp_path / "config").mkdir(parents=True, exist_ok=True)
    (tmp_path / "config" / "app.yaml").write_text(
        "log_level: INFO\nprovider: weatherapi\napi:\n  key: ${WEATHER_API_KEY}\n",
        encoding="utf-8",
    )
    return tmp_path


@pytest.fixture(autouse=True)
def clean_env(monkeypatch: pytest.MonkeyPatch):
    for var in (
        "WEATHER_API_KEY",
        "WEATHER_PROVIDER",
        "WEATHER_DASHBOARD_ROOT",
        "WEATHER_DASHBOARD_CONFIG_DIR",
    ):
        monkeypatch.delenv(var, raising=False)


# --------------------------- Settings factory ---------------------------


@pytest.fixture
def settings_factory(tmp_repo: Path) -> Callable[..., Settings]:
    """Build Settings rooted at tmp_repo without reading real YAML/.env."""

    def _build(
        provider: str = "weatherapi",
        api_key: str = "test-key",
        units: str = "imperial",
        log_level: str = "ERROR",
    ) -> Settings:
        paths = Paths(root=tmp_repo, config_dir=tmp_repo / "config")
        app = AppConfig(
            log_level=log_level,
            provider=provider,
            api=ApiConfig(key=api_key, units=units, timeout_seconds=1),
        )
        return Settings(paths=paths, app=app)

    return _build


# --------------------------- Network hardening ---------------------------


@pytest.fixture(autouse=True)
def block_network(monkeypatch: pytest.MonkeyPatch):
    """Disallow real HTTP. If a test needs HTTP, it must stub the call explicitly."""
    import requests

    def _nope(*args, **kwargs):
        raise RuntimeError(
            "Network access disabled in tests. Monkeypatch provider HTTP calls."
        )

    monkeypatch.setattr(requests, "get", _nope)


# --------------------------- Sample payloads ---------------------------


@pytest.fixture
def weatherapi_current() -> Dict[str, Any]:
    return {
        "location": {
            "name": "Denver",
            "region": "Colorado",
            "country": "United States of America",
            "lat": 39.74,
            "lon": -104.98,
        },
        "current": {
            "temp_f": 71.6,
            "feelslike_f": 70.4,
            "humidity": 23,
            "pressure_in": 30.1,
            "vis_miles": 9.0,
            "wind_mph": 6.9,
            "wind_degree": 220,
            "is_day": 1,
            "condition": {
                "text": "Partly cloudy",
                "icon": "//cdn.weatherapi.com/weather/64x64/day/116.png",
                "code": 1003,
            },
        },
    }


@pytest.fixture
def owm_current() -> Dict[str, Any]:
    return {
        "coord": {"lon": -74.006, "lat": 40.7143},
        "weather": [{"id": 500, "main": "Rain", "description": "light rain", "icon": "10n"}],
        "main": {"temp": 58.3, "feels_like": 57.6, "pressure": 1015, "humidity": 87},
        "visibility": 10000,
        "wind": {"speed": 9.2, "deg": 60},
        "sys": {"country": "US"},
        "name": "New York",
        "timezone": -14400,
    }


@pytest.fixture
def owm_forecast() -> Dict[str, Any]:
    # 8 three-hourly slots: 4 on 2025-06-01 and 4 on 2025-06-02 (UTC)
    day1 = 1748736000  # 2025-06-01T00:00:00Z
    day2 = day1 + 86400
    temps = [60, 65, 70, 68, 72, 75, 58, 62]
    stamps = [day1 + h * 3600 for h in (0, 3, 6, 9)] + [day2 + h * 3600 for h in (0, 3, 6, 9)]
    return {
        "city": {"name": "New York", "timezone": 0},
        "list": [
            {
                "dt": ts,
                "main": {"temp": t},
                "weather": [{"id": 801, "description": "few clouds", "icon": "02d"}],
            }
            for ts, t in zip(stamps, temps)
        ],
    }


# --------------------------- Recording view ---------------------------


class RecordingView:
    """DashboardView that records every callback."""

    def __init__(self) -> None:
        self.calls: List[Tuple[str, Any]] = []

    def _rec(self, name: str, value: Any = None) -> None:
        self.calls.append((name, value))

    def named(self, name: str) -> List[Any]:
        return [v for n, v in self.calls if n == name]

    def show_loading(self, message):
        self._rec("loading", message)

    def hide_loading(self):
        self._rec("hide_loading")

    def show_location(self, location):
        self._rec("location", location)

    def show_weather(self, weather):
        self._rec("weather", weather)

    def show_forecast(self, days):
        self._rec("forecast", days)

    def show_alerts(self, alerts):
        self._rec("alerts", alerts)

    def show_message(self, text, level="info"):
        self._rec("message", (level, text))

    def show_status(self, online):
        self._rec("status", online)


@pytest.fixture
def view() -> RecordingView:
    return RecordingView()
