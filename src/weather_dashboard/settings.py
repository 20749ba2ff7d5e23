# src/weather_dashboard/settings.py
"""
Central configuration loader for weather-dashboard.

- Provider selection (WeatherAPI.com or OpenWeatherMap) + API key
- Log-level normalization + validation
- Config directory override via WEATHER_DASHBOARD_CONFIG_DIR
- Helpful, explicit errors for common misconfigurations
"""

from __future__ import annotations

import os
import re
from pathlib import Path
from typing import Any, Dict, Optional, Union

import yaml
from pydantic import BaseModel, Field, ValidationError, field_validator

# Literal value shipped in templates; treated as "no key configured".
API_KEY_PLACEHOLDER = "YOUR_API_KEY_HERE"

PROVIDERS = ("weatherapi", "openweathermap")

# ---------- tiny .env loader (opt-in, no external dependency) ----------


def _load_dotenv(dotenv_path: Path) -> None:
    """Load KEY=VALUE pairs from a .env file into os.environ if not already set."""
    if not dotenv_path.exists():
        return
    for line in dotenv_path.read_text(encoding="utf-8").splitlines():
        line = line.strip()
        if not line or line.startswith("#"):
            continue
        if "=" not in line:
            continue
        key, val = line.split("=", 1)
        key = key.strip()
        val = val.strip().strip("'").strip('"')
        os.environ.setdefault(key, val)


# ---------- helpers ----------

_ENV_VAR_PATTERN = re.compile(r"\$\{([A-Z0-9_]+)\}")


def _env_expand(value: Any) -> Any:
    """Expand ${VAR} using environment variables within YAML scalar strings."""
    if isinstance(value, str):

        def repl(match: re.Match[str]) -> str:
            var = match.group(1)
            return os.environ.get(var, match.group(0))

        return _ENV_VAR_PATTERN.sub(repl, value)
    if isinstance(value, dict):
        return {k: _env_expand(v) for k, v in value.items()}
    if isinstance(value, list):
        return [_env_expand(v) for v in value]
    return value


def _read_yaml(path: Path) -> Dict[str, Any]:
    if not path.exists():
        return {}
    data = yaml.safe_load(path.read_text(encoding="utf-8")) or {}
    return _env_expand(data)  # type: ignore[return-value]


# ---------- Pydantic models ----------


class ApiConfig(BaseModel):
    key: str = Field(default=API_KEY_PLACEHOLDER, description="provider API key")
    timeout_seconds: float = 10.0
    units: str = Field(
        default="imperial",
        description="unit system requested from OpenWeatherMap (imperial|metric|standard)",
    )

    @field_validator("key", mode="before")
    @classmethod
    def _strip_key(cls, v: Optional[str]) -> str:
        v = (v or "").strip()
        # unexpanded ${VAR}: the variable was not set
        if _ENV_VAR_PATTERN.fullmatch(v):
            return ""
        return v

    @field_validator("timeout_seconds")
    @classmethod
    def _positive_timeout(cls, v: float) -> float:
        if v <= 0:
            raise ValueError("timeout_seconds must be positive")
        return v

    @field_validator("units")
    @classmethod
    def _check_units(cls, v: str) -> str:
        lv = v.lower().strip()
        if lv not in {"imperial", "metric", "standard"}:
            raise ValueError("units must be one of imperial, metric, standard")
        return lv

    @property
    def is_configured(self) -> bool:
        return bool(self.key) and self.key != API_KEY_PLACEHOLDER


class LocationConfig(BaseModel):
    max_nearest_degrees: float = Field(
        default=1.5,
        description="nearest known city must lie within this many degrees",
    )

    @field_validator("max_nearest_degrees")
    @classmethod
    def _non_negative(cls, v: float) -> float:
        if v < 0:
            raise ValueError("max_nearest_degrees must be non-negative")
        return v


class AppConfig(BaseModel):
    log_level: str = Field(default="INFO", description="Python logging level")
    provider: str = Field(default="weatherapi", description="active weather provider")
    api: ApiConfig = Field(default_factory=ApiConfig)
    default_city: str = "New York"
    refresh_interval_minutes: float = 30.0
    location: LocationConfig = Field(default_factory=LocationConfig)

    @field_validator("log_level")
    @classmethod
    def _normalize_log_level(cls, v: str) -> str:
        lv = v.upper().strip()
        allowed = {"CRITICAL", "ERROR", "WARNING", "INFO", "DEBUG"}
        if lv not in allowed:
            raise ValueError(f"log_level must be one of {sorted(allowed)}")
        return lv

    @field_validator("provider")
    @classmethod
    def _check_provider(cls, v: str) -> str:
        lv = v.lower().strip()
        if lv not in PROVIDERS:
            raise ValueError(f"provider must be one of {list(PROVIDERS)}")
        return lv

    @field_validator("refresh_interval_minutes")
    @classmethod
    def _positive_interval(cls, v: float) -> float:
        if v <= 0:
            raise ValueError("refresh_interval_minutes must be positive")
        return v


class Paths(BaseModel):
    root: Path
    config_dir: Path

    @field_validator("root", "config_dir", mode="before")
    @classmethod
    def _expanduser(cls, v: Union[str, Path]) -> Path:
        return Path(v).expanduser()


class Settings(BaseModel):
    """Single source of truth for runtime configuration."""

    paths: Paths
    app: AppConfig

    # ----------------- loader -----------------

    @classmethod
    def load(
        cls,
        root: Optional[Path] = None,
        dotenv: Optional[Path] = None,
    ) -> "Settings":
        """
        Load settings from environment + YAML.

        Precedence:
          1) Environment variables (including those loaded from `.env`)
          2) config/app.yaml
          3) Defaults in the models
        """
        env_root = os.environ.get("WEATHER_DASHBOARD_ROOT", "")
        if env_root:
            inferred_root = Path(env_root).expanduser()
        else:
            # src/weather_dashboard/settings.py -> project root is parents[2]
            inferred_root = Path(__file__).resolve().parents[2]
        base_root = root or inferred_root

        cfg_override = os.environ.get("WEATHER_DASHBOARD_CONFIG_DIR")
        config_dir = (
            Path(cfg_override).expanduser() if cfg_override else (base_root / "config")
        )

        # Optionally load .env from repo root (not config dir)
        dotenv_path = dotenv or base_root / ".env"
        _load_dotenv(dotenv_path)

        paths = Paths(root=base_root, config_dir=config_dir)

        app_path = config_dir / "app.yaml"
        if not app_path.exists():
            raise RuntimeError(
                f"Missing required config: {app_path}. "
                "Generate it from the repository template under config/app.yaml."
            )
        app_yaml = _read_yaml(app_path)

        # Secrets and provider choice may come from the environment only
        api_yaml = dict(app_yaml.get("api") or {})
        if os.environ.get("WEATHER_API_KEY"):
            api_yaml["key"] = os.environ["WEATHER_API_KEY"]
        app_yaml["api"] = api_yaml
        if os.environ.get("WEATHER_PROVIDER"):
            app_yaml["provider"] = os.environ["WEATHER_PROVIDER"]

        try:
            app_cfg = AppConfig(**app_yaml)
        except ValidationError as e:
            raise RuntimeError(f"Invalid app.yaml configuration: {e}") from e

        return cls(paths=paths, app=app_cfg)

    # ----------------- conveniences -----------------

    @property
    def is_configured(self) -> bool:
        return self.app.api.is_configured

    def require_api_key(self) -> None:
        """Raise if no usable API key is configured."""
        if not self.is_configured:
            raise RuntimeError(
                "Weather API key is not configured. Set WEATHER_API_KEY "
                "(e.g., in .env or your environment) or api.key in config/app.yaml."
            )
