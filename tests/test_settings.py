from pathlib import Path

import pytest

from weather_dashboard.settings import ApiConfig, AppConfig, Settings


def test_load_reads_yaml_and_env_key(tmp_repo: Path, monkeypatch):
    monkeypatch.setenv("WEATHER_API_KEY", "abc123")
    s = Settings.load(root=tmp_repo)

    assert s.app.provider == "weatherapi"
    assert s.app.api.key == "abc123"
    assert s.is_configured
    assert s.app.refresh_interval_minutes == 30
    assert s.paths.config_dir == tmp_repo / "config"


def test_unexpanded_key_is_unconfigured(tmp_repo: Path):
    s = Settings.load(root=tmp_repo, dotenv=tmp_repo / "missing.env")
    assert s.app.api.key == ""
    assert not s.is_configured
    with pytest.raises(RuntimeError):
        s.require_api_key()


def test_dotenv_and_provider_override(tmp_repo: Path, monkeypatch):
    (tmp_repo / ".env").write_text("WEATHER_API_KEY='from-dotenv'\n# comment\n", encoding="utf-8")
    monkeypatch.setenv("WEATHER_PROVIDER", "OpenWeatherMap")
    s = Settings.load(root=tmp_repo)

    assert s.app.api.key == "from-dotenv"
    assert s.app.provider == "openweathermap"


def test_missing_app_yaml_is_explicit(tmp_path: Path):
    with pytest.raises(RuntimeError, match="Missing required config"):
        Settings.load(root=tmp_path)


def test_invalid_yaml_values_raise(tmp_repo: Path):
    (tmp_repo / "config" / "app.yaml").write_text("provider: darksky\n", encoding="utf-8")
    with pytest.raises(RuntimeError, match="Invalid app.yaml"):
        Settings.load(root=tmp_repo)


def test_placeholder_key_is_unconfigured():
    assert not ApiConfig(key="YOUR_API_KEY_HERE").is_configured
    assert not ApiConfig().is_configured
    assert ApiConfig(key="real").is_configured


def test_app_config_normalizes():
    app = AppConfig(log_level="debug", provider=" WeatherAPI ")
    assert app.log_level == "DEBUG"
    assert app.provider == "weatherapi"
    with pytest.raises(ValueError):
        AppConfig(refresh_interval_minutes=0)
    with pytest.raises(ValueError):
        ApiConfig(units="kelvin")
