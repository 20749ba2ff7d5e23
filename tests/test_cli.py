import io
import json
from datetime import date, datetime, timezone

from weather_dashboard import cli
from weather_dashboard.models import Alert, AlertOrigin, ForecastDay, Severity


def test_version(capsys):
    assert cli.main(["--version"]) == 0
    assert "weather-dashboard 0.1.0" in capsys.readouterr().out


def test_print_settings_redacts_key(tmp_repo, monkeypatch, capsys):
    monkeypatch.setenv("WEATHER_API_KEY", "super-secret")
    assert cli.main(["--root", str(tmp_repo), "--print-settings"]) == 0

    out = capsys.readouterr().out
    assert "super-secret" not in out
    data = json.loads(out)
    assert data["configured"] is True
    assert data["app"]["api"]["key"] == "********"


def test_missing_config_exit_code(tmp_path, capsys):
    assert cli.main(["--root", str(tmp_path)]) == 1
    assert "[config]" in capsys.readouterr().err


def test_suggest(tmp_repo, capsys):
    assert cli.main(["--root", str(tmp_repo), "--suggest", "san"]) == 0
    out = capsys.readouterr().out
    assert "San Diego, CA" in out


def test_check_without_key_is_config_error(tmp_repo, capsys):
    assert cli.main(["--root", str(tmp_repo), "--check"]) == 1


def test_default_run_without_key_shows_demo(tmp_repo, capsys):
    assert cli.main(["--root", str(tmp_repo)]) == 0
    out = capsys.readouterr().out
    assert "Demo City" in out
    assert "72°F" in out


def test_console_view_marks_sample_alerts():
    buf = io.StringIO()
    view = cli.ConsoleView(out=buf)
    view.show_forecast([ForecastDay(date=date(2025, 6, 2), high=80, low=61, weather_code=800)])
    view.show_alerts(
        [
            Alert(
                title="Tornado Watch",
                severity=Severity.SEVERE,
                end=datetime(2025, 6, 1, 18, tzinfo=timezone.utc),
                origin=AlertOrigin.SYNTHETIC,
            )
        ]
    )
    text = buf.getvalue()
    assert "80°/61°" in text and "clear-day" in text
    assert "[SEVERE] Tornado Watch (sample)" in text
