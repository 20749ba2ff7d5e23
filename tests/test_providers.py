# tests/test_providers.py
from datetime import date, datetime, timezone

from weather_dashboard.models import AlertOrigin, Severity, VISIBILITY_UNAVAILABLE
from weather_dashboard.providers import common
from weather_dashboard.providers import openweathermap as owm_mod
from weather_dashboard.providers import weatherapi as wapi_mod
from weather_dashboard.settings import ApiConfig


def test_weatherapi_normalize_current(weatherapi_current):
    w = wapi_mod.normalize_current(weatherapi_current)

    assert w.location.name == "Denver"
    assert w.location.region == "Colorado"
    assert w.temperature == 72 and isinstance(w.temperature, int)
    assert w.feels_like == 70
    assert w.pressure_in_hg == "30.10"
    assert w.visibility_miles == "9.0"
    assert w.wind_speed_mph == 7
    assert w.wind_direction_deg == 220
    assert w.weather_code == 802  # 1003 partly cloudy
    assert w.is_day is True


def test_weatherapi_missing_visibility_uses_sentinel(weatherapi_current):
    del weatherapi_current["current"]["vis_miles"]
    w = wapi_mod.normalize_current(weatherapi_current)
    assert w.visibility_miles == VISIBILITY_UNAVAILABLE


def test_weatherapi_forecast_maps_daily_aggregates():
    raw = {
        "forecast": {
            "forecastday": [
                {
                    "date": f"2025-06-0{i}",
                    "day": {
                        "maxtemp_f": 80.6 + i,
                        "mintemp_f": 60.4,
                        "condition": {"text": "Sunny", "icon": "", "code": 1000},
                    },
                }
                for i in range(1, 8)
            ]
        }
    }
    days = wapi_mod.normalize_forecast(raw)

    assert len(days) == 5
    assert days[0].date == date(2025, 6, 1)
    assert days[0].high == 82 and days[0].low == 60
    assert days[0].weather_code == 800
    assert [d.date for d in days] == sorted(d.date for d in days)


def test_weatherapi_alerts_absent_block_is_none():
    assert wapi_mod.normalize_alerts({"location": {}, "forecast": {}}) is None
    assert wapi_mod.normalize_alerts({"alerts": {}}) is None


def test_weatherapi_alerts_normalized():
    raw = {
        "alerts": {
            "alert": [
                {
                    "headline": "Flood Warning issued for Harris County",
                    "severity": "Moderate",
                    "certainty": "Likely",
                    "areas": "Harris; Fort Bend",
                    "desc": "River flooding expected.",
                    "effective": "2025-06-01T10:00:00-05:00",
                    "expires": "2025-06-02T10:00:00-05:00",
                }
            ]
        }
    }
    alerts = wapi_mod.normalize_alerts(raw)

    assert len(alerts) == 1
    a = alerts[0]
    assert a.severity is Severity.MODERATE
    assert a.areas == frozenset({"Harris", "Fort Bend"})
    assert a.tags == ("Moderate", "Likely")
    assert a.origin is AlertOrigin.LIVE
    assert a.end - a.start == datetime(2025, 6, 2) - datetime(2025, 6, 1)


def test_owm_normalize_current_converts_metric_pressure_and_visibility(owm_current):
    w = owm_mod.normalize_current(owm_current, "imperial")

    assert w.location.name == "New York"
    assert w.temperature == 58
    assert w.pressure_in_hg == f"{1015 * 0.02953:.2f}" == "29.97"
    assert w.visibility_miles == "6.2"
    assert w.wind_speed_mph == 9
    assert w.weather_code == 500
    assert w.is_day is False  # "10n" icon


def test_owm_normalize_current_from_celsius(owm_current):
    owm_current["main"].update({"temp": 20.0, "feels_like": -40.0})
    owm_current["wind"]["speed"] = 10.0  # m/s
    owm_current.pop("visibility")
    w = owm_mod.normalize_current(owm_current, "metric")

    assert w.temperature == 68
    assert w.feels_like == -40
    assert w.wind_speed_mph == 22
    assert w.visibility_miles == VISIBILITY_UNAVAILABLE


def test_owm_forecast_groups_slots_by_date(owm_forecast):
    days = owm_mod.normalize_forecast(owm_forecast)

    assert len(days) == 2
    assert (days[0].high, days[0].low) == (70, 60)
    assert (days[1].high, days[1].low) == (75, 58)
    assert days[0].date < days[1].date


def test_owm_forecast_truncates_to_five_dates(owm_forecast):
    first = owm_forecast["list"][0]
    owm_forecast["list"] = [
        {**first, "dt": first["dt"] + day * 86400} for day in range(7)
    ]
    days = owm_mod.normalize_forecast(owm_forecast)
    assert len(days) == 5


def test_owm_alerts_use_tags_for_severity():
    raw = {
        "alerts": [
            {
                "event": "Tornado Warning",
                "description": "Take shelter now.",
                "start": 1748736000,
                "end": 1748739600,
                "tags": ["Extreme", "Tornado"],
            }
        ]
    }
    alerts = owm_mod.normalize_alerts(raw)

    assert alerts[0].severity is Severity.SEVERE
    assert alerts[0].start == datetime(2025, 6, 1, tzinfo=timezone.utc)
    assert owm_mod.normalize_alerts({}) == []


def test_requests_carry_key_and_location():
    api = ApiConfig(key="abc", units="metric")

    url, params = wapi_mod.city_request(api, "Boise")
    assert url.endswith("/current.json") and params["q"] == "Boise,US" and params["key"] == "abc"

    url, params = owm_mod.forecast_request(api, 40.0, -74.0, 5)
    assert params["units"] == "metric" and params["appid"] == "abc" and params["cnt"] == 40


def test_unit_helpers():
    assert common.hpa_to_inhg(1013.25) == "29.92"
    assert common.meters_to_miles(16093) == "10.0"
    assert common.meters_to_miles(None) is None
    assert common.to_fahrenheit(273.15, "standard") == 32
    assert common.to_mph(1, "metric") == 2


def test_half_degree_values_round_up(weatherapi_current):
    weatherapi_current["current"].update({"temp_f": 72.5, "feelslike_f": 70.5, "wind_mph": 6.5})
    w = wapi_mod.normalize_current(weatherapi_current)
    assert (w.temperature, w.feels_like, w.wind_speed_mph) == (73, 71, 7)

    raw = {"forecast": {"forecastday": [{"date": "2025-06-01", "day": {"maxtemp_f": 84.5, "mintemp_f": 61.5}}]}}
    day = wapi_mod.normalize_forecast(raw)[0]
    assert (day.high, day.low) == (85, 62)

    assert common.round_half_up(2.5) == 3
    assert common.round_half_up(-0.5) == 0
    assert common.round_half_up(-1.6) == -2
