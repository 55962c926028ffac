# backend/tests/test_weather.py

from datetime import date

import pytest

from farmdesk.core.exceptions import NotFoundError
from farmdesk.schemas.weather import WeatherDay
from farmdesk.services.weather_service import WeatherService, get_weather_advice, summarize_forecast


def _day(**overrides):
    base = {"date": "2024-06-01", "condition": "Sunny", "high": 75, "low": 55,
            "precipitation": 0, "humidity": 50, "windSpeed": 5}
    return WeatherDay.model_validate({**base, **overrides})


async def test_todays_weather_matches_date(registry):
    day = await registry.weather.get_todays_weather(date(2024, 6, 3))
    assert day.condition == "Showers"


async def test_todays_weather_falls_back_to_first_day(registry):
    day = await registry.weather.get_todays_weather(date(2030, 1, 1))
    assert day.date == date(2024, 6, 1)


async def test_empty_forecast_has_no_today():
    with pytest.raises(NotFoundError):
        await WeatherService([], delay_ms=(0, 0)).get_todays_weather()


def test_calm_day_has_no_advice():
    assert get_weather_advice(_day()) == []


@pytest.mark.parametrize(
    "overrides, types",
    [
        ({"precipitation": 80}, ["warning"]),
        ({"precipitation": 40}, ["info"]),
        ({"precipitation": 30}, []),
        ({"high": 90}, ["warning"]),
        ({"windSpeed": 25}, ["caution"]),
        ({"humidity": 20}, ["info"]),
        ({"precipitation": 75, "windSpeed": 21}, ["warning", "caution"]),
    ],
)
def test_advice_thresholds(overrides, types):
    assert [a.type for a in get_weather_advice(_day(**overrides))] == types


async def test_forecast_summary(registry):
    summary = summarize_forecast(await registry.weather.get_forecast())
    assert summary.average_high == 81
    assert summary.average_low == 61
    assert summary.rainy_days == 2
    assert summary.average_humidity == 54
