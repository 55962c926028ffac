# backend/farmdesk/services/weather_service.py

"""
Read-only weather view backed by a fixture forecast.

Advice thresholds (°F / % / mph):
 - precipitation > 70 heavy rain, > 30 light rain
 - high > 85 heat
 - wind speed > 20 strong wind
 - humidity < 30 dry air
"""

import asyncio
import random
from datetime import date
from typing import Iterable, List, Optional, Tuple

from farmdesk.core.exceptions import NotFoundError
from farmdesk.schemas.weather import ForecastSummary, WeatherAdvice, WeatherDay


class WeatherService:
    def __init__(self, forecast: Iterable[dict] = (), delay_ms: Tuple[int, int] = (200, 500)):
        self._forecast = [WeatherDay.model_validate(d) for d in forecast]
        self._delay_ms = delay_ms

    async def _delay(self) -> None:
        low, high = self._delay_ms
        if high > 0:
            await asyncio.sleep(random.uniform(low, high) / 1000.0)

    async def get_forecast(self) -> List[WeatherDay]:
        await self._delay()
        return [d.model_copy() for d in self._forecast]

    async def get_todays_weather(self, today: Optional[date] = None) -> WeatherDay:
        """Today's entry, or the first forecast day when today is not listed."""
        await self._delay()
        if not self._forecast:
            raise NotFoundError("Weather", None)
        today = today or date.today()
        for day in self._forecast:
            if day.date == today:
                return day.model_copy()
        return self._forecast[0].model_copy()


def get_weather_advice(weather: WeatherDay) -> List[WeatherAdvice]:
    advice = []

    if weather.precipitation > 70:
        advice.append(WeatherAdvice(
            type="warning", icon="CloudRain",
            message="Heavy rain expected - postpone irrigation and outdoor work",
        ))
    elif weather.precipitation > 30:
        advice.append(WeatherAdvice(
            type="info", icon="Droplets",
            message="Light rain possible - monitor soil moisture levels",
        ))

    if weather.high > 85:
        advice.append(WeatherAdvice(
            type="warning", icon="Thermometer",
            message="High temperatures - ensure adequate irrigation for crops",
        ))

    if weather.wind_speed > 20:
        advice.append(WeatherAdvice(
            type="caution", icon="Wind",
            message="Strong winds - secure loose materials and check plant support",
        ))

    if weather.humidity < 30:
        advice.append(WeatherAdvice(
            type="info", icon="Gauge",
            message="Low humidity - increase watering frequency for sensitive plants",
        ))

    return advice


def summarize_forecast(forecast: List[WeatherDay]) -> ForecastSummary:
    if not forecast:
        return ForecastSummary(average_high=0, average_low=0, rainy_days=0, average_humidity=0)
    n = len(forecast)
    return ForecastSummary(
        average_high=round(sum(d.high for d in forecast) / n),
        average_low=round(sum(d.low for d in forecast) / n),
        rainy_days=sum(1 for d in forecast if d.precipitation > 50),
        average_humidity=round(sum(d.humidity for d in forecast) / n),
    )
