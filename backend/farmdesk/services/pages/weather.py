# backend/farmdesk/services/pages/weather.py

from typing import List

from farmdesk.schemas.weather import ForecastSummary, WeatherAdvice, WeatherDay
from farmdesk.services.pages.base import PageController
from farmdesk.services.weather_service import get_weather_advice, summarize_forecast


class WeatherPage(PageController):
    page = "weather"
    load_error_message = "Failed to load weather data"

    def __init__(self, registry, notifier=None):
        super().__init__(registry, notifier)
        self.forecast: List[WeatherDay] = []

    async def load(self) -> bool:
        def apply(forecast):
            self.forecast = forecast

        return await self._run_load(self.registry.weather.get_forecast, apply)

    def advice(self) -> List[List[WeatherAdvice]]:
        return [get_weather_advice(day) for day in self.forecast]

    def summary(self) -> ForecastSummary:
        return summarize_forecast(self.forecast)
