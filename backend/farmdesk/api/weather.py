# backend/farmdesk/api/weather.py

from fastapi import APIRouter, Depends

from farmdesk.api.deps import get_registry, loaded
from farmdesk.services.pages import WeatherPage
from farmdesk.services.registry import ServiceRegistry
from farmdesk.services.weather_service import get_weather_advice

router = APIRouter(prefix="/weather", tags=["weather"])


@router.get("")
async def api_forecast(registry: ServiceRegistry = Depends(get_registry)):
    page = await loaded(WeatherPage(registry))
    return {
        "forecast": [
            {**day.model_dump(mode="json", by_alias=True), "advice": advice}
            for day, advice in zip(page.forecast, page.advice())
        ],
        "summary": page.summary(),
    }


@router.get("/today")
async def api_todays_weather(registry: ServiceRegistry = Depends(get_registry)):
    day = await registry.weather.get_todays_weather()
    return {**day.model_dump(mode="json", by_alias=True), "advice": get_weather_advice(day)}
