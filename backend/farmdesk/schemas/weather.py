# backend/farmdesk/schemas/weather.py

import datetime

from pydantic import BaseModel, ConfigDict, field_validator
from pydantic.alias_generators import to_camel

from farmdesk.schemas.common import date_only


class WeatherDay(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    date: datetime.date
    condition: str
    high: float
    low: float
    precipitation: float
    humidity: float
    wind_speed: float

    @field_validator("date", mode="before")
    @classmethod
    def _strip_time(cls, v):
        return date_only(v)


class WeatherAdvice(BaseModel):
    type: str  # warning | caution | info
    icon: str
    message: str


class ForecastSummary(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    average_high: int
    average_low: int
    rainy_days: int
    average_humidity: int
