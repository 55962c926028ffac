# backend/farmdesk/services/registry.py

"""
Composition root for the entity stores.

One ServiceRegistry is built per process (or per test) and owns every
store instance. The storage strategy is picked here, once, from settings:
 - "memory": InMemoryBackend seeded from fixtures (or injected seed data)
 - "remote": RemoteBackend over a shared RecordApiClient
"""

import json
import os
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

from farmdesk.core.config import Settings
from farmdesk.core.logger import get_logger
from farmdesk.services.crop_service import CropService
from farmdesk.services.expense_service import ExpenseService
from farmdesk.services.farm_service import FarmService
from farmdesk.services.income_service import IncomeService
from farmdesk.services.notification_service import LoggingNotifier, Notifier
from farmdesk.services.record_backend import InMemoryBackend, RecordBackend
from farmdesk.services.remote_backend import RecordApiClient, RemoteBackend
from farmdesk.services.task_service import TaskService
from farmdesk.services.weather_service import WeatherService

logger = get_logger("registry")

FIXTURE_DIR = os.path.join(os.path.dirname(__file__), os.pardir, "fixtures")

# entity -> (fixture / table name, store class)
STORES = {
    "farms": ("farms", FarmService),
    "crops": ("crops", CropService),
    "tasks": ("tasks", TaskService),
    "expenses": ("expenses", ExpenseService),
    "income": ("income", IncomeService),
}


def load_fixture(name: str) -> List[Dict[str, Any]]:
    path = os.path.join(FIXTURE_DIR, f"{name}.json")
    with open(path, "r", encoding="utf-8") as fh:
        return json.load(fh)


def _wire_fields(model_cls) -> List[str]:
    """Wire names (aliases) of a record model, used for remote field selection."""
    return [info.alias or name for name, info in model_cls.model_fields.items()]


@dataclass
class ServiceRegistry:
    farms: FarmService
    crops: CropService
    tasks: TaskService
    expenses: ExpenseService
    income: IncomeService
    weather: WeatherService
    notifier: Notifier = field(default_factory=LoggingNotifier)
    api_client: Optional[RecordApiClient] = None

    async def aclose(self) -> None:
        if self.api_client is not None:
            await self.api_client.aclose()


def build_registry(
    settings: Settings,
    seed: Optional[Dict[str, List[Dict[str, Any]]]] = None,
    notifier: Optional[Notifier] = None,
    api_client: Optional[RecordApiClient] = None,
) -> ServiceRegistry:
    """
    `seed` maps a store name ("farms", "crops", ...) or "weather" to wire
    records; missing keys fall back to the packaged fixtures.
    """
    delay = (settings.MOCK_DELAY_MIN_MS, settings.MOCK_DELAY_MAX_MS)
    backend_kind = settings.STORE_BACKEND.lower()

    if backend_kind == "remote" and api_client is None:
        api_client = RecordApiClient(
            base_url=settings.RECORD_API_URL,
            project_id=settings.RECORD_API_PROJECT_ID,
            public_key=settings.RECORD_API_PUBLIC_KEY,
            timeout=settings.RECORD_API_TIMEOUT,
        )

    stores = {}
    for name, (table, service_cls) in STORES.items():
        backend: RecordBackend
        if backend_kind == "remote":
            backend = RemoteBackend(
                entity=service_cls.entity,
                table=table,
                client=api_client,
                fields=_wire_fields(service_cls.model),
            )
        elif backend_kind == "memory":
            records = seed[name] if seed and name in seed else load_fixture(table)
            backend = InMemoryBackend(service_cls.entity, records, delay_ms=delay)
        else:
            raise ValueError(f"Unknown STORE_BACKEND: {settings.STORE_BACKEND}")
        stores[name] = service_cls(backend)

    forecast = seed["weather"] if seed and "weather" in seed else load_fixture("weather")
    logger.info(f"Store registry built with {backend_kind} backend")

    return ServiceRegistry(
        weather=WeatherService(forecast, delay_ms=delay),
        notifier=notifier or LoggingNotifier(),
        api_client=api_client if backend_kind == "remote" else None,
        **stores,
    )
