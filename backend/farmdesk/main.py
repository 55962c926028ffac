# backend/farmdesk/main.py

# FORCE logger module import so handlers attach
import farmdesk.core.logger
from farmdesk.core.logger import logger

from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from farmdesk.core.config import Settings, settings
from farmdesk.core.error_middleware import ExceptionLoggingMiddleware, register_exception_handlers
from farmdesk.core.request_middleware import RequestLoggingMiddleware
from farmdesk.services.registry import ServiceRegistry, build_registry

from farmdesk.api import crops, dashboard, expenses, farms, income, reports, tasks, weather


def create_app(app_settings: Settings = settings, registry: Optional[ServiceRegistry] = None) -> FastAPI:
    """
    Build the app around one store registry. Tests pass their own registry;
    otherwise it is built from settings on startup and closed on shutdown.
    """

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        owned = registry is None
        app.state.registry = registry or build_registry(app_settings)
        logger.info(f"Backend started with {app_settings.STORE_BACKEND} store backend")
        try:
            yield
        finally:
            if owned:
                await app.state.registry.aclose()

    app = FastAPI(title="FarmDesk API", version="1.0", lifespan=lifespan)

    # ---------------------------------------------------
    # CORS
    # ---------------------------------------------------
    app.add_middleware(
        CORSMiddleware,
        allow_origins=app_settings.CORS_ORIGINS,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    # ---------------------------------------------------
    # Logging middlewares + domain error mapping
    # ---------------------------------------------------
    app.add_middleware(RequestLoggingMiddleware)
    app.add_middleware(ExceptionLoggingMiddleware)
    register_exception_handlers(app)

    # ---------------------------------------------------
    # Routers
    # ---------------------------------------------------
    app.include_router(farms.router)
    app.include_router(crops.router)
    app.include_router(tasks.router)
    app.include_router(expenses.router)
    app.include_router(income.router)
    app.include_router(reports.router)
    app.include_router(weather.router)
    app.include_router(dashboard.router)

    @app.get("/health")
    async def health_check():
        return {"status": "ok"}

    return app


app = create_app()
