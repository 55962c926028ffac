# backend/farmdesk/api/deps.py

from fastapi import Request

from farmdesk.services.pages.base import PageController
from farmdesk.services.registry import ServiceRegistry


def get_registry(request: Request) -> ServiceRegistry:
    return request.app.state.registry


async def loaded(page: PageController) -> PageController:
    """Load a page for one request; a failed load surfaces as its domain error."""
    if not await page.load():
        if page.failure is not None:
            raise page.failure
    return page
