# backend/tests/conftest.py

import pytest
from fastapi.testclient import TestClient

from farmdesk.core.config import Settings
from farmdesk.main import create_app
from farmdesk.services.notification_service import RecordingNotifier
from farmdesk.services.registry import build_registry


@pytest.fixture
def settings():
    return Settings(STORE_BACKEND="memory", MOCK_DELAY_MIN_MS=0, MOCK_DELAY_MAX_MS=0)


@pytest.fixture
def notifier():
    return RecordingNotifier()


@pytest.fixture
def registry(settings, notifier):
    # fresh copy of the packaged fixtures per test
    return build_registry(settings, notifier=notifier)


@pytest.fixture
def client(settings, registry):
    with TestClient(create_app(settings, registry)) as c:
        yield c
