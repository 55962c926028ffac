# backend/tests/test_remote_backend.py

import json

import httpx
import pytest

from farmdesk.core.config import Settings
from farmdesk.core.exceptions import NetworkError, NotFoundError, PartialBatchFailure, ValidationError
from farmdesk.services.farm_service import FarmService
from farmdesk.services.registry import build_registry
from farmdesk.services.remote_backend import RecordApiClient, RemoteBackend

FARM = {"Id": 7, "name": "Remote Farm", "location": "Cloud", "size": 10, "sizeUnit": "acres"}


class FakeRecordApi:
    """Scripted record API: one queued response per request, requests kept for inspection."""

    def __init__(self):
        self.requests = []
        self.responses = []

    def reply(self, status=200, **body):
        self.responses.append((status, body))

    def handler(self, request: httpx.Request) -> httpx.Response:
        payload = json.loads(request.content) if request.content else None
        self.requests.append((request.method, request.url.path, payload))
        status, body = self.responses.pop(0)
        return httpx.Response(status, json=body)


@pytest.fixture
def api():
    return FakeRecordApi()


@pytest.fixture
def client(api):
    return RecordApiClient(
        base_url="https://records.test",
        project_id="proj",
        public_key="pk",
        transport=httpx.MockTransport(api.handler),
    )


@pytest.fixture
def farms(client):
    backend = RemoteBackend("Farm", "farms", client, fields=["Id", "name", "location", "size", "sizeUnit"])
    return FarmService(backend)


async def test_fetch_all_sends_field_selection(api, farms):
    api.reply(success=True, data=[FARM])
    result = await farms.get_all()
    assert result[0].name == "Remote Farm"
    method, path, payload = api.requests[0]
    assert (method, path) == ("POST", "/projects/proj/tables/farms/records/fetch")
    assert {"field": {"Name": "sizeUnit"}} in payload["fields"]


async def test_fetch_where_builds_equal_to_clause(api, farms):
    api.reply(success=True, data=[])
    await farms.backend.fetch_where(farmId=3)
    where = api.requests[0][2]["where"]
    assert where == [{"FieldName": "farmId", "Operator": "EqualTo", "Values": [3]}]


async def test_get_by_id_without_data_is_not_found(api, farms):
    api.reply(success=True, data=None)
    with pytest.raises(NotFoundError):
        await farms.get_by_id(7)


async def test_top_level_failure_is_network_error(api, farms):
    api.reply(success=False, message="Project disabled")
    with pytest.raises(NetworkError) as exc:
        await farms.get_all()
    assert exc.value.message == "Project disabled"


async def test_server_error_is_network_error(api, farms):
    api.reply(status=503)
    with pytest.raises(NetworkError) as exc:
        await farms.get_all()
    assert exc.value.status_code == 503


async def test_transport_error_is_network_error(farms):
    def broken(request):
        raise httpx.ConnectError("connection refused", request=request)

    farms.backend._client = RecordApiClient(
        "https://records.test", "proj", None, transport=httpx.MockTransport(broken)
    )
    with pytest.raises(NetworkError):
        await farms.get_all()


async def test_create_strips_id_and_returns_stored_record(api, farms):
    api.reply(success=True, results=[{"success": True, "data": {**FARM, "Id": 11}}])
    farm = await farms.create({"Id": 99, "name": "Remote Farm", "location": "Cloud", "size": "10"})
    assert farm.id == 11
    sent = api.requests[0][2]["records"][0]
    assert "Id" not in sent
    assert sent["size"] == 10.0


async def test_create_field_errors_become_validation_error(api, farms):
    api.reply(success=True, results=[{
        "success": False,
        "message": "Invalid record",
        "errors": [{"fieldLabel": "name", "message": "Name too long"}],
    }])
    with pytest.raises(ValidationError) as exc:
        await farms.create({"name": "x" * 300, "location": "Cloud", "size": 1})
    assert exc.value.errors == {"name": "Name too long"}


async def test_update_keeps_id_when_api_returns_no_record(api, farms):
    api.reply(success=True, data=FARM)
    api.reply(success=True, results=[{"success": True}])
    farm = await farms.update(7, {"location": "Edge"})
    assert farm.id == 7
    assert farm.location == "Edge"
    assert api.requests[1][0] == "PATCH"
    assert api.requests[1][2]["records"][0]["Id"] == 7


async def test_delete_failure_is_not_found(api, farms):
    api.reply(success=True, results=[{"success": False, "message": "Record does not exist"}])
    with pytest.raises(NotFoundError):
        await farms.delete(7)


async def test_batch_delete_reports_each_failed_record(api, farms):
    api.reply(success=True, results=[
        {"success": True},
        {"success": False, "message": "Record does not exist"},
    ])
    with pytest.raises(PartialBatchFailure) as exc:
        await farms.delete_many([7, 8])
    assert exc.value.succeeded == [7]
    assert exc.value.failed[0].record_id == 8
    assert exc.value.failed[0].message == "Record does not exist"


async def test_registry_builds_remote_stores(api, client):
    settings = Settings(STORE_BACKEND="remote", MOCK_DELAY_MIN_MS=0, MOCK_DELAY_MAX_MS=0)
    registry = build_registry(settings, api_client=client)
    api.reply(success=True, data=[])
    assert await registry.crops.get_all() == []
    assert api.requests[0][1] == "/projects/proj/tables/crops/records/fetch"
    await registry.aclose()


def test_unknown_backend_kind_is_rejected():
    with pytest.raises(ValueError):
        build_registry(Settings(STORE_BACKEND="sqlite"))


async def test_batch_update_keeps_records_acknowledged_without_data(api, farms):
    api.reply(success=True, data=FARM)
    api.reply(success=True, data={**FARM, "Id": 8, "name": "Other"})
    api.reply(success=True, results=[
        {"success": True},
        {"success": False, "message": "Record is locked"},
    ])
    with pytest.raises(PartialBatchFailure) as exc:
        await farms.update_many({7: {"location": "Edge"}, 8: {"location": "Far"}})
    assert [f.id for f in exc.value.succeeded] == [7]
    assert exc.value.succeeded[0].location == "Edge"
    assert [f.record_id for f in exc.value.failed] == [8]
    assert exc.value.message == "1 of 2 Farm records failed"


async def test_batch_create_without_echoed_records_is_network_error(api, farms):
    api.reply(success=True, results=[{"success": True}])
    with pytest.raises(NetworkError):
        await farms.create_many([{"name": "A", "location": "X", "size": 1}])


async def test_batch_create_partial_failure_keeps_created_records(api, farms):
    api.reply(success=True, results=[
        {"success": True, "data": {**FARM, "Id": 12}},
        {"success": False, "message": "Duplicate name"},
    ])
    with pytest.raises(PartialBatchFailure) as exc:
        await farms.create_many([
            {"name": "Remote Farm", "location": "Cloud", "size": 10},
            {"name": "Remote Farm", "location": "Cloud", "size": 10},
        ])
    assert [f.id for f in exc.value.succeeded] == [12]
    assert len(exc.value.failed) == 1
