# backend/farmdesk/api/records.py

"""
CRUD routes shared by every entity store.

Create and full update go through the same form validators the pages use;
PATCH hands a partial record straight to the store, which coerces it.
Batch routes answer 207 when only some records went through.
"""

from typing import Any, Callable, Dict, List, Mapping

from fastapi import APIRouter, Body, Depends

from farmdesk.api.deps import get_registry
from farmdesk.services.registry import ServiceRegistry


def add_record_routes(
    router: APIRouter,
    store_name: str,
    validator: Callable[[Mapping[str, Any]], Dict[str, Any]],
) -> APIRouter:
    def store(registry: ServiceRegistry):
        return getattr(registry, store_name)

    @router.get("")
    async def api_list(registry: ServiceRegistry = Depends(get_registry)):
        return [r.to_wire() for r in await store(registry).get_all()]

    @router.post("", status_code=201)
    async def api_create(
        payload: Dict[str, Any] = Body(...),
        registry: ServiceRegistry = Depends(get_registry),
    ):
        record = await store(registry).create(validator(payload))
        return record.to_wire()

    @router.post("/batch", status_code=201)
    async def api_create_many(
        payload: List[Dict[str, Any]] = Body(...),
        registry: ServiceRegistry = Depends(get_registry),
    ):
        records = await store(registry).create_many([validator(p) for p in payload])
        return [r.to_wire() for r in records]

    @router.post("/batch-delete")
    async def api_delete_many(
        ids: List[Any] = Body(..., embed=True),
        registry: ServiceRegistry = Depends(get_registry),
    ):
        return {"deleted": await store(registry).delete_many(ids)}

    @router.get("/{record_id}")
    async def api_get(record_id: str, registry: ServiceRegistry = Depends(get_registry)):
        return (await store(registry).get_by_id(record_id)).to_wire()

    @router.put("/{record_id}")
    async def api_replace(
        record_id: str,
        payload: Dict[str, Any] = Body(...),
        registry: ServiceRegistry = Depends(get_registry),
    ):
        record = await store(registry).update(record_id, validator(payload))
        return record.to_wire()

    @router.patch("/{record_id}")
    async def api_patch(
        record_id: str,
        payload: Dict[str, Any] = Body(...),
        registry: ServiceRegistry = Depends(get_registry),
    ):
        record = await store(registry).update(record_id, payload)
        return record.to_wire()

    @router.delete("/{record_id}")
    async def api_delete(record_id: str, registry: ServiceRegistry = Depends(get_registry)):
        return {"success": await store(registry).delete(record_id)}

    return router
