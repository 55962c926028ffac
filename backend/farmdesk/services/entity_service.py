# backend/farmdesk/services/entity_service.py

"""
Entity store contract shared by Farm, Crop, Task, Expense and Income.

An EntityService sits on top of a RecordBackend (in-memory or remote) and
guarantees, whichever backend is plugged in:
 - numeric and foreign-key fields are coerced before persistence
 - the Id is assigned by the store and never changed by an update
 - failures are logged and re-raised, never swallowed
"""

from contextlib import contextmanager
from typing import Any, Dict, Generic, Iterable, List, Mapping, Type, TypeVar

from pydantic import ValidationError as PydanticValidationError

from farmdesk.core.exceptions import (
    FarmDeskError,
    NetworkError,
    NotFoundError,
    PartialBatchFailure,
    RecordFailure,
    ValidationError,
)
from farmdesk.core.logger import get_logger
from farmdesk.schemas.common import RecordModel, field_names
from farmdesk.services.record_backend import RecordBackend

logger = get_logger("store")

M = TypeVar("M", bound=RecordModel)


def parse_id(record_id: Any) -> int:
    """Ids may arrive as strings from routes and select boxes."""
    if isinstance(record_id, bool):
        raise ValidationError({"Id": "Invalid ID format"}, "Invalid ID format")
    try:
        return int(record_id)
    except (TypeError, ValueError):
        raise ValidationError({"Id": "Invalid ID format"}, "Invalid ID format")


def pydantic_errors(exc: PydanticValidationError) -> Dict[str, str]:
    errors: Dict[str, str] = {}
    for err in exc.errors():
        key = str(err["loc"][0]) if err.get("loc") else "record"
        errors.setdefault(key, err.get("msg", "Invalid value"))
    return errors


class EntityService(Generic[M]):
    model: Type[M]
    entity: str = "Record"

    def __init__(self, backend: RecordBackend):
        self.backend = backend
        self._names = field_names(self.model)

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------
    @contextmanager
    def _reporting(self, operation: str, record_id: Any = None):
        try:
            yield
        except FarmDeskError as exc:
            logger.warning(
                f"{self.entity} {operation} failed: {exc.message}",
                extra={"entity": self.entity, "record_id": record_id},
            )
            raise

    def _normalize(self, data: Mapping[str, Any]) -> Dict[str, Any]:
        """Known keys only, by field name; the Id is never taken from input."""
        out: Dict[str, Any] = {}
        for key, value in data.items():
            name = self._names.get(key)
            if name and name != "id":
                out[name] = value
        return out

    def _build(self, data: Mapping[str, Any]) -> M:
        try:
            return self.model.model_validate(data)
        except PydanticValidationError as exc:
            raise ValidationError(pydantic_errors(exc)) from exc

    def _coerce(self, fields: Dict[str, Any], record_id: int = 0) -> Dict[str, Any]:
        """Validate/coerce field values and return the wire record without Id."""
        record = self._build({**fields, "id": record_id}).to_wire()
        record.pop("Id", None)
        return record

    def _prepare_create(self, fields: Dict[str, Any]) -> Dict[str, Any]:
        return fields

    # ------------------------------------------------------------------
    # Contract
    # ------------------------------------------------------------------
    async def get_all(self) -> List[M]:
        with self._reporting("get_all"):
            return [self._build(r) for r in await self.backend.fetch_all()]

    async def get_by_id(self, record_id: Any) -> M:
        rid = parse_id(record_id)
        with self._reporting("get_by_id", rid):
            return self._build(await self.backend.fetch_by_id(rid))

    async def create(self, data: Mapping[str, Any]) -> M:
        with self._reporting("create"):
            record = self._coerce(self._prepare_create(self._normalize(data)))
            stored = await self.backend.insert(record)
            created = self._build(stored)
        logger.info(f"{self.entity} created", extra={"entity": self.entity, "record_id": created.id})
        return created

    async def update(self, record_id: Any, patch: Mapping[str, Any]) -> M:
        rid = parse_id(record_id)
        with self._reporting("update", rid):
            existing = await self.get_by_id(rid)
            merged = {**existing.model_dump(exclude={"id"}), **self._normalize(patch)}
            record = self._coerce(merged, rid)
            stored = await self.backend.replace(rid, record)
            updated = self._build({**stored, "Id": rid})
        logger.info(f"{self.entity} updated", extra={"entity": self.entity, "record_id": rid})
        return updated

    async def delete(self, record_id: Any) -> bool:
        rid = parse_id(record_id)
        with self._reporting("delete", rid):
            await self.backend.remove(rid)
        logger.info(f"{self.entity} deleted", extra={"entity": self.entity, "record_id": rid})
        return True

    # ------------------------------------------------------------------
    # Batch variants (remote API accepts several records per call)
    # ------------------------------------------------------------------
    async def create_many(self, items: Iterable[Mapping[str, Any]]) -> List[M]:
        records = [self._coerce(self._prepare_create(self._normalize(d))) for d in items]
        with self._reporting("create_many"):
            try:
                stored = await self.backend.insert_many(records)
            except PartialBatchFailure as exc:
                # a created record the API did not echo back has no Id to build from
                raise PartialBatchFailure(
                    self.entity, [self._build(r) for r in exc.succeeded if isinstance(r, dict)], exc.failed
                ) from exc
            if not all(isinstance(r, dict) for r in stored):
                raise NetworkError(f"Record API returned no {self.entity} record")
        return [self._build(r) for r in stored]

    async def update_many(self, patches: Mapping[Any, Mapping[str, Any]]) -> List[M]:
        """
        Missing ids are reported as failed records; the remaining patches
        are still written.
        """
        records: List[Dict[str, Any]] = []
        missing: List[RecordFailure] = []
        for record_id, patch in patches.items():
            rid = parse_id(record_id)
            try:
                existing = await self.get_by_id(rid)
            except NotFoundError as exc:
                missing.append(RecordFailure(record_id=rid, message=exc.message))
                continue
            merged = {**existing.model_dump(exclude={"id"}), **self._normalize(patch)}
            records.append({**self._coerce(merged, rid), "Id": rid})

        # the API may acknowledge an update with a bare success flag: rebuild from what was sent
        by_id = {r["Id"]: r for r in records}

        def built(result) -> M:
            return self._build(result if isinstance(result, dict) else by_id[result])

        with self._reporting("update_many"):
            try:
                stored = await self.backend.replace_many(records) if records else []
            except PartialBatchFailure as exc:
                raise PartialBatchFailure(
                    self.entity, [built(r) for r in exc.succeeded], missing + exc.failed
                ) from exc
            if missing:
                raise PartialBatchFailure(self.entity, [built(r) for r in stored], missing)
        return [built(r) for r in stored]

    async def delete_many(self, record_ids: Iterable[Any]) -> List[int]:
        ids = [parse_id(i) for i in record_ids]
        with self._reporting("delete_many"):
            return await self.backend.remove_many(ids)
