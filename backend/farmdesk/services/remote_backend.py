# backend/farmdesk/services/remote_backend.py

"""
Remote record API client and the RemoteBackend strategy built on it.

The API is table-oriented:
 - fetch with field selection and where clauses
 - fetch by id
 - create / update (batch of records) and delete (batch of ids)

Every response carries a top-level "success" flag. Batch responses add a
"results" array with one entry per record; failed entries carry a message
and field-level errors. A top-level failure is raised as NetworkError, a
per-record failure goes through the record-level path below.
"""

from typing import Any, Dict, Iterable, List, Optional, Sequence

import httpx

from farmdesk.core.exceptions import (
    NetworkError,
    NotFoundError,
    PartialBatchFailure,
    RecordFailure,
    ValidationError,
)
from farmdesk.core.logger import get_logger
from farmdesk.services.record_backend import Record, RecordBackend

logger = get_logger("remote")


class RecordApiClient:
    def __init__(
        self,
        base_url: str,
        project_id: Optional[str],
        public_key: Optional[str],
        timeout: float = 10.0,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        headers = {"Content-Type": "application/json"}
        if public_key:
            headers["apikey"] = public_key
        self._client = httpx.AsyncClient(
            base_url=f"{base_url.rstrip('/')}/projects/{project_id}",
            headers=headers,
            timeout=timeout,
            transport=transport,
        )

    async def aclose(self) -> None:
        await self._client.aclose()

    async def _send(self, method: str, path: str, payload: Optional[dict] = None) -> Dict[str, Any]:
        try:
            resp = await self._client.request(method, path, json=payload)
        except httpx.HTTPError as exc:
            logger.error("Record API transport error", extra={"method": method, "path": path})
            raise NetworkError(f"Record API unreachable: {exc}") from exc

        if resp.status_code >= 500:
            raise NetworkError(f"Record API error {resp.status_code}", status_code=resp.status_code)

        try:
            body = resp.json()
        except ValueError as exc:
            raise NetworkError("Malformed response from record API", status_code=resp.status_code) from exc

        if not body.get("success"):
            message = body.get("message") or "Record API request failed"
            logger.error(message, extra={"method": method, "path": path, "status_code": resp.status_code})
            raise NetworkError(message, status_code=resp.status_code)
        return body

    async def fetch_records(
        self,
        table: str,
        fields: Sequence[str] = (),
        where: Optional[Dict[str, Any]] = None,
        order_by: Optional[str] = None,
        limit: Optional[int] = None,
    ) -> List[Record]:
        params: Dict[str, Any] = {"fields": [{"field": {"Name": f}} for f in fields]}
        if where:
            params["where"] = [
                {"FieldName": k, "Operator": "EqualTo", "Values": [v]}
                for k, v in where.items()
            ]
        if order_by:
            params["orderBy"] = [{"fieldName": order_by, "sorttype": "ASC"}]
        if limit:
            params["pagingInfo"] = {"limit": limit, "offset": 0}
        body = await self._send("POST", f"/tables/{table}/records/fetch", params)
        return list(body.get("data") or [])

    async def get_record_by_id(self, table: str, record_id: int) -> Optional[Record]:
        body = await self._send("GET", f"/tables/{table}/records/{record_id}")
        return body.get("data")

    async def create_records(self, table: str, records: List[Record]) -> List[dict]:
        body = await self._send("POST", f"/tables/{table}/records", {"records": records})
        return list(body.get("results") or [])

    async def update_records(self, table: str, records: List[Record]) -> List[dict]:
        body = await self._send("PATCH", f"/tables/{table}/records", {"records": records})
        return list(body.get("results") or [])

    async def delete_records(self, table: str, record_ids: List[int]) -> List[dict]:
        body = await self._send("DELETE", f"/tables/{table}/records", {"RecordIds": record_ids})
        return list(body.get("results") or [])


def _failure_of(result: dict, record_id: Optional[int]) -> RecordFailure:
    field_errors = {
        (e.get("fieldLabel") or e.get("field") or "record"): e.get("message", "")
        for e in result.get("errors") or []
    }
    return RecordFailure(
        record_id=record_id,
        message=result.get("message") or "Record operation failed",
        field_errors=field_errors,
    )


class RemoteBackend(RecordBackend):
    def __init__(self, entity: str, table: str, client: RecordApiClient, fields: Sequence[str] = ()):
        self.entity = entity
        self.table = table
        self._client = client
        self._fields = list(fields)

    # ------------------------------------------------------------------
    # Reads
    # ------------------------------------------------------------------
    async def fetch_all(self) -> List[Record]:
        return await self._client.fetch_records(self.table, self._fields)

    async def fetch_by_id(self, record_id: int) -> Record:
        data = await self._client.get_record_by_id(self.table, record_id)
        if not data:
            raise NotFoundError(self.entity, record_id)
        return data

    async def fetch_where(self, **equals: Any) -> List[Record]:
        return await self._client.fetch_records(self.table, self._fields, where=equals)

    # ------------------------------------------------------------------
    # Batch writes
    # ------------------------------------------------------------------
    def _split(self, results: List[dict], ids: List[Optional[int]]):
        succeeded, failed = [], []
        for i, result in enumerate(results):
            record_id = ids[i] if i < len(ids) else None
            if result.get("success"):
                succeeded.append(result.get("data") if result.get("data") is not None else record_id)
            else:
                failure = _failure_of(result, record_id)
                logger.warning(
                    f"{self.entity} record failed: {failure.message} {failure.field_errors}",
                    extra={"entity": self.entity, "record_id": record_id},
                )
                failed.append(failure)
        return succeeded, failed

    async def insert_many(self, records: Iterable[Record]) -> List[Record]:
        records = [{k: v for k, v in r.items() if k != "Id"} for r in records]
        results = await self._client.create_records(self.table, records)
        succeeded, failed = self._split(results, [None] * len(records))
        if failed:
            raise PartialBatchFailure(self.entity, succeeded, failed)
        return succeeded

    async def replace_many(self, records: Iterable[Record]) -> List[Record]:
        records = list(records)
        results = await self._client.update_records(self.table, records)
        succeeded, failed = self._split(results, [r.get("Id") for r in records])
        if failed:
            raise PartialBatchFailure(self.entity, succeeded, failed)
        return succeeded

    async def remove_many(self, record_ids: Iterable[int]) -> List[int]:
        record_ids = list(record_ids)
        results = await self._client.delete_records(self.table, record_ids)
        succeeded, failed = self._split(results, record_ids)
        if failed:
            raise PartialBatchFailure(self.entity, succeeded, failed)
        return succeeded

    # ------------------------------------------------------------------
    # Single-record writes: a lone failed record is not a "partial" batch,
    # it is classified as validation (field errors) or not-found / network.
    # ------------------------------------------------------------------
    async def insert(self, record: Record) -> Record:
        try:
            created = await self.insert_many([record])
        except PartialBatchFailure as exc:
            failure = exc.failed[0]
            if failure.field_errors:
                raise ValidationError(failure.field_errors, failure.message) from exc
            raise NetworkError(failure.message) from exc
        if not created or not isinstance(created[0], dict):
            raise NetworkError(f"Record API returned no {self.entity} record")
        return created[0]

    async def replace(self, record_id: int, record: Record) -> Record:
        try:
            updated = await self.replace_many([{**record, "Id": record_id}])
        except PartialBatchFailure as exc:
            failure = exc.failed[0]
            if failure.field_errors:
                raise ValidationError(failure.field_errors, failure.message) from exc
            raise NotFoundError(self.entity, record_id) from exc
        # some tables answer an update with a bare success flag
        if updated and isinstance(updated[0], dict):
            return updated[0]
        return {**record, "Id": record_id}

    async def remove(self, record_id: int) -> bool:
        try:
            await self.remove_many([record_id])
        except PartialBatchFailure as exc:
            raise NotFoundError(self.entity, record_id) from exc
        return True
