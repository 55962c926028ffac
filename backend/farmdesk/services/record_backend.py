# backend/farmdesk/services/record_backend.py

"""
Record backends: the storage strategy behind every entity store.

A backend only moves wire-format records (camelCase keys, "Id" identifier)
in and out. Coercion and Id immutability live one level up, in
EntityService, so both strategies honour them the same way.

 - InMemoryBackend: list seeded from fixtures, artificial latency
 - RemoteBackend (remote_backend.py): record-query API over httpx
"""

import asyncio
import random
from abc import ABC, abstractmethod
from threading import Lock
from typing import Any, Dict, Iterable, List, Optional, Tuple

from farmdesk.core.exceptions import NotFoundError, PartialBatchFailure, RecordFailure
from farmdesk.core.logger import get_logger

logger = get_logger("backend")

Record = Dict[str, Any]


class RecordBackend(ABC):
    entity: str = "Record"

    @abstractmethod
    async def fetch_all(self) -> List[Record]:
        ...

    @abstractmethod
    async def fetch_by_id(self, record_id: int) -> Record:
        ...

    @abstractmethod
    async def fetch_where(self, **equals: Any) -> List[Record]:
        ...

    @abstractmethod
    async def insert(self, record: Record) -> Record:
        ...

    @abstractmethod
    async def replace(self, record_id: int, record: Record) -> Record:
        ...

    @abstractmethod
    async def remove(self, record_id: int) -> bool:
        ...

    # ------------------------------------------------------------------
    # Batch operations. The in-memory store applies them one by one and
    # reports per-record failures the same way the remote API does.
    # ------------------------------------------------------------------
    async def insert_many(self, records: Iterable[Record]) -> List[Record]:
        return await self._each(records, self.insert, id_of=lambda r: None)

    async def replace_many(self, records: Iterable[Record]) -> List[Record]:
        return await self._each(records, lambda r: self.replace(r["Id"], r), id_of=lambda r: r.get("Id"))

    async def remove_many(self, record_ids: Iterable[int]) -> List[int]:
        return await self._each(record_ids, self._remove_returning_id, id_of=lambda i: i)

    async def _remove_returning_id(self, record_id: int) -> int:
        await self.remove(record_id)
        return record_id

    async def _each(self, items, operation, id_of) -> list:
        succeeded, failed = [], []
        for item in items:
            try:
                succeeded.append(await operation(item))
            except NotFoundError as exc:
                failed.append(RecordFailure(record_id=id_of(item), message=exc.message))
        if failed:
            raise PartialBatchFailure(self.entity, succeeded, failed)
        return succeeded


class InMemoryBackend(RecordBackend):
    """
    Owns one entity collection in process memory.

    Mutations are applied without optimistic-concurrency checks: two
    un-sequenced updates of the same Id resolve last-write-wins.
    """

    def __init__(
        self,
        entity: str,
        seed: Optional[Iterable[Record]] = None,
        delay_ms: Tuple[int, int] = (200, 500),
    ):
        self.entity = entity
        self._lock = Lock()
        self._records: List[Record] = [dict(r) for r in (seed or [])]
        self._delay_ms = delay_ms

    async def _delay(self) -> None:
        low, high = self._delay_ms
        if high <= 0:
            return
        await asyncio.sleep(random.uniform(low, high) / 1000.0)

    def _index_of(self, record_id: int) -> int:
        for i, r in enumerate(self._records):
            if r.get("Id") == record_id:
                return i
        raise NotFoundError(self.entity, record_id)

    async def fetch_all(self) -> List[Record]:
        await self._delay()
        with self._lock:
            return [dict(r) for r in self._records]

    async def fetch_by_id(self, record_id: int) -> Record:
        await self._delay()
        with self._lock:
            return dict(self._records[self._index_of(record_id)])

    async def fetch_where(self, **equals: Any) -> List[Record]:
        await self._delay()
        with self._lock:
            return [
                dict(r) for r in self._records
                if all(r.get(k) == v for k, v in equals.items())
            ]

    async def insert(self, record: Record) -> Record:
        await self._delay()
        with self._lock:
            max_id = max((r["Id"] for r in self._records), default=0)
            stored = {**record, "Id": max_id + 1}
            self._records.append(stored)
        logger.info("Inserted record", extra={"entity": self.entity, "record_id": stored["Id"]})
        return dict(stored)

    async def replace(self, record_id: int, record: Record) -> Record:
        await self._delay()
        with self._lock:
            i = self._index_of(record_id)
            stored = {**record, "Id": self._records[i]["Id"]}
            self._records[i] = stored
        logger.info("Replaced record", extra={"entity": self.entity, "record_id": record_id})
        return dict(stored)

    async def remove(self, record_id: int) -> bool:
        await self._delay()
        with self._lock:
            self._records.pop(self._index_of(record_id))
        logger.info("Removed record", extra={"entity": self.entity, "record_id": record_id})
        return True
