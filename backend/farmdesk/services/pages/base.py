# backend/farmdesk/services/pages/base.py

"""
Page-level controllers.

A controller owns one page's UI state (collections, filters, editing
target) and calls the stores, composer, filter and aggregation layers on
load and after every mutation. It never reaches into routing; intents such
as "edit record X" are plain method calls.

Loads are fail-fast joins: independent fetches run concurrently and the
first failure fails the whole load, surfaced once. Every load bumps a
generation counter; a result that arrives after a newer load started, or
after close(), is dropped instead of overwriting newer state.
"""

import asyncio
from typing import Any, Awaitable, Callable, List, Optional, TypeVar

from pydantic import ValidationError as PydanticValidationError

from farmdesk.core.exceptions import FarmDeskError, ValidationError
from farmdesk.core.logger import get_logger
from farmdesk.schemas.filters import FilterState
from farmdesk.services.entity_service import pydantic_errors
from farmdesk.services.notification_service import Notifier, NotifyLevel
from farmdesk.services.registry import ServiceRegistry

logger = get_logger("pages")

T = TypeVar("T")


async def gather_all(*aws: Awaitable) -> List[Any]:
    """asyncio.gather that cancels the remaining fetches on first failure."""
    tasks = [asyncio.ensure_future(a) for a in aws]
    try:
        return list(await asyncio.gather(*tasks))
    except BaseException:
        for t in tasks:
            if not t.done():
                t.cancel()
        raise


def replace_by_id(items: List[Any], record: Any) -> List[Any]:
    return [record if i.id == record.id else i for i in items]


def remove_by_id(items: List[Any], record_id: int) -> List[Any]:
    return [i for i in items if i.id != record_id]


class PageController:
    page = "page"
    load_error_message = "Failed to load data"

    def __init__(self, registry: ServiceRegistry, notifier: Optional[Notifier] = None):
        self.registry = registry
        self.notifier = notifier or registry.notifier
        self.loading = False
        self.error: Optional[str] = None
        self.failure: Optional[FarmDeskError] = None
        self.editing_id: Optional[int] = None
        self.show_form = False
        self.filters = FilterState()
        self._generation = 0
        self._closed = False

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------
    def _begin(self) -> int:
        self._generation += 1
        self.loading = True
        self.error = None
        self.failure = None
        return self._generation

    def _is_current(self, generation: int) -> bool:
        return not self._closed and generation == self._generation

    def close(self) -> None:
        """Page left: anything still in flight must not touch this state."""
        self._closed = True
        self._generation += 1

    @property
    def closed(self) -> bool:
        return self._closed

    async def _run_load(self, fetch: Callable[[], Awaitable[T]], apply: Callable[[T], None]) -> bool:
        generation = self._begin()
        try:
            result = await fetch()
        except FarmDeskError as exc:
            if not self._is_current(generation):
                logger.info("Dropping failure of superseded load", extra={"page": self.page})
                return False
            self.loading = False
            self.failure = exc
            self.error = exc.message or self.load_error_message
            logger.warning(f"{self.page} load failed: {exc.message}", extra={"page": self.page})
            self.notifier.notify(self.load_error_message, NotifyLevel.ERROR)
            return False

        if not self._is_current(generation):
            logger.info("Dropping result of superseded load", extra={"page": self.page})
            return False
        apply(result)
        self.loading = False
        return True

    async def load(self) -> bool:
        raise NotImplementedError

    # ------------------------------------------------------------------
    # Mutations
    # ------------------------------------------------------------------
    async def _mutate(
        self,
        operation: Awaitable[T],
        success_message: Optional[str],
        failure_message: str,
        apply: Optional[Callable[[T], None]] = None,
    ) -> T:
        """
        Run a store call; notify, log and re-raise on failure.

        `apply` reconciles local state with the result. It is skipped when
        the page was closed, or a newer load started, while the call was in
        flight: that load owns the collections now.
        """
        generation = self._generation
        try:
            result = await operation
        except FarmDeskError as exc:
            logger.warning(f"{self.page}: {failure_message}: {exc.message}", extra={"page": self.page})
            self.notifier.notify(exc.message or failure_message, NotifyLevel.ERROR)
            raise
        if success_message:
            self.notifier.notify(success_message, NotifyLevel.SUCCESS)
        if apply is not None:
            if self._is_current(generation):
                apply(result)
            else:
                logger.info("Skipping reconcile of superseded page state", extra={"page": self.page})
        return result

    # Reconcilers handed to _mutate as `apply`
    def _appending(self, attr: str, first: bool = False, close_form: bool = False) -> Callable[[Any], None]:
        def apply(record):
            items = getattr(self, attr)
            setattr(self, attr, [record] + items if first else items + [record])
            if close_form:
                self.cancel_form()
        return apply

    def _replacing(self, attr: str, close_form: bool = False) -> Callable[[Any], None]:
        def apply(record):
            setattr(self, attr, replace_by_id(getattr(self, attr), record))
            if close_form:
                self.cancel_form()
        return apply

    def _removing(self, attr: str, record_id: int) -> Callable[[Any], None]:
        def apply(_):
            setattr(self, attr, remove_by_id(getattr(self, attr), record_id))
        return apply

    # ------------------------------------------------------------------
    # Filters
    # ------------------------------------------------------------------
    def set_filters(self, **values: Any) -> None:
        """Merge the given filter keys into the page's FilterState."""
        try:
            update = FilterState(**values).model_dump(exclude_unset=True)
        except PydanticValidationError as exc:
            raise ValidationError(pydantic_errors(exc)) from exc
        self.filters = self.filters.model_copy(update=update)

    # ------------------------------------------------------------------
    # Editing intents
    # ------------------------------------------------------------------
    def open_create(self) -> None:
        self.editing_id = None
        self.show_form = True

    def open_edit(self, record_id: int) -> None:
        self.editing_id = record_id
        self.show_form = True

    def cancel_form(self) -> None:
        self.editing_id = None
        self.show_form = False

