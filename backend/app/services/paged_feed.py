"""Paged Feed: client-side accumulator that drives incremental loading.

Invariants:
    - At most one "load next page" request is in flight at a time
    - load_next() is a no-op once next_offset is None
    - A result that arrives after load() started a newer generation is discarded
    - The trigger is rebound to a new closure whenever the cursor moves, and torn
      down when there is no next page
    - A failed fetch leaves the accumulated records untouched
    - While load() is fetching a new root, the trigger is unbound and load_next() is refused
    - A failed trigger-driven page load is logged and kept in last_error

Design Decisions:
    - Trigger callbacks are synchronous, so the loader schedules load_next() on
      the running loop and keeps the task for callers that need to await it
    - Invalidation only marks the feed stale; refresh() is the caller's choice
"""

import asyncio
import logging
from typing import Awaitable, Callable

from app.core.domain_types import ListingQuery, ListingResult, Record
from app.core.visibility_trigger import IncrementalLoadTrigger
from app.services.invalidation import InvalidationSignal

logger = logging.getLogger(__name__)

Fetch = Callable[[ListingQuery], Awaitable[ListingResult]]


class PagedFeed:
    """Accumulates pages for one root query and loads more on sentinel entry."""

    def __init__(
        self,
        fetch: Fetch,
        trigger: IncrementalLoadTrigger | None = None,
        invalidation: InvalidationSignal | None = None,
    ):
        self._fetch = fetch
        self._trigger = trigger
        self._generation = 0
        self._in_flight = False
        self._root_loading = False
        self._unsubscribe = (
            invalidation.subscribe(self._on_invalidated) if invalidation else None
        )
        self.query = ListingQuery()
        self.records: list[Record] = []
        self.next_offset: int | None = None
        self.stale = False
        self.last_task: asyncio.Task | None = None
        self.last_error: BaseException | None = None

    @property
    def loading(self) -> bool:
        return self._in_flight or self._root_loading

    async def load(self, query: ListingQuery) -> bool:
        """Replace the feed with the first result for `query`."""
        self._generation += 1
        generation = self._generation
        self._in_flight = False
        self._root_loading = True
        if self._trigger is not None:
            self._trigger.teardown()
        try:
            result = await self._fetch(query)
        except Exception:
            if generation == self._generation:
                self._root_loading = False
                self._rebind()
            raise
        if generation != self._generation:
            logger.debug("Discarded superseded listing result")
            return False
        self._root_loading = False
        self.query = query
        self.records = list(result.records)
        self.next_offset = result.next_offset
        self.stale = False
        self._rebind()
        return True

    async def load_next(self) -> bool:
        """Append the next page; ignored while any request is pending or at the end."""
        if self.loading or self.next_offset is None:
            return False
        self._in_flight = True
        generation = self._generation
        try:
            result = await self._fetch(self.query.with_offset(self.next_offset))
        finally:
            if generation == self._generation:
                self._in_flight = False
        if generation != self._generation:
            logger.debug("Discarded superseded page result")
            return False
        self.records.extend(result.records)
        self.next_offset = result.next_offset
        self._rebind()
        return True

    async def refresh(self) -> bool:
        """Reload the root query, dropping every page accumulated so far."""
        return await self.load(self.query)

    def close(self) -> None:
        self._generation += 1
        self._root_loading = False
        if self._trigger is not None:
            self._trigger.teardown()
        if self._unsubscribe is not None:
            self._unsubscribe()
            self._unsubscribe = None

    def _rebind(self) -> None:
        if self._trigger is None:
            return
        if self.next_offset is None:
            self._trigger.teardown()
            return
        self._trigger.bind(self._make_loader())

    def _make_loader(self) -> Callable[[], None]:
        offset = self.next_offset

        def load_more() -> None:
            task = asyncio.get_running_loop().create_task(self.load_next())
            task.add_done_callback(lambda t: self._on_page_done(t, offset))
            self.last_task = task

        return load_more

    def _on_page_done(self, task: asyncio.Task, offset: int | None) -> None:
        if task.cancelled():
            return
        exc = task.exception()
        if exc is None:
            return
        self.last_error = exc
        logger.error(
            f"Failed to load next page: {exc}",
            extra={"offset": offset, "error_code": getattr(exc, "code", None)},
        )

    def _on_invalidated(self, collection: str, revision: int) -> None:
        self.stale = True
