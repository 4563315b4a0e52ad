"""Search Input Controller: raw input values -> navigable query state.

Invariants:
    - None input (uninitialized) is a no-op
    - "" clears the search term; any other value is used literally (no trimming)
    - pending is True while any triggered recomputation is in flight
    - Navigations start in input order; only the latest-started one that has
      settled is observable (last-write-wins)

Design Decisions:
    - Each input schedules a task on the running loop instead of debouncing:
      the event loop coalesces bursts and search is idempotent on identical terms
    - Superseded results are discarded here, not in the listing engine
"""

import asyncio
from typing import Awaitable, Callable

from app.core.domain_types import ListingQuery, ListingResult
from app.core.query_state import to_query_params

Navigate = Callable[[ListingQuery], Awaitable[ListingResult]]


class SearchInputController:
    """Turns keystroke values into ListingQuery navigations."""

    def __init__(self, navigate: Navigate, initial: ListingQuery | None = None):
        self._navigate = navigate
        self._query = initial or ListingQuery()
        self._issued = 0
        self._settled_seq = 0
        self._settled_query: ListingQuery | None = None
        self._result: ListingResult | None = None
        self._tasks: set[asyncio.Task] = set()

    @property
    def query(self) -> ListingQuery:
        """Most recently requested query state."""
        return self._query

    @property
    def params(self) -> dict[str, str]:
        return to_query_params(self._query)

    @property
    def pending(self) -> bool:
        return bool(self._tasks)

    @property
    def settled_query(self) -> ListingQuery | None:
        return self._settled_query

    @property
    def result(self) -> ListingResult | None:
        return self._result

    def on_input(self, value: str | None) -> asyncio.Task | None:
        """Apply one input change. Must be called from the running event loop."""
        if value is None:
            return None
        self._query = self._query.with_search(value)
        self._issued += 1
        task = asyncio.get_running_loop().create_task(
            self._run(self._issued, self._query),
        )
        self._tasks.add(task)
        task.add_done_callback(self._tasks.discard)
        return task

    async def _run(self, seq: int, query: ListingQuery) -> ListingResult:
        result = await self._navigate(query)
        if seq > self._settled_seq:
            self._settled_seq = seq
            self._settled_query = query
            self._result = result
        return result

    async def wait_settled(self) -> None:
        """Wait for every in-flight navigation; the first failure propagates."""
        while self._tasks:
            await asyncio.gather(*list(self._tasks))
