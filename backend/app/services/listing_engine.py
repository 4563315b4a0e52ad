"""Listing Query Engine: runs a planned listing query against the record store.

Invariants:
    - Pure read: no side effects, no caching, no retries
    - Terminal queries (offset None, no search) never touch the store
    - StoreError from the store propagates unchanged

Design Decisions:
    - Mode selection and cursor arithmetic live in core/listing_query.py;
      this class only performs the IO the plan asks for
"""

import logging

from app.core.domain_types import (
    ListingMode, ListingQuery, ListingResult, PAGE_SIZE, SEARCH_RESULT_CAP,
)
from app.core.listing_query import build_result, plan_listing
from app.core.repository_protocols import RecordStore

logger = logging.getLogger(__name__)


class ListingQueryEngine:
    """Chooses search or pagination per query and computes the next cursor."""

    def __init__(
        self,
        store: RecordStore,
        page_size: int = PAGE_SIZE,
        search_cap: int = SEARCH_RESULT_CAP,
    ):
        self._store = store
        self._page_size = page_size
        self._search_cap = search_cap

    async def list(self, query: ListingQuery) -> ListingResult:
        plan = plan_listing(query, self._page_size, self._search_cap)
        if plan.mode is ListingMode.TERMINAL:
            return build_result(plan, [])
        if plan.mode is ListingMode.SEARCH:
            records = await self._store.search(plan.search_term, plan.limit)
        else:
            records = await self._store.page(plan.offset, plan.limit)
        result = build_result(plan, records)
        logger.debug(
            f"Listed {len(result.records)} records ({plan.mode.value})",
            extra={
                "search_term": plan.search_term or None,
                "offset": plan.offset,
            },
        )
        return result
