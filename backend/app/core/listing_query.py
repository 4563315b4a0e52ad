"""Listing Query Planning: pure mode selection and cursor arithmetic.

Invariants:
    - Pure functions: no IO, no async, no DB
    - Precedence: non-empty search_term > offset None (terminal) > page read
    - Search mode never paginates: next_offset is always None
    - Page mode advances when the page holds >= page_size records (not ==)
    - Offset is validated on the page branch only; search ignores it entirely

Design Decisions:
    - Plan/execute split: plan_listing() decides what to read, the service reads it,
      build_result() turns the rows into a ListingResult
    - Limits passed in explicitly so Settings can override them without core importing config
"""

from dataclasses import dataclass
from typing import Sequence

from app.core.domain_types import (
    ListingMode, ListingQuery, ListingResult, Record,
    PAGE_SIZE, SEARCH_RESULT_CAP,
)
from app.core.errors import InvalidQueryError


@dataclass(frozen=True)
class ListingPlan:
    """What the engine must read from the store for one query."""
    mode: ListingMode
    search_term: str = ""
    offset: int | None = None
    limit: int = 0


def validate_query(query: ListingQuery) -> None:
    """Reject offsets that are not non-negative integers."""
    offset = query.offset
    if offset is None:
        return
    if isinstance(offset, bool) or not isinstance(offset, int):
        raise InvalidQueryError(
            f"offset must be an integer, got {type(offset).__name__}", "offset",
        )
    if offset < 0:
        raise InvalidQueryError(
            f"offset must be non-negative, got {offset}", "offset",
        )


def plan_listing(
    query: ListingQuery,
    page_size: int = PAGE_SIZE,
    search_cap: int = SEARCH_RESULT_CAP,
) -> ListingPlan:
    """Select the listing mode for a query.

    Search wins whenever the term is non-empty, regardless of offset;
    the offset is only validated when a page is actually read.
    """
    if query.is_search:
        return ListingPlan(
            mode=ListingMode.SEARCH,
            search_term=query.search_term,
            limit=search_cap,
        )
    if query.offset is None:
        return ListingPlan(mode=ListingMode.TERMINAL)
    validate_query(query)
    return ListingPlan(
        mode=ListingMode.PAGE, offset=query.offset, limit=page_size,
    )


def compute_next_offset(offset: int, returned: int, page_size: int = PAGE_SIZE) -> int | None:
    """Cursor for the page after `offset`, or None once the collection is exhausted."""
    if returned >= page_size:
        return offset + page_size
    return None


def build_result(plan: ListingPlan, records: Sequence[Record]) -> ListingResult:
    """Turn the rows read for a plan into a ListingResult."""
    if plan.mode is ListingMode.TERMINAL:
        return ListingResult()
    if plan.mode is ListingMode.SEARCH:
        return ListingResult(records=tuple(records[:plan.limit]), next_offset=None)
    return ListingResult(
        records=tuple(records),
        next_offset=compute_next_offset(plan.offset, len(records), plan.limit),
    )
