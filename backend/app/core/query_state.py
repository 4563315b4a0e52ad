"""Query State Codec: ListingQuery <-> navigation query parameters (`q`, `offset`).

Invariants:
    - Absent `offset` parses to the first page (0), never to the terminal state
    - `offset=null` (or an empty value) parses to the terminal state (None)
    - Absent or empty `q` parses to no search
    - A malformed `offset` is rejected only when no search term is present
    - to_query_params() round-trips every ListingQuery through parse_query_params()

Design Decisions:
    - Explicit codec at the HTTP boundary: core never reads request state directly
    - Terminal state serialized as the literal "null", the token a JS client emits
      when it renders a null cursor into a URL
"""

from typing import Mapping

from app.core.domain_types import FIRST_PAGE_OFFSET, ListingQuery
from app.core.errors import InvalidQueryError

SEARCH_PARAM = "q"
OFFSET_PARAM = "offset"
_TERMINAL_TOKENS = frozenset({"", "null"})


def _parse_offset(raw: str) -> int | None:
    raw = raw.strip()
    if raw.lower() in _TERMINAL_TOKENS:
        return None
    try:
        offset = int(raw)
    except ValueError:
        raise InvalidQueryError(
            f"offset must be an integer or 'null', got {raw!r}", OFFSET_PARAM,
        )
    if offset < 0:
        raise InvalidQueryError(
            f"offset must be non-negative, got {offset}", OFFSET_PARAM,
        )
    return offset


def parse_query_params(params: Mapping[str, str]) -> ListingQuery:
    """Build a ListingQuery from raw query parameters."""
    search_term = params.get(SEARCH_PARAM) or ""
    if OFFSET_PARAM not in params:
        return ListingQuery(search_term=search_term, offset=FIRST_PAGE_OFFSET)
    try:
        offset = _parse_offset(params[OFFSET_PARAM])
    except InvalidQueryError:
        if not search_term:
            raise
        offset = FIRST_PAGE_OFFSET
    return ListingQuery(search_term=search_term, offset=offset)


def to_query_params(query: ListingQuery) -> dict[str, str]:
    """Serialize a ListingQuery; the first page omits `offset` entirely."""
    params: dict[str, str] = {}
    if query.search_term:
        params[SEARCH_PARAM] = query.search_term
    if query.offset is None:
        params[OFFSET_PARAM] = "null"
    elif query.offset != FIRST_PAGE_OFFSET:
        params[OFFSET_PARAM] = str(query.offset)
    return params
