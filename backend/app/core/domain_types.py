"""Domain Types: value objects shared by the listing core and its shell.

Invariants:
    - Record is immutable once read; id is store-assigned and stable
    - ListingQuery with a non-empty search_term is always search mode, whatever its offset
    - ListingResult.next_offset is None when no further page exists
    - offset None on a ListingQuery is the explicit terminal state, not "first page"

Design Decisions:
    - Frozen dataclasses over dicts: hashable, comparable in tests, no accidental mutation
    - NewType for RecordId: zero runtime cost, full type-checker support
    - str Enum for ListingMode: serializes to JSON/log fields without custom encoders
"""

from dataclasses import dataclass, field, replace
from enum import Enum
from typing import NewType


# ─── Identity Types ──────────────────────────────────────────────

RecordId = NewType("RecordId", int)


# ─── Limits ──────────────────────────────────────────────────────

PAGE_SIZE = 20
SEARCH_RESULT_CAP = 1000
FIRST_PAGE_OFFSET = 0


# ─── Enums ───────────────────────────────────────────────────────

class ListingMode(str, Enum):
    """Which branch of the listing rule a query resolves to."""
    SEARCH = "search"
    PAGE = "page"
    TERMINAL = "terminal"


# ─── Value Objects ───────────────────────────────────────────────

@dataclass(frozen=True)
class Record:
    """A user record as held by the record store."""
    id: RecordId
    name: str
    username: str
    email: str


@dataclass(frozen=True)
class ListingQuery:
    """Per-navigation query state: search term and pagination cursor."""
    search_term: str = ""
    offset: int | None = FIRST_PAGE_OFFSET

    @property
    def is_search(self) -> bool:
        return self.search_term != ""

    def with_search(self, value: str) -> "ListingQuery":
        """Query produced by a search input change. Other params are kept."""
        return replace(self, search_term=value)

    def with_offset(self, offset: int | None) -> "ListingQuery":
        return replace(self, offset=offset)


@dataclass(frozen=True)
class ListingResult:
    """One listing response: ordered records plus the cursor for the next page."""
    records: tuple[Record, ...] = field(default_factory=tuple)
    next_offset: int | None = None

    @property
    def has_more(self) -> bool:
        return self.next_offset is not None
