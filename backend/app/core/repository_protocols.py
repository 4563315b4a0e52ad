"""Boundary Protocols: contracts between the listing core and its shell.

Invariants:
    - Core NEVER imports from shell; dependency arrows point inward only
    - Every RecordStore method is independently failable and raises StoreError on fault
    - delete_by_id raises RecordNotFoundError (a StoreError) when nothing was deleted

Design Decisions:
    - Protocol over ABC: structural subtyping, test fakes need no inheritance
    - Async in Protocol: implementations do IO; the pure planning in
      listing_query.py never awaits, the service orchestrates around it
"""

from typing import Protocol, Sequence

from app.core.domain_types import Record, RecordId


class RecordStore(Protocol):
    """Contract for user record persistence, implemented by the shell."""
    async def search(self, term: str, limit: int) -> Sequence[Record]: ...
    async def page(self, offset: int, limit: int) -> Sequence[Record]: ...
    async def delete_by_id(self, record_id: RecordId) -> None: ...
    async def add(self, name: str, username: str, email: str) -> Record: ...


class InvalidationSink(Protocol):
    """Receiver of the "listing view is stale" signal."""
    def emit(self, collection: str) -> int: ...
