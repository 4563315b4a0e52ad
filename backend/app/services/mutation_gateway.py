"""Mutation Gateway: delete/add records and emit the invalidation signal.

Invariants:
    - Exactly one invalidation per successful mutation
    - No invalidation when the store rejects the mutation
    - No retries; StoreError propagates to the caller
"""

import logging

from app.core.domain_types import Record, RecordId
from app.core.errors import StoreError
from app.core.repository_protocols import InvalidationSink, RecordStore

logger = logging.getLogger(__name__)

USERS_COLLECTION = "users"


class MutationGateway:
    """Write path for the user collection."""

    def __init__(self, store: RecordStore, invalidation: InvalidationSink):
        self._store = store
        self._invalidation = invalidation

    async def delete_record(self, record_id: RecordId) -> None:
        try:
            await self._store.delete_by_id(record_id)
        except StoreError as e:
            logger.warning(
                f"Failed to delete user: {e.message}",
                extra={"record_id": record_id, "error_code": e.code},
            )
            raise
        logger.info("User deleted", extra={"record_id": record_id})
        self._invalidation.emit(USERS_COLLECTION)

    async def add_record(self, name: str, username: str, email: str) -> Record:
        try:
            record = await self._store.add(name, username, email)
        except StoreError as e:
            logger.warning(
                f"Failed to add user: {e.message}",
                extra={"error_code": e.code},
            )
            raise
        logger.info("User added", extra={"record_id": record.id})
        self._invalidation.emit(USERS_COLLECTION)
        return record
