"""SQL Record Store: RecordStore protocol over an async SQLAlchemy session.

Invariants:
    - Reads are ordered by id ascending (store-natural order)
    - search() matches `name` only, case-insensitive substring, wildcards escaped
    - delete_by_id() raises RecordNotFoundError when no row was deleted
    - Every SQLAlchemy failure is rolled back and raised as StoreError

Design Decisions:
    - Returns frozen core Records, never ORM instances: callers cannot mutate rows
    - Commits per mutation: the gateway's invalidation must follow a durable write
"""

import logging
from typing import Sequence

from sqlalchemy import delete, select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.domain_types import Record, RecordId
from app.core.errors import ErrorContext, RecordNotFoundError, StoreError
from app.models.user import User

logger = logging.getLogger(__name__)


def _to_record(user: User) -> Record:
    return Record(
        id=RecordId(user.id), name=user.name,
        username=user.username, email=user.email,
    )


class SqlRecordStore:
    """User records persisted in the `users` table."""

    def __init__(self, db: AsyncSession):
        self._db = db

    async def search(self, term: str, limit: int) -> Sequence[Record]:
        query = (
            select(User)
            .where(User.name.icontains(term, autoescape=True))
            .order_by(User.id)
            .limit(limit)
        )
        return await self._read(query, "search")

    async def page(self, offset: int, limit: int) -> Sequence[Record]:
        query = select(User).order_by(User.id).offset(offset).limit(limit)
        return await self._read(query, "page")

    async def delete_by_id(self, record_id: RecordId) -> None:
        try:
            result = await self._db.execute(
                delete(User).where(User.id == record_id),
            )
            if result.rowcount == 0:
                await self._db.rollback()
                raise RecordNotFoundError(record_id, "delete")
            await self._db.commit()
        except SQLAlchemyError as e:
            await self._db.rollback()
            logger.error(f"DB delete failed: {e}", extra={"record_id": record_id})
            raise StoreError(
                "Database operation failed", "delete",
                ErrorContext(record_id=record_id),
            )

    async def add(self, name: str, username: str, email: str) -> Record:
        user = User(name=name, username=username, email=email)
        try:
            self._db.add(user)
            await self._db.commit()
            await self._db.refresh(user)
        except SQLAlchemyError as e:
            await self._db.rollback()
            logger.error(f"DB insert failed: {e}")
            raise StoreError("Database operation failed", "add")
        return _to_record(user)

    async def _read(self, query, operation: str) -> list[Record]:
        try:
            result = await self._db.execute(query)
            return [_to_record(u) for u in result.scalars().all()]
        except SQLAlchemyError as e:
            await self._db.rollback()
            logger.error(f"DB {operation} failed: {e}")
            raise StoreError("Database operation failed", operation)
