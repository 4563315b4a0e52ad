"""User ORM: persisted user record.

Invariants:
    - id is an autoincrement integer primary key, assigned by the store, never reused by the core
    - Store-natural order is ascending id (insertion order)
    - name, username, email are non-nullable

Design Decisions:
    - Index on name: search mode filters on name only
"""

from sqlalchemy import Integer, String
from sqlalchemy.orm import Mapped, mapped_column

from app.db.base import Base


class User(Base):
    """A directory user."""
    __tablename__ = "users"

    id: Mapped[int] = mapped_column(
        Integer, primary_key=True, autoincrement=True,
    )
    name: Mapped[str] = mapped_column(String(255), nullable=False, index=True)
    username: Mapped[str] = mapped_column(String(255), nullable=False)
    email: Mapped[str] = mapped_column(String(255), nullable=False)
