"""User Schemas: Pydantic models for the users listing and mutation endpoints.

Invariants:
    - UserCreate fields are stripped and non-empty; email must contain a single "@"
    - UserListResponse.new_offset is None when no further page exists

Design Decisions:
    - Regex check for email over email-validator: shape only, no DNS
    - field_validator for side-effect-free transforms (strip)
"""

from pydantic import BaseModel, Field, field_validator

from app.core.domain_types import Record


class UserCreate(BaseModel):
    """User creation payload."""
    name: str = Field(min_length=1, max_length=255)
    username: str = Field(min_length=1, max_length=255)
    email: str = Field(
        min_length=3, max_length=255, pattern=r"^[^@\s]+@[^@\s]+$",
    )

    @field_validator("name", "username", "email")
    @classmethod
    def strip_fields(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("field cannot be empty or whitespace")
        return v


class UserResponse(BaseModel):
    """Public-facing user record."""
    id: int
    name: str
    username: str
    email: str

    @classmethod
    def from_record(cls, record: Record) -> "UserResponse":
        return cls(
            id=record.id, name=record.name,
            username=record.username, email=record.email,
        )


class UserListResponse(BaseModel):
    """One listing page (or search result) plus the cursor for the next page."""
    users: list[UserResponse]
    new_offset: int | None
    revision: int = 0
