"""Users: listing (search or paginate), create, and delete endpoints.

Invariants:
    - `q` non-empty always selects search mode; `offset` is then ignored
    - Absent `offset` means first page; `offset=null` means the terminal empty result
    - DELETE emits invalidation only after the row is gone; 404 when it never existed
    - Every response carries the current invalidation revision

Design Decisions:
    - `offset` declared as a string: the null/absent distinction is parsed by
      core/query_state.py, not by FastAPI's int coercion
    - Store, engine and gateway built per request from the request's DB session
"""

import logging

from fastapi import APIRouter, Depends, Query, Response, status
from sqlalchemy.ext.asyncio import AsyncSession

from app.config import get_settings
from app.core.domain_types import RecordId
from app.core.query_state import OFFSET_PARAM, SEARCH_PARAM, parse_query_params
from app.infrastructure.database import get_db
from app.infrastructure.record_store import SqlRecordStore
from app.schemas.user import UserCreate, UserListResponse, UserResponse
from app.services.invalidation import InvalidationSignal, get_invalidation_signal
from app.services.listing_engine import ListingQueryEngine
from app.services.mutation_gateway import MutationGateway

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/api/v1/users", tags=["users"])


def get_record_store(db: AsyncSession = Depends(get_db)) -> SqlRecordStore:
    return SqlRecordStore(db)


def get_listing_engine(
    store: SqlRecordStore = Depends(get_record_store),
) -> ListingQueryEngine:
    settings = get_settings()
    return ListingQueryEngine(
        store,
        page_size=settings.listing_page_size,
        search_cap=settings.search_result_cap,
    )


def get_mutation_gateway(
    store: SqlRecordStore = Depends(get_record_store),
    signal: InvalidationSignal = Depends(get_invalidation_signal),
) -> MutationGateway:
    return MutationGateway(store, signal)


@router.get("", response_model=UserListResponse)
async def list_users(
    q: str | None = Query(None, description="Case-insensitive name substring"),
    offset: str | None = Query(None, description="Page cursor, or 'null' for no more data"),
    engine: ListingQueryEngine = Depends(get_listing_engine),
    signal: InvalidationSignal = Depends(get_invalidation_signal),
):
    """Search users by name, or read one page of the full collection."""
    params = {SEARCH_PARAM: q or ""}
    if offset is not None:
        params[OFFSET_PARAM] = offset
    result = await engine.list(parse_query_params(params))
    return UserListResponse(
        users=[UserResponse.from_record(r) for r in result.records],
        new_offset=result.next_offset,
        revision=signal.revision,
    )


@router.post(
    "", response_model=UserResponse, status_code=status.HTTP_201_CREATED,
)
async def create_user(
    body: UserCreate,
    gateway: MutationGateway = Depends(get_mutation_gateway),
):
    """Add a user and invalidate cached listings."""
    record = await gateway.add_record(body.name, body.username, body.email)
    return UserResponse.from_record(record)


@router.delete("/{user_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_user(
    user_id: int,
    gateway: MutationGateway = Depends(get_mutation_gateway),
):
    """Delete a user and invalidate cached listings."""
    await gateway.delete_record(RecordId(user_id))
    return Response(status_code=status.HTTP_204_NO_CONTENT)
