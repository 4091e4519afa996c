"""Watchlist API endpoints."""

import logging
from datetime import UTC, datetime
from typing import Annotated

from fastapi import APIRouter, Depends, Path, Query
from sqlalchemy import func, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from filmscape.database import get_db
from filmscape.exceptions import ConflictError, PermissionDeniedError, ResourceNotFoundError
from filmscape.models.watchlist import WatchlistItem
from filmscape.schemas.common import (
    IMDB_ID_PATTERN,
    ItemPagination,
    MessageResponse,
    WatchlistStatus,
)
from filmscape.schemas.watchlist import (
    WatchlistAdd,
    WatchlistCheckResponse,
    WatchlistItemEnvelope,
    WatchlistItemResponse,
    WatchlistItemUpdate,
    WatchlistListResponse,
)
from filmscape.services import movies as movie_service
from filmscape.utils.pagination import Page
from filmscape.utils.security import CurrentUser

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/watchlist", tags=["watchlist"])


async def get_item_with_movie(db: AsyncSession, item_id: int) -> WatchlistItem | None:
    """Load a watchlist item with its movie eagerly loaded."""
    result = await db.execute(
        select(WatchlistItem)
        .where(WatchlistItem.id == item_id)
        .options(selectinload(WatchlistItem.movie))
        .execution_options(populate_existing=True)
    )
    return result.scalar_one_or_none()


def already_listed() -> ConflictError:
    return ConflictError(
        "This movie is already in your watchlist", error="Movie already in watchlist"
    )


async def find_user_item(db: AsyncSession, user_id: int, movie_id: int) -> WatchlistItem | None:
    result = await db.execute(
        select(WatchlistItem).where(
            WatchlistItem.user_id == user_id, WatchlistItem.movie_id == movie_id
        )
    )
    return result.scalar_one_or_none()


async def get_owned_item(db: AsyncSession, item_id: int, user_id: int, action: str) -> WatchlistItem:
    """Load a watchlist item and check that ``user_id`` owns it.

    Raises:
        ResourceNotFoundError: If the item does not exist
        PermissionDeniedError: If the item belongs to someone else
    """
    item = await get_item_with_movie(db, item_id)
    if item is None:
        raise ResourceNotFoundError(
            "The requested watchlist item does not exist", error="Watchlist item not found"
        )
    if item.user_id != user_id:
        raise PermissionDeniedError(f"You can only {action} your own watchlist items")
    return item


@router.get("", response_model=WatchlistListResponse)
async def list_watchlist(
    current_user: CurrentUser,
    page: int = Query(1, ge=1, description="Page number"),
    limit: int = Query(20, ge=1, le=100, description="Items per page"),
    status: WatchlistStatus | None = Query(None, description="Filter by status"),
    db: AsyncSession = Depends(get_db),
) -> WatchlistListResponse:
    """List the current user's watchlist, newest first.

    Requires authentication.
    """
    base_query = select(WatchlistItem).where(WatchlistItem.user_id == current_user.id)
    if status is not None:
        base_query = base_query.where(WatchlistItem.status == status)

    count_query = select(func.count()).select_from(base_query.subquery())
    total = (await db.execute(count_query)).scalar_one()

    window = Page(page=page, limit=limit, total=total)
    results_query = (
        base_query.options(selectinload(WatchlistItem.movie))
        .order_by(WatchlistItem.created_at.desc(), WatchlistItem.id.desc())
        .offset(window.offset)
        .limit(limit)
    )
    items = (await db.execute(results_query)).scalars().all()

    return WatchlistListResponse(
        watchlist=[WatchlistItemResponse.model_validate(item) for item in items],
        pagination=ItemPagination.from_page(window),
    )


@router.post("/add", response_model=WatchlistItemEnvelope, status_code=201)
async def add_to_watchlist(
    current_user: CurrentUser,
    item_data: WatchlistAdd,
    db: AsyncSession = Depends(get_db),
) -> WatchlistItemEnvelope:
    """Add a movie to the current user's watchlist.

    The movie is created as a placeholder if it has never been referenced.
    Requires authentication.

    Raises:
        ConflictError 409: If the movie is already on the watchlist
    """
    movie = await movie_service.get_or_create(db, item_data.imdb_id)

    if await find_user_item(db, current_user.id, movie.id) is not None:
        raise already_listed()

    now = datetime.now(UTC)
    item = WatchlistItem(
        user_id=current_user.id,
        movie_id=movie.id,
        status=item_data.status,
        notes=item_data.notes,
        priority=item_data.priority,
        created_at=now,
        updated_at=now,
    )
    db.add(item)
    try:
        await db.flush()
    except IntegrityError:
        # A concurrent request added the same movie after the check above
        raise already_listed() from None
    logger.info("User %s added %s to watchlist", current_user.id, item_data.imdb_id)

    item = await get_item_with_movie(db, item.id)
    return WatchlistItemEnvelope(
        message="Movie added to watchlist successfully",
        watchlist_item=WatchlistItemResponse.model_validate(item),
    )


@router.get("/check/{imdb_id}", response_model=WatchlistCheckResponse)
async def check_in_watchlist(
    imdb_id: Annotated[str, Path(pattern=IMDB_ID_PATTERN)],
    current_user: CurrentUser,
    db: AsyncSession = Depends(get_db),
) -> WatchlistCheckResponse:
    """Report whether a movie is on the current user's watchlist.

    Requires authentication.
    """
    movie = await movie_service.get_or_create(db, imdb_id)

    query = (
        select(WatchlistItem)
        .where(WatchlistItem.user_id == current_user.id, WatchlistItem.movie_id == movie.id)
        .options(selectinload(WatchlistItem.movie))
    )
    item = (await db.execute(query)).scalar_one_or_none()

    return WatchlistCheckResponse(
        in_watchlist=item is not None,
        watchlist_item=WatchlistItemResponse.model_validate(item) if item else None,
    )


@router.put("/{item_id}", response_model=WatchlistItemEnvelope)
async def update_watchlist_item(
    item_id: int,
    current_user: CurrentUser,
    item_data: WatchlistItemUpdate,
    db: AsyncSession = Depends(get_db),
) -> WatchlistItemEnvelope:
    """Update status, notes or priority of a watchlist item.

    Only fields present in the request body are changed.
    Only the owner can update an item.
    Requires authentication.
    """
    item = await get_owned_item(db, item_id, current_user.id, "edit")

    changes = item_data.changes()
    for field, value in changes.items():
        setattr(item, field, value)
    if changes:
        item.updated_at = datetime.now(UTC)
    await db.flush()

    item = await get_item_with_movie(db, item_id)
    return WatchlistItemEnvelope(
        message="Watchlist item updated successfully",
        watchlist_item=WatchlistItemResponse.model_validate(item),
    )


@router.delete("/{item_id}", response_model=MessageResponse)
async def remove_from_watchlist(
    item_id: int,
    current_user: CurrentUser,
    db: AsyncSession = Depends(get_db),
) -> MessageResponse:
    """Remove a movie from the watchlist.

    Only the owner can remove an item.
    Requires authentication.
    """
    item = await get_owned_item(db, item_id, current_user.id, "delete")
    await db.delete(item)
    return MessageResponse(message="Movie removed from watchlist successfully")
