"""Review API endpoints.

Listing is public; writing, editing and deleting require authentication
and ownership. Every change recomputes the movie's rating aggregates.
"""

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
from filmscape.models.movie import Movie
from filmscape.models.review import Review
from filmscape.schemas.common import IMDB_ID_PATTERN, MessageResponse, ReviewPagination
from filmscape.schemas.review import (
    RecentReviewListResponse,
    ReviewCreate,
    ReviewEnvelope,
    ReviewListResponse,
    ReviewResponse,
    ReviewUpdate,
    ReviewWithMovie,
)
from filmscape.services import movies as movie_service
from filmscape.utils.pagination import Page
from filmscape.utils.security import CurrentUser

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/reviews", tags=["reviews"])


async def get_review(db: AsyncSession, review_id: int) -> Review | None:
    result = await db.execute(
        select(Review)
        .where(Review.id == review_id)
        .options(selectinload(Review.user), selectinload(Review.movie))
        .execution_options(populate_existing=True)
    )
    return result.scalar_one_or_none()


def already_reviewed() -> ConflictError:
    return ConflictError("You have already reviewed this movie", error="Review already exists")


async def has_reviewed(db: AsyncSession, user_id: int, movie_id: int) -> bool:
    result = await db.execute(
        select(Review.id).where(Review.user_id == user_id, Review.movie_id == movie_id)
    )
    return result.scalar_one_or_none() is not None


async def get_owned_review(db: AsyncSession, review_id: int, user_id: int, action: str) -> Review:
    """Load a review and check that ``user_id`` wrote it."""
    review = await get_review(db, review_id)
    if review is None:
        raise ResourceNotFoundError(
            "The requested review does not exist", error="Review not found"
        )
    if review.user_id != user_id:
        raise PermissionDeniedError(f"You can only {action} your own reviews")
    return review


@router.get("", response_model=RecentReviewListResponse)
async def list_recent_reviews(
    page: int = Query(1, ge=1, description="Page number"),
    limit: int = Query(10, ge=1, le=50, description="Reviews per page"),
    db: AsyncSession = Depends(get_db),
) -> RecentReviewListResponse:
    """List the most recent reviews across all movies.

    Public endpoint.
    """
    total = (await db.execute(select(func.count(Review.id)))).scalar_one()

    window = Page(page=page, limit=limit, total=total)
    query = (
        select(Review)
        .options(selectinload(Review.user), selectinload(Review.movie))
        .order_by(Review.created_at.desc(), Review.id.desc())
        .offset(window.offset)
        .limit(limit)
    )
    reviews = (await db.execute(query)).scalars().all()

    return RecentReviewListResponse(
        reviews=[ReviewWithMovie.model_validate(review) for review in reviews],
        pagination=ReviewPagination.from_page(window),
    )


@router.get("/movies/{imdb_id}", response_model=ReviewListResponse)
async def list_movie_reviews(
    imdb_id: Annotated[str, Path(pattern=IMDB_ID_PATTERN)],
    page: int = Query(1, ge=1, description="Page number"),
    limit: int = Query(10, ge=1, le=50, description="Reviews per page"),
    db: AsyncSession = Depends(get_db),
) -> ReviewListResponse:
    """List reviews of one movie, newest first.

    The movie is created as a placeholder if it has never been referenced.
    Public endpoint.
    """
    movie = await movie_service.get_or_create(db, imdb_id)

    count_query = select(func.count(Review.id)).where(Review.movie_id == movie.id)
    total = (await db.execute(count_query)).scalar_one()

    window = Page(page=page, limit=limit, total=total)
    query = (
        select(Review)
        .where(Review.movie_id == movie.id)
        .options(selectinload(Review.user))
        .order_by(Review.created_at.desc(), Review.id.desc())
        .offset(window.offset)
        .limit(limit)
    )
    reviews = (await db.execute(query)).scalars().all()

    return ReviewListResponse(
        reviews=[ReviewResponse.model_validate(review) for review in reviews],
        pagination=ReviewPagination.from_page(window),
    )


@router.post("/movies/{imdb_id}", response_model=ReviewEnvelope, status_code=201)
async def create_review(
    imdb_id: Annotated[str, Path(pattern=IMDB_ID_PATTERN)],
    current_user: CurrentUser,
    review_data: ReviewCreate,
    db: AsyncSession = Depends(get_db),
) -> ReviewEnvelope:
    """Write a review for a movie.

    Each user can review a movie once; edit the existing review instead.
    Requires authentication.

    Raises:
        ConflictError 409: If the user already reviewed this movie
    """
    movie = await movie_service.get_or_create(db, imdb_id)

    if await has_reviewed(db, current_user.id, movie.id):
        raise already_reviewed()

    now = datetime.now(UTC)
    review = Review(
        user_id=current_user.id,
        movie_id=movie.id,
        rating=review_data.rating,
        review_text=review_data.review_text,
        is_spoiler=review_data.is_spoiler,
        created_at=now,
        updated_at=now,
    )
    db.add(review)
    try:
        await db.flush()
    except IntegrityError:
        # A concurrent request reviewed the same movie after the check above
        raise already_reviewed() from None
    await movie_service.refresh_rating_aggregates(db, movie)
    logger.info("User %s reviewed %s (%d/10)", current_user.id, imdb_id, review.rating)

    review = await get_review(db, review.id)
    return ReviewEnvelope(
        message="Review submitted successfully",
        review=ReviewResponse.model_validate(review),
    )


@router.put("/{review_id}", response_model=ReviewEnvelope)
async def update_review(
    review_id: int,
    current_user: CurrentUser,
    review_data: ReviewUpdate,
    db: AsyncSession = Depends(get_db),
) -> ReviewEnvelope:
    """Edit a review. Only fields present in the body change.

    Only the author can edit a review.
    Requires authentication.
    """
    review = await get_owned_review(db, review_id, current_user.id, "edit")

    changes = review_data.changes()
    for field, value in changes.items():
        setattr(review, field, value)
    if changes:
        review.updated_at = datetime.now(UTC)

    await movie_service.refresh_rating_aggregates(db, review.movie)

    review = await get_review(db, review_id)
    return ReviewEnvelope(
        message="Review updated successfully",
        review=ReviewResponse.model_validate(review),
    )


@router.delete("/{review_id}", response_model=MessageResponse)
async def delete_review(
    review_id: int,
    current_user: CurrentUser,
    db: AsyncSession = Depends(get_db),
) -> MessageResponse:
    """Delete a review.

    Only the author can delete a review.
    Requires authentication.
    """
    review = await get_owned_review(db, review_id, current_user.id, "delete")
    movie: Movie = review.movie

    await db.delete(review)
    await movie_service.refresh_rating_aggregates(db, movie)

    return MessageResponse(message="Review deleted successfully")
