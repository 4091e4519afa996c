"""Movie API endpoints."""

import logging
from datetime import UTC, datetime
from typing import Annotated

from fastapi import APIRouter, Depends, Path, Query
from sqlalchemy import func, or_, select
from sqlalchemy.ext.asyncio import AsyncSession

from filmscape.database import get_db
from filmscape.exceptions import ConflictError, ResourceNotFoundError
from filmscape.models.movie import Movie
from filmscape.schemas.common import IMDB_ID_PATTERN, ItemPagination
from filmscape.schemas.movie import (
    MovieCreate,
    MovieDetails,
    MovieListResponse,
    MovieSearchResponse,
    MovieSearchResult,
    MovieSummary,
    MovieUpdate,
)
from filmscape.services import movies as movie_service
from filmscape.services.base import APIError, NotFoundError
from filmscape.services.omdb import OMDbClient, get_omdb_client, get_optional_omdb_client
from filmscape.utils.pagination import Page
from filmscape.utils.security import AdminUser

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/movies", tags=["movies"])

ImdbIdPath = Annotated[str, Path(pattern=IMDB_ID_PATTERN, description="IMDb ID")]


@router.get("", response_model=MovieListResponse)
async def list_movies(
    q: str | None = Query(None, max_length=255, description="Match on title or IMDb ID"),
    page: int = Query(1, ge=1, description="Page number"),
    limit: int = Query(20, ge=1, le=100, description="Movies per page"),
    db: AsyncSession = Depends(get_db),
) -> MovieListResponse:
    """List or search the local movie catalogue, sorted by title.

    Public endpoint.
    """
    base_query = select(Movie)
    term = (q or "").strip().lower()
    if term:
        pattern = f"%{term}%"
        base_query = base_query.where(
            or_(func.lower(Movie.title).like(pattern), func.lower(Movie.imdb_id).like(pattern))
        )

    count_query = select(func.count()).select_from(base_query.subquery())
    total = (await db.execute(count_query)).scalar_one()

    window = Page(page=page, limit=limit, total=total)
    results_query = (
        base_query.order_by(func.lower(Movie.title), Movie.id)
        .offset(window.offset)
        .limit(limit)
    )
    movies = (await db.execute(results_query)).scalars().all()

    return MovieListResponse(
        movies=[MovieSummary.model_validate(movie) for movie in movies],
        pagination=ItemPagination.from_page(window),
    )


@router.get("/search", response_model=MovieSearchResponse)
async def search_movies(
    query: str = Query(..., min_length=1, description="Search query for movies"),
    page: int = Query(1, ge=1, le=100, description="Page number"),
    year: int | None = Query(None, ge=1870, le=2100, description="Filter by release year"),
    omdb_client: OMDbClient = Depends(get_omdb_client),
) -> MovieSearchResponse:
    """Search OMDb for movies.

    Public endpoint.
    """
    try:
        response = await omdb_client.search_movies(query=query, page=page, year=year)

        return MovieSearchResponse(
            page=page,
            total_results=response.total_results,
            results=[
                MovieSearchResult(
                    imdb_id=movie.imdb_id,
                    title=movie.title,
                    year=movie.year,
                    type=movie.type,
                    poster_url=omdb_client.get_poster_url(movie.poster),
                )
                for movie in response.search
            ],
        )
    finally:
        await omdb_client.close()


@router.get("/lookup", response_model=MovieCreate)
async def lookup_movie(
    current_user: AdminUser,  # noqa: ARG001 - Required for admin enforcement
    title: str = Query(..., min_length=1, description="Title to look up on OMDb"),
    year: int | None = Query(None, ge=1870, le=2100, description="Release year"),
    omdb_client: OMDbClient = Depends(get_omdb_client),
) -> MovieCreate:
    """Look up a movie on OMDb by title to prefill the admin add form.

    Requires administrator privileges.
    """
    try:
        details = await omdb_client.get_movie_by_title(title, year=year)
    except NotFoundError:
        raise ResourceNotFoundError(
            f"No OMDb match for '{title}'", error="Movie not found"
        ) from None
    finally:
        await omdb_client.close()

    return MovieCreate(imdb_id=details.imdb_id, **details.to_movie_fields())


@router.post("", response_model=MovieDetails, status_code=201)
async def create_movie(
    current_user: AdminUser,
    movie_data: MovieCreate,
    db: AsyncSession = Depends(get_db),
) -> MovieDetails:
    """Add a movie to the catalogue.

    Requires administrator privileges.

    Raises:
        ConflictError 409: If a movie with this IMDb ID already exists
    """
    if await movie_service.get_movie_by_imdb_id(db, movie_data.imdb_id):
        raise ConflictError(
            f"Movie {movie_data.imdb_id} already exists", error="Movie already exists"
        )

    now = datetime.now(UTC)
    movie = Movie(
        imdb_id=movie_data.imdb_id,
        imdb_rating=0.0,
        average_rating=0.0,
        total_reviews=0,
        created_at=now,
        updated_at=now,
    )
    movie_service.apply_fields(movie, movie_data.model_dump(exclude={"imdb_id"}, exclude_none=True))
    db.add(movie)
    await db.flush()
    await db.refresh(movie)
    logger.info("Admin %s added movie %s", current_user.id, movie.imdb_id)

    return MovieDetails.model_validate(movie)


@router.get("/{imdb_id}", response_model=MovieDetails)
async def get_movie(
    imdb_id: ImdbIdPath,
    db: AsyncSession = Depends(get_db),
    omdb_client: OMDbClient | None = Depends(get_optional_omdb_client),
) -> MovieDetails:
    """Get a movie, creating it on first reference.

    Movies that were never enriched are filled in from OMDb when an API
    key is configured. OMDb failures are logged and the local record is
    returned as is.
    Public endpoint.
    """
    movie = await movie_service.get_or_create(db, imdb_id)

    if movie.enriched_at is None and omdb_client is not None:
        try:
            details = await omdb_client.get_movie(imdb_id)
            movie = await movie_service.enrich(db, imdb_id, details)
        except APIError as e:
            logger.warning("Could not enrich %s from OMDb: %s", imdb_id, e)
        finally:
            await omdb_client.close()

    await db.refresh(movie)
    return MovieDetails.model_validate(movie)


@router.patch("/{imdb_id}", response_model=MovieDetails)
async def update_movie(
    imdb_id: ImdbIdPath,
    current_user: AdminUser,
    movie_data: MovieUpdate,
    db: AsyncSession = Depends(get_db),
) -> MovieDetails:
    """Edit a movie's descriptive fields. Only fields present in the body change.

    Requires administrator privileges.
    """
    movie = await movie_service.get_movie_by_imdb_id(db, imdb_id)
    if movie is None:
        raise ResourceNotFoundError(f"Movie {imdb_id} does not exist", error="Movie not found")

    changed = movie_service.apply_fields(movie, movie_data.model_dump(exclude_unset=True))
    await db.flush()
    await db.refresh(movie)
    logger.info("Admin %s edited %s: %s", current_user.id, imdb_id, ", ".join(changed) or "-")

    return MovieDetails.model_validate(movie)


@router.post("/{imdb_id}/enrich", response_model=MovieDetails)
async def enrich_movie(
    imdb_id: ImdbIdPath,
    current_user: AdminUser,  # noqa: ARG001 - Required for admin enforcement
    db: AsyncSession = Depends(get_db),
    omdb_client: OMDbClient = Depends(get_omdb_client),
) -> MovieDetails:
    """Refresh a movie from OMDb, creating it first if needed.

    Requires administrator privileges.
    """
    await movie_service.get_or_create(db, imdb_id)
    try:
        details = await omdb_client.get_movie(imdb_id)
    except NotFoundError:
        raise ResourceNotFoundError(
            f"OMDb has no movie {imdb_id}", error="Movie not found"
        ) from None
    finally:
        await omdb_client.close()

    movie = await movie_service.enrich(db, imdb_id, details)
    await db.refresh(movie)
    return MovieDetails.model_validate(movie)
