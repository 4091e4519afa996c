"""Local movie catalogue: lazy creation, metadata enrichment and rating aggregates."""

import logging
from collections.abc import Mapping
from datetime import UTC, datetime
from typing import Any

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from filmscape.config import get_settings
from filmscape.exceptions import ResourceNotFoundError
from filmscape.models.movie import Movie
from filmscape.models.review import Review
from filmscape.schemas.external import OMDB_MISSING, OMDbMovieDetails

logger = logging.getLogger(__name__)

# Columns that metadata enrichment and admin edits may overwrite
DESCRIPTIVE_FIELDS = frozenset(
    {
        "title",
        "year",
        "rated",
        "released",
        "runtime",
        "genre",
        "director",
        "writer",
        "actors",
        "plot",
        "language",
        "country",
        "awards",
        "poster",
        "imdb_rating",
        "imdb_votes",
        "type",
        "dvd",
        "box_office",
        "production",
        "website",
    }
)


def has_value(value: Any) -> bool:
    """False for None, blank strings and OMDb's missing marker."""
    if isinstance(value, str):
        value = value.strip()
        return bool(value) and value != OMDB_MISSING
    return value is not None


def placeholder_title(imdb_id: str) -> str:
    """Synthetic title given to movies nobody has described yet."""
    return f"Movie {imdb_id}"


async def get_movie_by_imdb_id(db: AsyncSession, imdb_id: str) -> Movie | None:
    result = await db.execute(select(Movie).where(Movie.imdb_id == imdb_id))
    return result.scalar_one_or_none()


async def get_or_create(db: AsyncSession, imdb_id: str) -> Movie:
    """Return the movie with this IMDb id, creating a placeholder if needed.

    An existing movie is returned unchanged. A new one gets a synthetic
    title, the current year, the placeholder poster and zeroed ratings,
    to be filled in later by ``enrich``.
    """
    movie = await get_movie_by_imdb_id(db, imdb_id)
    if movie is not None:
        return movie

    now = datetime.now(UTC)
    movie = Movie(
        imdb_id=imdb_id,
        title=placeholder_title(imdb_id),
        year=now.year,
        poster=get_settings().placeholder_poster,
        imdb_rating=0.0,
        average_rating=0.0,
        total_reviews=0,
        created_at=now,
        updated_at=now,
    )
    db.add(movie)
    await db.flush()
    logger.info("Created placeholder movie %s", imdb_id)
    return movie


def apply_fields(movie: Movie, fields: Mapping[str, Any]) -> list[str]:
    """Set descriptive fields on a movie and return the names that changed."""
    changed = []
    for name, value in fields.items():
        if name not in DESCRIPTIVE_FIELDS:
            continue
        if getattr(movie, name) != value:
            setattr(movie, name, value)
            changed.append(name)
    if changed:
        movie.updated_at = datetime.now(UTC)
    return changed


async def enrich(
    db: AsyncSession,
    imdb_id: str,
    metadata: OMDbMovieDetails | Mapping[str, Any],
) -> Movie:
    """Overwrite a movie's fields with the ones present in ``metadata``.

    Fields missing from the metadata, empty, or reported by OMDb as "N/A"
    keep their current value.

    Raises:
        ResourceNotFoundError: If no movie has this IMDb id.
    """
    movie = await get_movie_by_imdb_id(db, imdb_id)
    if movie is None:
        raise ResourceNotFoundError(f"Movie {imdb_id} does not exist", error="Movie not found")

    if isinstance(metadata, OMDbMovieDetails):
        fields = metadata.to_movie_fields()
    else:
        fields = {k: v for k, v in metadata.items() if has_value(v)}

    changed = apply_fields(movie, fields)
    movie.enriched_at = datetime.now(UTC)
    await db.flush()
    logger.info("Enriched movie %s (%d fields changed)", imdb_id, len(changed))
    return movie


async def refresh_rating_aggregates(db: AsyncSession, movie: Movie) -> Movie:
    """Recompute average_rating and total_reviews from the reviews table."""
    await db.flush()
    result = await db.execute(
        select(func.count(Review.id), func.avg(Review.rating)).where(Review.movie_id == movie.id)
    )
    total, average = result.one()
    movie.total_reviews = total or 0
    movie.average_rating = round(float(average), 1) if average is not None else 0.0
    await db.flush()
    return movie
