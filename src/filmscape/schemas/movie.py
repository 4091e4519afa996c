"""Pydantic schemas for movie API endpoints."""

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field, field_validator

from filmscape.schemas.common import ImdbId, ItemPagination


class MovieSummary(BaseModel):
    """Compact movie view embedded in watchlist items and reviews."""

    model_config = ConfigDict(from_attributes=True)

    id: int = Field(description="Local database ID")
    imdb_id: str = Field(description="IMDb ID")
    title: str = Field(description="Movie title")
    year: int | None = Field(default=None, description="Release year")
    poster: str | None = Field(default=None, description="Poster image URL")
    imdb_rating: float = Field(default=0.0, description="IMDb rating")
    average_rating: float = Field(default=0.0, description="Average user review rating")
    total_reviews: int = Field(default=0, description="Number of user reviews")


class MovieFields(BaseModel):
    """Editable descriptive fields of a movie."""

    title: str | None = Field(default=None, min_length=1, max_length=255)
    year: int | None = Field(default=None, ge=1870, le=2100, description="Release year")
    rated: str | None = Field(default=None, max_length=20)
    released: str | None = Field(default=None, max_length=50)
    runtime: str | None = Field(default=None, max_length=50)
    genre: str | None = Field(default=None, max_length=255)
    director: str | None = Field(default=None, max_length=255)
    writer: str | None = Field(default=None)
    actors: str | None = Field(default=None)
    plot: str | None = Field(default=None)
    language: str | None = Field(default=None, max_length=255)
    country: str | None = Field(default=None, max_length=255)
    awards: str | None = Field(default=None, max_length=255)
    poster: str | None = Field(default=None, max_length=500)
    imdb_rating: float | None = Field(default=None, ge=0, le=10)
    imdb_votes: str | None = Field(default=None, max_length=50)
    type: str | None = Field(default=None, max_length=20)
    dvd: str | None = Field(default=None, max_length=50)
    box_office: str | None = Field(default=None, max_length=50)
    production: str | None = Field(default=None, max_length=255)
    website: str | None = Field(default=None, max_length=500)


class MovieCreate(MovieFields):
    """Schema for an administrator adding a movie."""

    imdb_id: ImdbId = Field(description="IMDb ID, e.g. tt0111161")
    title: str = Field(min_length=1, max_length=255, description="Movie title")


class MovieUpdate(MovieFields):
    """Partial update of a movie; only fields sent by the client are applied."""

    @field_validator("title", "imdb_rating")
    @classmethod
    def reject_null(cls, v):
        """Title and IMDb rating may be omitted but never nulled."""
        if v is None:
            msg = "Field cannot be null"
            raise ValueError(msg)
        return v


class MovieDetails(MovieSummary):
    """Full movie record for API responses."""

    rated: str | None = None
    released: str | None = None
    runtime: str | None = None
    genre: str | None = None
    director: str | None = None
    writer: str | None = None
    actors: str | None = None
    plot: str | None = None
    language: str | None = None
    country: str | None = None
    awards: str | None = None
    imdb_votes: str | None = None
    type: str | None = None
    dvd: str | None = None
    box_office: str | None = None
    production: str | None = None
    website: str | None = None
    enriched_at: datetime | None = Field(
        default=None, description="When metadata was last pulled from OMDb"
    )
    created_at: datetime = Field(description="When the movie was first referenced")
    updated_at: datetime = Field(description="When the movie was last changed")


class MovieListResponse(BaseModel):
    """Paginated local catalogue listing."""

    movies: list[MovieSummary] = Field(default_factory=list, description="Movies on this page")
    pagination: ItemPagination = Field(description="Page metadata")


class MovieSearchResult(BaseModel):
    """A single external search result."""

    model_config = ConfigDict(extra="ignore")

    imdb_id: str = Field(description="IMDb ID")
    title: str = Field(description="Movie title")
    year: str | None = Field(default=None, description="Release year as reported by OMDb")
    type: str | None = Field(default=None, description="movie, series or episode")
    poster_url: str = Field(description="Poster image URL or placeholder")


class MovieSearchResponse(BaseModel):
    """Response for the external movie search endpoint."""

    model_config = ConfigDict(extra="ignore")

    page: int = Field(description="Current page number")
    total_results: int = Field(description="Total number of results")
    results: list[MovieSearchResult] = Field(default_factory=list, description="Movie results")
