"""Pydantic schemas for request/response validation."""

from filmscape.schemas.common import (
    ErrorResponse,
    ItemPagination,
    MessageResponse,
    ReviewPagination,
    WatchlistStatus,
)
from filmscape.schemas.external import (
    OMDbMovieDetails,
    OMDbSearchResponse,
    OMDbSearchResult,
)
from filmscape.schemas.movie import (
    MovieCreate,
    MovieDetails,
    MovieListResponse,
    MovieSearchResponse,
    MovieSearchResult,
    MovieSummary,
    MovieUpdate,
)
from filmscape.schemas.review import (
    RecentReviewListResponse,
    ReviewCreate,
    ReviewListResponse,
    ReviewResponse,
    ReviewUpdate,
    ReviewWithMovie,
)
from filmscape.schemas.watchlist import (
    WatchlistAdd,
    WatchlistCheckResponse,
    WatchlistItemResponse,
    WatchlistItemUpdate,
    WatchlistListResponse,
)

__all__ = [
    # Shared schemas
    "ErrorResponse",
    "ItemPagination",
    "MessageResponse",
    "ReviewPagination",
    "WatchlistStatus",
    # External API schemas
    "OMDbMovieDetails",
    "OMDbSearchResponse",
    "OMDbSearchResult",
    # Movie schemas
    "MovieCreate",
    "MovieDetails",
    "MovieListResponse",
    "MovieSearchResponse",
    "MovieSearchResult",
    "MovieSummary",
    "MovieUpdate",
    # Review schemas
    "RecentReviewListResponse",
    "ReviewCreate",
    "ReviewListResponse",
    "ReviewResponse",
    "ReviewUpdate",
    "ReviewWithMovie",
    # Watchlist schemas
    "WatchlistAdd",
    "WatchlistCheckResponse",
    "WatchlistItemResponse",
    "WatchlistItemUpdate",
    "WatchlistListResponse",
]
