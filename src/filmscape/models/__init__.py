"""SQLAlchemy ORM models."""

from filmscape.models.movie import Movie
from filmscape.models.review import Review
from filmscape.models.user import User
from filmscape.models.watchlist import WatchlistItem
from filmscape.schemas.common import WatchlistStatus

__all__ = [
    "Movie",
    "Review",
    "User",
    "WatchlistItem",
    "WatchlistStatus",
]
