"""Client-side mirrors of the watchlist and reviews."""

from filmscape.client.backends import (
    LocalWatchlistBackend,
    RemoteReviewsBackend,
    RemoteWatchlistBackend,
    ReviewsBackend,
    WatchlistBackend,
)
from filmscape.client.mirror import ReviewsMirror, WatchlistMirror
from filmscape.client.state import ListState, reduce

__all__ = [
    "ListState",
    "LocalWatchlistBackend",
    "RemoteReviewsBackend",
    "RemoteWatchlistBackend",
    "ReviewsBackend",
    "ReviewsMirror",
    "WatchlistBackend",
    "WatchlistMirror",
    "reduce",
]
