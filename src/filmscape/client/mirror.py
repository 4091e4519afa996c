"""Client-side mirrors of the watchlist and of a movie's reviews.

Watchlist mutations are optimistic and write-through: the in-memory state
changes first, then the write to the backend is awaited. When the write
fails the error message lands in ``state.error`` and the exception is
re-raised. By default the optimistic change stays in place until the next
``fetch`` reconciles with the store; pass ``rollback_on_failure=True`` to
restore the previous item instead.
"""

import itertools
import logging
from datetime import UTC, datetime
from typing import Any

from filmscape.client.backends import ReviewsBackend, WatchlistBackend
from filmscape.client.state import (
    ErrorCleared,
    FetchFailed,
    FetchStarted,
    FetchSucceeded,
    Item,
    ItemAdded,
    ItemInserted,
    ItemRemoved,
    ItemReplaced,
    ItemUpdated,
    ListState,
    MutationFailed,
    PaginationAdjusted,
    reduce,
)
from filmscape.schemas.common import WatchlistStatus

logger = logging.getLogger(__name__)


class ListMirror:
    """Holds a ``ListState`` and applies actions to it."""

    def __init__(self) -> None:
        self.state = ListState()

    def dispatch(self, action: object) -> ListState:
        self.state = reduce(self.state, action)
        return self.state

    @property
    def items(self) -> list[Item]:
        return list(self.state.items)

    def clear_error(self) -> None:
        self.dispatch(ErrorCleared())

    def _failed(self, exc: Exception, fallback: str) -> None:
        message = str(exc) or fallback
        logger.warning("%s: %s", fallback, message)
        self.dispatch(MutationFailed(message))


class WatchlistMirror(ListMirror):
    """Optimistic in-memory copy of the current user's watchlist."""

    def __init__(
        self,
        backend: WatchlistBackend,
        rollback_on_failure: bool = False,
        page_size: int = 20,
    ) -> None:
        super().__init__()
        self.backend = backend
        self.rollback_on_failure = rollback_on_failure
        self.page_size = page_size
        self._provisional_ids = itertools.count(1)

    async def fetch(self, page: int = 1, status: str | None = None) -> ListState:
        """Replace the in-memory list with one page from the backend."""
        self.dispatch(FetchStarted())
        try:
            items, pagination = await self.backend.list_items(
                page=page, limit=self.page_size, status=status
            )
        except Exception as e:
            self.dispatch(FetchFailed(str(e) or "Failed to fetch watchlist"))
            raise
        return self.dispatch(FetchSucceeded(items, pagination))

    def _provisional_item(
        self, imdb_id: str, status: str, notes: str | None, priority: int
    ) -> Item:
        now = datetime.now(UTC).isoformat()
        return {
            "id": f"pending-{next(self._provisional_ids)}",
            "movie_id": imdb_id,
            "status": status,
            "notes": notes,
            "priority": priority,
            "created_at": now,
            "updated_at": now,
            "movie": {"imdb_id": imdb_id, "title": imdb_id},
        }

    async def add(
        self,
        imdb_id: str,
        status: str = WatchlistStatus.WANT_TO_WATCH.value,
        notes: str | None = None,
        priority: int = 0,
    ) -> Item:
        """Show the movie at the top of the list, then store it.

        The provisional entry is swapped for the stored item once the
        backend confirms it.
        """
        provisional = self._provisional_item(imdb_id, status, notes, priority)
        self.dispatch(ItemAdded(provisional))
        try:
            item = await self.backend.add(imdb_id, status=status, notes=notes, priority=priority)
        except Exception as e:
            if self.rollback_on_failure:
                self.dispatch(ItemRemoved(provisional["id"]))
            self._failed(e, "Failed to add to watchlist")
            raise
        self.dispatch(ItemReplaced(provisional["id"], item))
        return item

    async def update(self, item_id: Any, **changes: Any) -> Item:
        """Apply ``changes`` locally, then write them to the backend."""
        previous = self.state.find(item_id)
        if previous is not None:
            self.dispatch(ItemUpdated({**previous, **changes}))
        try:
            item = await self.backend.update(item_id, changes)
        except Exception as e:
            if self.rollback_on_failure and previous is not None:
                self.dispatch(ItemUpdated(previous))
            self._failed(e, "Failed to update watchlist item")
            raise
        self.dispatch(ItemUpdated(item))
        return item

    async def remove(self, item_id: Any) -> None:
        """Drop the item locally, then delete it from the backend."""
        index = self.state.index_of(item_id)
        previous = self.state.find(item_id)
        self.dispatch(ItemRemoved(item_id))
        try:
            await self.backend.remove(item_id)
        except Exception as e:
            if self.rollback_on_failure and previous is not None:
                self.dispatch(ItemInserted(previous, index))
            self._failed(e, "Failed to remove from watchlist")
            raise

    async def check(self, imdb_id: str) -> tuple[bool, Item | None]:
        """Ask the backend whether a movie is on the watchlist."""
        item = await self.backend.check(imdb_id)
        return item is not None, item


class ReviewsMirror(ListMirror):
    """In-memory copy of one page of a movie's reviews.

    Writes are not optimistic: submitting or editing reloads the current
    page once the backend confirms, and deleting drops the review only
    after the backend has removed it.
    """

    def __init__(self, backend: ReviewsBackend, imdb_id: str, page_size: int = 10) -> None:
        super().__init__()
        self.backend = backend
        self.imdb_id = imdb_id
        self.page_size = page_size

    @property
    def current_page(self) -> int:
        if self.state.pagination:
            return self.state.pagination.get("current_page") or 1
        return 1

    async def fetch(self, page: int = 1) -> ListState:
        self.dispatch(FetchStarted())
        try:
            reviews, pagination = await self.backend.list_movie_reviews(
                self.imdb_id, page=page, limit=self.page_size
            )
        except Exception as e:
            self.dispatch(FetchFailed(str(e) or "Failed to load reviews"))
            raise
        return self.dispatch(FetchSucceeded(reviews, pagination))

    async def submit(
        self, rating: int, review_text: str | None = None, is_spoiler: bool = False
    ) -> Item:
        try:
            review = await self.backend.submit(
                self.imdb_id, rating, review_text=review_text, is_spoiler=is_spoiler
            )
        except Exception as e:
            self._failed(e, "Failed to submit review")
            raise
        await self.fetch(self.current_page)
        return review

    async def edit(self, review_id: Any, **changes: Any) -> Item:
        try:
            review = await self.backend.edit(review_id, changes)
        except Exception as e:
            self._failed(e, "Failed to update review")
            raise
        await self.fetch(self.current_page)
        return review

    async def delete(self, review_id: Any) -> None:
        try:
            await self.backend.delete_review(review_id)
        except Exception as e:
            self._failed(e, "Failed to delete review")
            raise
        self.dispatch(ItemRemoved(review_id))
        self.dispatch(PaginationAdjusted("total_reviews", -1))

    def own_review(self, user_id: Any) -> Item | None:
        """The review on this page written by ``user_id``, if any."""
        for review in self.state.items:
            if (review.get("user") or {}).get("id") == user_id:
                return review
        return None

    @property
    def average_rating(self) -> float:
        """Mean rating of the reviews on this page, to one decimal."""
        if not self.state.items:
            return 0.0
        total = sum(review["rating"] for review in self.state.items)
        return round(total / len(self.state.items), 1)
