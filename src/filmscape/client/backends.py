"""Durable stores behind the client mirrors.

``RemoteWatchlistBackend`` and ``RemoteReviewsBackend`` talk to the REST API
through the shared httpx base client. ``LocalWatchlistBackend`` keeps a
per-user JSON file for offline or demo use.
"""

import json
import logging
from abc import ABC, abstractmethod
from datetime import UTC, datetime
from pathlib import Path
from typing import Any

import httpx
from pydantic import ValidationError

from filmscape.client.state import Item
from filmscape.exceptions import InvalidInputError, ResourceNotFoundError
from filmscape.schemas.common import ItemPagination, WatchlistStatus
from filmscape.schemas.watchlist import WatchlistAdd, WatchlistItemUpdate
from filmscape.services.base import APIError, BaseAPIClient
from filmscape.services.omdb import OMDbClient
from filmscape.utils.pagination import Page

logger = logging.getLogger(__name__)

PageResult = tuple[list[Item], dict[str, Any]]


class WatchlistBackend(ABC):
    """Where a watchlist is durably stored."""

    @abstractmethod
    async def list_items(
        self, page: int = 1, limit: int = 20, status: str | None = None
    ) -> PageResult:
        """Return one page of items, newest first, and its pagination block."""

    @abstractmethod
    async def add(
        self,
        imdb_id: str,
        status: str = WatchlistStatus.WANT_TO_WATCH.value,
        notes: str | None = None,
        priority: int = 0,
    ) -> Item:
        """Store a movie on the watchlist and return the stored item."""

    @abstractmethod
    async def update(self, item_id: Any, changes: dict[str, Any]) -> Item:
        """Apply a partial update and return the stored item."""

    @abstractmethod
    async def remove(self, item_id: Any) -> None:
        """Delete an item."""

    @abstractmethod
    async def check(self, imdb_id: str) -> Item | None:
        """Return the item for this movie, or None if it is not listed."""


class ReviewsBackend(ABC):
    """Where a movie's reviews are read from and written to."""

    @abstractmethod
    async def list_movie_reviews(self, imdb_id: str, page: int = 1, limit: int = 10) -> PageResult:
        """Return one page of a movie's reviews and its pagination block."""

    @abstractmethod
    async def submit(
        self,
        imdb_id: str,
        rating: int,
        review_text: str | None = None,
        is_spoiler: bool = False,
    ) -> Item:
        """Create a review and return it."""

    @abstractmethod
    async def edit(self, review_id: Any, changes: dict[str, Any]) -> Item:
        """Apply a partial update to a review and return it."""

    @abstractmethod
    async def delete_review(self, review_id: Any) -> None:
        """Delete a review."""


class AuthenticatedAPIClient(BaseAPIClient):
    """Client for this application's own REST API, optionally with a bearer token."""

    def __init__(
        self,
        base_url: str,
        token: str | None = None,
        timeout: float = 30.0,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        """Initialize the client.

        Args:
            base_url: API root, e.g. ``http://localhost:8000/api``.
            token: JWT access token from ``/auth/login``.
            timeout: Request timeout in seconds.
            transport: Optional httpx transport, e.g. ``httpx.ASGITransport``.
        """
        self.token = token
        super().__init__(base_url=base_url, timeout=timeout, transport=transport)

    @property
    def default_headers(self) -> dict[str, str]:
        """Return default headers."""
        headers = {"Accept": "application/json"}
        if self.token:
            headers["Authorization"] = f"Bearer {self.token}"
        return headers


class RemoteWatchlistBackend(AuthenticatedAPIClient, WatchlistBackend):
    """Watchlist stored by the REST API."""

    async def list_items(
        self, page: int = 1, limit: int = 20, status: str | None = None
    ) -> PageResult:
        params: dict[str, Any] = {"page": page, "limit": limit}
        if status:
            params["status"] = status
        data = await self.get("/watchlist", params=params)
        return data.get("watchlist", []), data.get("pagination", {})

    async def add(
        self,
        imdb_id: str,
        status: str = WatchlistStatus.WANT_TO_WATCH.value,
        notes: str | None = None,
        priority: int = 0,
    ) -> Item:
        body = {"imdb_id": imdb_id, "status": status, "notes": notes, "priority": priority}
        data = await self.post("/watchlist/add", json=body)
        return data["watchlist_item"]

    async def update(self, item_id: Any, changes: dict[str, Any]) -> Item:
        data = await self.put(f"/watchlist/{item_id}", json=changes)
        return data["watchlist_item"]

    async def remove(self, item_id: Any) -> None:
        await self.delete(f"/watchlist/{item_id}")

    async def check(self, imdb_id: str) -> Item | None:
        data = await self.get(f"/watchlist/check/{imdb_id}")
        return data.get("watchlist_item")


class RemoteReviewsBackend(AuthenticatedAPIClient, ReviewsBackend):
    """Reviews stored by the REST API. Listing works without a token."""

    async def list_movie_reviews(self, imdb_id: str, page: int = 1, limit: int = 10) -> PageResult:
        data = await self.get(f"/reviews/movies/{imdb_id}", params={"page": page, "limit": limit})
        return data.get("reviews", []), data.get("pagination", {})

    async def submit(
        self,
        imdb_id: str,
        rating: int,
        review_text: str | None = None,
        is_spoiler: bool = False,
    ) -> Item:
        body = {"rating": rating, "review_text": review_text, "is_spoiler": is_spoiler}
        data = await self.post(f"/reviews/movies/{imdb_id}", json=body)
        return data["review"]

    async def edit(self, review_id: Any, changes: dict[str, Any]) -> Item:
        data = await self.put(f"/reviews/{review_id}", json=changes)
        return data["review"]

    async def delete_review(self, review_id: Any) -> None:
        await self.delete(f"/reviews/{review_id}")


class LocalWatchlistBackend(WatchlistBackend):
    """Watchlist kept in a JSON file per user.

    Items are keyed by IMDb id, so adding a movie that is already listed
    replaces the old entry and moves it to the front. When an OMDb client
    is given, new entries are decorated with title, year, poster and
    rating; lookup failures fall back to the bare IMDb id.
    """

    def __init__(
        self,
        directory: str | Path,
        user_id: Any,
        omdb_client: OMDbClient | None = None,
    ) -> None:
        self.path = Path(directory) / f"watchlist-{user_id}.json"
        self.user_id = user_id
        self.omdb_client = omdb_client

    def _load(self) -> list[Item]:
        if not self.path.exists():
            return []
        with self.path.open(encoding="utf-8") as fh:
            return json.load(fh)

    def _save(self, items: list[Item]) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        with self.path.open("w", encoding="utf-8") as fh:
            json.dump(items, fh, indent=2)

    async def _describe(self, imdb_id: str) -> dict[str, Any]:
        movie: dict[str, Any] = {
            "id": imdb_id,
            "imdb_id": imdb_id,
            "title": imdb_id,
            "year": datetime.now(UTC).year,
            "poster": None,
            "imdb_rating": 0.0,
            "average_rating": 0.0,
            "total_reviews": 0,
        }
        if self.omdb_client is None:
            return movie
        try:
            details = await self.omdb_client.get_movie(imdb_id)
        except APIError as e:
            logger.info("No OMDb details for %s: %s", imdb_id, e)
            return movie
        fields = details.to_movie_fields()
        for key in ("title", "year", "poster", "imdb_rating"):
            if key in fields:
                movie[key] = fields[key]
        return movie

    async def list_items(
        self, page: int = 1, limit: int = 20, status: str | None = None
    ) -> PageResult:
        items = self._load()
        if status:
            items = [item for item in items if item["status"] == status]
        window = Page(page=page, limit=limit, total=len(items))
        pagination = ItemPagination.from_page(window).model_dump()
        return items[window.offset : window.offset + limit], pagination

    async def add(
        self,
        imdb_id: str,
        status: str = WatchlistStatus.WANT_TO_WATCH.value,
        notes: str | None = None,
        priority: int = 0,
    ) -> Item:
        try:
            data = WatchlistAdd(imdb_id=imdb_id, status=status, notes=notes, priority=priority)
        except ValidationError as e:
            raise InvalidInputError(str(e)) from e

        now = datetime.now(UTC).isoformat()
        item = {
            "id": data.imdb_id,
            "user_id": self.user_id,
            "movie_id": data.imdb_id,
            "status": data.status.value,
            "notes": data.notes,
            "priority": data.priority,
            "created_at": now,
            "updated_at": now,
            "movie": await self._describe(data.imdb_id),
        }
        items = [existing for existing in self._load() if existing["id"] != data.imdb_id]
        self._save([item, *items])
        return item

    async def update(self, item_id: Any, changes: dict[str, Any]) -> Item:
        try:
            validated = WatchlistItemUpdate.model_validate(changes).changes()
        except ValidationError as e:
            raise InvalidInputError(str(e)) from e

        items = self._load()
        for index, item in enumerate(items):
            if item["id"] == item_id:
                break
        else:
            raise ResourceNotFoundError(
                "The requested watchlist item does not exist", error="Watchlist item not found"
            )

        if "status" in validated:
            validated["status"] = validated["status"].value
        updated = {**item, **validated, "updated_at": datetime.now(UTC).isoformat()}
        items[index] = updated
        self._save(items)
        return updated

    async def remove(self, item_id: Any) -> None:
        items = self._load()
        remaining = [item for item in items if item["id"] != item_id]
        if len(remaining) == len(items):
            raise ResourceNotFoundError(
                "The requested watchlist item does not exist", error="Watchlist item not found"
            )
        self._save(remaining)

    async def check(self, imdb_id: str) -> Item | None:
        for item in self._load():
            if item["id"] == imdb_id:
                return item
        return None
