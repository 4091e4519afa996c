"""Pydantic schemas for watchlist API endpoints."""

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field, field_validator

from filmscape.schemas.common import ImdbId, ItemPagination, WatchlistStatus
from filmscape.schemas.movie import MovieSummary


class WatchlistItemBase(BaseModel):
    """Fields shared by watchlist create and update requests."""

    notes: str | None = Field(default=None, max_length=500, description="Personal notes")
    priority: int = Field(default=0, ge=0, le=5, description="Priority from 0 to 5")


class WatchlistAdd(WatchlistItemBase):
    """Schema for adding a movie to the watchlist."""

    imdb_id: ImdbId = Field(description="IMDb ID of the movie to add")
    status: WatchlistStatus = Field(
        default=WatchlistStatus.WANT_TO_WATCH, description="Viewing status"
    )


class WatchlistItemUpdate(BaseModel):
    """Partial update of a watchlist item.

    Fields left out of the request body are not touched. Sending
    ``"notes": null`` clears the notes; ``status`` and ``priority`` cannot
    be null.
    """

    status: WatchlistStatus | None = Field(default=None, description="Viewing status")
    notes: str | None = Field(default=None, max_length=500, description="Personal notes")
    priority: int | None = Field(default=None, ge=0, le=5, description="Priority from 0 to 5")

    @field_validator("status", "priority")
    @classmethod
    def reject_null(cls, v):
        """Status and priority may be omitted but never nulled."""
        if v is None:
            msg = "Field cannot be null"
            raise ValueError(msg)
        return v

    def changes(self) -> dict:
        """Fields explicitly present in the request."""
        return self.model_dump(exclude_unset=True)


class WatchlistItemResponse(BaseModel):
    """A watchlist item joined with its movie."""

    model_config = ConfigDict(from_attributes=True)

    id: int = Field(description="Watchlist item ID")
    user_id: int = Field(description="Owner user ID")
    movie_id: int = Field(description="Local movie ID")
    status: WatchlistStatus = Field(description="Viewing status")
    notes: str | None = Field(default=None, description="Personal notes")
    priority: int = Field(description="Priority from 0 to 5")
    created_at: datetime = Field(description="When the item was added")
    updated_at: datetime = Field(description="When the item was last changed")
    movie: MovieSummary = Field(description="Movie details")


class WatchlistListResponse(BaseModel):
    """Paginated watchlist."""

    watchlist: list[WatchlistItemResponse] = Field(default_factory=list)
    pagination: ItemPagination = Field(description="Page metadata")


class WatchlistItemEnvelope(BaseModel):
    """Mutation result carrying the affected item."""

    message: str = Field(description="Confirmation message")
    watchlist_item: WatchlistItemResponse = Field(description="The affected item")


class WatchlistCheckResponse(BaseModel):
    """Whether a movie is on the current user's watchlist."""

    in_watchlist: bool = Field(description="True when the movie is on the watchlist")
    watchlist_item: WatchlistItemResponse | None = Field(default=None)
