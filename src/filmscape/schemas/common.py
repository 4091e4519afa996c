"""Pydantic schemas shared across endpoints."""

import enum
from typing import Annotated, Any

from pydantic import BaseModel, ConfigDict, Field, StringConstraints

from filmscape.utils.pagination import Page

IMDB_ID_PATTERN = r"^tt\d{7,8}$"

ImdbId = Annotated[str, StringConstraints(pattern=IMDB_ID_PATTERN)]


class WatchlistStatus(str, enum.Enum):
    """Where a movie sits in a user's viewing plans."""

    WANT_TO_WATCH = "want_to_watch"
    WATCHING = "watching"
    WATCHED = "watched"


class ErrorResponse(BaseModel):
    """JSON error envelope returned by every failing request."""

    error: str = Field(description="Short error title")
    message: str = Field(description="Human readable explanation")
    details: list[Any] | None = Field(default=None, description="Validation failures, if any")


class PaginationBase(BaseModel):
    """Page metadata common to paginated list responses."""

    model_config = ConfigDict(extra="ignore")

    current_page: int = Field(description="Current page number")
    total_pages: int = Field(description="Total number of pages")
    limit: int = Field(description="Items per page")
    has_next: bool = Field(description="Whether a later page exists")
    has_prev: bool = Field(description="Whether an earlier page exists")


class ItemPagination(PaginationBase):
    """Page metadata counting generic items."""

    total_items: int = Field(description="Total number of items")

    @classmethod
    def from_page(cls, page: Page) -> "ItemPagination":
        return cls(
            current_page=page.page,
            total_pages=page.total_pages,
            total_items=page.total,
            limit=page.limit,
            has_next=page.has_next,
            has_prev=page.has_prev,
        )


class ReviewPagination(PaginationBase):
    """Page metadata counting reviews."""

    total_reviews: int = Field(description="Total number of reviews")

    @classmethod
    def from_page(cls, page: Page) -> "ReviewPagination":
        return cls(
            current_page=page.page,
            total_pages=page.total_pages,
            total_reviews=page.total,
            limit=page.limit,
            has_next=page.has_next,
            has_prev=page.has_prev,
        )


class MessageResponse(BaseModel):
    """Plain confirmation message."""

    message: str = Field(description="Confirmation message")
