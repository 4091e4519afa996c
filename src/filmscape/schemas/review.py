"""Pydantic schemas for review API endpoints."""

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field, StrictBool, StrictInt, field_validator

from filmscape.schemas.common import ReviewPagination
from filmscape.schemas.movie import MovieSummary


class ReviewAuthor(BaseModel):
    """Public author info shown next to a review."""

    model_config = ConfigDict(from_attributes=True)

    id: int = Field(description="User ID")
    username: str = Field(description="Username")
    profile_picture: str | None = Field(default=None, description="Avatar URL")


class ReviewCreate(BaseModel):
    """Schema for submitting a review."""

    rating: StrictInt = Field(ge=1, le=10, description="Whole-number rating from 1 to 10")
    review_text: str | None = Field(default=None, max_length=5000, description="Review body")
    is_spoiler: StrictBool = Field(default=False, description="Whether the text has spoilers")

    @field_validator("review_text")
    @classmethod
    def blank_to_none(cls, v: str | None) -> str | None:
        """Store whitespace-only text as no text."""
        if v is not None and not v.strip():
            return None
        return v


class ReviewUpdate(BaseModel):
    """Partial update of a review; omitted fields are kept."""

    rating: StrictInt | None = Field(default=None, ge=1, le=10)
    review_text: str | None = Field(default=None, max_length=5000)
    is_spoiler: StrictBool | None = Field(default=None)

    @field_validator("rating", "is_spoiler")
    @classmethod
    def reject_null(cls, v):
        """Rating and spoiler flag may be omitted but never nulled."""
        if v is None:
            msg = "Field cannot be null"
            raise ValueError(msg)
        return v

    @field_validator("review_text")
    @classmethod
    def blank_to_none(cls, v: str | None) -> str | None:
        if v is not None and not v.strip():
            return None
        return v

    def changes(self) -> dict:
        """Fields explicitly present in the request."""
        return self.model_dump(exclude_unset=True)


class ReviewResponse(BaseModel):
    """A review with its author."""

    model_config = ConfigDict(from_attributes=True)

    id: int = Field(description="Review ID")
    movie_id: int = Field(description="Local movie ID")
    rating: int = Field(description="Rating from 1 to 10")
    review_text: str | None = Field(default=None, description="Review body")
    is_spoiler: bool = Field(description="Whether the text has spoilers")
    created_at: datetime = Field(description="When the review was written")
    updated_at: datetime = Field(description="When the review was last edited")
    user: ReviewAuthor = Field(description="Review author")


class ReviewWithMovie(ReviewResponse):
    """A review with its author and movie, for cross-movie feeds."""

    movie: MovieSummary = Field(description="Reviewed movie")


class ReviewListResponse(BaseModel):
    """Paginated reviews of one movie."""

    reviews: list[ReviewResponse] = Field(default_factory=list)
    pagination: ReviewPagination = Field(description="Page metadata")


class RecentReviewListResponse(BaseModel):
    """Paginated recent reviews across all movies."""

    reviews: list[ReviewWithMovie] = Field(default_factory=list)
    pagination: ReviewPagination = Field(description="Page metadata")


class ReviewEnvelope(BaseModel):
    """Mutation result carrying the affected review."""

    message: str = Field(description="Confirmation message")
    review: ReviewResponse = Field(description="The affected review")
