"""Movie ORM model."""

from __future__ import annotations

from datetime import datetime
from typing import TYPE_CHECKING

from sqlalchemy import String, Text
from sqlalchemy.orm import Mapped, mapped_column, relationship

from filmscape.database import Base

if TYPE_CHECKING:
    from filmscape.models.review import Review
    from filmscape.models.watchlist import WatchlistItem


class Movie(Base):
    """Catalogue entry keyed by IMDb id, enriched from OMDb."""

    __tablename__ = "movies"

    id: Mapped[int] = mapped_column(primary_key=True)
    imdb_id: Mapped[str] = mapped_column(String(12), unique=True, index=True)
    title: Mapped[str] = mapped_column(String(255))
    year: Mapped[int | None] = mapped_column(nullable=True)
    rated: Mapped[str | None] = mapped_column(String(20), nullable=True)
    released: Mapped[str | None] = mapped_column(String(50), nullable=True)
    runtime: Mapped[str | None] = mapped_column(String(50), nullable=True)
    genre: Mapped[str | None] = mapped_column(String(255), nullable=True)
    director: Mapped[str | None] = mapped_column(String(255), nullable=True)
    writer: Mapped[str | None] = mapped_column(Text, nullable=True)
    actors: Mapped[str | None] = mapped_column(Text, nullable=True)
    plot: Mapped[str | None] = mapped_column(Text, nullable=True)
    language: Mapped[str | None] = mapped_column(String(255), nullable=True)
    country: Mapped[str | None] = mapped_column(String(255), nullable=True)
    awards: Mapped[str | None] = mapped_column(String(255), nullable=True)
    poster: Mapped[str | None] = mapped_column(String(500), nullable=True)
    imdb_rating: Mapped[float] = mapped_column(default=0.0)
    imdb_votes: Mapped[str | None] = mapped_column(String(50), nullable=True)
    type: Mapped[str | None] = mapped_column(String(20), nullable=True)  # movie, series, episode
    dvd: Mapped[str | None] = mapped_column(String(50), nullable=True)
    box_office: Mapped[str | None] = mapped_column(String(50), nullable=True)
    production: Mapped[str | None] = mapped_column(String(255), nullable=True)
    website: Mapped[str | None] = mapped_column(String(500), nullable=True)

    # Derived from the reviews table
    average_rating: Mapped[float] = mapped_column(default=0.0)
    total_reviews: Mapped[int] = mapped_column(default=0)

    enriched_at: Mapped[datetime | None] = mapped_column(nullable=True)  # None until OMDb sync
    created_at: Mapped[datetime] = mapped_column(default=datetime.utcnow)
    updated_at: Mapped[datetime] = mapped_column(default=datetime.utcnow, onupdate=datetime.utcnow)

    # Relationships
    reviews: Mapped[list[Review]] = relationship(
        back_populates="movie", cascade="all, delete-orphan"
    )
    watchlist_items: Mapped[list[WatchlistItem]] = relationship(
        back_populates="movie", cascade="all, delete-orphan"
    )
