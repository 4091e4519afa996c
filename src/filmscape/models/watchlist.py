"""Watchlist ORM model."""

from __future__ import annotations

from datetime import datetime
from typing import TYPE_CHECKING

from sqlalchemy import CheckConstraint, Enum, ForeignKey, String, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column, relationship

from filmscape.database import Base
from filmscape.schemas.common import WatchlistStatus

if TYPE_CHECKING:
    from filmscape.models.movie import Movie
    from filmscape.models.user import User


class WatchlistItem(Base):
    """A movie on a user's watchlist."""

    __tablename__ = "watchlist_items"
    __table_args__ = (
        UniqueConstraint("user_id", "movie_id", name="uq_watchlist_user_movie"),
        CheckConstraint("priority BETWEEN 0 AND 5", name="ck_watchlist_priority_range"),
    )

    id: Mapped[int] = mapped_column(primary_key=True)
    user_id: Mapped[int] = mapped_column(ForeignKey("users.id", ondelete="CASCADE"), index=True)
    movie_id: Mapped[int] = mapped_column(ForeignKey("movies.id", ondelete="CASCADE"), index=True)
    status: Mapped[WatchlistStatus] = mapped_column(
        Enum(
            WatchlistStatus,
            name="watchlist_status",
            values_callable=lambda e: [member.value for member in e],
        ),
        default=WatchlistStatus.WANT_TO_WATCH,
        index=True,
    )
    notes: Mapped[str | None] = mapped_column(String(500), nullable=True)
    priority: Mapped[int] = mapped_column(default=0)  # 0 (none) to 5 (highest)
    created_at: Mapped[datetime] = mapped_column(default=datetime.utcnow, index=True)
    updated_at: Mapped[datetime] = mapped_column(default=datetime.utcnow, onupdate=datetime.utcnow)

    # Relationships
    user: Mapped[User] = relationship(back_populates="watchlist_items")
    movie: Mapped[Movie] = relationship(back_populates="watchlist_items")
