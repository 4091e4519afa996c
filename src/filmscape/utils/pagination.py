"""Offset pagination helpers shared by list endpoints and the local client store."""

import math
from dataclasses import dataclass


@dataclass(frozen=True)
class Page:
    """Position of one page within a result set of ``total`` items."""

    page: int
    limit: int
    total: int

    def __post_init__(self) -> None:
        if self.page < 1:
            raise ValueError("page must be >= 1")
        if self.limit < 1:
            raise ValueError("limit must be >= 1")
        if self.total < 0:
            raise ValueError("total must be >= 0")

    @property
    def offset(self) -> int:
        return (self.page - 1) * self.limit

    @property
    def total_pages(self) -> int:
        return math.ceil(self.total / self.limit)

    @property
    def has_next(self) -> bool:
        return self.page < self.total_pages

    @property
    def has_prev(self) -> bool:
        return self.page > 1

