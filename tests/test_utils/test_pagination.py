"""Tests for offset pagination."""

import pytest

from filmscape.schemas.common import ItemPagination, ReviewPagination
from filmscape.utils.pagination import Page


@pytest.mark.parametrize(
    ("page", "limit", "total", "total_pages", "has_next", "has_prev", "offset"),
    [
        (2, 20, 25, 2, False, True, 20),
        (1, 20, 25, 2, True, False, 0),
        (1, 10, 0, 0, False, False, 0),
        (3, 10, 30, 3, False, True, 20),
        (5, 10, 30, 3, False, True, 40),
    ],
)
def test_page_metadata(page, limit, total, total_pages, has_next, has_prev, offset) -> None:
    window = Page(page=page, limit=limit, total=total)

    assert window.total_pages == total_pages
    assert window.has_next is has_next
    assert window.has_prev is has_prev
    assert window.offset == offset


@pytest.mark.parametrize(("page", "limit", "total"), [(0, 20, 5), (1, 0, 5), (1, 20, -1)])
def test_invalid_page(page, limit, total) -> None:
    with pytest.raises(ValueError):
        Page(page=page, limit=limit, total=total)


def test_pagination_blocks_name_their_count() -> None:
    window = Page(page=1, limit=10, total=12)

    assert ItemPagination.from_page(window).model_dump() == {
        "current_page": 1,
        "total_pages": 2,
        "limit": 10,
        "has_next": True,
        "has_prev": False,
        "total_items": 12,
    }
    assert ReviewPagination.from_page(window).total_reviews == 12
