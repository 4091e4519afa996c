"""In-memory list state for client mirrors and the reducer that evolves it.

Items are the JSON objects returned by the API (watchlist items or
reviews), keyed by their ``id``. The reducer is pure: it never mutates the
state it receives and unknown actions return the state unchanged.
"""

from dataclasses import dataclass, replace
from typing import Any

Item = dict[str, Any]


@dataclass(frozen=True)
class ListState:
    """Snapshot of a paginated list as seen by the client."""

    items: tuple[Item, ...] = ()
    is_loading: bool = False
    error: str | None = None
    pagination: dict[str, Any] | None = None

    def find(self, item_id: Any) -> Item | None:
        for item in self.items:
            if item.get("id") == item_id:
                return item
        return None

    def index_of(self, item_id: Any) -> int | None:
        for index, item in enumerate(self.items):
            if item.get("id") == item_id:
                return index
        return None


@dataclass(frozen=True)
class FetchStarted:
    pass


@dataclass(frozen=True)
class FetchSucceeded:
    items: list[Item]
    pagination: dict[str, Any] | None = None


@dataclass(frozen=True)
class FetchFailed:
    message: str


@dataclass(frozen=True)
class MutationFailed:
    """A write was rejected; the list itself is left alone."""

    message: str


@dataclass(frozen=True)
class ItemAdded:
    """Prepend an item (newest first)."""

    item: Item


@dataclass(frozen=True)
class ItemInserted:
    """Put an item back at a known position, e.g. after a failed removal."""

    item: Item
    index: int


@dataclass(frozen=True)
class ItemRemoved:
    item_id: Any


@dataclass(frozen=True)
class ItemUpdated:
    """Replace the item that has the same id."""

    item: Item


@dataclass(frozen=True)
class ItemReplaced:
    """Swap a provisional item for the one the store confirmed.

    Any other entry already carrying the confirmed id is dropped, so a
    store that replaces on re-add never shows the movie twice.
    """

    provisional_id: Any
    item: Item


@dataclass(frozen=True)
class PaginationAdjusted:
    """Shift a pagination counter such as ``total_reviews``."""

    key: str
    delta: int


@dataclass(frozen=True)
class ErrorCleared:
    pass


def reduce(state: ListState, action: object) -> ListState:
    """Return the state that results from applying ``action`` to ``state``."""
    if isinstance(action, FetchStarted):
        return replace(state, is_loading=True, error=None)

    if isinstance(action, FetchSucceeded):
        return replace(
            state,
            items=tuple(action.items),
            pagination=action.pagination,
            is_loading=False,
            error=None,
        )

    if isinstance(action, FetchFailed):
        return replace(state, is_loading=False, error=action.message)

    if isinstance(action, MutationFailed):
        return replace(state, error=action.message)

    if isinstance(action, ItemAdded):
        return replace(state, items=(action.item, *state.items))

    if isinstance(action, ItemInserted):
        items = list(state.items)
        index = max(0, min(action.index, len(items)))
        items.insert(index, action.item)
        return replace(state, items=tuple(items))

    if isinstance(action, ItemRemoved):
        return replace(
            state, items=tuple(i for i in state.items if i.get("id") != action.item_id)
        )

    if isinstance(action, ItemUpdated):
        item_id = action.item.get("id")
        return replace(
            state,
            items=tuple(action.item if i.get("id") == item_id else i for i in state.items),
        )

    if isinstance(action, ItemReplaced):
        confirmed_id = action.item.get("id")
        items = []
        for item in state.items:
            if item.get("id") == action.provisional_id:
                items.append(action.item)
            elif item.get("id") != confirmed_id:
                items.append(item)
        return replace(state, items=tuple(items))

    if isinstance(action, PaginationAdjusted):
        if not state.pagination or action.key not in state.pagination:
            return state
        pagination = dict(state.pagination)
        pagination[action.key] = max(0, pagination[action.key] + action.delta)
        return replace(state, pagination=pagination)

    if isinstance(action, ErrorCleared):
        return replace(state, error=None)

    return state
