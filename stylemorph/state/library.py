"""Ordered in-memory collection of identifiable assets."""

from typing import Generic, Iterable, Protocol, TypeVar


class Identified(Protocol):
    id: str


T = TypeVar("T", bound=Identified)


class AssetLibrary(Generic[T]):
    """Most-recent-first list of items keyed by ``id``.

    Knows nothing about selection or the synthesis service; callers that
    need to react to removals do so with the returned item.
    """

    def __init__(self, items: Iterable[T] = ()):
        self._items: list[T] = list(items)

    def insert_front(self, item: T) -> T:
        self._items.insert(0, item)
        return item

    def insert_batch_front(self, items: Iterable[T]) -> list[T]:
        """Prepend several items as one block, keeping their given order."""
        batch = list(items)
        self._items[0:0] = batch
        return batch

    def find(self, item_id: str) -> T | None:
        for item in self._items:
            if item.id == item_id:
                return item
        return None

    def remove(self, item_id: str) -> T | None:
        """Remove and return the item, or None if the id is unknown."""
        for index, item in enumerate(self._items):
            if item.id == item_id:
                return self._items.pop(index)
        return None

    def replace(self, item: T) -> bool:
        """Swap in a new version of an item, keeping its position."""
        for index, existing in enumerate(self._items):
            if existing.id == item.id:
                self._items[index] = item
                return True
        return False

    def list(self) -> list[T]:
        """Snapshot of the items in display order."""
        return list(self._items)

    def __len__(self) -> int:
        return len(self._items)

    def __contains__(self, item_id: object) -> bool:
        return any(item.id == item_id for item in self._items)
