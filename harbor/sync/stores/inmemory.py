"""In-memory implementation of SyncQueue."""

from uuid import UUID

from harbor.sync.models import SyncItem
from harbor.sync.queue import SyncQueue


class InMemorySyncQueue(SyncQueue):
    """In-memory sync queue for testing and development.

    Not durable across process restarts.
    """

    def __init__(self) -> None:
        self._items: list[SyncItem] = []

    async def items(self) -> list[SyncItem]:
        return list(self._items)

    async def enqueue(self, item: SyncItem) -> None:
        self._items.append(item)

    async def remove(self, item_ids: list[UUID]) -> int:
        ids = set(item_ids)
        before = len(self._items)
        self._items = [item for item in self._items if item.id not in ids]
        return before - len(self._items)
