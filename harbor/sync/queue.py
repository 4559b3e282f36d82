"""SyncQueue abstract interface."""

from abc import ABC, abstractmethod
from uuid import UUID

from harbor.sync.models import SyncItem


class SyncQueue(ABC):
    """Durable FIFO of pending write items.

    Only SyncCoordinator reads or writes the queue.
    """

    @abstractmethod
    async def items(self) -> list[SyncItem]:
        """List every queued item, oldest first."""
        pass

    @abstractmethod
    async def enqueue(self, item: SyncItem) -> None:
        """Append an item."""
        pass

    @abstractmethod
    async def remove(self, item_ids: list[UUID]) -> int:
        """Remove the given items, returning how many were removed."""
        pass

    async def size(self) -> int:
        return len(await self.items())
