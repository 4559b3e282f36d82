"""Redis implementation of SyncQueue.

Key structure:
- {prefix}:sync:order - List of item IDs, oldest first
- {prefix}:sync:items - Hash of item ID -> SyncItem JSON
"""

from uuid import UUID

import redis.asyncio as redis

from harbor.exceptions import StorageError
from harbor.observability.logging import get_logger
from harbor.sync.models import SyncItem
from harbor.sync.queue import SyncQueue

logger = get_logger(__name__)


class RedisSyncQueue(SyncQueue):
    """Redis-backed durable sync queue."""

    def __init__(self, client: redis.Redis, key_prefix: str = "harbor") -> None:
        self._client = client
        self._order_key = f"{key_prefix}:sync:order"
        self._items_key = f"{key_prefix}:sync:items"

    async def items(self) -> list[SyncItem]:
        try:
            ids = await self._client.lrange(self._order_key, 0, -1)
            if not ids:
                return []
            raw = await self._client.hmget(self._items_key, ids)
        except redis.RedisError as e:
            logger.error("redis_sync_queue_read_failed", error=str(e))
            raise StorageError(f"Failed to read sync queue: {e}") from e

        items: list[SyncItem] = []
        for item_id, data in zip(ids, raw, strict=True):
            if data is None:
                logger.warning("sync_item_missing", item_id=str(item_id))
                continue
            items.append(SyncItem.model_validate_json(data))
        return items

    async def enqueue(self, item: SyncItem) -> None:
        try:
            pipe = self._client.pipeline(transaction=True)
            pipe.hset(self._items_key, str(item.id), item.model_dump_json())
            pipe.rpush(self._order_key, str(item.id))
            await pipe.execute()
        except redis.RedisError as e:
            logger.error("redis_sync_enqueue_failed", item_id=str(item.id), error=str(e))
            raise StorageError(f"Failed to enqueue sync item: {e}") from e

    async def remove(self, item_ids: list[UUID]) -> int:
        if not item_ids:
            return 0
        keys = [str(item_id) for item_id in item_ids]
        try:
            pipe = self._client.pipeline(transaction=True)
            for key in keys:
                pipe.lrem(self._order_key, 0, key)
            pipe.hdel(self._items_key, *keys)
            results = await pipe.execute()
        except redis.RedisError as e:
            logger.error("redis_sync_remove_failed", count=len(keys), error=str(e))
            raise StorageError(f"Failed to remove sync items: {e}") from e
        return int(results[-1])
