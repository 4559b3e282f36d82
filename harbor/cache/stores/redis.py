"""Redis implementation of CacheStore and CacheStorage.

Key structure:
- {prefix}:cache:namespaces - Set of namespace names
- {prefix}:cache:{name}:entries - Hash of key -> CacheEntry JSON
- {prefix}:cache:{name}:order - Sorted set of key scored by insertion sequence
- {prefix}:cache:{name}:seq - Insertion sequence counter
"""

from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

import redis.asyncio as redis

from harbor.cache.models import CacheEntry, RequestKey
from harbor.cache.store import CacheStorage, CacheStore
from harbor.exceptions import StorageError
from harbor.http.models import Response
from harbor.observability.logging import get_logger

logger = get_logger(__name__)


@asynccontextmanager
async def _storage_errors(operation: str, namespace: str) -> AsyncIterator[None]:
    """Translate Redis failures into StorageError."""
    try:
        yield
    except redis.RedisError as e:
        logger.error(
            "redis_cache_operation_failed",
            operation=operation,
            namespace=namespace,
            error=str(e),
        )
        raise StorageError(f"Redis {operation} failed for {namespace}: {e}") from e


class RedisCacheStore(CacheStore):
    """Redis-backed cache namespace.

    Insertion order lives in a sorted set scored by an INCR counter, so
    a re-put moves the key to the end.
    """

    def __init__(self, client: redis.Redis, name: str, key_prefix: str = "harbor") -> None:
        self._client = client
        self._name = name
        self._base = f"{key_prefix}:cache:{name}"

    @property
    def name(self) -> str:
        return self._name

    @property
    def _entries_key(self) -> str:
        return f"{self._base}:entries"

    @property
    def _order_key(self) -> str:
        return f"{self._base}:order"

    @property
    def _seq_key(self) -> str:
        return f"{self._base}:seq"

    async def get(self, key: RequestKey) -> CacheEntry | None:
        async with _storage_errors("get", self._name):
            data = await self._client.hget(self._entries_key, str(key))
        if data is None:
            return None
        return CacheEntry.model_validate_json(data)

    async def put(self, key: RequestKey, response: Response) -> CacheEntry:
        async with _storage_errors("put", self._name):
            sequence = await self._client.incr(self._seq_key)
            entry = CacheEntry(key=key, response=response, sequence=sequence)
            pipe = self._client.pipeline(transaction=True)
            pipe.hset(self._entries_key, str(key), entry.model_dump_json())
            pipe.zadd(self._order_key, {str(key): sequence})
            await pipe.execute()
        return entry

    async def delete(self, key: RequestKey) -> bool:
        async with _storage_errors("delete", self._name):
            pipe = self._client.pipeline(transaction=True)
            pipe.hdel(self._entries_key, str(key))
            pipe.zrem(self._order_key, str(key))
            removed, _ = await pipe.execute()
        return bool(removed)

    async def keys(self) -> list[RequestKey]:
        async with _storage_errors("keys", self._name):
            raw = await self._client.zrange(self._order_key, 0, -1)
        return [RequestKey.parse(k.decode() if isinstance(k, bytes) else k) for k in raw]

    async def drop(self) -> None:
        """Remove every key belonging to this namespace."""
        async with _storage_errors("drop", self._name):
            await self._client.delete(self._entries_key, self._order_key, self._seq_key)


class RedisCacheStorage(CacheStorage):
    """Redis-backed namespace registry."""

    def __init__(self, client: redis.Redis, key_prefix: str = "harbor") -> None:
        self._client = client
        self._prefix = key_prefix
        self._names_key = f"{key_prefix}:cache:namespaces"

    async def open(self, name: str) -> CacheStore:
        async with _storage_errors("open", name):
            await self._client.sadd(self._names_key, name)
        return RedisCacheStore(self._client, name, self._prefix)

    async def has(self, name: str) -> bool:
        async with _storage_errors("has", name):
            return bool(await self._client.sismember(self._names_key, name))

    async def delete(self, name: str) -> bool:
        async with _storage_errors("delete_namespace", name):
            removed = await self._client.srem(self._names_key, name)
        await RedisCacheStore(self._client, name, self._prefix).drop()
        return bool(removed)

    async def names(self) -> list[str]:
        async with _storage_errors("names", "*"):
            raw = await self._client.smembers(self._names_key)
        return sorted(n.decode() if isinstance(n, bytes) else n for n in raw)
