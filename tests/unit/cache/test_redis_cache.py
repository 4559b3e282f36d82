"""Unit tests for Redis cache backends."""

from unittest.mock import AsyncMock, MagicMock

import pytest
import redis.asyncio as redis

from harbor.cache.models import CacheEntry, RequestKey
from harbor.cache.stores.redis import RedisCacheStorage, RedisCacheStore
from harbor.exceptions import StorageError
from tests.factories import make_response

NAMESPACE = "parking-reminder-runtime-v1"
BASE = f"harbor:cache:{NAMESPACE}"


@pytest.fixture
def mock_pipeline():
    """Create mock Redis pipeline."""
    pipe = MagicMock()
    pipe.execute = AsyncMock(return_value=[1, 1])
    return pipe


@pytest.fixture
def mock_redis(mock_pipeline):
    """Create mock Redis client."""
    client = AsyncMock()
    client.pipeline = MagicMock(return_value=mock_pipeline)
    client.hget = AsyncMock(return_value=None)
    client.incr = AsyncMock(return_value=1)
    client.zrange = AsyncMock(return_value=[])
    return client


@pytest.fixture
def store(mock_redis) -> RedisCacheStore:
    return RedisCacheStore(mock_redis, NAMESPACE)


def key(path: str) -> RequestKey:
    return RequestKey(url=f"http://localhost:8000{path}")


class TestRedisCacheStore:
    """Tests for RedisCacheStore."""

    @pytest.mark.asyncio
    async def test_put_writes_hash_and_order(
        self, store: RedisCacheStore, mock_redis, mock_pipeline
    ) -> None:
        mock_redis.incr.return_value = 7

        entry = await store.put(key("/a"), make_response("a"))

        assert entry.sequence == 7
        mock_redis.incr.assert_awaited_once_with(f"{BASE}:seq")
        hset_args = mock_pipeline.hset.call_args.args
        assert hset_args[0] == f"{BASE}:entries"
        assert hset_args[1] == "GET http://localhost:8000/a"
        assert CacheEntry.model_validate_json(hset_args[2]).response.body == b"a"
        mock_pipeline.zadd.assert_called_once_with(
            f"{BASE}:order", {"GET http://localhost:8000/a": 7}
        )
        mock_pipeline.execute.assert_awaited_once()

    @pytest.mark.asyncio
    async def test_get_deserializes_entry(self, store: RedisCacheStore, mock_redis) -> None:
        stored = CacheEntry(key=key("/a"), response=make_response(b"\x00\xff"), sequence=3)
        mock_redis.hget.return_value = stored.model_dump_json()

        entry = await store.get(key("/a"))

        assert entry is not None
        assert entry.response.body == b"\x00\xff"
        assert entry.sequence == 3

    @pytest.mark.asyncio
    async def test_get_missing_returns_none(self, store: RedisCacheStore) -> None:
        assert await store.get(key("/missing")) is None

    @pytest.mark.asyncio
    async def test_keys_follow_sorted_set_order(self, store: RedisCacheStore, mock_redis) -> None:
        mock_redis.zrange.return_value = [
            "GET http://localhost:8000/b",
            "GET http://localhost:8000/a",
        ]
        assert await store.keys() == [key("/b"), key("/a")]
        mock_redis.zrange.assert_awaited_once_with(f"{BASE}:order", 0, -1)

    @pytest.mark.asyncio
    async def test_delete_reports_removal(self, store: RedisCacheStore, mock_pipeline) -> None:
        mock_pipeline.execute.return_value = [0, 0]
        assert await store.delete(key("/a")) is False

    @pytest.mark.asyncio
    async def test_redis_error_becomes_storage_error(
        self, store: RedisCacheStore, mock_redis
    ) -> None:
        mock_redis.incr.side_effect = redis.ConnectionError("down")
        with pytest.raises(StorageError):
            await store.put(key("/a"), make_response())


class TestRedisCacheStorage:
    """Tests for RedisCacheStorage."""

    @pytest.mark.asyncio
    async def test_open_registers_namespace(self, mock_redis) -> None:
        storage = RedisCacheStorage(mock_redis, key_prefix="test")
        store = await storage.open("ns")
        mock_redis.sadd.assert_awaited_once_with("test:cache:namespaces", "ns")
        assert store.name == "ns"

    @pytest.mark.asyncio
    async def test_names_sorted(self, mock_redis) -> None:
        mock_redis.smembers = AsyncMock(return_value={"b", "a"})
        storage = RedisCacheStorage(mock_redis)
        assert await storage.names() == ["a", "b"]

    @pytest.mark.asyncio
    async def test_delete_drops_entries(self, mock_redis) -> None:
        mock_redis.srem = AsyncMock(return_value=1)
        storage = RedisCacheStorage(mock_redis)

        assert await storage.delete("ns") is True
        mock_redis.delete.assert_awaited_once_with(
            "harbor:cache:ns:entries",
            "harbor:cache:ns:order",
            "harbor:cache:ns:seq",
        )
