"""Unit tests for agent assembly."""

from unittest.mock import AsyncMock, MagicMock, patch

import pytest

from harbor.agent.factory import create_agent, create_redis_client
from harbor.agent.state import AgentState
from harbor.cache.stores.inmemory import InMemoryCacheStorage
from harbor.cache.stores.redis import RedisCacheStorage
from harbor.config.models.cache import CacheConfig
from harbor.config.models.storage import StorageConfig
from harbor.config.settings import Settings
from harbor.http.fetcher import HttpxFetcher
from harbor.sync.stores.inmemory import InMemorySyncQueue
from harbor.sync.stores.redis import RedisSyncQueue


class TestAgentState:
    """Tests for namespace naming and liveness."""

    def test_names_from_config(self) -> None:
        state = AgentState.from_config(CacheConfig(prefix="app", version="v7"))

        assert state.precache.name == "app-precache-v7"
        assert state.runtime.name == "app-runtime-v7"
        assert state.lookup_namespaces == ["app-runtime-v7", "app-precache-v7"]

    def test_only_current_generation_is_live(self) -> None:
        state = AgentState.from_config(CacheConfig(prefix="app", version="v2"))

        assert state.is_live("app-runtime-v2")
        assert not state.is_live("app-runtime-v1")


class TestCreateAgent:
    """Tests for create_agent."""

    def test_inmemory_backend(self) -> None:
        agent = create_agent(Settings())

        assert isinstance(agent.storage, InMemoryCacheStorage)
        assert isinstance(agent.fetcher, HttpxFetcher)
        assert agent.state.version == "v1"

    def test_redis_backend_uses_given_client(self) -> None:
        settings = Settings(storage=StorageConfig(backend="redis", key_prefix="test"))
        client = AsyncMock()
        client.pipeline = MagicMock()

        agent = create_agent(settings, redis_client=client)

        assert isinstance(agent.storage, RedisCacheStorage)
        assert isinstance(agent.coordinator._queue, RedisSyncQueue)

    def test_injected_backends_win(self) -> None:
        settings = Settings(storage=StorageConfig(backend="redis"))
        storage = InMemoryCacheStorage()
        queue = InMemorySyncQueue()

        with patch("harbor.agent.factory.create_redis_client") as factory:
            agent = create_agent(settings, storage=storage, queue=queue)

        factory.assert_not_called()
        assert agent.storage is storage
        assert agent.coordinator._queue is queue

    def test_metrics_server_only_on_request(self) -> None:
        with patch("harbor.agent.factory.setup_metrics") as setup_metrics:
            create_agent(Settings())
            setup_metrics.assert_not_called()

            create_agent(Settings(), serve_metrics=True)
            setup_metrics.assert_called_once_with(9090)

    @pytest.mark.asyncio
    async def test_sync_endpoint_resolved_against_origin(
        self, fetcher, recording_sleep
    ) -> None:
        agent = create_agent(Settings(), fetcher=fetcher, sleep=recording_sleep)
        await agent.coordinator.enqueue({"plate": "A123"})

        await agent.coordinator.sync()

        assert fetcher.requests[0].url == "http://localhost:8000/api/sync"


class TestCreateRedisClient:
    """Tests for create_redis_client."""

    def test_uses_connection_url(self) -> None:
        settings = Settings(storage=StorageConfig(connection_url="redis://cache:6380/2"))

        with patch("harbor.agent.factory.redis.from_url") as from_url:
            create_redis_client(settings)

        from_url.assert_called_once_with("redis://cache:6380/2", decode_responses=True)

    def test_falls_back_to_env(self, env_override) -> None:
        with env_override({"REDIS_URL": "redis://env-host:6379"}):
            with patch("harbor.agent.factory.redis.from_url") as from_url:
                create_redis_client(Settings())

        from_url.assert_called_once_with("redis://env-host:6379", decode_responses=True)
