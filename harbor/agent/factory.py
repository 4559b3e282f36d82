"""Agent assembly from configuration."""

import asyncio
import os
from collections.abc import Awaitable, Callable
from typing import Any

import redis.asyncio as redis

from harbor.agent.agent import HarborAgent
from harbor.agent.state import AgentState
from harbor.cache.store import CacheStorage
from harbor.cache.stores.inmemory import InMemoryCacheStorage
from harbor.cache.stores.redis import RedisCacheStorage
from harbor.cache.trimmer import CacheTrimmer
from harbor.config import get_settings
from harbor.config.settings import Settings
from harbor.fetch.classifier import ClassificationPolicy
from harbor.fetch.router import FetchRouter
from harbor.fetch.strategies import FetchContext
from harbor.http.fetcher import Fetcher, HttpxFetcher
from harbor.http.models import resolve_url
from harbor.messaging.clients import ClientRegistry, InMemoryClientRegistry
from harbor.messaging.messenger import ClientMessenger
from harbor.notifications.dispatcher import NotificationDispatcher
from harbor.notifications.surface import InMemoryNotificationSurface, NotificationSurface
from harbor.observability.logging import get_logger, setup_logging
from harbor.observability.metrics import setup_metrics
from harbor.sync.coordinator import SyncCoordinator
from harbor.sync.queue import SyncQueue
from harbor.sync.retry import RetryEngine
from harbor.sync.stores.inmemory import InMemorySyncQueue
from harbor.sync.stores.redis import RedisSyncQueue

logger = get_logger(__name__)


def create_redis_client(settings: Settings) -> redis.Redis:
    """Create a Redis client from storage config, falling back to REDIS_URL."""
    redis_url = settings.storage.connection_url or os.environ.get(
        "REDIS_URL", "redis://localhost:6379"
    )
    client = redis.from_url(redis_url, decode_responses=True)
    logger.info("redis_client_created", url=redis_url.split("@")[-1])
    return client


def create_agent(
    settings: Settings | None = None,
    *,
    fetcher: Fetcher | None = None,
    storage: CacheStorage | None = None,
    queue: SyncQueue | None = None,
    surface: NotificationSurface | None = None,
    clients: ClientRegistry | None = None,
    redis_client: redis.Redis | None = None,
    sleep: Callable[[float], Awaitable[Any]] = asyncio.sleep,
    serve_metrics: bool = False,
) -> HarborAgent:
    """Build an agent and its collaborators.

    Host capabilities that are not passed in are created from settings:
    an httpx fetcher for the configured origin, cache and queue backends
    per ``storage.backend``, and in-memory notification and client stand-ins.
    """
    settings = settings or get_settings()
    log_config = settings.observability.logging
    setup_logging(
        level=log_config.level,
        format=log_config.format,
        redact_pii=log_config.redact_pii,
    )
    if serve_metrics and settings.observability.metrics.enabled:
        setup_metrics(settings.observability.metrics.port)

    backend = settings.storage.backend
    if backend == "redis" and (storage is None or queue is None):
        redis_client = redis_client or create_redis_client(settings)
        prefix = settings.storage.key_prefix
        storage = storage or RedisCacheStorage(redis_client, key_prefix=prefix)
        queue = queue or RedisSyncQueue(redis_client, key_prefix=prefix)
    else:
        storage = storage or InMemoryCacheStorage()
        queue = queue or InMemorySyncQueue()

    fetch_config = settings.fetch
    fetcher = fetcher or HttpxFetcher(
        fetch_config.origin, timeout=fetch_config.request_timeout_seconds
    )
    surface = surface or InMemoryNotificationSurface()
    clients = clients or InMemoryClientRegistry()

    state = AgentState.from_config(settings.cache)
    trimmer = CacheTrimmer(storage)
    policy = ClassificationPolicy.from_config(fetch_config)

    context = FetchContext(
        fetcher=fetcher,
        storage=storage,
        trimmer=trimmer,
        runtime_namespace=state.runtime.name,
        lookup_namespaces=state.lookup_namespaces,
        root_url=resolve_url(fetch_config.origin, fetch_config.root_path),
        max_entries=settings.cache.max_entries,
        navigation_timeout=fetch_config.navigation_timeout_ms / 1000,
        offline_body=fetch_config.offline_body,
    )
    router = FetchRouter(context, policy)

    sync_config = settings.sync
    coordinator = SyncCoordinator(
        queue,
        fetcher,
        RetryEngine(
            max_attempts=sync_config.max_attempts,
            base_delay=sync_config.backoff_base_seconds,
            sleep=sleep,
        ),
        resolve_url(fetch_config.origin, sync_config.endpoint),
        clients=clients,
        max_attempts=sync_config.max_attempts,
    )

    messenger = ClientMessenger(
        clients,
        coordinator,
        fetcher,
        storage,
        trimmer,
        policy,
        origin=fetch_config.origin,
        runtime_namespace=state.runtime.name,
        max_entries=settings.cache.max_entries,
        settle_delay=settings.messaging.settle_delay_ms / 1000,
        sleep=sleep,
    )

    logger.info(
        "agent_created",
        backend=backend,
        origin=fetch_config.origin,
        precache=state.precache.name,
        runtime=state.runtime.name,
    )

    return HarborAgent(
        state,
        storage=storage,
        fetcher=fetcher,
        router=router,
        coordinator=coordinator,
        notifications=NotificationDispatcher(settings.notifications, surface),
        surface=surface,
        messenger=messenger,
        clients=clients,
        origin=fetch_config.origin,
        precache_manifest=list(settings.cache.precache_manifest),
        sync_tag=sync_config.tag,
        offline_body=fetch_config.offline_body,
    )
