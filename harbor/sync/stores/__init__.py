"""Sync queue backends."""

from harbor.sync.queue import SyncQueue
from harbor.sync.stores.inmemory import InMemorySyncQueue
from harbor.sync.stores.redis import RedisSyncQueue

__all__ = [
    "InMemorySyncQueue",
    "RedisSyncQueue",
    "SyncQueue",
]
