"""Cache store backends."""

from harbor.cache.store import CacheStorage, CacheStore
from harbor.cache.stores.inmemory import InMemoryCacheStorage, InMemoryCacheStore
from harbor.cache.stores.redis import RedisCacheStorage, RedisCacheStore

__all__ = [
    "CacheStorage",
    "CacheStore",
    "InMemoryCacheStorage",
    "InMemoryCacheStore",
    "RedisCacheStorage",
    "RedisCacheStore",
]
