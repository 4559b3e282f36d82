"""Response caching: namespaces, stores and trimming."""

from harbor.cache.models import (
    CacheEntry,
    CacheGeneration,
    CacheNamespace,
    RequestKey,
    normalize_url,
)
from harbor.cache.store import CacheStorage, CacheStore
from harbor.cache.trimmer import CacheTrimmer

__all__ = [
    "CacheEntry",
    "CacheGeneration",
    "CacheNamespace",
    "CacheStorage",
    "CacheStore",
    "CacheTrimmer",
    "RequestKey",
    "normalize_url",
]
