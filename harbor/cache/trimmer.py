"""Bounded-size eviction for cache namespaces."""

from harbor.cache.store import CacheStorage
from harbor.observability.logging import get_logger
from harbor.observability.metrics import CACHE_EVICTIONS, STORAGE_ERRORS

logger = get_logger(__name__)


class CacheTrimmer:
    """Evicts the oldest insertions until a namespace fits its bound.

    Trimming is best-effort: enumeration and deletion failures are logged
    and never raised to the caller.
    """

    def __init__(self, storage: CacheStorage) -> None:
        self._storage = storage

    async def trim(self, namespace: str, max_entries: int) -> int:
        """Delete the oldest ``count - max_entries`` entries.

        Returns:
            Number of entries evicted
        """
        try:
            store = await self._storage.open(namespace)
            keys = await store.keys()
        except Exception as e:
            logger.warning(
                "cache_trim_enumerate_failed",
                namespace=namespace,
                error=str(e),
                error_type=type(e).__name__,
            )
            STORAGE_ERRORS.labels(operation="trim").inc()
            return 0

        excess = len(keys) - max_entries
        if excess <= 0:
            return 0

        evicted = 0
        for key in keys[:excess]:
            try:
                if await store.delete(key):
                    evicted += 1
            except Exception as e:
                logger.warning(
                    "cache_trim_delete_failed",
                    namespace=namespace,
                    key=str(key),
                    error=str(e),
                )
                STORAGE_ERRORS.labels(operation="trim").inc()

        if evicted:
            CACHE_EVICTIONS.labels(namespace=namespace).inc(evicted)
            logger.debug(
                "cache_trimmed",
                namespace=namespace,
                evicted=evicted,
                max_entries=max_entries,
            )
        return evicted
