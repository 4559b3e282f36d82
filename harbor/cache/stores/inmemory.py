"""In-memory implementation of CacheStore and CacheStorage."""

from collections import OrderedDict

from harbor.cache.models import CacheEntry, RequestKey
from harbor.cache.store import CacheStorage, CacheStore
from harbor.http.models import Response


class InMemoryCacheStore(CacheStore):
    """In-memory cache namespace for testing and development.

    An OrderedDict keeps insertion order; a per-store counter assigns
    the entry sequence numbers.
    """

    def __init__(self, name: str) -> None:
        self._name = name
        self._entries: OrderedDict[RequestKey, CacheEntry] = OrderedDict()
        self._sequence = 0

    @property
    def name(self) -> str:
        return self._name

    async def get(self, key: RequestKey) -> CacheEntry | None:
        return self._entries.get(key)

    async def put(self, key: RequestKey, response: Response) -> CacheEntry:
        self._sequence += 1
        entry = CacheEntry(key=key, response=response, sequence=self._sequence)
        # Re-insertion goes to the end of the order
        self._entries.pop(key, None)
        self._entries[key] = entry
        return entry

    async def delete(self, key: RequestKey) -> bool:
        if key in self._entries:
            del self._entries[key]
            return True
        return False

    async def keys(self) -> list[RequestKey]:
        return list(self._entries.keys())


class InMemoryCacheStorage(CacheStorage):
    """In-memory namespace registry."""

    def __init__(self) -> None:
        self._stores: dict[str, InMemoryCacheStore] = {}

    async def open(self, name: str) -> CacheStore:
        if name not in self._stores:
            self._stores[name] = InMemoryCacheStore(name)
        return self._stores[name]

    async def has(self, name: str) -> bool:
        return name in self._stores

    async def delete(self, name: str) -> bool:
        if name in self._stores:
            del self._stores[name]
            return True
        return False

    async def names(self) -> list[str]:
        return list(self._stores.keys())
