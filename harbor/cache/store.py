"""CacheStore and CacheStorage abstract interfaces."""

from abc import ABC, abstractmethod

from harbor.cache.models import CacheEntry, RequestKey
from harbor.http.models import Request, Response


class CacheStore(ABC):
    """Abstract interface for one named cache namespace.

    Entries are kept in insertion order. Writing an existing key removes
    the old entry and appends the new one.
    """

    @property
    @abstractmethod
    def name(self) -> str:
        """Namespace name."""
        pass

    @abstractmethod
    async def get(self, key: RequestKey) -> CacheEntry | None:
        """Get an entry by key."""
        pass

    @abstractmethod
    async def put(self, key: RequestKey, response: Response) -> CacheEntry:
        """Store a response snapshot under key."""
        pass

    @abstractmethod
    async def delete(self, key: RequestKey) -> bool:
        """Delete an entry, returning whether it existed."""
        pass

    @abstractmethod
    async def keys(self) -> list[RequestKey]:
        """List keys, oldest insertion first."""
        pass

    async def match(self, request: Request) -> Response | None:
        """Get the stored response for a request, if any."""
        if not request.is_retrieval:
            return None
        entry = await self.get(RequestKey.from_request(request))
        return entry.response if entry is not None else None

    async def put_request(self, request: Request, response: Response) -> CacheEntry:
        """Store a clone of response under the request's key."""
        return await self.put(RequestKey.from_request(request), response.clone())

    async def count(self) -> int:
        return len(await self.keys())


class CacheStorage(ABC):
    """Abstract registry of cache namespaces."""

    @abstractmethod
    async def open(self, name: str) -> CacheStore:
        """Open a namespace, creating it if needed."""
        pass

    @abstractmethod
    async def has(self, name: str) -> bool:
        """Check whether a namespace exists."""
        pass

    @abstractmethod
    async def delete(self, name: str) -> bool:
        """Delete a namespace and all its entries."""
        pass

    @abstractmethod
    async def names(self) -> list[str]:
        """List existing namespace names."""
        pass

    async def match(self, request: Request, names: list[str]) -> Response | None:
        """Search the given namespaces in order for a stored response.

        Namespaces that do not exist are skipped without being created.
        """
        if not request.is_retrieval:
            return None
        for name in names:
            if not await self.has(name):
                continue
            store = await self.open(name)
            response = await store.match(request)
            if response is not None:
                return response
        return None
