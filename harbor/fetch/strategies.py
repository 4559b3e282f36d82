"""Fetch strategies.

Each strategy is a pipeline of explicit steps: look up the cache, fetch
from the network, validate, persist a clone, trim. Steps report their
outcome as values (``NetworkResult``, ``Response | None``, ``bool``) so
the strategy reads top to bottom without relying on exceptions.
"""

import asyncio
from abc import ABC, abstractmethod
from dataclasses import dataclass

from harbor.cache.store import CacheStorage
from harbor.cache.trimmer import CacheTrimmer
from harbor.exceptions import FetchError, FetchTimeoutError
from harbor.fetch.classifier import RequestCategory
from harbor.http.fetcher import Fetcher
from harbor.http.models import Request, Response, ResponseType, offline_response
from harbor.lifetime import EventLifetime
from harbor.observability.logging import get_logger
from harbor.observability.metrics import (
    BACKGROUND_REFRESHES,
    CACHE_LOOKUPS,
    CACHE_WRITES,
    FETCH_OUTCOMES,
    STORAGE_ERRORS,
)

logger = get_logger(__name__)


@dataclass
class FetchContext:
    """Collaborators and limits shared by all strategies."""

    fetcher: Fetcher
    storage: CacheStorage
    trimmer: CacheTrimmer
    runtime_namespace: str
    lookup_namespaces: list[str]
    root_url: str
    max_entries: int
    navigation_timeout: float
    offline_body: str


@dataclass
class NetworkResult:
    """Outcome of the network step."""

    response: Response | None = None
    error: FetchError | None = None

    @property
    def ok(self) -> bool:
        return self.response is not None


class FetchStrategy(ABC):
    """Base class holding the shared pipeline steps."""

    name: str = "base"

    def __init__(self, context: FetchContext) -> None:
        self._context = context

    @abstractmethod
    async def handle(
        self,
        request: Request,
        category: RequestCategory,
        lifetime: EventLifetime,
    ) -> Response:
        """Produce a response for the request."""
        pass

    async def _fetch(self, request: Request, timeout: float | None = None) -> NetworkResult:
        """Network step. Never raises; failures come back as the result."""
        try:
            if timeout is None:
                response = await self._context.fetcher.fetch(request)
            else:
                # wait_for cancels the in-flight fetch when the timer wins
                response = await asyncio.wait_for(self._context.fetcher.fetch(request), timeout)
        except asyncio.TimeoutError:
            logger.info("fetch_timed_out", url=request.url, timeout=timeout)
            return NetworkResult(
                error=FetchTimeoutError(f"No response within {timeout}s", url=request.url)
            )
        except FetchError as e:
            return NetworkResult(error=e)
        except Exception as e:
            logger.warning(
                "fetch_unexpected_error",
                url=request.url,
                error=str(e),
                error_type=type(e).__name__,
            )
            return NetworkResult(error=FetchError(str(e), url=request.url))
        return NetworkResult(response=response)

    async def _lookup(self, request: Request) -> Response | None:
        """Cache step across live namespaces. Storage errors count as a miss."""
        try:
            response = await self._context.storage.match(
                request, self._context.lookup_namespaces
            )
        except Exception as e:
            logger.warning("cache_lookup_failed", url=request.url, error=str(e))
            STORAGE_ERRORS.labels(operation="lookup").inc()
            response = None
        CACHE_LOOKUPS.labels(result="hit" if response is not None else "miss").inc()
        return response

    async def _root_page(self) -> Response | None:
        return await self._lookup(Request(url=self._context.root_url))

    def _is_cacheable(
        self, request: Request, response: Response, category: RequestCategory
    ) -> bool:
        return (
            response.status == 200
            and response.response_type == ResponseType.BASIC
            and request.is_retrieval
            and category != RequestCategory.SENSITIVE
        )

    async def _persist(self, request: Request, response: Response) -> bool:
        """Persist step: store a clone into the runtime namespace."""
        try:
            store = await self._context.storage.open(self._context.runtime_namespace)
            await store.put_request(request, response)
        except Exception as e:
            logger.warning(
                "cache_put_failed",
                url=request.url,
                namespace=self._context.runtime_namespace,
                error=str(e),
            )
            STORAGE_ERRORS.labels(operation="put").inc()
            return False
        CACHE_WRITES.labels(namespace=self._context.runtime_namespace, origin=self.name).inc()
        return True

    async def _trim(self) -> int:
        return await self._context.trimmer.trim(
            self._context.runtime_namespace, self._context.max_entries
        )

    async def _persist_and_trim(self, request: Request, response: Response) -> bool:
        stored = await self._persist(request, response)
        if stored:
            await self._trim()
        return stored

    def _offline(self, request: Request, category: RequestCategory) -> Response:
        logger.info("serving_offline_response", url=request.url, category=category.value)
        FETCH_OUTCOMES.labels(category=category.value, source="offline").inc()
        return offline_response(self._context.offline_body)


class CacheFirstStrategy(FetchStrategy):
    """Serve from cache and refresh in the background; fetch on a miss."""

    name = "cache_first"

    async def handle(
        self,
        request: Request,
        category: RequestCategory,
        lifetime: EventLifetime,
    ) -> Response:
        cached = await self._lookup(request)
        if cached is not None:
            lifetime.detach(
                self._refresh(request, category),
                name=f"refresh:{request.url}",
            )
            FETCH_OUTCOMES.labels(category=category.value, source="cache").inc()
            return cached

        result = await self._fetch(request)
        response = result.response
        if response is not None:
            if self._is_cacheable(request, response, category):
                if await self._persist(request, response):
                    lifetime.wait_until(self._trim())
            FETCH_OUTCOMES.labels(category=category.value, source="network").inc()
            return response

        logger.info("cache_first_network_failed", url=request.url, error=str(result.error))
        fallback = await self._root_page()
        if fallback is not None:
            FETCH_OUTCOMES.labels(category=category.value, source="fallback").inc()
            return fallback
        return self._offline(request, category)

    async def _refresh(self, request: Request, category: RequestCategory) -> None:
        """Re-fetch a served entry and replace it when the fetch is cacheable."""
        result = await self._fetch(request)
        response = result.response
        if response is None:
            BACKGROUND_REFRESHES.labels(outcome="network_failed").inc()
            logger.debug("background_refresh_failed", url=request.url, error=str(result.error))
            return
        if not self._is_cacheable(request, response, category):
            BACKGROUND_REFRESHES.labels(outcome="not_cacheable").inc()
            return
        if await self._persist_and_trim(request, response):
            BACKGROUND_REFRESHES.labels(outcome="updated").inc()
        else:
            BACKGROUND_REFRESHES.labels(outcome="store_failed").inc()


class NetworkFirstStrategy(FetchStrategy):
    """Race the network against a timer; fall back to cache, then root."""

    name = "network_first"

    async def handle(
        self,
        request: Request,
        category: RequestCategory,
        lifetime: EventLifetime,
    ) -> Response:
        result = await self._fetch(request, timeout=self._context.navigation_timeout)
        response = result.response
        if response is not None:
            if self._is_cacheable(request, response, category):
                if await self._persist(request, response):
                    lifetime.wait_until(self._trim())
            FETCH_OUTCOMES.labels(category=category.value, source="network").inc()
            return response

        logger.info("network_first_fallback", url=request.url, error=str(result.error))
        cached = await self._lookup(request)
        if cached is not None:
            FETCH_OUTCOMES.labels(category=category.value, source="cache").inc()
            return cached
        fallback = await self._root_page()
        if fallback is not None:
            FETCH_OUTCOMES.labels(category=category.value, source="fallback").inc()
            return fallback
        return self._offline(request, category)


class PassthroughStrategy(FetchStrategy):
    """Network first with opportunistic mirroring into the runtime cache.

    Sensitive and non-GET requests are never mirrored and never answered
    from cache.
    """

    name = "passthrough"

    async def handle(
        self,
        request: Request,
        category: RequestCategory,
        lifetime: EventLifetime,
    ) -> Response:
        result = await self._fetch(request)
        response = result.response
        if response is not None:
            if self._is_cacheable(request, response, category):
                lifetime.detach(
                    self._persist_and_trim(request, response),
                    name=f"mirror:{request.url}",
                )
            FETCH_OUTCOMES.labels(category=category.value, source="network").inc()
            return response

        if category != RequestCategory.SENSITIVE and request.is_retrieval:
            cached = await self._lookup(request)
            if cached is not None:
                FETCH_OUTCOMES.labels(category=category.value, source="cache").inc()
                return cached

        raise result.error or FetchError("Network request failed", url=request.url)
