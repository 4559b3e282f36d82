"""Routing of client messages to agent components."""

import asyncio
from collections.abc import Awaitable, Callable, Mapping
from typing import TYPE_CHECKING, Any

import httpx
from pydantic import BaseModel, ValidationError

from harbor.cache.store import CacheStorage
from harbor.cache.trimmer import CacheTrimmer
from harbor.exceptions import HarborError
from harbor.fetch.classifier import ClassificationPolicy, is_sensitive
from harbor.http.fetcher import Fetcher
from harbor.http.models import Request, ResponseType, resolve_url
from harbor.messaging.clients import ClientRegistry, ClientWindow
from harbor.messaging.models import (
    ClientNotice,
    ClientReply,
    EnqueueSyncMessage,
    GetVersionMessage,
    PinAssetsMessage,
    SyncResultReply,
    TriggerSyncMessage,
    VersionInfoReply,
    client_message_adapter,
)
from harbor.observability.logging import get_logger
from harbor.observability.metrics import CACHE_WRITES, CLIENT_MESSAGES, STORAGE_ERRORS
from harbor.timeutils import epoch_ms

if TYPE_CHECKING:
    from harbor.sync.coordinator import SyncCoordinator

logger = get_logger(__name__)


def _same_page(candidate: str, target: str) -> bool:
    """Exact match, or same origin and path with the query ignored."""
    if candidate == target:
        return True
    try:
        a = httpx.URL(candidate)
        b = httpx.URL(target)
    except httpx.InvalidURL:
        return False
    return (a.scheme, a.host, a.port, a.path) == (b.scheme, b.host, b.port, b.path)


class ClientMessenger:
    """Handles messages from client windows and delivers notices to them."""

    def __init__(
        self,
        clients: ClientRegistry,
        coordinator: "SyncCoordinator",
        fetcher: Fetcher,
        storage: CacheStorage,
        trimmer: CacheTrimmer,
        policy: ClassificationPolicy,
        *,
        origin: str,
        runtime_namespace: str,
        max_entries: int,
        settle_delay: float = 1.0,
        sleep: Callable[[float], Awaitable[Any]] = asyncio.sleep,
    ) -> None:
        self._clients = clients
        self._coordinator = coordinator
        self._fetcher = fetcher
        self._storage = storage
        self._trimmer = trimmer
        self._policy = policy
        self._origin = origin
        self._runtime_namespace = runtime_namespace
        self._max_entries = max_entries
        self._settle_delay = settle_delay
        self._sleep = sleep

    async def handle(
        self,
        raw: Mapping[str, Any] | BaseModel,
        source_id: str | None = None,
    ) -> ClientReply | None:
        """Validate and dispatch one inbound message.

        Returns the reply for request kinds that have one. Invalid messages
        are logged and produce no reply.
        """
        try:
            data = raw.model_dump() if isinstance(raw, BaseModel) else raw
            message = client_message_adapter.validate_python(data)
        except ValidationError as e:
            CLIENT_MESSAGES.labels(kind="invalid").inc()
            logger.warning(
                "client_message_invalid",
                source_id=source_id,
                errors=e.error_count(),
            )
            return None

        CLIENT_MESSAGES.labels(kind=message.type).inc()
        logger.debug("client_message_received", kind=message.type, source_id=source_id)

        try:
            match message:
                case TriggerSyncMessage():
                    result = await self._coordinator.sync()
                    return SyncResultReply(success=result.success, timestamp=result.timestamp)
                case GetVersionMessage():
                    return VersionInfoReply(
                        version=self._runtime_namespace, timestamp=epoch_ms()
                    )
                case PinAssetsMessage(assets=assets):
                    await self.pin_assets(assets)
                case EnqueueSyncMessage(payload=payload):
                    await self._coordinator.enqueue(payload)
        except HarborError as e:
            logger.error(
                "client_message_failed",
                kind=message.type,
                source_id=source_id,
                error=e.message,
                error_type=type(e).__name__,
            )
        return None

    async def pin_assets(self, assets: list[str]) -> int:
        """Fetch each asset into the runtime namespace, then trim.

        A failing asset is logged and skipped. Returns the number stored.
        """
        stored = 0
        for asset in assets:
            try:
                request = Request(url=resolve_url(self._origin, asset))
                sensitive = is_sensitive(request, self._policy)
            except httpx.InvalidURL as e:
                logger.warning("pin_asset_invalid_url", asset=asset, error=str(e))
                continue
            if sensitive:
                logger.info("pin_asset_refused", url=request.url)
                continue
            try:
                response = await self._fetcher.fetch(request)
            except Exception as e:
                logger.warning("pin_asset_fetch_failed", url=request.url, error=str(e))
                continue
            if response.status != 200 or response.response_type != ResponseType.BASIC:
                logger.warning("pin_asset_not_cacheable", url=request.url, status=response.status)
                continue
            try:
                store = await self._storage.open(self._runtime_namespace)
                await store.put_request(request, response)
            except Exception as e:
                logger.warning("pin_asset_store_failed", url=request.url, error=str(e))
                STORAGE_ERRORS.labels(operation="put").inc()
                continue
            CACHE_WRITES.labels(namespace=self._runtime_namespace, origin="pin").inc()
            stored += 1

        await self._trimmer.trim(self._runtime_namespace, self._max_entries)
        logger.info("assets_pinned", requested=len(assets), stored=stored)
        return stored

    async def focus_or_open(self, url: str, notice: ClientNotice) -> ClientWindow | None:
        """Bring a window showing url to the front and deliver notice to it.

        An existing window on the same page is reused; otherwise a new one
        is opened and given time to load before the notice is posted.
        """
        target = resolve_url(self._origin, url)
        try:
            windows = await self._clients.windows()
        except Exception as e:
            logger.warning("client_enumerate_failed", error=str(e))
            windows = []

        for window in windows:
            if _same_page(window.url, target):
                focused = await self._clients.focus(window.id)
                if focused is not None:
                    await self._post(focused, notice)
                    return focused

        window = await self._clients.open_window(target)
        if window is None:
            logger.warning("client_open_refused", url=target)
            return None
        await self._sleep(self._settle_delay)
        await self._post(window, notice)
        return window

    async def _post(self, window: ClientWindow, notice: ClientNotice) -> None:
        try:
            await self._clients.post_message(window.id, notice)
        except Exception as e:
            logger.warning(
                "client_notice_failed",
                client_id=window.id,
                message_type=notice.type,
                error=str(e),
            )
