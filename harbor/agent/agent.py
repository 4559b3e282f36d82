"""The agent: routes lifecycle events to their components."""

from typing import Any

import httpx

from harbor.agent.events import (
    ActivateEvent,
    AgentEvent,
    FetchEvent,
    InstallEvent,
    MessageEvent,
    NotificationClickEvent,
    PushEvent,
    SyncEvent,
)
from harbor.agent.state import AgentState, LifecyclePhase
from harbor.cache.store import CacheStorage
from harbor.fetch.router import FetchRouter
from harbor.http.fetcher import Fetcher
from harbor.http.models import Request, Response, ResponseType, offline_response, resolve_url
from harbor.messaging.clients import ClientRegistry
from harbor.messaging.messenger import ClientMessenger
from harbor.messaging.models import AgentUpdatedNotice, ClientReply, NotificationClickedNotice
from harbor.notifications.dispatcher import NotificationDispatcher
from harbor.notifications.models import ClickResolution, NotificationPayload
from harbor.notifications.surface import NotificationSurface
from harbor.observability.logging import get_logger
from harbor.sync.coordinator import SyncCoordinator
from harbor.sync.models import SyncResult

logger = get_logger(__name__)


class HarborAgent:
    """Offline request agent.

    The host delivers lifecycle events through ``dispatch``. No exception
    escapes ``dispatch``: a failing fetch handler degrades to the offline
    response, every other handler to ``None``.
    """

    def __init__(
        self,
        state: AgentState,
        *,
        storage: CacheStorage,
        fetcher: Fetcher,
        router: FetchRouter,
        coordinator: SyncCoordinator,
        notifications: NotificationDispatcher,
        surface: NotificationSurface,
        messenger: ClientMessenger,
        clients: ClientRegistry,
        origin: str,
        precache_manifest: list[str],
        sync_tag: str,
        offline_body: str,
        skip_waiting: bool = True,
    ) -> None:
        self.state = state
        self.storage = storage
        self.fetcher = fetcher
        self.router = router
        self.coordinator = coordinator
        self.notifications = notifications
        self.surface = surface
        self.messenger = messenger
        self.clients = clients
        self._origin = origin
        self._precache_manifest = precache_manifest
        self._sync_tag = sync_tag
        self._offline_body = offline_body
        self._skip_waiting = skip_waiting

    async def dispatch(self, event: AgentEvent) -> Any:
        """Handle one lifecycle event and return its result, if any."""
        try:
            match event:
                case InstallEvent():
                    return await self._on_install(event)
                case ActivateEvent():
                    return await self._on_activate(event)
                case PushEvent():
                    return await self._on_push(event)
                case NotificationClickEvent():
                    return await self._on_notification_click(event)
                case FetchEvent():
                    return await self._on_fetch(event)
                case SyncEvent():
                    return await self._on_sync(event)
                case MessageEvent():
                    return await self._on_message(event)
                case _:
                    logger.warning("unknown_event", event_type=type(event).__name__)
                    return None
        except Exception as e:
            logger.error(
                "event_handler_failed",
                event_type=type(event).__name__,
                error=str(e),
                error_type=type(e).__name__,
            )
            if isinstance(event, FetchEvent):
                event.response = offline_response(self._offline_body)
                return event.response
            return None

    async def _on_install(self, event: InstallEvent) -> int:
        """Seed the precache namespace from the manifest."""
        self.state.phase = LifecyclePhase.INSTALLING
        logger.info("agent_installing", version=self.state.version)

        stored = await self._precache()

        self.state.phase = LifecyclePhase.INSTALLED
        # Without skip_waiting the new version waits for old clients to close
        self.state.waiting = not self._skip_waiting
        logger.info(
            "agent_installed",
            version=self.state.version,
            precached=stored,
            manifest_size=len(self._precache_manifest),
            waiting=self.state.waiting,
        )
        return stored

    async def _precache(self) -> int:
        store = await self.storage.open(self.state.precache.name)
        stored = 0
        for path in self._precache_manifest:
            try:
                request = Request(url=resolve_url(self._origin, path))
            except httpx.InvalidURL as e:
                logger.warning("precache_invalid_url", path=path, error=str(e))
                continue
            try:
                response = await self.fetcher.fetch(request)
                if response.status != 200 or response.response_type != ResponseType.BASIC:
                    logger.warning("precache_not_cacheable", url=request.url, status=response.status)
                    continue
                await store.put_request(request, response)
            except Exception as e:
                logger.warning(
                    "precache_failed",
                    url=request.url,
                    error=str(e),
                    error_type=type(e).__name__,
                )
                continue
            stored += 1
        return stored

    async def _on_activate(self, event: ActivateEvent) -> list[str]:
        """Retire stale namespaces, claim clients and announce the update."""
        self.state.phase = LifecyclePhase.ACTIVATING
        deleted: list[str] = []

        try:
            names = await self.storage.names()
        except Exception as e:
            logger.warning("cache_enumerate_failed", error=str(e))
            names = []

        for name in names:
            if self.state.is_live(name):
                continue
            try:
                if await self.storage.delete(name):
                    deleted.append(name)
            except Exception as e:
                logger.warning("cache_delete_failed", namespace=name, error=str(e))

        try:
            await self.clients.claim()
        except Exception as e:
            logger.warning("client_claim_failed", error=str(e))

        self.state.phase = LifecyclePhase.ACTIVATED
        self.state.waiting = False
        await self.clients.broadcast(AgentUpdatedNotice(version=self.state.version))
        logger.info("agent_activated", version=self.state.version, deleted=deleted)
        return deleted

    async def _on_push(self, event: PushEvent) -> NotificationPayload:
        return await self.notifications.handle_push(event.data)

    async def _on_notification_click(self, event: NotificationClickEvent) -> ClickResolution:
        payload = event.notification
        try:
            await self.surface.close(payload)
        except Exception as e:
            logger.warning("notification_close_failed", tag=payload.tag, error=str(e))

        resolution = self.notifications.resolve_click(event.action, payload.data)
        logger.info(
            "notification_clicked",
            action=resolution.action,
            notification_id=payload.data.id,
            url=resolution.url,
        )
        if resolution.url is None:
            return resolution

        notice = NotificationClickedNotice(action=resolution.action, data=resolution.data)
        await event.wait_until(self.messenger.focus_or_open(resolution.url, notice))
        return resolution

    async def _on_fetch(self, event: FetchEvent) -> Response:
        event.response = await self.router.handle(event.request, event.lifetime)
        return event.response

    async def _on_sync(self, event: SyncEvent) -> SyncResult | None:
        if event.tag != self._sync_tag:
            logger.info("sync_tag_ignored", tag=event.tag)
            return None
        return await self.coordinator.sync()

    async def _on_message(self, event: MessageEvent) -> ClientReply | None:
        reply = await self.messenger.handle(event.data, event.source_id)
        if reply is None or event.source_id is None:
            return reply
        try:
            await self.clients.post_message(event.source_id, reply)
        except Exception as e:
            logger.warning(
                "client_reply_failed",
                client_id=event.source_id,
                reply_type=reply.type,
                error=str(e),
            )
        return reply
