"""Lifecycle events delivered to the agent by its host."""

from collections.abc import Awaitable, Mapping
from dataclasses import dataclass, field
from typing import Any

from harbor.http.models import Request, Response
from harbor.lifetime import EventLifetime
from harbor.notifications.models import NotificationPayload


@dataclass(kw_only=True)
class ExtendableEvent:
    """Base event whose lifetime can be extended by outstanding work."""

    lifetime: EventLifetime = field(default_factory=EventLifetime)

    def wait_until(self, awaitable: Awaitable[Any]) -> Awaitable[Any]:
        return self.lifetime.wait_until(awaitable)

    async def settle(self) -> None:
        """Wait for all extended work; failures are logged, not raised."""
        await self.lifetime.settle()


@dataclass(kw_only=True)
class InstallEvent(ExtendableEvent):
    pass


@dataclass(kw_only=True)
class ActivateEvent(ExtendableEvent):
    pass


@dataclass(kw_only=True)
class PushEvent(ExtendableEvent):
    data: bytes | str | None = None


@dataclass(kw_only=True)
class NotificationClickEvent(ExtendableEvent):
    notification: NotificationPayload
    action: str = ""


@dataclass(kw_only=True)
class FetchEvent(ExtendableEvent):
    request: Request
    response: Response | None = None


@dataclass(kw_only=True)
class SyncEvent(ExtendableEvent):
    tag: str


@dataclass(kw_only=True)
class MessageEvent(ExtendableEvent):
    data: Mapping[str, Any]
    source_id: str | None = None


AgentEvent = (
    InstallEvent
    | ActivateEvent
    | PushEvent
    | NotificationClickEvent
    | FetchEvent
    | SyncEvent
    | MessageEvent
)
