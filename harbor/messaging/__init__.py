"""Client messaging protocol and window coordination."""

from harbor.messaging.clients import ClientRegistry, ClientWindow, InMemoryClientRegistry
from harbor.messaging.messenger import ClientMessenger
from harbor.messaging.models import (
    AgentUpdatedNotice,
    ClientMessage,
    ClientNotice,
    ClientReply,
    EnqueueSyncMessage,
    GetVersionMessage,
    NotificationClickedNotice,
    OutboundMessage,
    PinAssetsMessage,
    SyncCompletedNotice,
    SyncResultReply,
    TriggerSyncMessage,
    VersionInfoReply,
)

__all__ = [
    "AgentUpdatedNotice",
    "ClientMessage",
    "ClientMessenger",
    "ClientNotice",
    "ClientRegistry",
    "ClientReply",
    "ClientWindow",
    "EnqueueSyncMessage",
    "GetVersionMessage",
    "InMemoryClientRegistry",
    "NotificationClickedNotice",
    "OutboundMessage",
    "PinAssetsMessage",
    "SyncCompletedNotice",
    "SyncResultReply",
    "TriggerSyncMessage",
    "VersionInfoReply",
]
