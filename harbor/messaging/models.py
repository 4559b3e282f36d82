"""Client message protocol.

Inbound messages, replies and outbound notices are discriminated on the
``type`` field.
"""

from typing import Annotated, Any, Literal

from pydantic import BaseModel, Field, TypeAdapter

# Inbound requests


class TriggerSyncMessage(BaseModel):
    """Ask the agent to drain the sync queue now."""

    type: Literal["trigger-sync"] = "trigger-sync"


class GetVersionMessage(BaseModel):
    """Ask for the active cache namespace."""

    type: Literal["get-version"] = "get-version"


class PinAssetsMessage(BaseModel):
    """Fetch the listed URLs into the runtime cache."""

    type: Literal["pin-assets"] = "pin-assets"
    assets: list[str] = Field(default_factory=list, description="URLs to pin")


class EnqueueSyncMessage(BaseModel):
    """Queue a write made while offline."""

    type: Literal["enqueue-sync"] = "enqueue-sync"
    payload: dict[str, Any] = Field(default_factory=dict, description="Opaque write payload")


ClientMessage = Annotated[
    TriggerSyncMessage | GetVersionMessage | PinAssetsMessage | EnqueueSyncMessage,
    Field(discriminator="type"),
]

client_message_adapter: TypeAdapter[ClientMessage] = TypeAdapter(ClientMessage)


# Replies


class SyncResultReply(BaseModel):
    type: Literal["sync-result"] = "sync-result"
    success: bool
    timestamp: int


class VersionInfoReply(BaseModel):
    type: Literal["version-info"] = "version-info"
    version: str
    timestamp: int


ClientReply = SyncResultReply | VersionInfoReply


# Outbound notices (no reply expected)


class AgentUpdatedNotice(BaseModel):
    type: Literal["agent-updated"] = "agent-updated"
    version: str | None = None


class SyncCompletedNotice(BaseModel):
    type: Literal["sync-completed"] = "sync-completed"
    timestamp: int


class NotificationClickedNotice(BaseModel):
    type: Literal["notification-clicked"] = "notification-clicked"
    action: str
    data: dict[str, Any] = Field(default_factory=dict)


ClientNotice = AgentUpdatedNotice | SyncCompletedNotice | NotificationClickedNotice

OutboundMessage = ClientReply | ClientNotice
