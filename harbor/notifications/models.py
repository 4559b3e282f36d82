"""Notification payload models."""

from typing import Any

from pydantic import BaseModel, ConfigDict, Field


class NotificationAction(BaseModel):
    """An action button shown on a notification."""

    action: str = Field(..., description="Action identifier")
    title: str = Field(..., description="Button label")


class NotificationData(BaseModel):
    """Data bag carried by a notification back to the click handler.

    Keys beyond the known ones are preserved.
    """

    model_config = ConfigDict(extra="allow")

    url: str = Field(default="/", description="Click-through URL")
    id: str = Field(..., description="Notification identifier")
    action: str = Field(default="default", description="Originating action tag")
    timestamp: int = Field(..., description="Build time in epoch milliseconds")


class NotificationPayload(BaseModel):
    """A fully resolved notification ready for display."""

    title: str
    body: str
    icon: str
    badge: str
    tag: str
    vibrate: list[int] = Field(default_factory=list)
    actions: list[NotificationAction] = Field(default_factory=list)
    data: NotificationData


class ClickResolution(BaseModel):
    """Where a notification click leads.

    ``url`` is None when the click ends without navigation.
    """

    action: str
    url: str | None = None
    data: dict[str, Any] = Field(default_factory=dict)

    @property
    def navigates(self) -> bool:
        return self.url is not None
