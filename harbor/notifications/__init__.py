"""Notifications: payload building, display and click routing."""

from harbor.notifications.dispatcher import NotificationDispatcher
from harbor.notifications.models import (
    ClickResolution,
    NotificationAction,
    NotificationData,
    NotificationPayload,
)
from harbor.notifications.surface import InMemoryNotificationSurface, NotificationSurface

__all__ = [
    "ClickResolution",
    "InMemoryNotificationSurface",
    "NotificationAction",
    "NotificationData",
    "NotificationDispatcher",
    "NotificationPayload",
    "NotificationSurface",
]
