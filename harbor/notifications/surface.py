"""Host notification display capability."""

from abc import ABC, abstractmethod

from harbor.notifications.models import NotificationPayload


class NotificationSurface(ABC):
    """Abstract interface for showing and closing notifications."""

    @abstractmethod
    async def show(self, payload: NotificationPayload) -> None:
        """Display a notification."""
        pass

    @abstractmethod
    async def close(self, payload: NotificationPayload) -> None:
        """Dismiss a displayed notification."""
        pass


class InMemoryNotificationSurface(NotificationSurface):
    """Records notifications instead of displaying them."""

    def __init__(self) -> None:
        self.shown: list[NotificationPayload] = []
        self.closed: list[NotificationPayload] = []

    async def show(self, payload: NotificationPayload) -> None:
        self.shown.append(payload)

    async def close(self, payload: NotificationPayload) -> None:
        self.closed.append(payload)
