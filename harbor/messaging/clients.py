"""Connected client windows.

``ClientRegistry`` is the host capability for enumerating, focusing,
opening and messaging client windows.
"""

from abc import ABC, abstractmethod
from uuid import uuid4

from pydantic import BaseModel, Field

from harbor.exceptions import MessageError
from harbor.messaging.models import OutboundMessage
from harbor.observability.logging import get_logger

logger = get_logger(__name__)


class ClientWindow(BaseModel):
    """A client window controlled by the agent."""

    id: str = Field(default_factory=lambda: uuid4().hex, description="Client identifier")
    url: str = Field(..., description="Current URL")
    focused: bool = Field(default=False, description="Whether the window has focus")


class ClientRegistry(ABC):
    """Abstract interface to the host's client windows."""

    @abstractmethod
    async def windows(self) -> list[ClientWindow]:
        """List open windows."""
        pass

    @abstractmethod
    async def focus(self, client_id: str) -> ClientWindow | None:
        """Focus a window; returns None if it is gone."""
        pass

    @abstractmethod
    async def open_window(self, url: str) -> ClientWindow | None:
        """Open a new window; returns None if the host refused."""
        pass

    @abstractmethod
    async def post_message(self, client_id: str, message: OutboundMessage) -> None:
        """Send a message to one window."""
        pass

    @abstractmethod
    async def claim(self) -> None:
        """Take control of every open window."""
        pass

    async def broadcast(self, message: OutboundMessage) -> int:
        """Send a message to every open window, returning the delivery count."""
        delivered = 0
        for window in await self.windows():
            try:
                await self.post_message(window.id, message)
                delivered += 1
            except Exception as e:
                logger.warning(
                    "client_broadcast_failed",
                    client_id=window.id,
                    message_type=message.type,
                    error=str(e),
                )
        return delivered


class InMemoryClientRegistry(ClientRegistry):
    """In-memory client registry for testing and development.

    Records every delivered message as ``(client_id, message)``.
    """

    def __init__(self) -> None:
        self._windows: dict[str, ClientWindow] = {}
        self.messages: list[tuple[str, OutboundMessage]] = []
        self.opened: list[str] = []
        self.claimed = False

    def add_window(self, url: str, client_id: str | None = None) -> ClientWindow:
        window = ClientWindow(url=url) if client_id is None else ClientWindow(id=client_id, url=url)
        self._windows[window.id] = window
        return window

    async def windows(self) -> list[ClientWindow]:
        return list(self._windows.values())

    async def focus(self, client_id: str) -> ClientWindow | None:
        window = self._windows.get(client_id)
        if window is None:
            return None
        for other in self._windows.values():
            other.focused = other.id == client_id
        return window

    async def open_window(self, url: str) -> ClientWindow | None:
        self.opened.append(url)
        window = self.add_window(url)
        return await self.focus(window.id)

    async def post_message(self, client_id: str, message: OutboundMessage) -> None:
        if client_id not in self._windows:
            raise MessageError(f"Unknown client: {client_id}")
        self.messages.append((client_id, message))

    async def claim(self) -> None:
        self.claimed = True

    def messages_of(self, message_type: str) -> list[OutboundMessage]:
        return [m for _, m in self.messages if m.type == message_type]
