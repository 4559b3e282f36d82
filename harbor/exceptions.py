"""Exception hierarchy for Harbor.

All exceptions inherit from HarborError. The ``retryable`` class attribute
is read by the retry engine to classify failures raised by operations.
"""


class HarborError(Exception):
    """Base exception for all Harbor errors."""

    retryable: bool = False

    def __init__(self, message: str) -> None:
        self.message = message
        super().__init__(message)


class FetchError(HarborError):
    """Raised when a network fetch fails (connectivity, DNS, reset)."""

    retryable = True

    def __init__(self, message: str, url: str | None = None) -> None:
        super().__init__(message)
        self.url = url


class FetchTimeoutError(FetchError):
    """Raised when a network fetch does not complete in time."""


class StorageError(HarborError):
    """Raised when a cache or queue backend operation fails."""


class CacheKeyError(StorageError):
    """Raised when a request cannot be used as a cache key."""

    def __init__(self, message: str, method: str | None = None) -> None:
        super().__init__(message)
        self.method = method


class MessageError(HarborError):
    """Raised when a client message cannot be parsed or routed."""
