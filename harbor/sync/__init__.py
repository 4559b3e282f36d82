"""Deferred synchronization: queue, retry engine and coordinator."""

from harbor.sync.coordinator import SyncCoordinator
from harbor.sync.models import (
    AttemptResult,
    RetryAttempt,
    RetryOutcome,
    RetryReport,
    SyncBatch,
    SyncItem,
    SyncResult,
    SyncState,
)
from harbor.sync.queue import SyncQueue
from harbor.sync.retry import RetryEngine, classify_error, classify_status

__all__ = [
    "AttemptResult",
    "RetryAttempt",
    "RetryEngine",
    "RetryOutcome",
    "RetryReport",
    "SyncBatch",
    "SyncCoordinator",
    "SyncItem",
    "SyncQueue",
    "SyncResult",
    "SyncState",
    "classify_error",
    "classify_status",
]
