"""Sync domain models."""

from datetime import datetime
from enum import Enum
from typing import Any
from uuid import UUID, uuid4

from pydantic import BaseModel, Field

from harbor.timeutils import utc_now


class SyncItem(BaseModel):
    """A pending write queued while offline."""

    id: UUID = Field(default_factory=uuid4, description="Item identifier")
    payload: dict[str, Any] = Field(default_factory=dict, description="Opaque client payload")
    created_at: datetime = Field(default_factory=utc_now, description="Creation timestamp")


class SyncBatch(BaseModel):
    """Wire body of one drain cycle: ``{items, timestamp}``."""

    items: list[SyncItem] = Field(..., description="Every queued item")
    timestamp: int = Field(..., description="Epoch milliseconds at submission")


class SyncState(str, Enum):
    """Coordinator state."""

    IDLE = "idle"
    DRAINING = "draining"


class SyncResult(BaseModel):
    """Outcome of a sync trigger."""

    success: bool = Field(..., description="Whether the queue was delivered")
    timestamp: int = Field(..., description="Epoch milliseconds when the drain finished")
    item_count: int = Field(default=0, ge=0, description="Items in the drained batch")


class AttemptResult(str, Enum):
    """Classification of one attempt."""

    SUCCESS = "success"
    RETRYABLE = "retryable"
    TERMINAL = "terminal"


class RetryOutcome(str, Enum):
    """Final outcome of a retry run."""

    SUCCESS = "success"
    EXHAUSTED = "exhausted"
    TERMINAL = "terminal"


class RetryAttempt(BaseModel):
    """Record of one attempt."""

    attempt: int = Field(..., ge=1, description="Attempt number, starting at 1")
    result: AttemptResult = Field(..., description="Attempt classification")
    status: int | None = Field(default=None, description="Response status, if any")
    error: str | None = Field(default=None, description="Failure description")
    delay_seconds: float | None = Field(
        default=None,
        description="Backoff slept after this attempt",
    )


class RetryReport(BaseModel):
    """All attempts of a retry run and its outcome."""

    outcome: RetryOutcome = Field(..., description="Final outcome")
    attempts: list[RetryAttempt] = Field(default_factory=list, description="Attempts made")

    @property
    def succeeded(self) -> bool:
        return self.outcome == RetryOutcome.SUCCESS
