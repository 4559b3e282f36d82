"""Time helpers shared across modules."""

import time
from datetime import UTC, datetime


def utc_now() -> datetime:
    """Return current UTC time."""
    return datetime.now(UTC)


def epoch_ms() -> int:
    """Milliseconds since the Unix epoch, the timestamp format on the wire."""
    return int(time.time() * 1000)
