"""Prometheus metrics for Harbor.

Tracks cache effectiveness, fetch outcomes, sync drains and
notification/message traffic.
"""

from prometheus_client import Counter, Gauge, Histogram, start_http_server

# Cache metrics
CACHE_LOOKUPS = Counter(
    "harbor_cache_lookups_total",
    "Cache lookups by result",
    labelnames=["result"],
)

CACHE_WRITES = Counter(
    "harbor_cache_writes_total",
    "Responses written into a cache namespace",
    labelnames=["namespace", "origin"],
)

CACHE_EVICTIONS = Counter(
    "harbor_cache_evictions_total",
    "Entries evicted by trimming",
    labelnames=["namespace"],
)

STORAGE_ERRORS = Counter(
    "harbor_storage_errors_total",
    "Swallowed storage errors",
    labelnames=["operation"],
)

# Fetch metrics
FETCH_OUTCOMES = Counter(
    "harbor_fetch_outcomes_total",
    "Fetch events by category and the source that answered",
    labelnames=["category", "source"],
)

FETCH_LATENCY = Histogram(
    "harbor_fetch_latency_seconds",
    "Time to produce a response for a fetch event",
    labelnames=["category"],
    buckets=(0.005, 0.01, 0.025, 0.05, 0.1, 0.25, 0.5, 1.0, 2.5, 5.0, 10.0),
)

BACKGROUND_REFRESHES = Counter(
    "harbor_background_refreshes_total",
    "Background refreshes by outcome",
    labelnames=["outcome"],
)

# Sync metrics
SYNC_ATTEMPTS = Counter(
    "harbor_sync_attempts_total",
    "Remote sync attempts by classification",
    labelnames=["result"],
)

SYNC_DRAINS = Counter(
    "harbor_sync_drains_total",
    "Completed drain cycles by outcome",
    labelnames=["outcome"],
)

SYNC_QUEUE_DEPTH = Gauge(
    "harbor_sync_queue_depth",
    "Pending sync items observed at the last drain",
)

# Notification / messaging metrics
NOTIFICATIONS_SHOWN = Counter(
    "harbor_notifications_shown_total",
    "Notifications displayed by payload kind",
    labelnames=["kind"],
)

CLIENT_MESSAGES = Counter(
    "harbor_client_messages_total",
    "Inbound client messages by kind",
    labelnames=["kind"],
)


def setup_metrics(port: int | None = None) -> None:
    """Initialize metrics exposition.

    Metrics register themselves when defined; when a port is given an
    HTTP exposition server is started on it.
    """
    if port is not None:
        start_http_server(port)
