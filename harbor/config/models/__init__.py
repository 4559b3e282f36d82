"""Configuration model exports.

    from harbor.config.models import CacheConfig, FetchConfig
"""

from harbor.config.models.cache import CacheConfig
from harbor.config.models.fetch import FetchConfig
from harbor.config.models.messaging import MessagingConfig
from harbor.config.models.notifications import (
    NotificationActionConfig,
    NotificationsConfig,
)
from harbor.config.models.observability import (
    LoggingConfig,
    MetricsConfig,
    ObservabilityConfig,
)
from harbor.config.models.storage import StorageConfig
from harbor.config.models.sync import SyncConfig

__all__ = [
    "CacheConfig",
    "FetchConfig",
    "LoggingConfig",
    "MessagingConfig",
    "MetricsConfig",
    "NotificationActionConfig",
    "NotificationsConfig",
    "ObservabilityConfig",
    "StorageConfig",
    "SyncConfig",
]
