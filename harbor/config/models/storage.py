"""Storage backend configuration models."""

from typing import Literal

from pydantic import BaseModel, Field

BackendType = Literal["inmemory", "redis"]


class StorageConfig(BaseModel):
    """Backend used for cache namespaces and the sync queue."""

    backend: BackendType = Field(
        default="inmemory",
        description="Backend type",
    )
    connection_url: str | None = Field(
        default=None,
        description="Redis connection URL (falls back to REDIS_URL)",
    )
    key_prefix: str = Field(
        default="harbor",
        description="Prefix for every Redis key",
    )
