"""Deferred synchronization configuration."""

from pydantic import BaseModel, Field


class SyncConfig(BaseModel):
    """Sync queue drain configuration."""

    tag: str = Field(
        default="sync-parking-data",
        description="Sync event tag that triggers a drain",
    )
    endpoint: str = Field(
        default="/api/sync",
        description="Relative path of the remote sync endpoint",
    )
    max_attempts: int = Field(
        default=3,
        ge=1,
        description="Attempts per drain cycle",
    )
    backoff_base_seconds: float = Field(
        default=1.0,
        gt=0,
        description="Base unit for the exponential backoff (delay = base * 2**attempt)",
    )
