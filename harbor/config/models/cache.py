"""Cache namespace configuration models."""

from pydantic import BaseModel, Field


class CacheConfig(BaseModel):
    """Cache namespaces, bounds and the install-time manifest."""

    prefix: str = Field(
        default="parking-reminder",
        description="Prefix shared by every namespace this agent owns",
    )
    version: str = Field(
        default="v1",
        description="Generation version tag; bump to retire old namespaces",
    )
    max_entries: int = Field(
        default=50,
        gt=0,
        description="Maximum live entries in the runtime namespace",
    )
    precache_manifest: list[str] = Field(
        default_factory=lambda: [
            "/",
            "/index.html",
            "/manifest.json",
            "/icon-192x192.png",
            "/icon-72x72.png",
        ],
        description="Paths fetched into the precache namespace at install",
    )
