"""Agent lifecycle state."""

from enum import Enum

from pydantic import BaseModel, Field

from harbor.cache.models import CacheGeneration, CacheNamespace
from harbor.config.models.cache import CacheConfig


class LifecyclePhase(str, Enum):
    """Where the agent is in its install/activate lifecycle."""

    PARSED = "parsed"
    INSTALLING = "installing"
    INSTALLED = "installed"
    ACTIVATING = "activating"
    ACTIVATED = "activated"


class AgentState(BaseModel):
    """State owned by the agent and passed to its handlers."""

    precache: CacheNamespace = Field(..., description="Namespace seeded at install")
    runtime: CacheNamespace = Field(..., description="Namespace filled while serving")
    version: str = Field(..., description="Version tag of the live namespaces")
    phase: LifecyclePhase = Field(default=LifecyclePhase.PARSED, description="Lifecycle phase")
    waiting: bool = Field(default=False, description="Installed but waiting for old clients")

    @classmethod
    def from_config(cls, config: CacheConfig) -> "AgentState":
        return cls(
            precache=CacheNamespace(
                prefix=config.prefix,
                generation=CacheGeneration.PRECACHE,
                version=config.version,
            ),
            runtime=CacheNamespace(
                prefix=config.prefix,
                generation=CacheGeneration.RUNTIME,
                version=config.version,
            ),
            version=config.version,
        )

    @property
    def lookup_namespaces(self) -> list[str]:
        """Live namespace names in lookup order, runtime first."""
        return [self.runtime.name, self.precache.name]

    def is_live(self, name: str) -> bool:
        return name in (self.precache.name, self.runtime.name)
