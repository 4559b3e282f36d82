"""Cache domain models."""

from datetime import datetime
from enum import Enum

import httpx
from pydantic import BaseModel, ConfigDict, Field

from harbor.exceptions import CacheKeyError
from harbor.http.models import Request, Response
from harbor.timeutils import utc_now


def normalize_url(url: str) -> str:
    """Canonicalize a URL for use in a cache key.

    Drops the fragment; httpx lower-cases scheme and host.
    """
    return str(httpx.URL(url.split("#", 1)[0]))


class CacheGeneration(str, Enum):
    """Role of a namespace."""

    PRECACHE = "precache"
    RUNTIME = "runtime"


class CacheNamespace(BaseModel):
    """A named, versioned cache store identity."""

    model_config = ConfigDict(frozen=True)

    prefix: str = Field(..., description="Owner prefix")
    generation: CacheGeneration = Field(..., description="Namespace role")
    version: str = Field(..., description="Version tag")

    @property
    def name(self) -> str:
        return f"{self.prefix}-{self.generation.value}-{self.version}"


class RequestKey(BaseModel):
    """Canonical request identity used as a cache key.

    Only retrieval (GET) requests can be keys.
    """

    model_config = ConfigDict(frozen=True)

    method: str = Field(default="GET", description="Retrieval method")
    url: str = Field(..., description="Normalized URL")

    @classmethod
    def from_request(cls, request: Request) -> "RequestKey":
        if not request.is_retrieval:
            raise CacheKeyError(
                f"Only GET requests can be cached, got {request.method}",
                method=request.method,
            )
        return cls(method=request.method, url=normalize_url(request.url))

    @classmethod
    def parse(cls, value: str) -> "RequestKey":
        """Inverse of ``str(key)``."""
        method, url = value.split(" ", 1)
        return cls(method=method, url=url)

    def __str__(self) -> str:
        return f"{self.method} {self.url}"


class CacheEntry(BaseModel):
    """A stored response snapshot with its insertion order."""

    key: RequestKey = Field(..., description="Request identity")
    response: Response = Field(..., description="Stored snapshot")
    sequence: int = Field(..., ge=0, description="Insertion order within the namespace")
    stored_at: datetime = Field(default_factory=utc_now, description="Insertion time")
