"""Request classification.

Pure functions mapping a request to the category that selects its fetch
strategy.
"""

from dataclasses import dataclass
from enum import Enum
from pathlib import PurePosixPath

import httpx

from harbor.config.models.fetch import FetchConfig
from harbor.http.models import Request


class RequestCategory(str, Enum):
    """Fetch strategy selector."""

    NAVIGATION = "navigation"
    STATIC_ASSET = "static-asset"
    SENSITIVE = "sensitive"
    OTHER = "other"


@dataclass(frozen=True)
class ClassificationPolicy:
    """Denylists and allowlists used by classify()."""

    sensitive_paths: tuple[str, ...]
    sensitive_params: frozenset[str]
    static_extensions: frozenset[str]
    cdn_hosts: frozenset[str]

    @classmethod
    def from_config(cls, config: FetchConfig) -> "ClassificationPolicy":
        return cls(
            sensitive_paths=tuple(p.lower().rstrip("/") or "/" for p in config.sensitive_paths),
            sensitive_params=frozenset(p.lower() for p in config.sensitive_params),
            static_extensions=frozenset(e.lower() for e in config.static_extensions),
            cdn_hosts=frozenset(h.lower() for h in config.cdn_hosts),
        )


def _matches_prefix(path: str, prefix: str) -> bool:
    # "/auth" matches "/auth", "/auth/x" and "/auth.html" but not "/authors"
    if path == prefix:
        return True
    return path.startswith(prefix + "/") or path.startswith(prefix + ".")


def is_sensitive(request: Request, policy: ClassificationPolicy) -> bool:
    """Check the path and query parameters against the denylists."""
    url = httpx.URL(request.url)
    path = url.path.lower()
    if any(_matches_prefix(path, prefix) for prefix in policy.sensitive_paths):
        return True
    return any(name.lower() in policy.sensitive_params for name in url.params.keys())


def is_static_asset(request: Request, policy: ClassificationPolicy) -> bool:
    url = httpx.URL(request.url)
    if url.host.lower() in policy.cdn_hosts:
        return True
    return PurePosixPath(url.path).suffix.lower() in policy.static_extensions


def classify(request: Request, policy: ClassificationPolicy) -> RequestCategory:
    """Map a request to its category.

    Rules in priority order: non-GET, sensitive, navigation, static asset,
    other.
    """
    if not request.is_retrieval:
        return RequestCategory.OTHER
    if is_sensitive(request, policy):
        return RequestCategory.SENSITIVE
    if request.is_navigation:
        return RequestCategory.NAVIGATION
    if is_static_asset(request, policy):
        return RequestCategory.STATIC_ASSET
    return RequestCategory.OTHER
