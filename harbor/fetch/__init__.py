"""Request classification and fetch strategies."""

from harbor.fetch.classifier import (
    ClassificationPolicy,
    RequestCategory,
    classify,
    is_sensitive,
)
from harbor.fetch.router import FetchRouter
from harbor.fetch.strategies import (
    CacheFirstStrategy,
    FetchContext,
    FetchStrategy,
    NetworkFirstStrategy,
    NetworkResult,
    PassthroughStrategy,
)

__all__ = [
    "CacheFirstStrategy",
    "ClassificationPolicy",
    "FetchContext",
    "FetchRouter",
    "FetchStrategy",
    "NetworkFirstStrategy",
    "NetworkResult",
    "PassthroughStrategy",
    "RequestCategory",
    "classify",
    "is_sensitive",
]
