"""HTTP value types and the network capability."""

from harbor.http.fetcher import Fetcher, HttpxFetcher
from harbor.http.models import (
    Request,
    RequestMode,
    Response,
    ResponseType,
    offline_response,
    resolve_url,
    same_origin,
)

__all__ = [
    "Fetcher",
    "HttpxFetcher",
    "Request",
    "RequestMode",
    "Response",
    "ResponseType",
    "offline_response",
    "resolve_url",
    "same_origin",
]
