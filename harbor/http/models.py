"""Request and response value types.

Responses carry their whole body as bytes, so a snapshot can be returned to
the caller and a clone persisted without either side consuming the other.
"""

import json
from enum import Enum
from typing import Any

import httpx
from pydantic import BaseModel, ConfigDict, Field, field_validator

RETRIEVAL_METHODS: frozenset[str] = frozenset({"GET"})


class RequestMode(str, Enum):
    """How the client issued the request."""

    NAVIGATE = "navigate"
    SAME_ORIGIN = "same-origin"
    CORS = "cors"
    NO_CORS = "no-cors"


class ResponseType(str, Enum):
    """Visibility of a response to the agent."""

    BASIC = "basic"
    CORS = "cors"
    OPAQUE = "opaque"
    ERROR = "error"


class Request(BaseModel):
    """An outbound request intercepted on behalf of a client."""

    model_config = ConfigDict(frozen=True, ser_json_bytes="base64", val_json_bytes="base64")

    method: str = Field(default="GET", description="HTTP method")
    url: str = Field(..., description="Absolute request URL")
    mode: RequestMode = Field(default=RequestMode.CORS, description="Request mode")
    headers: dict[str, str] = Field(default_factory=dict, description="Request headers")
    body: bytes | None = Field(default=None, description="Request body")

    @field_validator("method")
    @classmethod
    def _upper_method(cls, value: str) -> str:
        return value.upper()

    @property
    def is_navigation(self) -> bool:
        return self.mode == RequestMode.NAVIGATE

    @property
    def is_retrieval(self) -> bool:
        return self.method in RETRIEVAL_METHODS


class Response(BaseModel):
    """A complete response snapshot."""

    model_config = ConfigDict(frozen=True, ser_json_bytes="base64", val_json_bytes="base64")

    status: int = Field(default=200, description="HTTP status code")
    status_text: str = Field(default="", description="Reason phrase")
    headers: dict[str, str] = Field(default_factory=dict, description="Lower-cased headers")
    body: bytes = Field(default=b"", description="Response body")
    response_type: ResponseType = Field(default=ResponseType.BASIC, description="Response type")
    url: str = Field(default="", description="Final URL after redirects")

    @field_validator("headers")
    @classmethod
    def _lower_headers(cls, value: dict[str, str]) -> dict[str, str]:
        return {k.lower(): v for k, v in value.items()}

    @property
    def ok(self) -> bool:
        return 200 <= self.status < 300

    def clone(self) -> "Response":
        """Copy the snapshot so it can be persisted independently."""
        return self.model_copy(deep=True)

    def text(self) -> str:
        return self.body.decode("utf-8", errors="replace")

    def json(self) -> Any:
        return json.loads(self.body)


def resolve_url(origin: str, path: str) -> str:
    """Resolve a (possibly relative) path against the agent origin."""
    return str(httpx.URL(origin).join(path))


def same_origin(url: str, origin: str) -> bool:
    """Check whether url shares scheme, host and port with origin."""
    a = httpx.URL(url)
    b = httpx.URL(origin)
    return (a.scheme, a.host, a.port) == (b.scheme, b.host, b.port)


def offline_response(body: str) -> Response:
    """Build the synthetic response returned when nothing else can answer."""
    return Response(
        status=503,
        status_text="Service Unavailable",
        headers={"Content-Type": "text/plain; charset=utf-8"},
        body=body.encode("utf-8"),
        response_type=ResponseType.BASIC,
    )
