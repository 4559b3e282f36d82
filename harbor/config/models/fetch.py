"""Request classification and fetch strategy configuration."""

from pydantic import BaseModel, Field


class FetchConfig(BaseModel):
    """Fetch path configuration.

    The denylists and allowlists feed the request classifier; the timeout
    bounds the network-first strategy used for navigations.
    """

    origin: str = Field(
        default="http://localhost:8000",
        description="Origin of the client application (same-origin responses are 'basic')",
    )
    root_path: str = Field(
        default="/",
        description="Entry page served as the offline fallback",
    )
    navigation_timeout_ms: int = Field(
        default=3000,
        gt=0,
        description="Network-first race timeout for navigations",
    )
    request_timeout_seconds: float = Field(
        default=30.0,
        gt=0,
        description="Default timeout for outbound requests",
    )
    sensitive_paths: list[str] = Field(
        default_factory=lambda: [
            "/login",
            "/logout",
            "/auth",
            "/api/auth",
            "/account/password",
            "/payment",
            "/checkout",
        ],
        description="Path prefixes never read from or written to a store",
    )
    sensitive_params: list[str] = Field(
        default_factory=lambda: [
            "token",
            "access_token",
            "password",
            "session",
            "auth",
            "card",
            "cvv",
        ],
        description="Query parameter names that mark a request sensitive",
    )
    static_extensions: list[str] = Field(
        default_factory=lambda: [
            ".js",
            ".css",
            ".png",
            ".jpg",
            ".jpeg",
            ".gif",
            ".svg",
            ".ico",
            ".webp",
            ".woff",
            ".woff2",
            ".ttf",
            ".json",
        ],
        description="Path extensions served cache-first",
    )
    cdn_hosts: list[str] = Field(
        default_factory=lambda: [
            "cdn.jsdelivr.net",
            "unpkg.com",
            "fonts.googleapis.com",
            "fonts.gstatic.com",
        ],
        description="Hosts whose responses are treated as static assets",
    )
    offline_body: str = Field(
        default="网络连接失败，请检查您的网络连接",
        description="Body of the synthetic 503 response",
    )
