"""Network fetchers.

``Fetcher`` is the network capability the host hands to the agent.
``HttpxFetcher`` implements it on top of ``httpx.AsyncClient``.
"""

from abc import ABC, abstractmethod

import httpx

from harbor.exceptions import FetchError, FetchTimeoutError
from harbor.http.models import Request, RequestMode, Response, ResponseType, same_origin
from harbor.observability.logging import get_logger

logger = get_logger(__name__)


class Fetcher(ABC):
    """Abstract network capability."""

    @abstractmethod
    async def fetch(self, request: Request, *, timeout: float | None = None) -> Response:
        """Perform the request.

        Raises:
            FetchTimeoutError: The request did not complete in time
            FetchError: Any other network-level failure
        """
        pass

    async def close(self) -> None:
        """Release network resources."""
        return None


class HttpxFetcher(Fetcher):
    """Fetcher backed by a shared httpx.AsyncClient.

    Responses from the agent's own origin are 'basic'; cross-origin
    responses are 'cors', or 'opaque' (status 0, no body) for no-cors
    requests.
    """

    def __init__(
        self,
        origin: str,
        client: httpx.AsyncClient | None = None,
        timeout: float = 30.0,
    ) -> None:
        self._origin = origin
        self._client = client
        self._timeout = timeout

    async def _ensure_client(self) -> httpx.AsyncClient:
        """Ensure HTTP client is initialized."""
        if self._client is None:
            self._client = httpx.AsyncClient(follow_redirects=True)
        return self._client

    async def fetch(self, request: Request, *, timeout: float | None = None) -> Response:
        client = await self._ensure_client()
        try:
            response = await client.request(
                request.method,
                request.url,
                headers=request.headers,
                content=request.body,
                timeout=timeout if timeout is not None else self._timeout,
            )
        except httpx.TimeoutException as e:
            logger.warning("fetch_timeout", url=request.url, method=request.method)
            raise FetchTimeoutError(f"Timed out fetching {request.url}", url=request.url) from e
        except httpx.HTTPError as e:
            logger.warning(
                "fetch_network_error",
                url=request.url,
                method=request.method,
                error=str(e),
                error_type=type(e).__name__,
            )
            raise FetchError(str(e) or type(e).__name__, url=request.url) from e

        final_url = str(response.url)
        if same_origin(final_url, self._origin):
            response_type = ResponseType.BASIC
        elif request.mode == RequestMode.NO_CORS:
            return Response(status=0, response_type=ResponseType.OPAQUE, url=final_url)
        else:
            response_type = ResponseType.CORS

        return Response(
            status=response.status_code,
            status_text=response.reason_phrase,
            headers=dict(response.headers),
            body=response.content,
            response_type=response_type,
            url=final_url,
        )

    async def close(self) -> None:
        """Close the HTTP client."""
        if self._client is not None:
            await self._client.aclose()
            self._client = None
