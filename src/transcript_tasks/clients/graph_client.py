"""
Microsoft Graph HTTP client.

Handles:
- Bearer auth via the shared TokenProvider
- Mapping of failed responses into the GraphError hierarchy
- Retry with exponential backoff for reads (GET) on throttling / 5xx / transport errors
"""

from typing import Any, Protocol

import httpx
from tenacity import (
    retry,
    retry_if_exception_type,
    stop_after_attempt,
    wait_exponential,
)

from ..config import config
from ..errors import GraphRateLimitError, GraphServerError, wrap_graph_error

_RETRYABLE = (GraphRateLimitError, GraphServerError, httpx.TransportError)


class AccessTokenSource(Protocol):
    async def get_access_token(self) -> str: ...


class GraphClient:
    """
    Thin async wrapper over the Graph REST API.

    Writes (POST/PATCH/DELETE) are sent once; only reads are retried so a
    create call is never duplicated.
    """

    def __init__(
        self,
        token_provider: AccessTokenSource,
        base_url: str | None = None,
        timeout: float | None = None,
        http_client: httpx.AsyncClient | None = None,
    ):
        """
        Initialize the Graph client.

        Args:
            token_provider: Object with ``async get_access_token() -> str``
            base_url: Graph root (defaults to GRAPH_BASE_URL)
            timeout: Request timeout in seconds (defaults to GRAPH_TIMEOUT_SECONDS)
            http_client: Optional preconfigured httpx client (must carry its own base_url)
        """
        self.token_provider = token_provider
        self._http = http_client or httpx.AsyncClient(
            base_url=base_url or config.GRAPH_BASE_URL,
            timeout=timeout or config.GRAPH_TIMEOUT_SECONDS,
        )

    async def _request(
        self,
        method: str,
        path: str,
        params: dict[str, Any] | None = None,
        json: dict[str, Any] | None = None,
        headers: dict[str, str] | None = None,
    ) -> httpx.Response:
        token = await self.token_provider.get_access_token()
        request_headers = {'Authorization': f"Bearer {token}"}
        if headers:
            request_headers.update(headers)

        response = await self._http.request(
            method,
            path,
            params=params,
            json=json,
            headers=request_headers,
        )

        if response.is_error:
            raise wrap_graph_error(
                response.status_code,
                response.text,
                context={'method': method, 'path': path},
            )
        return response

    @retry(
        retry=retry_if_exception_type(_RETRYABLE),
        stop=stop_after_attempt(3),
        wait=wait_exponential(multiplier=1, min=1, max=10),
        reraise=True,
    )
    async def get(self, path: str, params: dict[str, Any] | None = None) -> dict[str, Any]:
        """GET a JSON resource."""
        response = await self._request('GET', path, params=params)
        return response.json()

    @retry(
        retry=retry_if_exception_type(_RETRYABLE),
        stop=stop_after_attempt(3),
        wait=wait_exponential(multiplier=1, min=1, max=10),
        reraise=True,
    )
    async def get_bytes(self, path: str, params: dict[str, Any] | None = None) -> bytes:
        """GET a binary / text stream (e.g., transcript content)."""
        response = await self._request('GET', path, params=params)
        return response.content

    async def post(self, path: str, json: dict[str, Any]) -> dict[str, Any]:
        """POST a JSON body and return the created resource."""
        response = await self._request('POST', path, json=json)
        return response.json() if response.content else {}

    async def patch(
        self,
        path: str,
        json: dict[str, Any],
        headers: dict[str, str] | None = None,
    ) -> dict[str, Any]:
        """PATCH a resource. Planner updates pass ``If-Match`` in headers."""
        response = await self._request('PATCH', path, json=json, headers=headers)
        return response.json() if response.content else {}

    async def delete(self, path: str) -> None:
        """DELETE a resource."""
        await self._request('DELETE', path)

    async def close(self) -> None:
        await self._http.aclose()
