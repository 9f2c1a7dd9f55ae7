"""
Base HTTP Client

Shared async base class for thin HTTP clients talking to the bookings API.
"""

import logging
from typing import Any, Callable, Dict, Optional, Tuple

import httpx

from cancellation.errors import UpstreamError

logger = logging.getLogger(__name__)

TokenProvider = Callable[[], Optional[str]]


class BaseClient:
    """Base async HTTP client with common error handling."""

    def __init__(
        self,
        base_url: str,
        timeout: float = 30.0,
        token_provider: Optional[TokenProvider] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        """
        Initialize base client.

        Args:
            base_url: API base URL
            timeout: Request timeout in seconds
            token_provider: Callable returning the current bearer token (or None)
            transport: Optional httpx transport (tests use httpx.MockTransport)
        """
        if not base_url:
            raise ValueError("Base URL is required")
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self._token_provider = token_provider
        # Single client instance for connection reuse
        self._client = httpx.AsyncClient(
            base_url=self.base_url,
            timeout=timeout,
            headers={"Content-Type": "application/json"},
            transport=transport,
        )

    def _auth_headers(self) -> Dict[str, str]:
        if self._token_provider is None:
            return {}
        token = self._token_provider()
        if not token:
            return {}
        return {"Authorization": f"Bearer {token}"}

    @staticmethod
    def _parse_body(response: httpx.Response) -> Any:
        if not response.content:
            return None
        try:
            return response.json()
        except ValueError:
            return response.text

    async def _send(
        self,
        method: str,
        path: str,
        json: Optional[Dict[str, Any]] = None,
        params: Optional[Dict[str, Any]] = None
    ) -> Tuple[int, Any]:
        """
        Make HTTP request and return status code with parsed body.

        Non-2xx responses are returned, not raised.

        Raises:
            UpstreamError: On timeouts and network failures
        """
        try:
            response = await self._client.request(
                method=method,
                url=path,
                json=json,
                params=params,
                headers=self._auth_headers(),
            )
        except httpx.TimeoutException as e:
            raise UpstreamError(f"API request timed out: {method} {path}") from e
        except httpx.RequestError as e:
            raise UpstreamError(f"API request failed: {str(e)}") from e

        logger.debug(
            f"{method} {path} -> {response.status_code}",
            extra={"method": method, "path": path, "status_code": response.status_code},
        )
        return response.status_code, self._parse_body(response)

    async def _request(
        self,
        method: str,
        path: str,
        json: Optional[Dict[str, Any]] = None,
        params: Optional[Dict[str, Any]] = None
    ) -> Any:
        """
        Make HTTP request and return parsed JSON.

        Raises:
            UpstreamError: On network failures or HTTP errors
        """
        status_code, body = await self._send(method, path, json=json, params=params)
        if not 200 <= status_code < 300:
            error_text = body if isinstance(body, str) else str(body)
            raise UpstreamError(f"API returned error {status_code}: {error_text[:500]}")
        return body

    async def aclose(self) -> None:
        """Close the underlying httpx client."""
        await self._client.aclose()
