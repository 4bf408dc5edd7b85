"""
HTTP client utilities for the ossauth SDK
"""

import httpx
from typing import Optional, Dict


class HttpClient:
    """
    HTTP client wrapper with connection pooling.

    Requests are sent once; retry policy belongs to the caller.
    """

    def __init__(self, timeout: int = 30, transport: Optional[httpx.AsyncBaseTransport] = None):
        self.timeout = timeout
        self._client = httpx.AsyncClient(
            timeout=timeout,
            limits=httpx.Limits(max_connections=100, max_keepalive_connections=100),
            transport=transport,
        )

    async def get(self, url: str, headers: Optional[Dict[str, str]] = None) -> httpx.Response:
        return await self._request("GET", url, headers=headers)

    async def put(
        self,
        url: str,
        content: Optional[bytes] = None,
        headers: Optional[Dict[str, str]] = None,
    ) -> httpx.Response:
        return await self._request("PUT", url, content=content, headers=headers)

    async def delete(self, url: str, headers: Optional[Dict[str, str]] = None) -> httpx.Response:
        return await self._request("DELETE", url, headers=headers)

    async def _request(
        self,
        method: str,
        url: str,
        headers: Optional[Dict[str, str]] = None,
        **kwargs
    ) -> httpx.Response:
        return await self._client.request(method, url, headers=headers, **kwargs)

    async def close(self):
        """Close the HTTP client."""
        await self._client.aclose()

    async def __aenter__(self):
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        await self.close()
