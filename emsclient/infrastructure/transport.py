# ============================================================================
# HTTPX TRANSPORT ADAPTER
# ============================================================================
# STATUS: Infrastructure - Optional fetch capability
# PURPOSE: Expose an httpx.AsyncClient as the client's fetch capability
# CREATED: 18 OCT 2026
# ============================================================================
"""
HTTPX Transport Adapter

The EMS client never performs network I/O by itself; it calls the fetch
capability it was constructed with. HttpxFetcher is a ready-made capability
for applications that use httpx:

    async with HttpxFetcher() as fetch:
        client = EMSClient(fetch_function=fetch, app_version="8.6.0", ...)
        services = await client.get_tms_services()

An httpx.Response already satisfies the response protocol the loader reads
(status_code, is_success, json()).
"""

from typing import Optional

import httpx

from emsclient.core.logging import get_logger, ComponentType

logger = get_logger(__name__, ComponentType.TRANSPORT)

# Transport-level limits; the loader applies its own overall timeout on top
DEFAULT_TIMEOUT = httpx.Timeout(connect=10.0, read=30.0, write=10.0, pool=10.0)


class HttpxFetcher:
    """Callable fetch capability backed by httpx."""

    def __init__(
        self,
        client: Optional[httpx.AsyncClient] = None,
        timeout: Optional[httpx.Timeout] = None,
        headers: Optional[dict] = None,
    ):
        self._owns_client = client is None
        self._client = client or httpx.AsyncClient(
            timeout=timeout or DEFAULT_TIMEOUT,
            headers=headers,
            follow_redirects=True,
        )

    async def __call__(self, url: str) -> httpx.Response:
        response = await self._client.get(url)
        logger.debug(f"GET {url} -> {response.status_code}")
        return response

    async def aclose(self) -> None:
        """Close the underlying client when this adapter created it."""
        if self._owns_client:
            await self._client.aclose()

    async def __aenter__(self) -> "HttpxFetcher":
        return self

    async def __aexit__(self, exc_type, exc, tb) -> None:
        await self.aclose()


__all__ = ["HttpxFetcher", "DEFAULT_TIMEOUT"]
