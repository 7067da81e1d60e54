"""Shared HTTP client for the token exchange and the catalog lookups.

Both CredentialProvider and CatalogClient talk to the same vendor, so one
httpx.AsyncClient with keep-alive serves them. The lifecycle closes it at
shutdown; tests bypass it by injecting their own client.

Usage:
    client = await HttpClientPool.get_client(timeout=settings.catalog.request_timeout)
    ...
    await HttpClientPool.close()
"""

import asyncio
import logging
from typing import ClassVar

import httpx

logger = logging.getLogger(__name__)


class HttpClientPool:
    """Process-wide lazily created httpx.AsyncClient."""

    _client: ClassVar[httpx.AsyncClient | None] = None
    _lock: ClassVar[asyncio.Lock | None] = None

    DEFAULT_TIMEOUT: ClassVar[float] = 30.0
    DEFAULT_MAX_KEEPALIVE: ClassVar[int] = 10
    DEFAULT_MAX_CONNECTIONS: ClassVar[int] = 20

    @classmethod
    def _ensure_lock(cls) -> asyncio.Lock:
        # Created lazily so it binds to the running loop, not import time
        if cls._lock is None:
            cls._lock = asyncio.Lock()
        return cls._lock

    @classmethod
    async def get_client(
        cls,
        timeout: float | None = None,
        max_keepalive: int | None = None,
        max_connections: int | None = None,
    ) -> httpx.AsyncClient:
        """Get the shared HTTP client instance.

        Configuration only applies to the call that creates the client.

        Args:
            timeout: Request timeout in seconds
            max_keepalive: Max idle connections to keep open
            max_connections: Max total concurrent connections

        Returns:
            Shared httpx.AsyncClient instance
        """
        async with cls._ensure_lock():
            if cls._client is None:
                effective_timeout = timeout or cls.DEFAULT_TIMEOUT
                cls._client = httpx.AsyncClient(
                    timeout=httpx.Timeout(effective_timeout),
                    limits=httpx.Limits(
                        max_keepalive_connections=max_keepalive
                        or cls.DEFAULT_MAX_KEEPALIVE,
                        max_connections=max_connections or cls.DEFAULT_MAX_CONNECTIONS,
                    ),
                    http2=True,
                    follow_redirects=True,
                )
                logger.info(
                    "HTTP client pool initialized (timeout=%.1fs)", effective_timeout
                )
            return cls._client

    @classmethod
    async def close(cls) -> None:
        """Close the shared client; the next get_client() builds a new one."""
        async with cls._ensure_lock():
            if cls._client is not None:
                await cls._client.aclose()
                cls._client = None
                logger.info("HTTP client pool closed")
