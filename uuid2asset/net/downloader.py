"""
Handles the low-level fetching of asset files over HTTP using a shared
aiohttp connection pool.
"""

import asyncio
import logging
from typing import Optional

import aiohttp

from uuid2asset.models.config import DEFAULT_MAX_WORKERS

log = logging.getLogger(__name__)


class AssetDownloader:
    """
    Fetches whole files into memory.

    A 404 is a definitive answer ("this asset does not exist") and is returned
    as None. Any other failure is raised so the caller's retry policy can deal
    with it.
    """

    def __init__(
        self,
        max_connections: int = DEFAULT_MAX_WORKERS,
        session: Optional[aiohttp.ClientSession] = None,
    ):
        """
        Args:
            max_connections: Connection pool size (should match max_workers).
            session: An existing session to use instead of creating one. It is
                not closed by `close()`.
        """
        self.max_connections = max_connections
        self._session = session
        self._owns_session = session is None
        self._session_lock = asyncio.Lock()

    async def _get_session(self) -> aiohttp.ClientSession:
        """
        Gets or creates the ClientSession for this downloader.

        The pool is created once and reused for every request.
        """
        async with self._session_lock:
            if self._session and not self._session.closed:
                return self._session

            connector = aiohttp.TCPConnector(
                limit=self.max_connections,
                limit_per_host=self.max_connections,
                ttl_dns_cache=600,  # 10 minutes
                keepalive_timeout=30,
                enable_cleanup_closed=True,
                force_close=False,
            )
            # Per-attempt deadlines come from the retry policy
            timeout = aiohttp.ClientTimeout(total=None, sock_connect=15, sock_read=90)
            self._session = aiohttp.ClientSession(
                connector=connector,
                timeout=timeout,
                headers={"Accept-Encoding": "gzip, deflate"},
            )
            self._owns_session = True
            log.debug(f"Created download pool with limit={self.max_connections}")

        return self._session

    async def fetch(self, url: str) -> Optional[bytes]:
        """
        Downloads a file.

        Returns:
            The response body, or None if the server answered 404.

        Raises:
            aiohttp.ClientResponseError: For any other non-success status.
            aiohttp.ClientError: For connection-level failures.
        """
        session = await self._get_session()
        async with session.get(url, allow_redirects=True) as response:
            if response.status == 404:
                log.debug(f"Not found: {url}")
                return None
            response.raise_for_status()
            data = await response.read()

        log.debug(f"Fetched {url} ({len(data)} bytes)")
        return data

    async def close(self) -> None:
        """Closes the connection pool if this downloader created it."""
        async with self._session_lock:
            if self._owns_session and self._session and not self._session.closed:
                await self._session.close()
                log.debug("Downloader connection pool closed.")
            self._session = None

    async def __aenter__(self) -> "AssetDownloader":
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        await self.close()
