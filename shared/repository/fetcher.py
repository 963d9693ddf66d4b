"""
Content Fetcher - one GET per raw-content URL.

The raw-content host answers a missing file with the literal body
``404: Not Found``; that exact body is the not-found signal. Any
transport failure (DNS, refused connection, timeout) is a FetchFailed.
"""
import asyncio
import logging
import time
from contextlib import asynccontextmanager
from typing import AsyncIterator, Optional

import aiohttp

from shared.observability.metrics import FetchMetrics, get_fetch_metrics

from .errors import FetchFailed, FileNotFound

logger = logging.getLogger(__name__)

NOT_FOUND_BODY = b"404: Not Found"


class ContentFetcher:
    """
    Fetches raw file bytes over HTTP.

    Pass a session to share its connection pool across fetches (the hash
    service opens one per request); without one, each fetch opens and
    closes its own.
    """

    def __init__(
        self,
        session: Optional[aiohttp.ClientSession] = None,
        timeout_seconds: float = 30,
        metrics: Optional[FetchMetrics] = None,
    ):
        self.session = session
        self.timeout_seconds = timeout_seconds
        self.metrics = metrics or get_fetch_metrics()

    @asynccontextmanager
    async def _session_scope(self) -> AsyncIterator[aiohttp.ClientSession]:
        if self.session is not None:
            yield self.session
            return
        async with aiohttp.ClientSession() as session:
            yield session

    async def fetch(self, url: str) -> bytes:
        """
        Retrieve the full body at ``url``.

        Raises:
            FetchFailed: the request could not be completed
            FileNotFound: the body is exactly ``404: Not Found``
        """
        started_at = time.perf_counter()
        try:
            async with self._session_scope() as session:
                async with session.get(
                    url,
                    timeout=aiohttp.ClientTimeout(total=self.timeout_seconds),
                ) as resp:
                    body = await resp.read()
        except (aiohttp.ClientError, asyncio.TimeoutError) as e:
            logger.warning(f"Fetch failed for {url}: {e!r}")
            self.metrics.record("failed", started_at)
            raise FetchFailed() from e

        if body == NOT_FOUND_BODY:
            logger.info(f"File not found: {url}")
            self.metrics.record("not_found", started_at)
            raise FileNotFound()

        logger.debug(f"Fetched {len(body)} bytes from {url}")
        self.metrics.record("ok", started_at)
        return body
