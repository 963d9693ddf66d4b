"""
Repository existence check against the remote host.

A repository/branch pair exists when ``<github>/<owner>/<name>/tree/<branch>``
answers 200.
"""
import asyncio
import logging
from typing import Optional

import aiohttp

from shared.repository.errors import RepositoryNotFound
from shared.repository.resolver import GITHUB_URL

logger = logging.getLogger(__name__)


class RepositoryVerifier:
    """Checks that a repository and branch exist before they are stored."""

    def __init__(
        self,
        github_url: str = GITHUB_URL,
        timeout_seconds: float = 10,
        session: Optional[aiohttp.ClientSession] = None,
    ):
        self.github_url = github_url.rstrip("/")
        self.timeout_seconds = timeout_seconds
        self.session = session

    def tree_url(self, path: str, branch: str) -> str:
        return f"{self.github_url}/{path.strip('/')}/tree/{branch}"

    async def exists(self, path: str, branch: str) -> bool:
        url = self.tree_url(path, branch)
        try:
            if self.session is not None:
                status = await self._status(self.session, url)
            else:
                async with aiohttp.ClientSession() as session:
                    status = await self._status(session, url)
        except (aiohttp.ClientError, asyncio.TimeoutError) as e:
            logger.warning(f"Existence check failed for {url}: {e!r}")
            return False

        logger.debug(f"Existence check {url} -> {status}")
        return status == 200

    async def verify(self, path: str, branch: str) -> None:
        """Raise RepositoryNotFound unless ``path``@``branch`` exists."""
        if not await self.exists(path, branch):
            raise RepositoryNotFound()

    async def _status(self, session: aiohttp.ClientSession, url: str) -> int:
        async with session.get(
            url,
            timeout=aiohttp.ClientTimeout(total=self.timeout_seconds),
        ) as resp:
            return resp.status
