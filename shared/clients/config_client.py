"""
Configuration Provider client.

Reads the current (gitRef, branch) pair from the config service's
``GET /details`` endpoint.
"""
import asyncio
import json
import logging
from typing import Optional

import aiohttp

from shared.observability.tracing import inject_context
from shared.repository.errors import ConfigurationUnavailable
from shared.repository.models import RepositoryConfiguration

logger = logging.getLogger(__name__)


class ConfigServiceClient:
    """HTTP client for the config service."""

    def __init__(
        self,
        base_url: str,
        session: Optional[aiohttp.ClientSession] = None,
        timeout_seconds: float = 10,
    ):
        self.base_url = base_url.rstrip("/")
        self.session = session
        self.timeout_seconds = timeout_seconds

    @property
    def details_url(self) -> str:
        return f"{self.base_url}/details"

    async def get_configuration(self) -> RepositoryConfiguration:
        """
        Fetch a snapshot of the current repository configuration.

        Raises:
            ConfigurationUnavailable: the service is unreachable or answered
                with something that is not a gitRef/branch JSON object
        """
        try:
            if self.session is not None:
                raw = await self._get(self.session)
            else:
                async with aiohttp.ClientSession() as session:
                    raw = await self._get(session)
        except (aiohttp.ClientError, asyncio.TimeoutError) as e:
            logger.warning(f"Config service unreachable at {self.details_url}: {e!r}")
            raise ConfigurationUnavailable() from e

        try:
            data = json.loads(raw)
            if not isinstance(data, dict):
                raise TypeError(f"expected a JSON object, got {type(data).__name__}")
            config = RepositoryConfiguration.from_dict(data)
        except (ValueError, TypeError) as e:
            logger.warning(f"Invalid config service response: {e}")
            raise ConfigurationUnavailable("The data is invalid") from e

        logger.debug(f"Loaded configuration {config.to_dict()}")
        return config

    async def _get(self, session: aiohttp.ClientSession) -> bytes:
        async with session.get(
            self.details_url,
            headers=inject_context({}),
            timeout=aiohttp.ClientTimeout(total=self.timeout_seconds),
        ) as resp:
            return await resp.read()
