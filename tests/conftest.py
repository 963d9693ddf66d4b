"""
Shared pytest fixtures for the repository hash services.

Provides fixtures for:
- Logging capture
- A configured repository snapshot
- An in-memory content fetcher with per-file delays and failures
- A fake configuration provider
"""

import asyncio
import logging
import sys
from pathlib import Path
from typing import Dict, List, Optional, Union

import pytest

# Add project root to path
PROJECT_ROOT = Path(__file__).parent.parent
sys.path.insert(0, str(PROJECT_ROOT))

from shared.repository import (
    RAW_CONTENT_HOST,
    RepositoryConfiguration,
    RepositoryError,
)


# ============================================================================
# Logging Fixtures
# ============================================================================

@pytest.fixture(autouse=True)
def configure_test_logging(caplog):
    """Configure logging for all tests."""
    caplog.set_level(logging.DEBUG)
    return caplog


# ============================================================================
# Configuration Fixtures
# ============================================================================

@pytest.fixture
def repo_config() -> RepositoryConfiguration:
    """octocat/Hello-World checked out at main."""
    return RepositoryConfiguration(
        reference="https://github.com/octocat/Hello-World.git",
        branch="main",
    )


@pytest.fixture
def raw_prefix() -> str:
    """URL prefix every file of repo_config resolves under."""
    return f"{RAW_CONTENT_HOST}/octocat/Hello-World/main/"


# ============================================================================
# Fetcher Fixtures
# ============================================================================

class FakeFetcher:
    """
    In-memory stand-in for ContentFetcher.

    ``files`` maps repository paths to their bytes, or to an exception to
    raise. ``delays`` (seconds) reorders completion; a file without a delay
    answers without suspending.
    """

    def __init__(
        self,
        prefix: str,
        files: Dict[str, Union[bytes, Exception]],
        delays: Optional[Dict[str, float]] = None,
    ):
        self.prefix = prefix
        self.files = files
        self.delays = delays or {}
        self.calls: List[str] = []
        self.completed: List[str] = []
        self.cancelled: List[str] = []

    async def fetch(self, url: str) -> bytes:
        assert url.startswith(self.prefix), url
        name = url[len(self.prefix):]
        self.calls.append(name)

        delay = self.delays.get(name)
        if delay:
            try:
                await asyncio.sleep(delay)
            except asyncio.CancelledError:
                self.cancelled.append(name)
                raise

        self.completed.append(name)
        result = self.files[name]
        if isinstance(result, Exception):
            raise result
        return result


@pytest.fixture
def make_fetcher(raw_prefix):
    """Factory for FakeFetcher bound to repo_config's URL prefix."""
    def _make(files, delays=None) -> FakeFetcher:
        return FakeFetcher(raw_prefix, files, delays)
    return _make


# ============================================================================
# Configuration Provider Fixtures
# ============================================================================

class FakeConfigClient:
    """Configuration provider returning a fixed snapshot or raising."""

    def __init__(self, result: Union[RepositoryConfiguration, RepositoryError]):
        self.result = result
        self.calls = 0

    async def get_configuration(self) -> RepositoryConfiguration:
        self.calls += 1
        if isinstance(self.result, Exception):
            raise self.result
        return self.result


@pytest.fixture
def make_config_client():
    return FakeConfigClient
