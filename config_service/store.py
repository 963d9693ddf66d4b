"""
In-process store for the current repository configuration.
"""
import logging
import threading

from shared.repository.models import RepositoryConfiguration
from shared.repository.resolver import GITHUB_URL, repository_reference

logger = logging.getLogger(__name__)


class RepositoryConfigStore:
    """
    Holds one RepositoryConfiguration for the life of the process.

    Values are frozen and swapped whole, so ``get()`` always returns a
    consistent (reference, branch) pair.
    """

    def __init__(self, default_branch: str = "master", github_url: str = GITHUB_URL):
        self.default_branch = default_branch
        self.github_url = github_url
        self._lock = threading.Lock()
        self._config = RepositoryConfiguration()

    def get(self) -> RepositoryConfiguration:
        with self._lock:
            return self._config

    def check_out(self, path: str, branch: str = "") -> RepositoryConfiguration:
        """
        Store the reference for ``owner/name`` and ``branch``.

        An empty branch falls back to the default branch.

        Raises:
            InvalidReference: path is not ``owner/name``
        """
        config = RepositoryConfiguration(
            reference=repository_reference(path, github_url=self.github_url),
            branch=branch or self.default_branch,
        )
        with self._lock:
            self._config = config
        logger.info(f"Checked out {config.reference} @ {config.branch}")
        return config
