# Config Service - current repository reference and branch
from .store import RepositoryConfigStore

__all__ = ["RepositoryConfigStore"]
