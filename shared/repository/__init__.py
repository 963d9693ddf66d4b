"""
Repository content resolution, fetching and aggregate hashing.

Usage:
    from shared.repository import AggregateHasher, ContentFetcher

    async with aiohttp.ClientSession() as session:
        hasher = AggregateHasher(ContentFetcher(session))
        digest = await hasher.hash_files(config, ["README.md", "setup.py"])
"""
from .errors import (
    RepositoryError,
    ConfigurationMissing,
    ConfigurationUnavailable,
    InvalidReference,
    FileNotFound,
    FetchFailed,
    InvalidPayload,
    EmptyRequest,
    RepositoryNotFound,
)
from .models import RepositoryConfiguration, FetchOutcome
from .resolver import GITHUB_URL, RAW_CONTENT_HOST, resolve_raw_url, repository_reference
from .fetcher import ContentFetcher, NOT_FOUND_BODY
from .hashing import AggregateHasher, compute_sha256, combine_digests

__all__ = [
    "RepositoryError",
    "ConfigurationMissing",
    "ConfigurationUnavailable",
    "InvalidReference",
    "FileNotFound",
    "FetchFailed",
    "InvalidPayload",
    "EmptyRequest",
    "RepositoryNotFound",
    "RepositoryConfiguration",
    "FetchOutcome",
    "GITHUB_URL",
    "RAW_CONTENT_HOST",
    "resolve_raw_url",
    "repository_reference",
    "ContentFetcher",
    "NOT_FOUND_BODY",
    "AggregateHasher",
    "compute_sha256",
    "combine_digests",
]
