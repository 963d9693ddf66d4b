"""
SHA-256 hashing and the aggregate multi-file hashing engine.

The aggregate digest of ``[f1, ..., fn]`` is
``sha256(sha256(f1) + ... + sha256(fn))`` over the lowercase hex digests,
concatenated in request order.
"""
import asyncio
import hashlib
import logging
from typing import List, Optional, Protocol, Sequence, Union

from shared.observability.metrics import HashMetrics, get_hash_metrics
from shared.observability.tracing import add_span_attributes, create_span, record_exception

from .errors import EmptyRequest, RepositoryError
from .models import FetchOutcome, RepositoryConfiguration
from .resolver import RAW_CONTENT_HOST, resolve_raw_url

logger = logging.getLogger(__name__)


def compute_sha256(content: Union[bytes, str]) -> str:
    """
    Compute SHA-256 hash of content.

    Args:
        content: Bytes to hash (str is UTF-8 encoded first)

    Returns:
        Lowercase hex-encoded SHA-256 hash
    """
    if isinstance(content, str):
        content = content.encode("utf-8")
    return hashlib.sha256(content).hexdigest()


def combine_digests(digests: Sequence[str]) -> str:
    """Hash the in-order concatenation of per-file hex digests."""
    return compute_sha256("".join(digests))


class Fetcher(Protocol):
    """Anything that can turn a URL into bytes (see ContentFetcher)."""

    async def fetch(self, url: str) -> bytes:
        ...


class AggregateHasher:
    """
    Concurrent fetch-and-digest over an ordered list of files.

    Every file gets its own task and its own result slot. The first failure
    sets a shared event; tasks that have not started fetching yet see it and
    skip their fetch. All tasks are joined before a result is produced, and
    any recorded failure wins over a digest.

    With ``cancel_on_failure`` the still-pending tasks are cancelled as soon
    as a failure is recorded instead of being left to finish. Cancelling
    ``hash_files`` itself always cancels and joins every task.
    """

    def __init__(
        self,
        fetcher: Fetcher,
        cancel_on_failure: bool = False,
        raw_host: str = RAW_CONTENT_HOST,
        metrics: Optional[HashMetrics] = None,
    ):
        self.fetcher = fetcher
        self.cancel_on_failure = cancel_on_failure
        self.raw_host = raw_host
        self.metrics = metrics or get_hash_metrics()

    async def fetch_file(self, config: RepositoryConfiguration, file_name: str) -> bytes:
        """Resolve and fetch a single file's raw bytes."""
        url = resolve_raw_url(config.reference, config.branch, file_name, host=self.raw_host)
        return await self.fetcher.fetch(url)

    async def hash_files(
        self,
        config: RepositoryConfiguration,
        file_names: Sequence[str],
    ) -> str:
        """
        Compute the aggregate digest of ``file_names`` in order.

        Args:
            config: Configuration snapshot used for every file in the request
            file_names: Ordered, non-empty list of repository-relative paths

        Returns:
            Hex digest over the ordered per-file digests

        Raises:
            EmptyRequest: file_names is empty
            RepositoryError: the failure of the lowest-index failed file
        """
        if not file_names:
            self.metrics.record(EmptyRequest.__name__, 0)
            raise EmptyRequest()

        with create_span("hash_files", file_count=len(file_names)):
            try:
                digest = await self._hash_files(config, list(file_names))
            except RepositoryError as e:
                record_exception(e)
                self.metrics.record(type(e).__name__, len(file_names))
                raise
            add_span_attributes(digest=digest)
            self.metrics.record("ok", len(file_names))
            return digest

    async def _hash_files(self, config: RepositoryConfiguration, file_names: List[str]) -> str:
        slots: List[Optional[FetchOutcome]] = [None] * len(file_names)
        failed = asyncio.Event()

        tasks = [
            asyncio.create_task(self._hash_one(config, index, name, slots, failed))
            for index, name in enumerate(file_names)
        ]
        try:
            await self._join(tasks, failed)
        except asyncio.CancelledError:
            # No fetch may outlive the request that started it
            logger.debug(f"Hash request cancelled, stopping {len(file_names)} fetches")
            for task in tasks:
                task.cancel()
            await asyncio.gather(*tasks, return_exceptions=True)
            raise

        # Surface anything that was not a RepositoryError
        for task in tasks:
            if not task.cancelled() and task.exception() is not None:
                raise task.exception()

        if failed.is_set():
            errors = [slot.error for slot in slots if slot is not None and slot.error is not None]
            hashed = sum(1 for slot in slots if slot is not None and slot.ok)
            logger.warning(
                f"Hash request failed: {len(errors)} of {len(file_names)} files errored, "
                f"{hashed} hashed"
            )
            raise errors[0]

        digests = [slot.digest for slot in slots]
        result = combine_digests(digests)
        logger.info(f"Hashed {len(file_names)} files: {result}")
        return result

    async def _join(self, tasks: List[asyncio.Task], failed: asyncio.Event) -> None:
        """Wait for every task; cancel the rest early if configured to."""
        pending = set(tasks)
        while pending:
            done, pending = await asyncio.wait(pending, return_when=asyncio.FIRST_COMPLETED)
            if failed.is_set() and self.cancel_on_failure and pending:
                logger.debug(f"Cancelling {len(pending)} pending fetches after failure")
                for task in pending:
                    task.cancel()
                await asyncio.gather(*pending, return_exceptions=True)
                return

    async def _hash_one(
        self,
        config: RepositoryConfiguration,
        index: int,
        file_name: str,
        slots: List[Optional[FetchOutcome]],
        failed: asyncio.Event,
    ) -> None:
        outcome = FetchOutcome(index=index, file_name=file_name)
        slots[index] = outcome

        if failed.is_set():
            logger.debug(f"Skipping {file_name}: another file already failed")
            return

        try:
            content = await self.fetch_file(config, file_name)
        except RepositoryError as e:
            logger.info(f"File {index} ({file_name}) failed: {e.message}")
            outcome.error = e
            failed.set()
            return

        outcome.digest = compute_sha256(content)
