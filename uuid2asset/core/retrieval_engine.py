"""
Generic bounded-concurrency executor used to run download tasks.

A fixed pool of workers pulls items from a shared queue, so at most
`max_workers` processor calls are ever in flight. Every call goes through
`retry_with_timeout`, which means transient failures are retried inside the
engine and never surface as results.
"""

import asyncio
import functools
import logging
from typing import Awaitable, Callable, Generic, Optional, Sequence, TypeVar

from uuid2asset.models.config import DEFAULT_MAX_WORKERS, DEFAULT_PROGRESS_INTERVAL
from uuid2asset.models.stats import RetrievalStats
from uuid2asset.utils.retry import RetryPolicy, retry_with_timeout

log = logging.getLogger(__name__)

T = TypeVar("T")
R = TypeVar("R")

ProgressCallback = Callable[[RetrievalStats], None]


def _default_is_success(result) -> bool:
    return result is not None


class RetrievalEngine(Generic[T, R]):
    """Runs an async processor over many items with bounded concurrency."""

    def __init__(
        self,
        max_workers: int = DEFAULT_MAX_WORKERS,
        progress_interval: int = DEFAULT_PROGRESS_INTERVAL,
        policy: Optional[RetryPolicy] = None,
        progress_callback: Optional[ProgressCallback] = None,
        is_success: Callable[[R], bool] = _default_is_success,
        describe: Callable[[T], str] = str,
    ):
        """
        Args:
            max_workers: Maximum number of processor calls in flight at once.
            progress_interval: Report progress after this many completed items.
            policy: Retry policy applied to every item (defaults to unbounded
                retries with a 5s delay and a 30s per-attempt timeout).
            progress_callback: Receives the live stats at every report.
            is_success: Classifies a result for the success/failure counters.
            describe: Renders an item for log messages.
        """
        if max_workers < 1:
            raise ValueError("max_workers must be at least 1")
        if progress_interval < 1:
            raise ValueError("progress_interval must be at least 1")
        self.max_workers = max_workers
        self.progress_interval = progress_interval
        self.policy = policy or RetryPolicy()
        self.progress_callback = progress_callback
        self.is_success = is_success
        self.describe = describe
        self.stats = RetrievalStats()

    def _report(self, stats: RetrievalStats) -> None:
        stats.sample_throughput()
        if self.progress_callback:
            self.progress_callback(stats)

    async def run(
        self, items: Sequence[T], processor: Callable[[T], Awaitable[R]]
    ) -> list[R]:
        """
        Processes every item and returns the results in input order.

        Raises:
            asyncio.CancelledError: If the run is cancelled; in-flight attempts
                are cancelled with it.
            RetryExhaustedError: Only when the policy bounds `max_attempts`.
        """
        items = list(items)
        stats = RetrievalStats(total=len(items))
        self.stats = stats
        if not items:
            self._report(stats)
            return []

        results: list[Optional[R]] = [None] * len(items)
        queue: asyncio.Queue = asyncio.Queue()
        for index, item in enumerate(items):
            queue.put_nowait((index, item))

        worker_count = min(self.max_workers, len(items))
        log.debug(f"Starting {worker_count} workers for {len(items)} items.")

        def on_retry(attempt: int, error: BaseException) -> None:
            stats.record_retry()

        async def worker() -> None:
            while True:
                try:
                    index, item = queue.get_nowait()
                except asyncio.QueueEmpty:
                    return
                result = await retry_with_timeout(
                    functools.partial(processor, item),
                    self.policy,
                    description=self.describe(item),
                    on_retry=on_retry,
                )
                results[index] = result
                stats.record(self.is_success(result))
                if stats.processed % self.progress_interval == 0 or stats.is_complete:
                    self._report(stats)

        workers = [asyncio.create_task(worker()) for _ in range(worker_count)]
        try:
            await asyncio.gather(*workers)
        except BaseException:
            for task in workers:
                task.cancel()
            await asyncio.gather(*workers, return_exceptions=True)
            raise

        return results
