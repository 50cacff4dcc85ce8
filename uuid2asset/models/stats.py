"""
Dataclass for tracking retrieval statistics, including real-time throughput.
"""

import time
from dataclasses import dataclass, field


@dataclass
class RetrievalStats:
    """Counters for one retrieval run. Used for display only, never for control flow."""

    total: int = 0
    processed: int = 0
    succeeded: int = 0
    failed: int = 0
    retries: int = 0

    # Throughput sampling fields
    items_per_second: float = 0.0
    started_at: float = field(default_factory=time.monotonic, repr=False)
    _last_report_time: float = field(default=0.0, repr=False)
    _last_report_processed: int = field(default=0, repr=False)

    def __post_init__(self):
        self._last_report_time = self.started_at

    @property
    def percentage(self) -> float:
        if self.total <= 0:
            return 100.0
        return self.processed / self.total * 100

    @property
    def elapsed(self) -> float:
        return time.monotonic() - self.started_at

    @property
    def is_complete(self) -> bool:
        return self.processed >= self.total

    def record(self, success: bool) -> None:
        """Counts one finished item."""
        self.processed += 1
        if success:
            self.succeeded += 1
        else:
            self.failed += 1

    def record_retry(self) -> None:
        self.retries += 1

    def sample_throughput(self) -> float:
        """
        Updates and returns the item rate since the previous sample.
        """
        now = time.monotonic()
        elapsed = now - self._last_report_time
        done = self.processed - self._last_report_processed
        if elapsed > 0:
            self.items_per_second = done / elapsed
        self._last_report_time = now
        self._last_report_processed = self.processed
        return self.items_per_second
