"""
Per-bundle result records produced by the bundle processor.
"""

from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import Optional

from .stats import RetrievalStats


class BundleStatus(Enum):
    COMPLETED = "completed"
    MANIFEST_INVALID = "manifest_invalid"
    NO_FILES_FOUND = "no_files_found"
    FAILED = "failed"


@dataclass
class BundleReport:
    """What happened to one manifest."""

    name: str
    status: BundleStatus = BundleStatus.FAILED
    files_found: int = 0
    archive_path: Optional[Path] = None
    archive_size: int = 0
    duration_s: float = 0.0
    message: str = ""
    base_stats: dict[str, RetrievalStats] = field(default_factory=dict)

    @property
    def succeeded(self) -> bool:
        return self.status is BundleStatus.COMPLETED

    @property
    def tasks_total(self) -> int:
        return sum(s.total for s in self.base_stats.values())

    @property
    def retries(self) -> int:
        return sum(s.retries for s in self.base_stats.values())
