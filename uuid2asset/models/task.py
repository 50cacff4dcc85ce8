"""
Value types passed between the task generator, the retrieval engine, and the
bundle processor.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Optional


class BaseType(str, Enum):
    """Asset categories inside a bundle, in the order they are processed."""

    IMPORT = "import"
    NATIVE = "native"


class OutcomeStatus(Enum):
    """Terminal result of one download task."""

    FOUND = "found"
    NOT_FOUND = "not_found"


@dataclass(frozen=True)
class DownloadTask:
    """A single candidate file: where to fetch it and where it goes in the archive."""

    url: str
    destination_path: str
    base_type: BaseType


@dataclass(frozen=True)
class RetrievalOutcome:
    """The result of executing a DownloadTask. Transient failures never end up here."""

    task: DownloadTask
    status: OutcomeStatus
    data: Optional[bytes] = None

    @classmethod
    def found(cls, task: DownloadTask, data: bytes) -> "RetrievalOutcome":
        return cls(task, OutcomeStatus.FOUND, data)

    @classmethod
    def not_found(cls, task: DownloadTask) -> "RetrievalOutcome":
        return cls(task, OutcomeStatus.NOT_FOUND)

    @property
    def is_found(self) -> bool:
        return self.status is OutcomeStatus.FOUND
