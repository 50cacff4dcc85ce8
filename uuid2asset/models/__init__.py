"""
Data Models Layer.

This package contains the Pydantic models and dataclasses that define the core
data structures used throughout the application: configuration, manifests,
download tasks, and statistics.
"""

from .config import FetchConfig
from .manifest import Manifest, load_manifest
from .report import BundleReport, BundleStatus
from .stats import RetrievalStats
from .task import BaseType, DownloadTask, OutcomeStatus, RetrievalOutcome

__all__ = [
    "BaseType",
    "BundleReport",
    "BundleStatus",
    "DownloadTask",
    "FetchConfig",
    "Manifest",
    "OutcomeStatus",
    "RetrievalOutcome",
    "RetrievalStats",
    "load_manifest",
]
