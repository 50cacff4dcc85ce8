"""
Storage Layer.

This package handles all data persistence: the optional configuration file
and the zip archive each bundle is written to.
"""

from .bundle_archive import BundleArchive, archive_filename
from .config_manager import ConfigManager

__all__ = ["BundleArchive", "ConfigManager", "archive_filename"]
