"""
Network Layer.

This package is responsible for talking to the asset server.
"""

from .downloader import AssetDownloader

__all__ = ["AssetDownloader"]
