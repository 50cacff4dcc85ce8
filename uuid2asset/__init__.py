"""
uuid2asset: bulk asset retrieval for UUID-addressed asset bundles.
"""

__version__ = "1.0.0"
