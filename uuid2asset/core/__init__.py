"""
Core application engine for orchestrating the download process.

This package contains the primary logic. The `FetchSession` acts as the
high-level coordinator, handing each manifest to the `BundleProcessor`, which
expands it into download tasks and runs them through the `RetrievalEngine`.
"""
