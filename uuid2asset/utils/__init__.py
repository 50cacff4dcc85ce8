"""
Shared helpers: identifier decoding, retry policy, and display formatting.
"""

from .retry import RetryPolicy, retry_with_timeout
from .uuid_decoder import decode_uuid

__all__ = ["RetryPolicy", "decode_uuid", "retry_with_timeout"]
