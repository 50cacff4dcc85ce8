"""
Retry-with-timeout helper used by the retrieval engine.

An operation is raced against a timeout and retried after a fixed delay on any
failure. The default policy never gives up.
"""

import asyncio
import logging
from dataclasses import dataclass
from typing import Awaitable, Callable, Optional, TypeVar

from rich.markup import escape

from uuid2asset.exceptions import RetryExhaustedError

log = logging.getLogger(__name__)

T = TypeVar("T")


@dataclass(frozen=True)
class RetryPolicy:
    """How an operation is retried.

    Attributes:
        max_attempts: Attempts before giving up, or None to retry forever.
        delay: Fixed pause in seconds between attempts.
        timeout: Seconds a single attempt may run before it is cancelled.
    """

    max_attempts: Optional[int] = None
    delay: float = 5.0
    timeout: float = 30.0

    def allows(self, attempt: int) -> bool:
        """Whether another attempt may follow the given (1-based) attempt."""
        return self.max_attempts is None or attempt < self.max_attempts


async def retry_with_timeout(
    operation: Callable[[], Awaitable[T]],
    policy: RetryPolicy,
    description: str = "operation",
    on_retry: Optional[Callable[[int, BaseException], None]] = None,
) -> T:
    """
    Runs `operation` until it succeeds, following `policy`.

    Each attempt is wrapped in `asyncio.wait_for`, so a timed-out attempt is
    cancelled rather than left running in the background. Cancellation of the
    caller is never retried.

    Args:
        operation: Zero-argument factory returning a fresh awaitable per attempt.
        policy: The retry policy.
        description: Short label used in log messages (usually a URL).
        on_retry: Optional callback invoked with (attempt, error) before each
            retry sleep.

    Raises:
        RetryExhaustedError: If a bounded policy runs out of attempts.
    """
    attempt = 1
    while True:
        try:
            return await asyncio.wait_for(operation(), timeout=policy.timeout)
        except asyncio.TimeoutError as e:
            error: Exception = e
            # wait_for raises a bare TimeoutError; subclasses carry their own text
            reason = str(e) or f"timed out after {policy.timeout:g}s"
        except Exception as e:
            error = e
            reason = str(e) or type(e).__name__

        if not policy.allows(attempt):
            raise RetryExhaustedError(
                f"Giving up on {description} after {attempt} attempts: {reason}"
            ) from error

        log.warning(
            f"[yellow]Attempt {attempt} for {escape(description)} failed: "
            f"{escape(reason)}. Retrying in {policy.delay:g}s...[/yellow]"
        )
        if on_retry:
            on_retry(attempt, error)
        await asyncio.sleep(policy.delay)
        attempt += 1
