import asyncio
import logging

import aiohttp
import pytest

from uuid2asset.exceptions import RetryExhaustedError
from uuid2asset.utils.retry import RetryPolicy, retry_with_timeout

FAST = RetryPolicy(delay=0, timeout=1)


class Flaky:
    """Fails `failures` times, then returns `value`."""

    def __init__(self, failures, value="ok", error=ConnectionError):
        self.failures = failures
        self.value = value
        self.error = error
        self.calls = 0

    async def __call__(self):
        self.calls += 1
        if self.calls <= self.failures:
            raise self.error(f"failure {self.calls}")
        return self.value


@pytest.mark.parametrize("failures", [0, 1, 4])
def test_retries_until_success(failures):
    operation = Flaky(failures)
    result = asyncio.run(retry_with_timeout(operation, FAST, description="x"))
    assert result == "ok"
    assert operation.calls == failures + 1


def test_timed_out_attempt_is_cancelled_and_retried():
    state = {"calls": 0, "cancelled": 0}

    async def operation():
        state["calls"] += 1
        if state["calls"] == 1:
            try:
                await asyncio.sleep(10)
            except asyncio.CancelledError:
                state["cancelled"] += 1
                raise
        return "done"

    policy = RetryPolicy(delay=0, timeout=0.05)
    assert asyncio.run(retry_with_timeout(operation, policy)) == "done"
    assert state == {"calls": 2, "cancelled": 1}


def test_on_retry_receives_each_failure():
    seen = []
    operation = Flaky(3)
    asyncio.run(
        retry_with_timeout(operation, FAST, on_retry=lambda n, e: seen.append((n, str(e))))
    )
    assert seen == [(1, "failure 1"), (2, "failure 2"), (3, "failure 3")]


def test_bounded_policy_gives_up():
    operation = Flaky(10)
    policy = RetryPolicy(max_attempts=3, delay=0, timeout=1)

    with pytest.raises(RetryExhaustedError) as excinfo:
        asyncio.run(retry_with_timeout(operation, policy, description="file.bin"))

    assert operation.calls == 3
    assert isinstance(excinfo.value.__cause__, ConnectionError)
    assert "file.bin" in str(excinfo.value)


def test_unbounded_policy_allows_any_attempt():
    policy = RetryPolicy()
    assert policy.max_attempts is None
    assert policy.delay == 5.0
    assert policy.timeout == 30.0
    assert policy.allows(10_000)


def test_cancellation_is_not_retried():
    calls = 0

    async def operation():
        nonlocal calls
        calls += 1
        raise asyncio.CancelledError()

    with pytest.raises(asyncio.CancelledError):
        asyncio.run(retry_with_timeout(operation, FAST))
    assert calls == 1


def test_retry_waits_the_fixed_delay():
    operation = Flaky(2)
    policy = RetryPolicy(delay=0.05, timeout=1)

    async def timed():
        loop = asyncio.get_running_loop()
        start = loop.time()
        await retry_with_timeout(operation, policy)
        return loop.time() - start

    assert asyncio.run(timed()) >= 0.09


def test_attempt_timeout_is_reported_with_the_policy_limit(caplog):
    async def operation():
        await asyncio.sleep(10)

    policy = RetryPolicy(max_attempts=2, delay=0, timeout=0.05)
    with caplog.at_level(logging.WARNING), pytest.raises(RetryExhaustedError):
        asyncio.run(retry_with_timeout(operation, policy, description="slow.bin"))

    assert "timed out after 0.05s" in caplog.text


def test_socket_timeout_keeps_its_own_message(caplog):
    operation = Flaky(
        1, error=lambda msg: aiohttp.ServerTimeoutError("Timeout on reading data from socket")
    )

    with caplog.at_level(logging.WARNING):
        result = asyncio.run(retry_with_timeout(operation, FAST, description="a.bin"))

    assert result == "ok"
    assert "Timeout on reading data from socket" in caplog.text
    assert "timed out after" not in caplog.text
