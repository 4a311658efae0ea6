"""Tests for async_utils.py: CircuitBreaker, batch_process, gather, timeouts."""

import asyncio
import time

import pytest

from research_search.shared.async_utils import (
    CircuitBreaker,
    batch_process,
    gather_with_errors,
    timeout_with_fallback,
)
from research_search.shared.exceptions import RateLimitError


# ============================================================
# gather_with_errors
# ============================================================


class TestGatherWithErrors:
    async def test_order_follows_arguments_not_completion(self):
        async def task(n, delay):
            await asyncio.sleep(delay)
            return n

        results = await gather_with_errors(task(1, 0.03), task(2, 0.0), task(3, 0.01))
        assert results == [1, 2, 3]

    async def test_with_exceptions_returned(self):
        async def ok():
            return "ok"

        async def fail():
            raise ValueError("bad")

        results = await gather_with_errors(ok(), fail(), return_exceptions=True)
        assert results[0] == "ok"
        assert isinstance(results[1], ValueError)

    async def test_fail_fast(self):
        async def fail():
            raise ValueError("bad")

        async def ok():
            return 1

        with pytest.raises(ExceptionGroup):
            await gather_with_errors(ok(), fail())

    async def test_empty(self):
        assert await gather_with_errors() == []


# ============================================================
# batch_process
# ============================================================


class TestBatchProcess:
    async def test_results_aligned_with_items(self):
        async def double(n):
            return n * 2

        assert await batch_process([1, 2, 3], double, batch_size=2) == [2, 4, 6]

    async def test_batches_run_one_after_another(self):
        running = 0
        peak = 0

        async def track(n):
            nonlocal running, peak
            running += 1
            peak = max(peak, running)
            await asyncio.sleep(0.005)
            running -= 1
            return n

        await batch_process(list(range(7)), track, batch_size=3)
        assert peak == 3

    async def test_handles_errors(self):
        async def maybe_fail(n):
            if n == 2:
                raise ValueError("bad")
            return n

        results = await batch_process([1, 2, 3], maybe_fail, batch_size=10)
        assert results[0] == 1
        assert isinstance(results[1], ValueError)
        assert results[2] == 3

    async def test_empty_items(self):
        async def echo(n):
            return n

        assert await batch_process([], echo) == []


# ============================================================
# CircuitBreaker
# ============================================================


class TestCircuitBreaker:
    async def test_closed_state_allows_calls(self):
        async with CircuitBreaker(failure_threshold=3):
            pass

    async def test_opens_after_threshold_failures(self):
        cb = CircuitBreaker(failure_threshold=2, recovery_timeout=10.0)

        for _ in range(2):
            with pytest.raises(RuntimeError):
                async with cb:
                    raise RuntimeError("fail")

        assert cb.state == "open"

    async def test_open_rejects_calls(self):
        cb = CircuitBreaker(failure_threshold=1, recovery_timeout=60.0)

        with pytest.raises(RuntimeError):
            async with cb:
                raise RuntimeError("fail")

        with pytest.raises(RateLimitError):
            async with cb:
                pass

    async def test_success_decrements_failure_count(self):
        cb = CircuitBreaker(failure_threshold=5)
        cb._failure_count = 3

        async with cb:
            pass

        assert cb._failure_count == 2

    async def test_half_open_recovery(self):
        cb = CircuitBreaker(failure_threshold=1, recovery_timeout=0.01)

        with pytest.raises(RuntimeError):
            async with cb:
                raise RuntimeError("fail")

        await asyncio.sleep(0.02)

        async with cb:
            pass

        assert cb.state == "closed"

    def test_is_open_property(self):
        cb = CircuitBreaker()
        assert cb.is_open is False

        cb._state = "open"
        cb._last_failure_time = time.monotonic()
        assert cb.is_open is True


# ============================================================
# timeout_with_fallback
# ============================================================


class TestTimeoutWithFallback:
    async def test_success_returns_result(self):
        async def fast():
            return "ok"

        assert await timeout_with_fallback(fast(), timeout=1.0, fallback="default") == "ok"

    async def test_timeout_returns_fallback_value(self):
        async def slow():
            await asyncio.sleep(10)
            return "never"

        assert await timeout_with_fallback(slow(), timeout=0.01, fallback="default") == "default"

    async def test_timeout_calls_fallback_factory(self):
        async def slow():
            await asyncio.sleep(10)

        assert await timeout_with_fallback(slow(), timeout=0.01, fallback=list) == []
