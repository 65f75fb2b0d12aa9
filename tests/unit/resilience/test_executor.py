"""Unit tests for ResilientExecutor retry loop and breaker integration."""

from __future__ import annotations

import asyncio
import math
import random
from typing import Any, Awaitable, Callable

import pytest

from doc_optimizer.kernel.errors import DependencyError, FailureKind, ValidationError
from doc_optimizer.resilience import (
    CircuitBreaker,
    CircuitBreakerState,
    CircuitOpenError,
    ResilientExecutor,
    RetryConfig,
)
from doc_optimizer.testing.fakes import FakeClock, FakeMetricsRegistry, FakeSleep, FrozenClock


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


class Operation:
    """Async callable failing with the given errors, then returning *result*."""

    def __init__(self, *errors: BaseException, result: Any = "ok") -> None:
        self._errors = list(errors)
        self._result = result
        self.calls = 0

    async def __call__(self) -> Any:
        self.calls += 1
        if self._errors:
            raise self._errors.pop(0)
        return self._result


class AlwaysFails:
    def __init__(self, exc_factory: Callable[[], BaseException]) -> None:
        self._factory = exc_factory
        self.calls = 0

    async def __call__(self) -> None:
        self.calls += 1
        raise self._factory()


def dep(kind: FailureKind) -> DependencyError:
    return DependencyError("openai", kind)


def make_executor(
    clock: FrozenClock | None = None,
    sleep: FakeSleep | None = None,
    **kwargs: Any,
) -> tuple[ResilientExecutor, FrozenClock, FakeSleep]:
    clock = clock or FakeClock()
    sleep = sleep or FakeSleep(clock)
    executor = ResilientExecutor(
        "openai",
        clock=clock,
        sleep=sleep,
        rng=random.Random(0),
        **kwargs,
    )
    return executor, clock, sleep


def run(coro: Awaitable[Any]) -> Any:
    return asyncio.run(coro)  # type: ignore[arg-type]


# ---------------------------------------------------------------------------
# Retry loop
# ---------------------------------------------------------------------------


class TestRetryLoop:
    def test_returns_result_on_first_success(self) -> None:
        executor, _, sleep = make_executor()
        op = Operation(result=42)
        assert run(executor.execute_with_retry(op, "ctx")) == 42
        assert op.calls == 1
        assert sleep.delays == []

    def test_network_failures_then_success(self) -> None:
        executor, _, sleep = make_executor()
        op = Operation(dep(FailureKind.NETWORK_FAILURE), dep(FailureKind.NETWORK_FAILURE), result="done")
        result = run(executor.execute_with_retry(op, "ctx", max_attempts=3))
        assert result == "done"
        assert op.calls == 3
        assert sleep.call_count == 2
        status = executor.status()
        assert status.state == CircuitBreakerState.CLOSED
        assert status.failure_count == 2

    def test_unauthorized_fails_fast_but_counts(self) -> None:
        executor, _, sleep = make_executor()
        op = AlwaysFails(lambda: dep(FailureKind.UNAUTHORIZED))
        with pytest.raises(DependencyError) as exc_info:
            run(executor.execute_with_retry(op, "ctx"))
        assert exc_info.value.kind == FailureKind.UNAUTHORIZED
        assert op.calls == 1
        assert sleep.delays == []
        assert executor.status().failure_count == 1

    def test_client_fault_not_retried(self) -> None:
        executor, _, _ = make_executor()
        op = AlwaysFails(lambda: dep(FailureKind.CLIENT_FAULT))
        with pytest.raises(DependencyError):
            run(executor.execute_with_retry(op, "ctx"))
        assert op.calls == 1

    def test_unknown_exception_not_retried(self) -> None:
        executor, _, _ = make_executor()
        op = AlwaysFails(lambda: ValueError("bad"))
        with pytest.raises(ValueError):
            run(executor.execute_with_retry(op, "ctx"))
        assert op.calls == 1

    def test_rate_limited_retried_until_exhausted(self) -> None:
        executor, _, sleep = make_executor()
        op = AlwaysFails(lambda: dep(FailureKind.RATE_LIMITED))
        with pytest.raises(DependencyError):
            run(executor.execute_with_retry(op, "ctx", max_attempts=4))
        assert op.calls == 4
        assert sleep.call_count == 3

    def test_reraises_last_failure(self) -> None:
        executor, _, _ = make_executor()
        first = dep(FailureKind.SERVER_UNAVAILABLE)
        last = dep(FailureKind.SERVER_UNAVAILABLE)
        op = Operation(first, last)
        with pytest.raises(DependencyError) as exc_info:
            run(executor.execute_with_retry(op, "ctx", max_attempts=2))
        assert exc_info.value is last

    def test_single_attempt_never_sleeps(self) -> None:
        executor, _, sleep = make_executor()
        op = AlwaysFails(lambda: dep(FailureKind.NETWORK_FAILURE))
        with pytest.raises(DependencyError):
            run(executor.execute_with_retry(op, "ctx", max_attempts=1))
        assert sleep.delays == []

    def test_backoff_delays_without_jitter(self) -> None:
        executor, _, sleep = make_executor()
        op = AlwaysFails(lambda: dep(FailureKind.SERVER_UNAVAILABLE))
        with pytest.raises(DependencyError):
            run(executor.execute_with_retry(op, "ctx", max_attempts=4, jitter=False, base_delay=2.0))
        assert sleep.delays == [2.0, 4.0, 8.0]

    def test_backoff_respects_max_delay(self) -> None:
        executor, _, sleep = make_executor()
        op = AlwaysFails(lambda: dep(FailureKind.RATE_LIMITED))
        with pytest.raises(DependencyError):
            run(executor.execute_with_retry(op, "ctx", max_attempts=5, jitter=False, max_delay=3.0))
        assert sleep.delays == [1.0, 2.0, 3.0, 3.0]

    def test_jittered_delays_within_bounds(self) -> None:
        executor, _, sleep = make_executor()
        op = AlwaysFails(lambda: dep(FailureKind.RATE_LIMITED))
        with pytest.raises(DependencyError):
            run(executor.execute_with_retry(op, "ctx", max_attempts=4))
        for delay, unjittered in zip(sleep.delays, (1.0, 2.0, 4.0)):
            assert unjittered / 2 <= delay < unjittered

    def test_executor_defaults_apply(self) -> None:
        executor, _, sleep = make_executor(defaults=RetryConfig(max_attempts=2, jitter=False))
        op = AlwaysFails(lambda: dep(FailureKind.NETWORK_FAILURE))
        with pytest.raises(DependencyError):
            run(executor.execute_with_retry(op, "ctx"))
        assert op.calls == 2
        assert sleep.delays == [1.0]

    def test_context_never_changes_behaviour(self) -> None:
        executor, _, _ = make_executor()
        op = Operation(dep(FailureKind.NETWORK_FAILURE))
        assert run(executor.execute_with_retry(op, "circuit open retry unauthorized")) == "ok"

    @pytest.mark.parametrize("overrides", [
        {"max_attempts": 2.0},
        {"base_delay": math.nan},
        {"max_delay": math.inf},
    ])
    def test_invalid_overrides_rejected_before_any_attempt(self, overrides: dict[str, float]) -> None:
        executor, _, sleep = make_executor()
        op = AlwaysFails(lambda: dep(FailureKind.SERVER_UNAVAILABLE))
        with pytest.raises(ValidationError):
            run(executor.execute_with_retry(op, "ctx", **overrides))
        assert op.calls == 0
        assert sleep.delays == []
        assert executor.status().failure_count == 0


# ---------------------------------------------------------------------------
# Breaker integration
# ---------------------------------------------------------------------------


class TestBreakerIntegration:
    def test_five_failing_calls_open_breaker(self) -> None:
        executor, _, _ = make_executor()
        for _ in range(5):
            op = AlwaysFails(lambda: dep(FailureKind.SERVER_UNAVAILABLE))
            with pytest.raises(DependencyError):
                run(executor.execute_with_retry(op, "ctx", max_attempts=1))
        assert executor.status().state == CircuitBreakerState.OPEN

        sixth = Operation()
        with pytest.raises(CircuitOpenError):
            run(executor.execute_with_retry(sixth, "ctx"))
        assert sixth.calls == 0

    def test_four_failures_keep_breaker_closed(self) -> None:
        executor, _, _ = make_executor()
        for _ in range(4):
            with pytest.raises(DependencyError):
                run(executor.execute_with_retry(
                    AlwaysFails(lambda: dep(FailureKind.SERVER_UNAVAILABLE)), "ctx", max_attempts=1
                ))
        assert executor.status().state == CircuitBreakerState.CLOSED
        assert run(executor.execute_with_retry(Operation(), "ctx")) == "ok"

    def test_rejection_incurs_no_delay(self) -> None:
        executor, _, sleep = make_executor()
        for _ in range(5):
            with pytest.raises(DependencyError):
                run(executor.execute_with_retry(
                    AlwaysFails(lambda: dep(FailureKind.NETWORK_FAILURE)), "ctx", max_attempts=1
                ))
        with pytest.raises(CircuitOpenError):
            run(executor.execute_with_retry(Operation(), "ctx"))
        assert sleep.delays == []

    def test_trial_after_recovery_timeout_closes(self) -> None:
        executor, clock, _ = make_executor()
        for _ in range(5):
            with pytest.raises(DependencyError):
                run(executor.execute_with_retry(
                    AlwaysFails(lambda: dep(FailureKind.SERVER_UNAVAILABLE)), "ctx", max_attempts=1
                ))
        clock.advance(seconds=61)
        trial = Operation(result="recovered")
        assert run(executor.execute_with_retry(trial, "ctx")) == "recovered"
        assert trial.calls == 1
        status = executor.status()
        assert status.state == CircuitBreakerState.CLOSED
        assert status.failure_count == 0

    def test_failed_trial_reopens(self) -> None:
        executor, clock, _ = make_executor()
        for _ in range(5):
            with pytest.raises(DependencyError):
                run(executor.execute_with_retry(
                    AlwaysFails(lambda: dep(FailureKind.SERVER_UNAVAILABLE)), "ctx", max_attempts=1
                ))
        clock.advance(seconds=61)
        trial = AlwaysFails(lambda: dep(FailureKind.SERVER_UNAVAILABLE))
        with pytest.raises(DependencyError):
            run(executor.execute_with_retry(trial, "ctx", max_attempts=1))
        assert trial.calls == 1
        assert executor.status().state == CircuitBreakerState.OPEN

    def test_rate_limited_failures_never_open(self) -> None:
        executor, _, _ = make_executor()
        for _ in range(10):
            with pytest.raises(DependencyError):
                run(executor.execute_with_retry(
                    AlwaysFails(lambda: dep(FailureKind.RATE_LIMITED)), "ctx", max_attempts=1
                ))
        assert executor.status().state == CircuitBreakerState.CLOSED

    def test_repeated_auth_failures_open(self) -> None:
        executor, _, _ = make_executor()
        for _ in range(5):
            with pytest.raises(DependencyError):
                run(executor.execute_with_retry(
                    AlwaysFails(lambda: dep(FailureKind.UNAUTHORIZED)), "ctx"
                ))
        assert executor.status().state == CircuitBreakerState.OPEN

    def test_opening_mid_loop_still_finishes_attempts(self) -> None:
        executor, _, _ = make_executor()
        op = AlwaysFails(lambda: dep(FailureKind.NETWORK_FAILURE))
        with pytest.raises(DependencyError):
            run(executor.execute_with_retry(op, "ctx", max_attempts=6))
        assert op.calls == 6
        assert executor.status().state == CircuitBreakerState.OPEN

    def test_shared_breaker_between_executors(self) -> None:
        clock = FakeClock()
        breaker = CircuitBreaker("openai", clock=clock)
        a, _, _ = make_executor(clock=clock, breaker=breaker)
        b, _, _ = make_executor(clock=clock, breaker=breaker)
        for _ in range(5):
            with pytest.raises(DependencyError):
                run(a.execute_with_retry(
                    AlwaysFails(lambda: dep(FailureKind.SERVER_UNAVAILABLE)), "ctx", max_attempts=1
                ))
        with pytest.raises(CircuitOpenError):
            run(b.execute_with_retry(Operation(), "ctx"))

    def test_independent_executors_do_not_share_state(self) -> None:
        a, clock, _ = make_executor()
        b, _, _ = make_executor(clock=clock)
        for _ in range(5):
            with pytest.raises(DependencyError):
                run(a.execute_with_retry(
                    AlwaysFails(lambda: dep(FailureKind.SERVER_UNAVAILABLE)), "ctx", max_attempts=1
                ))
        assert run(b.execute_with_retry(Operation(), "ctx")) == "ok"

    def test_reset_restores_service(self) -> None:
        executor, _, _ = make_executor()
        for _ in range(5):
            with pytest.raises(DependencyError):
                run(executor.execute_with_retry(
                    AlwaysFails(lambda: dep(FailureKind.SERVER_UNAVAILABLE)), "ctx", max_attempts=1
                ))
        executor.reset()
        assert executor.status().is_healthy is True
        assert run(executor.execute_with_retry(Operation(), "ctx")) == "ok"


# ---------------------------------------------------------------------------
# Cancellation
# ---------------------------------------------------------------------------


class TestCancellation:
    def test_cancel_during_backoff_aborts_loop(self) -> None:
        async def scenario() -> tuple[int, int]:
            op = AlwaysFails(lambda: dep(FailureKind.NETWORK_FAILURE))
            executor = ResilientExecutor("openai", clock=FakeClock(), defaults=RetryConfig(jitter=False))
            task = asyncio.create_task(executor.execute_with_retry(op, "ctx", base_delay=10.0))
            while op.calls == 0:
                await asyncio.sleep(0)
            await asyncio.sleep(0)
            task.cancel()
            with pytest.raises(asyncio.CancelledError):
                await task
            return op.calls, executor.status().failure_count

        calls, failures = asyncio.run(scenario())
        assert calls == 1
        assert failures == 1


# ---------------------------------------------------------------------------
# Observability
# ---------------------------------------------------------------------------


class TestMetrics:
    def test_counts_requests_retries_and_successes(self) -> None:
        metrics = FakeMetricsRegistry()
        executor, _, _ = make_executor(metrics=metrics)
        op = Operation(dep(FailureKind.NETWORK_FAILURE), dep(FailureKind.NETWORK_FAILURE))
        run(executor.execute_with_retry(op, "ctx"))
        assert metrics.total("resilience.requests") == 1
        assert metrics.total("resilience.retries") == 2
        assert metrics.total("resilience.successes") == 1
        assert metrics.total("resilience.failures") == 0
        assert len(metrics.values("resilience.duration")) == 1

    def test_counts_trips_and_rejections(self) -> None:
        metrics = FakeMetricsRegistry()
        executor, _, _ = make_executor(metrics=metrics)
        for _ in range(5):
            with pytest.raises(DependencyError):
                run(executor.execute_with_retry(
                    AlwaysFails(lambda: dep(FailureKind.SERVER_UNAVAILABLE)), "ctx", max_attempts=1
                ))
        with pytest.raises(CircuitOpenError):
            run(executor.execute_with_retry(Operation(), "ctx"))
        assert metrics.total("resilience.circuit_trips") == 1
        assert metrics.total("resilience.failures") == 5
        assert metrics.total("resilience.rejections") == 1
        assert metrics.total("resilience.requests") == 6

    def test_duration_measured_with_injected_clock(self) -> None:
        metrics = FakeMetricsRegistry()
        executor, _, _ = make_executor(metrics=metrics, defaults=RetryConfig(jitter=False))
        op = Operation(dep(FailureKind.NETWORK_FAILURE), dep(FailureKind.NETWORK_FAILURE))
        run(executor.execute_with_retry(op, "ctx"))
        # FakeSleep advanced the clock by 1s + 2s of backoff
        assert metrics.values("resilience.duration") == [pytest.approx(3_000.0)]

    def test_broken_observability_does_not_change_outcome(self) -> None:
        class ExplodingLogger:
            def __getattr__(self, name: str):  # noqa: ANN204
                def boom(*args: object, **kwargs: object) -> None:
                    raise RuntimeError("log backend down")
                return boom

        executor, _, _ = make_executor(logger=ExplodingLogger())
        op = Operation(dep(FailureKind.NETWORK_FAILURE))
        assert run(executor.execute_with_retry(op, "ctx")) == "ok"
