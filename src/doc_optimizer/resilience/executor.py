"""Resilience – ResilientExecutor: retry with backoff behind a circuit breaker."""
from __future__ import annotations

import asyncio
import random
from typing import Any, Awaitable, Callable, TypeVar

from doc_optimizer.kernel.time import Clock, SystemClock
from doc_optimizer.observability.logging import Logger, get_logger, log_safely
from doc_optimizer.observability.metrics import Counter, Histogram, Metrics, NoopMetrics
from doc_optimizer.resilience.circuit_breaker import (
    CircuitBreaker,
    CircuitBreakerPolicy,
    CircuitBreakerStatus,
    CircuitOpenError,
)
from doc_optimizer.resilience.classification import classify_failure, failure_kind
from doc_optimizer.resilience.retry import DEFAULT_RETRY_CONFIG, RetryConfig

T = TypeVar("T")
Sleep = Callable[[float], Awaitable[None]]


class ResilientExecutor:
    """Run an async operation with bounded retries and circuit-breaker protection.

    One executor guards one dependency: its :class:`CircuitBreaker` is not
    keyed by caller or context. Share an instance explicitly when several
    call sites talk to the same dependency.

    Parameters
    ----------
    name:
        Dependency name, used for the breaker and in logs.
    defaults:
        Process-wide retry defaults; per-call overrides are merged over them.
    policy:
        Breaker thresholds. Ignored when *breaker* is given.
    breaker:
        Pre-built breaker, e.g. to share one between executors.
    clock:
        Time source for the breaker's failure timestamps and call durations.
    sleep:
        Awaitable delay primitive (``asyncio.sleep`` by default).
    rng:
        Random source for jitter.
    logger, metrics:
        Observability sinks. Reporting never alters control flow.

    Example
    -------
    ::

        executor = ResilientExecutor("openai")
        completion = await executor.execute_with_retry(
            lambda: client.post("/chat/completions", json=payload),
            "OpenAI gpt-4o completion",
            base_delay=2.0,
        )
    """

    def __init__(
        self,
        name: str = "default",
        *,
        defaults: RetryConfig | None = None,
        policy: CircuitBreakerPolicy | None = None,
        breaker: CircuitBreaker | None = None,
        clock: Clock | None = None,
        sleep: Sleep | None = None,
        rng: random.Random | None = None,
        logger: Logger | None = None,
        metrics: Metrics | None = None,
    ) -> None:
        self.name = name
        self._defaults = defaults or DEFAULT_RETRY_CONFIG
        self._log = logger or get_logger(__name__, dependency=name)
        self._clock = clock or SystemClock()
        self._breaker = breaker or CircuitBreaker(name, policy, clock=self._clock, logger=self._log)
        self._sleep: Sleep = sleep or asyncio.sleep
        self._rng = rng or random.Random()

        metrics = metrics or NoopMetrics()
        self._requests = metrics.counter("resilience.requests", "Calls submitted to the executor")
        self._successes = metrics.counter("resilience.successes", "Calls that returned a result")
        self._failures = metrics.counter("resilience.failures", "Calls that raised a terminal failure")
        self._retries = metrics.counter("resilience.retries", "Backoff delays scheduled")
        self._trips = metrics.counter("resilience.circuit_trips", "Transitions to OPEN")
        self._rejections = metrics.counter("resilience.rejections", "Calls rejected by an OPEN breaker")
        self._duration = metrics.histogram("resilience.duration", "Wall time per call", unit="ms")

    @property
    def breaker(self) -> CircuitBreaker:
        return self._breaker

    @property
    def defaults(self) -> RetryConfig:
        return self._defaults

    async def execute_with_retry(
        self,
        operation: Callable[[], Awaitable[T]],
        context: str,
        **overrides: Any,
    ) -> T:
        """Run *operation* until it succeeds, fails terminally, or attempts run out.

        Raises
        ------
        CircuitOpenError
            The breaker is OPEN and the recovery timeout has not elapsed.
            *operation* is not invoked.
        Exception
            The last failure raised by *operation*, re-raised unchanged.
        asyncio.CancelledError
            The calling task was cancelled, including during a backoff delay.
        """
        config = self._defaults.merged(**overrides)
        labels = {"dependency": self.name}
        self._count(self._requests, labels)

        try:
            self._breaker.before_call(context)
        except CircuitOpenError:
            self._count(self._rejections, labels)
            raise

        started = self._clock.timestamp()
        try:
            return await self._attempt_loop(operation, context, config, labels)
        finally:
            self._observe((self._clock.timestamp() - started) * 1000, labels)

    async def _attempt_loop(
        self,
        operation: Callable[[], Awaitable[T]],
        context: str,
        config: RetryConfig,
        labels: dict[str, str],
    ) -> T:
        for attempt in range(1, config.max_attempts + 1):
            log_safely(
                self._log, "debug", "retry.attempt",
                context=context, attempt=attempt, max_attempts=config.max_attempts,
            )
            try:
                result = await operation()
            except Exception as exc:
                kind = failure_kind(exc)
                classification = classify_failure(exc)
                tripped = self._breaker.record_failure(
                    context, circuit_breaking=classification.circuit_breaking
                )
                if tripped:
                    self._count(self._trips, labels)
                log_safely(
                    self._log, "warning", "retry.attempt_failed",
                    context=context,
                    attempt=attempt,
                    max_attempts=config.max_attempts,
                    error=repr(exc),
                    kind=kind.value,
                    retryable=classification.retryable,
                    circuit_breaking=classification.circuit_breaking,
                )

                if not classification.retryable or attempt == config.max_attempts:
                    self._count(self._failures, labels)
                    log_safely(
                        self._log, "error", "retry.gave_up",
                        context=context, attempts=attempt, kind=kind.value,
                    )
                    raise

                delay = config.delay_for(attempt, self._rng)
                self._count(self._retries, labels)
                log_safely(
                    self._log, "info", "retry.scheduled",
                    context=context, attempt=attempt, delay_seconds=delay,
                )
                try:
                    await self._sleep(delay)
                except asyncio.CancelledError:
                    log_safely(self._log, "warning", "retry.cancelled", context=context, attempt=attempt)
                    raise
                continue

            self._breaker.record_success(context)
            self._count(self._successes, labels)
            return result

        # range(1, max_attempts + 1) is never empty and every iteration returns or raises
        raise AssertionError("unreachable")

    def status(self) -> CircuitBreakerStatus:
        return self._breaker.status()

    def reset(self) -> None:
        self._breaker.reset()

    @staticmethod
    def _count(counter: Counter, labels: dict[str, str]) -> None:
        try:
            counter.add(1, labels)
        except Exception:  # noqa: BLE001
            pass

    def _observe(self, value: float, labels: dict[str, str]) -> None:
        try:
            self._duration.record(value, labels)
        except Exception:  # noqa: BLE001
            pass


__all__ = ["ResilientExecutor", "Sleep"]
