"""Resilience – CircuitBreaker state record and transitions."""
from __future__ import annotations

import threading

from doc_optimizer.kernel.time import Clock, SystemClock
from doc_optimizer.observability.logging import Logger, get_logger, log_safely
from doc_optimizer.resilience.circuit_breaker.errors import CircuitOpenError
from doc_optimizer.resilience.circuit_breaker.policy import CircuitBreakerPolicy
from doc_optimizer.resilience.circuit_breaker.state import CircuitBreakerState, CircuitBreakerStatus


class CircuitBreaker:
    """Single breaker record owned by one executor.

    Every method runs synchronously and never awaits, so each transition is
    atomic under asyncio. The lock keeps them atomic under threads too.

    The failure counter is reset only by a successful HALF_OPEN trial or by
    :meth:`reset`; successes while CLOSED leave it untouched.
    """

    def __init__(
        self,
        name: str,
        policy: CircuitBreakerPolicy | None = None,
        clock: Clock | None = None,
        logger: Logger | None = None,
    ) -> None:
        self.name = name
        self._policy = policy or CircuitBreakerPolicy()
        self._clock = clock or SystemClock()
        self._log = logger or get_logger(__name__, circuit=name)
        self._state = CircuitBreakerState.CLOSED
        self._failure_count = 0
        self._last_failure_time = 0.0
        self._lock = threading.Lock()

    @property
    def policy(self) -> CircuitBreakerPolicy:
        return self._policy

    @property
    def state(self) -> CircuitBreakerState:
        return self._state

    @property
    def failure_count(self) -> int:
        return self._failure_count

    def before_call(self, context: str) -> None:
        """Admit or reject a call; OPEN becomes HALF_OPEN once the timeout elapsed."""
        with self._lock:
            if self._state != CircuitBreakerState.OPEN:
                return
            elapsed = self._clock.timestamp() - self._last_failure_time
            half_open = elapsed > self._policy.recovery_timeout_seconds
            if half_open:
                self._state = CircuitBreakerState.HALF_OPEN
            retry_after = self._policy.recovery_timeout_seconds - elapsed
        if half_open:
            log_safely(self._log, "info", "circuit_breaker.half_open", context=context)
            return
        log_safely(self._log, "warning", "circuit_breaker.rejected", context=context)
        raise CircuitOpenError(self.name, context, retry_after_seconds=max(0.0, retry_after))

    def record_success(self, context: str) -> None:
        with self._lock:
            if self._state != CircuitBreakerState.HALF_OPEN:
                return
            self._state = CircuitBreakerState.CLOSED
            self._failure_count = 0
        log_safely(self._log, "info", "circuit_breaker.closed", context=context)

    def record_failure(self, context: str, *, circuit_breaking: bool) -> bool:
        """Count a failure; return ``True`` when this failure opened the breaker."""
        with self._lock:
            self._failure_count += 1
            self._last_failure_time = self._clock.timestamp()
            count = self._failure_count
            tripped = (
                circuit_breaking
                and count >= self._policy.failure_threshold
                and self._state != CircuitBreakerState.OPEN
            )
            if tripped:
                self._state = CircuitBreakerState.OPEN
        if tripped:
            log_safely(
                self._log, "error", "circuit_breaker.opened",
                context=context, failures=count, threshold=self._policy.failure_threshold,
            )
        return tripped

    def status(self) -> CircuitBreakerStatus:
        with self._lock:
            return CircuitBreakerStatus(
                state=self._state,
                failure_count=self._failure_count,
                last_failure_time=self._last_failure_time,
            )

    def reset(self) -> None:
        """Force CLOSED with a zero counter (administrative recovery)."""
        with self._lock:
            self._state = CircuitBreakerState.CLOSED
            self._failure_count = 0
            self._last_failure_time = 0.0
        log_safely(self._log, "info", "circuit_breaker.reset")


__all__ = ["CircuitBreaker"]
