"""Application rate limiting – in-memory sliding-window request limiter."""
from __future__ import annotations

from doc_optimizer.application.rate_limit.rate_limiter import (
    RateLimitDecision,
    RateLimiter,
    RateLimiterStats,
    RateLimitResult,
)
from doc_optimizer.application.rate_limit.window import RollingWindowStore
from doc_optimizer.kernel.errors import ValidationError
from doc_optimizer.kernel.time import Clock


class SlidingWindowRateLimiter(RateLimiter):
    """Single-process limiter admitting ``max_requests`` per rolling window.

    Tracks one timestamp per admitted request for each identifier. A rejected
    request leaves the identifier's window untouched. ``max_requests == 0``
    rejects everything.
    """

    def __init__(
        self,
        max_requests: int = 100,
        window_seconds: float = 900.0,
        clock: Clock | None = None,
    ) -> None:
        if max_requests < 0:
            raise ValidationError(
                "Invalid rate limit quota",
                errors=[{"field": "max_requests", "message": "must be >= 0"}],
            )
        self.max_requests = max_requests
        self._store = RollingWindowStore(window_seconds, clock)

    @property
    def window_seconds(self) -> float:
        return self._store.window_seconds

    def check(self, identifier: str) -> RateLimitResult:
        store = self._store
        with store.lock:
            now = store.now()
            window = store.purge(identifier, now)
            count = len(window) if window else 0
            allowed = count < self.max_requests
            if allowed:
                store.append(identifier, now)
                count += 1
            store.sweep(now)
            reset_at = store.reset_at(identifier, now)

        return RateLimitResult(
            decision=RateLimitDecision.ALLOWED if allowed else RateLimitDecision.DENIED,
            remaining=max(0, self.max_requests - count),
            reset_at=reset_at,
            limit=self.max_requests,
            checked_at=now,
        )

    def remaining(self, identifier: str) -> int:
        store = self._store
        with store.lock:
            return max(0, self.max_requests - store.used(identifier, store.now()))

    def reset_time(self, identifier: str) -> float:
        store = self._store
        with store.lock:
            return store.reset_at(identifier, store.now())

    def reset(self, identifier: str) -> None:
        with self._store.lock:
            self._store.discard(identifier)

    def stats(self) -> RateLimiterStats:
        store = self._store
        with store.lock:
            return RateLimiterStats(request_count=store.total(store.now()), identifier_count=len(store))

    def tracks(self, identifier: str) -> bool:
        """Whether *identifier* currently holds a window (for memory checks)."""
        with self._store.lock:
            return identifier in self._store


__all__ = ["SlidingWindowRateLimiter"]
