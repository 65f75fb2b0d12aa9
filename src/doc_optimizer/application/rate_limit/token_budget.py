"""Application rate limiting – rolling token budget per identifier."""
from __future__ import annotations

from doc_optimizer.application.rate_limit.rate_limiter import (
    RateLimitDecision,
    RateLimiterStats,
    RateLimitResult,
)
from doc_optimizer.application.rate_limit.window import RollingWindowStore
from doc_optimizer.kernel.errors import ValidationError
from doc_optimizer.kernel.time import Clock


class TokenWindowLimiter:
    """Admit model calls while an identifier's token spend stays within budget.

    Each admitted call records its token count; spend older than the window
    no longer counts. A call whose estimate alone exceeds ``max_tokens`` is
    always rejected.
    """

    def __init__(
        self,
        max_tokens: int = 50_000,
        window_seconds: float = 900.0,
        clock: Clock | None = None,
    ) -> None:
        if max_tokens < 0:
            raise ValidationError(
                "Invalid token budget",
                errors=[{"field": "max_tokens", "message": "must be >= 0"}],
            )
        self.max_tokens = max_tokens
        self._store = RollingWindowStore(window_seconds, clock)

    def check_tokens(self, identifier: str, tokens: int) -> RateLimitResult:
        if tokens < 0:
            raise ValidationError(
                "Token estimate must be non-negative",
                errors=[{"field": "tokens", "message": "must be >= 0"}],
            )
        store = self._store
        with store.lock:
            now = store.now()
            store.purge(identifier, now)
            used = store.used(identifier, now)
            allowed = used + tokens <= self.max_tokens
            if allowed and tokens > 0:
                store.append(identifier, now, tokens)
                used += tokens
            store.sweep(now)
            reset_at = store.reset_at(identifier, now)

        return RateLimitResult(
            decision=RateLimitDecision.ALLOWED if allowed else RateLimitDecision.DENIED,
            remaining=max(0, self.max_tokens - used),
            reset_at=reset_at,
            limit=self.max_tokens,
            checked_at=now,
        )

    def remaining_tokens(self, identifier: str) -> int:
        store = self._store
        with store.lock:
            return max(0, self.max_tokens - store.used(identifier, store.now()))

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


__all__ = ["TokenWindowLimiter"]
