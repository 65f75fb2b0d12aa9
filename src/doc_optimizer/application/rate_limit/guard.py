"""Application rate limiting – exception-raising admission helper."""
from __future__ import annotations

from doc_optimizer.application.rate_limit.rate_limiter import RateLimiter, RateLimitResult
from doc_optimizer.kernel.errors import RateLimitError


def enforce_rate_limit(limiter: RateLimiter, identifier: str) -> RateLimitResult:
    """Return the admitted result or raise :class:`RateLimitError`.

    The error carries ``retry_after_seconds`` derived from the limiter's
    reset time, ready for a ``Retry-After`` header.
    """
    result = limiter.check(identifier)
    if not result.allowed:
        raise RateLimitError(
            f"Rate limit of {result.limit} requests exceeded",
            retry_after_seconds=result.retry_after_seconds,
            detail={"limit": result.limit, "reset_at": result.reset_at},
        )
    return result


__all__ = ["enforce_rate_limit"]
