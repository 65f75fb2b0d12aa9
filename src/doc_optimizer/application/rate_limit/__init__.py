"""Application rate limiting – sliding-window request limiter and token budget."""
from doc_optimizer.application.rate_limit.rate_limiter import (
    RateLimitDecision,
    RateLimiter,
    RateLimiterStats,
    RateLimitResult,
)
from doc_optimizer.application.rate_limit.sliding_window import SlidingWindowRateLimiter
from doc_optimizer.application.rate_limit.token_budget import TokenWindowLimiter
from doc_optimizer.application.rate_limit.guard import enforce_rate_limit

__all__ = [
    "RateLimitDecision",
    "RateLimitResult",
    "RateLimiter",
    "RateLimiterStats",
    "SlidingWindowRateLimiter",
    "TokenWindowLimiter",
    "enforce_rate_limit",
]
