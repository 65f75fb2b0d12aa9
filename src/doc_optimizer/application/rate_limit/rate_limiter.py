"""Application rate limiting – RateLimiter, RateLimitDecision, RateLimitResult."""
from __future__ import annotations

import abc
import dataclasses
import math
from enum import Enum


class RateLimitDecision(str, Enum):
    ALLOWED = "ALLOWED"
    DENIED = "DENIED"


@dataclasses.dataclass(frozen=True)
class RateLimitResult:
    """Result of a rate limit check.

    ``reset_at`` and ``checked_at`` are POSIX timestamps from the limiter's
    clock; ``reset_at`` is ``0.0`` when nothing is tracked for the identifier.
    """
    decision: RateLimitDecision
    remaining: int
    reset_at: float
    limit: int
    checked_at: float

    @property
    def allowed(self) -> bool:
        return self.decision == RateLimitDecision.ALLOWED

    @property
    def retry_after_seconds(self) -> float:
        if self.reset_at <= 0:
            return 0.0
        return max(0.0, self.reset_at - self.checked_at)

    def headers(self) -> dict[str, str]:
        """``X-RateLimit-*`` response headers (reset as whole epoch seconds)."""
        return {
            "X-RateLimit-Limit": str(self.limit),
            "X-RateLimit-Remaining": str(self.remaining),
            "X-RateLimit-Reset": str(math.ceil(self.reset_at)),
        }


@dataclasses.dataclass(frozen=True)
class RateLimiterStats:
    request_count: int
    identifier_count: int


class RateLimiter(abc.ABC):
    """Port: admit or reject requests per identifier.

    Implementations never suspend and never raise on a rejection.
    """

    @abc.abstractmethod
    def check(self, identifier: str) -> RateLimitResult: ...

    def check_limit(self, identifier: str) -> bool:
        return self.check(identifier).allowed

    @abc.abstractmethod
    def remaining(self, identifier: str) -> int: ...

    @abc.abstractmethod
    def reset_time(self, identifier: str) -> float: ...

    @abc.abstractmethod
    def reset(self, identifier: str) -> None: ...


__all__ = ["RateLimitDecision", "RateLimitResult", "RateLimiter", "RateLimiterStats"]
