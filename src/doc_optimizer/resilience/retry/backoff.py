"""Resilience – exponential backoff."""
from __future__ import annotations


class ExponentialBackoff:
    """Delay grows exponentially: ``base_delay * exponential_base^(attempt-1)``.

    *attempt* is 1-based: the delay after the first failed attempt equals
    ``base_delay``. The result never exceeds ``max_delay``.
    """

    def __init__(
        self,
        base_delay: float = 1.0,
        max_delay: float = 30.0,
        exponential_base: float = 2.0,
    ) -> None:
        self._base = base_delay
        self._max = max_delay
        self._exp = exponential_base

    def compute(self, attempt: int) -> float:
        try:
            raw = self._base * (self._exp ** (attempt - 1))
        except OverflowError:
            return self._max
        return min(raw, self._max)


__all__ = ["ExponentialBackoff"]
