"""Resilience – jitter strategies."""
from __future__ import annotations

import abc
import random


class JitterStrategy(abc.ABC):
    """Apply randomness to a backoff delay to spread a thundering herd."""

    @abc.abstractmethod
    def apply(self, delay: float) -> float: ...


class NoJitter(JitterStrategy):
    def apply(self, delay: float) -> float:
        return delay


class EqualJitter(JitterStrategy):
    """Scale by a uniform factor in ``[0.5, 1.0)``.

    The random source is injectable so tests can pass a seeded
    :class:`random.Random`.
    """

    def __init__(self, rng: random.Random | None = None) -> None:
        self._rng = rng or random.Random()

    def apply(self, delay: float) -> float:
        return delay * (0.5 + self._rng.random() * 0.5)


__all__ = ["EqualJitter", "JitterStrategy", "NoJitter"]
