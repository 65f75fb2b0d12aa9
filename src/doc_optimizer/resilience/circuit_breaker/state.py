"""Resilience – CircuitBreakerState enum and status snapshot."""
from __future__ import annotations

import dataclasses
from enum import Enum


class CircuitBreakerState(str, Enum):
    CLOSED = "CLOSED"
    OPEN = "OPEN"
    HALF_OPEN = "HALF_OPEN"


@dataclasses.dataclass(frozen=True)
class CircuitBreakerStatus:
    """Point-in-time view of a breaker for health checks."""

    state: CircuitBreakerState
    failure_count: int
    last_failure_time: float

    @property
    def is_healthy(self) -> bool:
        return self.state != CircuitBreakerState.OPEN

    def to_dict(self) -> dict[str, object]:
        return {
            "state": self.state.value,
            "failure_count": self.failure_count,
            "last_failure_time": self.last_failure_time,
            "is_healthy": self.is_healthy,
        }


__all__ = ["CircuitBreakerState", "CircuitBreakerStatus"]
