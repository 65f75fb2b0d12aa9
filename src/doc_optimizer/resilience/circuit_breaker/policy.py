"""Resilience – CircuitBreakerPolicy."""
from __future__ import annotations

import dataclasses

from doc_optimizer.kernel.errors import ValidationError


@dataclasses.dataclass(frozen=True)
class CircuitBreakerPolicy:
    """Configuration for a circuit breaker."""
    failure_threshold: int = 5
    recovery_timeout_seconds: float = 60.0

    def __post_init__(self) -> None:
        if self.failure_threshold < 1:
            raise ValidationError(
                "Invalid circuit breaker policy",
                errors=[{"field": "failure_threshold", "message": "must be >= 1"}],
            )
        if self.recovery_timeout_seconds < 0:
            raise ValidationError(
                "Invalid circuit breaker policy",
                errors=[{"field": "recovery_timeout_seconds", "message": "must be >= 0"}],
            )


__all__ = ["CircuitBreakerPolicy"]
