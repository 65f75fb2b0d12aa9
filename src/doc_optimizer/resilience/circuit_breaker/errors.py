"""Resilience – circuit-breaker specific errors."""
from __future__ import annotations

from typing import Any

from doc_optimizer.kernel.errors import InfrastructureError


class CircuitOpenError(InfrastructureError):
    """Raised when a :class:`CircuitBreaker` rejects a call while OPEN.

    Attributes
    ----------
    circuit_name:
        Name of the circuit breaker that rejected the call.
    context:
        Label of the rejected call.
    retry_after_seconds:
        Seconds left until the breaker admits a trial call.
    """

    default_code = "circuit_open"

    def __init__(
        self,
        circuit_name: str,
        context: str = "",
        *,
        retry_after_seconds: float = 0.0,
        message: str | None = None,
    ) -> None:
        self.circuit_name = circuit_name
        self.context = context
        self.retry_after_seconds = retry_after_seconds
        super().__init__(message or f"Circuit breaker '{circuit_name}' is OPEN for {context or 'call'}")

    def to_dict(self) -> dict[str, Any]:
        base = super().to_dict()
        base["circuit_name"] = self.circuit_name
        base["retry_after_seconds"] = self.retry_after_seconds
        return base


__all__ = ["CircuitOpenError"]
