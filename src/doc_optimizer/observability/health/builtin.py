"""Observability – built-in health checks."""
from __future__ import annotations

from doc_optimizer.observability.health.check import HealthCheck, HealthStatus
from doc_optimizer.resilience import ResilientExecutor


class CircuitBreakerHealthCheck(HealthCheck):
    """Unhealthy while the executor's breaker is OPEN."""

    def __init__(self, executor: ResilientExecutor) -> None:
        self._executor = executor

    @property
    def name(self) -> str:
        return f"circuit_breaker:{self._executor.name}"

    async def check(self) -> HealthStatus:
        status = self._executor.status()
        return HealthStatus(
            healthy=status.is_healthy,
            detail=f"state={status.state.value} failures={status.failure_count}",
        )


__all__ = ["CircuitBreakerHealthCheck"]
