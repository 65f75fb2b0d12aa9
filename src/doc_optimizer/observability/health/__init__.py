"""Observability – health checks."""
from doc_optimizer.observability.health.check import HealthCheck, HealthStatus
from doc_optimizer.observability.health.builtin import CircuitBreakerHealthCheck

__all__ = ["CircuitBreakerHealthCheck", "HealthCheck", "HealthStatus"]
