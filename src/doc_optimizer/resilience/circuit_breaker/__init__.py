"""Resilience – Circuit Breaker pattern."""
from doc_optimizer.resilience.circuit_breaker.errors import CircuitOpenError
from doc_optimizer.resilience.circuit_breaker.state import CircuitBreakerState, CircuitBreakerStatus
from doc_optimizer.resilience.circuit_breaker.policy import CircuitBreakerPolicy
from doc_optimizer.resilience.circuit_breaker.breaker import CircuitBreaker

__all__ = [
    "CircuitBreaker",
    "CircuitBreakerPolicy",
    "CircuitBreakerState",
    "CircuitBreakerStatus",
    "CircuitOpenError",
]
