"""Resilience – retry with backoff and jitter, circuit breaker, failure classification."""

from doc_optimizer.resilience.circuit_breaker import (
    CircuitBreaker,
    CircuitBreakerPolicy,
    CircuitBreakerState,
    CircuitBreakerStatus,
    CircuitOpenError,
)
from doc_optimizer.resilience.classification import (
    ErrorClassification,
    classify_failure,
    classify_kind,
    failure_kind,
)
from doc_optimizer.resilience.executor import ResilientExecutor
from doc_optimizer.resilience.retry import DEFAULT_RETRY_CONFIG, RetryConfig

__all__ = [
    "CircuitBreaker",
    "CircuitBreakerPolicy",
    "CircuitBreakerState",
    "CircuitBreakerStatus",
    "CircuitOpenError",
    "DEFAULT_RETRY_CONFIG",
    "ErrorClassification",
    "ResilientExecutor",
    "RetryConfig",
    "classify_failure",
    "classify_kind",
    "failure_kind",
]
