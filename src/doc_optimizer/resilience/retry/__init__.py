"""Resilience – retry configuration with exponential backoff and jitter."""
from doc_optimizer.resilience.retry.backoff import ExponentialBackoff
from doc_optimizer.resilience.retry.config import DEFAULT_RETRY_CONFIG, RetryConfig
from doc_optimizer.resilience.retry.jitter import EqualJitter, JitterStrategy, NoJitter

__all__ = [
    "DEFAULT_RETRY_CONFIG",
    "EqualJitter",
    "ExponentialBackoff",
    "JitterStrategy",
    "NoJitter",
    "RetryConfig",
]
