"""Config – ResilienceSettings and component factories.

Environment variables (no prefix)::

    RATE_LIMIT_MAX=100                 requests per window
    RATE_LIMIT_WINDOW_MS=900000        rolling window length
    RATE_LIMIT_TOKENS=50000            token budget per window
    RETRY_MAX_ATTEMPTS=3
    RETRY_BASE_DELAY_MS=1000
    RETRY_MAX_DELAY_MS=30000
    RETRY_EXPONENTIAL_BASE=2
    RETRY_JITTER=true
    CIRCUIT_FAILURE_THRESHOLD=5
    CIRCUIT_RECOVERY_TIMEOUT_MS=60000
    LOG_LEVEL=info
"""
from __future__ import annotations

import dataclasses
from typing import Any, Mapping

from doc_optimizer.application.rate_limit import SlidingWindowRateLimiter, TokenWindowLimiter
from doc_optimizer.config.settings import EnvSettingsLoader, Settings
from doc_optimizer.config.validation import InvalidSettingValueError
from doc_optimizer.kernel.time import Clock
from doc_optimizer.observability.logging import JsonLoggerFactory
from doc_optimizer.observability.metrics import Metrics
from doc_optimizer.resilience import CircuitBreakerPolicy, ResilientExecutor, RetryConfig

_LOG_LEVELS = ("fatal", "error", "warn", "warning", "info", "debug", "trace")


@dataclasses.dataclass
class ResilienceSettings(Settings):
    rate_limit_max: int = 100
    rate_limit_window_ms: int = 900_000
    rate_limit_tokens: int = 50_000
    retry_max_attempts: int = 3
    retry_base_delay_ms: int = 1_000
    retry_max_delay_ms: int = 30_000
    retry_exponential_base: float = 2.0
    retry_jitter: bool = True
    circuit_failure_threshold: int = 5
    circuit_recovery_timeout_ms: int = 60_000
    log_level: str = "info"

    def _validate(self) -> None:
        non_negative = ("rate_limit_max", "rate_limit_tokens", "retry_base_delay_ms", "retry_max_delay_ms",
                        "circuit_recovery_timeout_ms")
        for name in non_negative:
            value = getattr(self, name)
            if value < 0:
                raise InvalidSettingValueError(name, value, "must be >= 0")
        positive = ("rate_limit_window_ms", "retry_max_attempts", "circuit_failure_threshold")
        for name in positive:
            value = getattr(self, name)
            if value <= 0:
                raise InvalidSettingValueError(name, value, "must be > 0")
        if self.retry_exponential_base < 1:
            raise InvalidSettingValueError("retry_exponential_base", self.retry_exponential_base, "must be >= 1")
        if self.log_level.lower() not in _LOG_LEVELS:
            raise InvalidSettingValueError("log_level", self.log_level, f"expected one of {_LOG_LEVELS}")

    @classmethod
    def from_env(cls, environ: Mapping[str, str] | None = None) -> "ResilienceSettings":
        return EnvSettingsLoader(environ).load(cls)

    @property
    def rate_limit_window_seconds(self) -> float:
        return self.rate_limit_window_ms / 1000

    def retry_config(self) -> RetryConfig:
        return RetryConfig(
            max_attempts=self.retry_max_attempts,
            base_delay=self.retry_base_delay_ms / 1000,
            max_delay=self.retry_max_delay_ms / 1000,
            exponential_base=self.retry_exponential_base,
            jitter=self.retry_jitter,
        )

    def circuit_policy(self) -> CircuitBreakerPolicy:
        return CircuitBreakerPolicy(
            failure_threshold=self.circuit_failure_threshold,
            recovery_timeout_seconds=self.circuit_recovery_timeout_ms / 1000,
        )

    def build_executor(
        self,
        name: str,
        *,
        metrics: Metrics | None = None,
        **kwargs: Any,
    ) -> ResilientExecutor:
        """Executor guarding the dependency *name*; *kwargs* go to the constructor."""
        return ResilientExecutor(
            name,
            defaults=self.retry_config(),
            policy=self.circuit_policy(),
            metrics=metrics,
            **kwargs,
        )

    def build_rate_limiter(self, clock: Clock | None = None) -> SlidingWindowRateLimiter:
        return SlidingWindowRateLimiter(self.rate_limit_max, self.rate_limit_window_seconds, clock)

    def build_token_limiter(self, clock: Clock | None = None) -> TokenWindowLimiter:
        return TokenWindowLimiter(self.rate_limit_tokens, self.rate_limit_window_seconds, clock)

    def configure_logging(self, sensitive_fields: frozenset[str] | None = None) -> None:
        JsonLoggerFactory.configure(self.log_level, sensitive_fields)


__all__ = ["ResilienceSettings"]
