"""Resilience – RetryConfig value object."""
from __future__ import annotations

import dataclasses
import math
import random
from typing import Any

from doc_optimizer.kernel.errors import ValidationError
from doc_optimizer.resilience.retry.backoff import ExponentialBackoff
from doc_optimizer.resilience.retry.jitter import EqualJitter, JitterStrategy, NoJitter


@dataclasses.dataclass(frozen=True)
class RetryConfig:
    """Per-call retry configuration.

    Durations are in seconds. Instances are immutable; per-call overrides
    produce a new instance via :meth:`merged`.
    """

    max_attempts: int = 3
    base_delay: float = 1.0
    max_delay: float = 30.0
    exponential_base: float = 2.0
    jitter: bool = True

    def __post_init__(self) -> None:
        errors: list[dict[str, Any]] = []
        if not isinstance(self.max_attempts, int) or isinstance(self.max_attempts, bool):
            errors.append({"field": "max_attempts", "message": "must be an integer"})
        elif self.max_attempts < 1:
            errors.append({"field": "max_attempts", "message": "must be >= 1"})
        for name in ("base_delay", "max_delay"):
            value = getattr(self, name)
            if not math.isfinite(value):
                errors.append({"field": name, "message": "must be finite"})
            elif value < 0:
                errors.append({"field": name, "message": "must be >= 0"})
        if not math.isfinite(self.exponential_base):
            errors.append({"field": "exponential_base", "message": "must be finite"})
        elif self.exponential_base < 1:
            errors.append({"field": "exponential_base", "message": "must be >= 1"})
        if errors:
            raise ValidationError("Invalid retry configuration", errors=errors)

    def merged(self, **overrides: Any) -> "RetryConfig":
        """Return a copy with *overrides* applied; ``None`` values are ignored."""
        changes = {k: v for k, v in overrides.items() if v is not None}
        if not changes:
            return self
        known = {f.name for f in dataclasses.fields(self)}
        unknown = sorted(set(changes) - known)
        if unknown:
            raise ValidationError(
                f"Unknown retry option(s): {', '.join(unknown)}",
                errors=[{"field": name, "message": "unknown option"} for name in unknown],
            )
        return dataclasses.replace(self, **changes)

    def delay_for(self, attempt: int, rng: random.Random | None = None) -> float:
        """Seconds to wait after the *attempt*-th failure, floored to whole ms."""
        backoff = ExponentialBackoff(self.base_delay, self.max_delay, self.exponential_base)
        jitter: JitterStrategy = EqualJitter(rng) if self.jitter else NoJitter()
        delay = jitter.apply(backoff.compute(attempt))
        return math.floor(delay * 1000) / 1000


DEFAULT_RETRY_CONFIG = RetryConfig()

__all__ = ["DEFAULT_RETRY_CONFIG", "RetryConfig"]
