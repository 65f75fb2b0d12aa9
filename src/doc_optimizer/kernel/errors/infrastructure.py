"""Infrastructure errors — failures of remote dependencies.

Every remote-call layer wrapped by :class:`~doc_optimizer.resilience.ResilientExecutor`
reports failures as :class:`DependencyError` tagged with a :class:`FailureKind`.
The kind is the only input the retry and circuit-breaker policy looks at.
"""

from __future__ import annotations

from enum import Enum
from typing import Any

from doc_optimizer.kernel.errors.base import BaseError


class FailureKind(str, Enum):
    """Closed set of dependency failure categories."""

    RATE_LIMITED = "RATE_LIMITED"
    SERVER_UNAVAILABLE = "SERVER_UNAVAILABLE"
    NETWORK_FAILURE = "NETWORK_FAILURE"
    UNAUTHORIZED = "UNAUTHORIZED"
    CLIENT_FAULT = "CLIENT_FAULT"
    UNKNOWN = "UNKNOWN"

    @classmethod
    def from_status(cls, status_code: int | None) -> "FailureKind":
        """Map an HTTP status code onto a failure kind."""
        if status_code is None:
            return cls.UNKNOWN
        if status_code == 429:
            return cls.RATE_LIMITED
        if status_code in (500, 502, 503, 504):
            return cls.SERVER_UNAVAILABLE
        if status_code in (401, 403):
            return cls.UNAUTHORIZED
        if status_code in (400, 404):
            return cls.CLIENT_FAULT
        return cls.UNKNOWN


class InfrastructureError(BaseError):
    """Infrastructure / I/O failure that is not a business rule violation."""

    default_code = "infrastructure_error"


class DependencyError(InfrastructureError):
    """A remote dependency failed in a categorised way."""

    default_code = "dependency_error"

    def __init__(
        self,
        service: str,
        kind: FailureKind = FailureKind.UNKNOWN,
        message: str | None = None,
        *,
        status_code: int | None = None,
        **kwargs: Any,
    ) -> None:
        super().__init__(message or f"Dependency '{service}' failed ({kind.value})", **kwargs)
        self.service = service
        self.kind = kind
        self.status_code = status_code

    @classmethod
    def from_status(
        cls,
        service: str,
        status_code: int,
        message: str | None = None,
        **kwargs: Any,
    ) -> "DependencyError":
        return cls(
            service,
            FailureKind.from_status(status_code),
            message or f"HTTP {status_code} from '{service}'",
            status_code=status_code,
            **kwargs,
        )

    def to_dict(self) -> dict[str, Any]:
        base = super().to_dict()
        base["service"] = self.service
        base["kind"] = self.kind.value
        if self.status_code is not None:
            base["status_code"] = self.status_code
        return base


__all__ = ["DependencyError", "FailureKind", "InfrastructureError"]
