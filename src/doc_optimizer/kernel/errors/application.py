"""Application-layer errors — raised at the request boundary."""

from __future__ import annotations

from typing import Any

from doc_optimizer.kernel.errors.base import BaseError


class ApplicationError(BaseError):
    """Cross-cutting application-layer concern."""

    default_code = "application_error"


class UnauthorizedError(ApplicationError):
    """Missing or invalid credentials."""

    default_code = "unauthorized"


class RateLimitError(ApplicationError):
    """A caller exceeded its request quota."""

    default_code = "rate_limit_exceeded"

    def __init__(
        self,
        message: str = "Rate limit exceeded",
        *,
        retry_after_seconds: float | None = None,
        **kwargs: Any,
    ) -> None:
        super().__init__(message, **kwargs)
        self.retry_after_seconds = retry_after_seconds

    def to_dict(self) -> dict[str, Any]:
        base = super().to_dict()
        if self.retry_after_seconds is not None:
            base["retry_after_seconds"] = self.retry_after_seconds
        return base


__all__ = ["ApplicationError", "RateLimitError", "UnauthorizedError"]
