"""FastAPI adapter – FastAPIExceptionMapper."""
from __future__ import annotations

import math
from typing import Any, Callable

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from doc_optimizer.kernel.errors import (
    BaseError,
    DependencyError,
    DomainError,
    InfrastructureError,
    NotFoundError,
    RateLimitError,
    UnauthorizedError,
    ValidationError,
)
from doc_optimizer.resilience import CircuitOpenError


class FastAPIExceptionMapper:
    """Register doc_optimizer error → HTTP status-code mappings on a FastAPI app.

    Error body schema::

        {"code": "circuit_open", "message": "...", "detail": {...}}

    Mappings
    --------
    ``ValidationError``     → 400
    ``UnauthorizedError``   → 401
    ``NotFoundError``       → 404
    ``RateLimitError``      → 429 (``Retry-After``)
    ``CircuitOpenError``    → 503 (``Retry-After``)
    ``DependencyError``     → 503
    ``InfrastructureError`` → 503
    ``DomainError``         → 422
    """

    def __init__(self) -> None:
        # ORDER MATTERS: more-specific subtypes first
        self._map: list[tuple[type[Exception], int]] = [
            (ValidationError, 400),
            (UnauthorizedError, 401),
            (NotFoundError, 404),
            (RateLimitError, 429),
            (CircuitOpenError, 503),
            (DependencyError, 503),
            (InfrastructureError, 503),
            (DomainError, 422),
        ]

    def status_for(self, exc: BaseException) -> int:
        for exc_type, status in self._map:
            if isinstance(exc, exc_type):
                return status
        return 500

    def to_response(self, exc: BaseException, status: int | None = None) -> JSONResponse:
        code = status or self.status_for(exc)
        if isinstance(exc, BaseError):
            body: dict[str, Any] = exc.to_dict()
        else:
            body = {"code": "error", "message": str(exc)}

        headers: dict[str, str] = {}
        retry_after = getattr(exc, "retry_after_seconds", None)
        if code in (429, 503) and retry_after is not None:
            headers["Retry-After"] = str(max(1, math.ceil(retry_after)))
        return JSONResponse(status_code=code, content=body, headers=headers)

    def register(self, app: FastAPI) -> None:
        """Register all error handlers on a ``FastAPI`` app."""
        for exc_type, status in self._map:

            def make_handler(code: int) -> Callable[[Request, Exception], JSONResponse]:
                def handler(request: Request, exc: Exception) -> JSONResponse:  # noqa: ARG001
                    return self.to_response(exc, code)

                return handler

            app.add_exception_handler(exc_type, make_handler(status))


__all__ = ["FastAPIExceptionMapper"]
