"""Resilience – failure classification.

:func:`classify_failure` maps any exception onto a :class:`FailureKind` and
the kind onto an :class:`ErrorClassification`. It is a pure function: no
state is read or written.

Resolution order:

1. :class:`DependencyError` carries its kind explicitly.
2. :class:`CircuitOpenError` is never retried.
3. Timeouts, connection errors and DNS failures are network failures.
4. Any exception with an integer ``status_code`` or ``status`` attribute
   (SDK and HTTP client errors) is mapped by HTTP status.
5. Everything else is ``UNKNOWN``: fail fast and leave the breaker alone.
"""
from __future__ import annotations

import asyncio
import dataclasses
import socket

from doc_optimizer.kernel.errors import DependencyError, FailureKind
from doc_optimizer.resilience.circuit_breaker.errors import CircuitOpenError


@dataclasses.dataclass(frozen=True)
class ErrorClassification:
    retryable: bool
    circuit_breaking: bool


_POLICY: dict[FailureKind, ErrorClassification] = {
    FailureKind.RATE_LIMITED: ErrorClassification(retryable=True, circuit_breaking=False),
    FailureKind.SERVER_UNAVAILABLE: ErrorClassification(retryable=True, circuit_breaking=True),
    FailureKind.NETWORK_FAILURE: ErrorClassification(retryable=True, circuit_breaking=True),
    # not retried, but counted toward opening the breaker
    FailureKind.UNAUTHORIZED: ErrorClassification(retryable=False, circuit_breaking=True),
    FailureKind.CLIENT_FAULT: ErrorClassification(retryable=False, circuit_breaking=False),
    FailureKind.UNKNOWN: ErrorClassification(retryable=False, circuit_breaking=False),
}

_NETWORK_ERRORS: tuple[type[BaseException], ...] = (
    asyncio.TimeoutError,
    TimeoutError,
    ConnectionError,
    socket.gaierror,
)


def classify_kind(kind: FailureKind) -> ErrorClassification:
    return _POLICY[kind]


def failure_kind(exc: BaseException) -> FailureKind:
    """Return the :class:`FailureKind` describing *exc*."""
    if isinstance(exc, DependencyError):
        return exc.kind
    if isinstance(exc, CircuitOpenError):
        return FailureKind.UNKNOWN
    if isinstance(exc, _NETWORK_ERRORS):
        return FailureKind.NETWORK_FAILURE
    for attr in ("status_code", "status"):
        status = getattr(exc, attr, None)
        if isinstance(status, int) and not isinstance(status, bool):
            return FailureKind.from_status(status)
    return FailureKind.UNKNOWN


def classify_failure(exc: BaseException) -> ErrorClassification:
    return _POLICY[failure_kind(exc)]


__all__ = ["ErrorClassification", "classify_failure", "classify_kind", "failure_kind"]
