"""Kernel error hierarchy — public re-export surface.

Hierarchy::

    BaseError
    ├── DomainError          (domain.py)
    │   ├── ValidationError
    │   └── NotFoundError
    ├── ApplicationError     (application.py)
    │   ├── UnauthorizedError
    │   └── RateLimitError
    └── InfrastructureError  (infrastructure.py)
        └── DependencyError  (tagged with FailureKind)
"""

from doc_optimizer.kernel.errors.application import (
    ApplicationError,
    RateLimitError,
    UnauthorizedError,
)
from doc_optimizer.kernel.errors.base import BaseError
from doc_optimizer.kernel.errors.domain import DomainError, NotFoundError, ValidationError
from doc_optimizer.kernel.errors.infrastructure import (
    DependencyError,
    FailureKind,
    InfrastructureError,
)

__all__ = [
    "ApplicationError",
    "BaseError",
    "DependencyError",
    "DomainError",
    "FailureKind",
    "InfrastructureError",
    "NotFoundError",
    "RateLimitError",
    "UnauthorizedError",
    "ValidationError",
]
