"""
doc_optimizer – resilient-call core for the document optimizer service.

Import path convention::

    from doc_optimizer.resilience import ResilientExecutor
    from doc_optimizer.application.rate_limit import SlidingWindowRateLimiter
    from doc_optimizer.kernel.errors import DependencyError, FailureKind
"""

__version__ = "0.1.0"
__all__ = ["__version__"]
