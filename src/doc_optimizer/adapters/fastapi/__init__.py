"""FastAPI adapter – exception mapper and rate-limit middleware."""
from doc_optimizer.adapters.fastapi.exception_mapper import FastAPIExceptionMapper
from doc_optimizer.adapters.fastapi.middleware import FastAPIRateLimitMiddleware, default_identifier

__all__ = ["FastAPIExceptionMapper", "FastAPIRateLimitMiddleware", "default_identifier"]
