"""FastAPI adapter – FastAPIRateLimitMiddleware."""
from __future__ import annotations

import json
import math
from typing import TYPE_CHECKING, Any, Callable

from doc_optimizer.application.rate_limit import RateLimiter, RateLimitResult

if TYPE_CHECKING:
    from starlette.types import ASGIApp, Message, Receive, Scope, Send


class FastAPIRateLimitMiddleware:
    """Enforce a :class:`RateLimiter` per caller.

    Rejected requests get HTTP 429 with a ``Retry-After`` header derived from
    the limiter's reset time. Every response carries ``X-RateLimit-Limit``,
    ``X-RateLimit-Remaining`` and ``X-RateLimit-Reset``.
    """

    def __init__(
        self,
        app: "ASGIApp",
        limiter: RateLimiter,
        identifier_fn: Callable[["Scope"], str] | None = None,
        exempt_paths: frozenset[str] = frozenset({"/health"}),
    ) -> None:
        self.app = app
        self._limiter = limiter
        self._identifier_fn = identifier_fn or default_identifier
        self._exempt = exempt_paths

    async def __call__(self, scope: "Scope", receive: "Receive", send: "Send") -> None:
        if scope["type"] != "http" or scope.get("path") in self._exempt:
            await self.app(scope, receive, send)
            return

        result = self._limiter.check(self._identifier_fn(scope))
        limit_headers = _encode_headers(result)

        if not result.allowed:
            retry_after = str(max(1, math.ceil(result.retry_after_seconds)))
            body = json.dumps({
                "code": "rate_limit_exceeded",
                "message": f"Rate limit exceeded. Retry after {retry_after}s.",
            }).encode()
            headers = [
                (b"content-type", b"application/json"),
                (b"content-length", str(len(body)).encode()),
                (b"retry-after", retry_after.encode()),
                *limit_headers,
            ]
            await send({"type": "http.response.start", "status": 429, "headers": headers})
            await send({"type": "http.response.body", "body": body})
            return

        async def send_with_headers(message: "Message") -> None:
            if message["type"] == "http.response.start":
                message = dict(message)
                message["headers"] = list(message.get("headers", [])) + limit_headers
            await send(message)

        await self.app(scope, receive, send_with_headers)


def _encode_headers(result: RateLimitResult) -> list[tuple[bytes, bytes]]:
    return [(k.lower().encode(), v.encode()) for k, v in result.headers().items()]


def default_identifier(scope: Any) -> str:
    """Identify the caller by API key, then bearer token, then client IP."""
    headers = dict(scope.get("headers", []))
    api_key = headers.get(b"x-api-key")
    if api_key:
        return f"key:{api_key.decode('latin-1')}"
    authorization = headers.get(b"authorization", b"").decode("latin-1")
    if authorization.lower().startswith("bearer "):
        return f"token:{authorization[7:].strip()}"
    client = scope.get("client")
    if client and isinstance(client, (tuple, list)):
        return f"ip:{client[0]}"
    return "unknown"


__all__ = ["FastAPIRateLimitMiddleware", "default_identifier"]
