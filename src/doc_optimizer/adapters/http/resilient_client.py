"""HTTP adapter – ResilientHttpClient."""
from __future__ import annotations

from typing import Any

import httpx

from doc_optimizer.adapters.http.client import HttpxHttpClient
from doc_optimizer.resilience import ResilientExecutor


class ResilientHttpClient(HttpxHttpClient):
    """HTTP client whose every request runs through a :class:`ResilientExecutor`.

    Pass an existing *executor* to share one circuit breaker with other
    callers of the same dependency. ``retry`` keyword arguments on a request
    are forwarded as per-call overrides, e.g.
    ``await client.post(url, json=body, retry={"max_attempts": 2})``.
    """

    def __init__(
        self,
        base_url: str = "",
        timeout: float = 30.0,
        service: str | None = None,
        executor: ResilientExecutor | None = None,
        **kwargs: Any,
    ) -> None:
        super().__init__(base_url, timeout, service, **kwargs)
        self.executor = executor or ResilientExecutor(self.service)

    async def _request(self, method: str, url: str, **kwargs: Any) -> httpx.Response:
        overrides = kwargs.pop("retry", None) or {}
        return await self.executor.execute_with_retry(
            lambda: super(ResilientHttpClient, self)._request(method, url, **kwargs),
            f"{self.service} {method} {url}",
            **overrides,
        )


__all__ = ["ResilientHttpClient"]
