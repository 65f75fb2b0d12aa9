"""HTTP adapter – HttpxHttpClient with FailureKind error mapping."""
from __future__ import annotations

from typing import Any

import httpx

from doc_optimizer.kernel.errors import DependencyError, FailureKind


class HttpxHttpClient:
    """Thin async httpx wrapper that reports failures as :class:`DependencyError`.

    Non-2xx responses are mapped by status code; timeouts and transport
    errors (connection refused or reset, DNS) become ``NETWORK_FAILURE``.
    """

    def __init__(
        self,
        base_url: str = "",
        timeout: float = 30.0,
        service: str | None = None,
        **kwargs: Any,
    ) -> None:
        self.service = service or base_url or "http"
        self._client = httpx.AsyncClient(base_url=base_url, timeout=timeout, **kwargs)

    async def __aenter__(self) -> "HttpxHttpClient":
        await self._client.__aenter__()
        return self

    async def __aexit__(self, *args: Any) -> None:
        await self._client.__aexit__(*args)

    async def aclose(self) -> None:
        await self._client.aclose()

    async def get(self, url: str, **kwargs: Any) -> httpx.Response:
        return await self._request("GET", url, **kwargs)

    async def post(self, url: str, **kwargs: Any) -> httpx.Response:
        return await self._request("POST", url, **kwargs)

    async def _request(self, method: str, url: str, **kwargs: Any) -> httpx.Response:
        try:
            response = await self._client.request(method, url, **kwargs)
            response.raise_for_status()
            return response
        except httpx.HTTPStatusError as exc:
            raise DependencyError.from_status(
                self.service,
                exc.response.status_code,
                f"HTTP {exc.response.status_code} from {method} {url}",
            ) from exc
        except httpx.TransportError as exc:
            # TimeoutException, ConnectError, ReadError, ... all derive from TransportError
            raise DependencyError(
                self.service,
                FailureKind.NETWORK_FAILURE,
                f"{type(exc).__name__} on {method} {url}",
            ) from exc


HttpClient = HttpxHttpClient

__all__ = ["HttpClient", "HttpxHttpClient"]
