from __future__ import annotations

import asyncio
from collections.abc import Mapping
from typing import Any

import httpx
from tenacity import retry, retry_if_exception_type, stop_after_attempt, wait_exponential


class RESTDataSource:
    """JSON REST client scoped to a single GraphQL request.

    GET responses are memoized for the lifetime of the instance, so a query
    that asks for the same resource from several resolvers hits the upstream
    once. Instances are created per request and must not be shared.
    """

    def __init__(
        self,
        base_url: str,
        transport: httpx.AsyncBaseTransport | None = None,
        timeout: float = 10.0,
    ) -> None:
        self.base_url = base_url.rstrip("/")
        self._transport = transport
        self._timeout = timeout
        self._client: httpx.AsyncClient | None = None
        self._memoized: dict[tuple[str, tuple[tuple[str, str], ...]], asyncio.Future[Any]] = {}

    @property
    def client(self) -> httpx.AsyncClient:
        if self._client is None:
            self._client = httpx.AsyncClient(
                base_url=self.base_url,
                timeout=self._timeout,
                transport=self._transport,
            )
        return self._client

    async def close(self) -> None:
        for pending in self._memoized.values():
            pending.cancel()
        self._memoized.clear()
        if self._client is not None:
            await self._client.aclose()

    async def get(self, path: str, params: Mapping[str, Any] | None = None) -> Any:
        clean_params = {key: value for key, value in (params or {}).items() if value is not None}
        key = (path, tuple(sorted((name, str(value)) for name, value in clean_params.items())))

        pending = self._memoized.get(key)
        if pending is None:
            pending = asyncio.ensure_future(self._fetch(path, clean_params))
            self._memoized[key] = pending

        try:
            return await pending
        except httpx.HTTPError:
            self._memoized.pop(key, None)
            raise

    async def post(self, path: str, payload: Mapping[str, Any]) -> Any:
        response = await self.client.post(path, json=payload)
        response.raise_for_status()
        return response.json()

    async def patch(self, path: str, payload: Mapping[str, Any]) -> Any:
        response = await self.client.patch(path, json=payload)
        response.raise_for_status()
        return response.json()

    @retry(
        retry=retry_if_exception_type(httpx.TransportError),
        stop=stop_after_attempt(3),
        wait=wait_exponential(multiplier=0.2, max=2),
        reraise=True,
    )
    async def _fetch(self, path: str, params: Mapping[str, Any]) -> Any:
        response = await self.client.get(path, params=params)
        response.raise_for_status()
        return response.json()
