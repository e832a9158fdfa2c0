"""Async httpx client with a retry transport, shared by HTTP adapters."""

from __future__ import annotations

from logging import getLogger
from typing import TYPE_CHECKING, TypedDict, Unpack

import httpx
from httpx_retries import RetryTransport

if TYPE_CHECKING:
    from types import TracebackType

    from httpx._client import UseClientDefault
    from httpx._types import HeaderTypes, QueryParamTypes, TimeoutTypes

    from clientele.config.http_resilience import ResilienceConfig

log = getLogger(__name__)


class RequestOptions(TypedDict, total=False):
    params: QueryParamTypes | None
    headers: HeaderTypes | None
    timeout: TimeoutTypes | UseClientDefault


def client_headers(config: ResilienceConfig) -> dict[str, str]:
    """Default headers plus ``Authorization`` when a bearer token is configured."""

    headers = dict(config.default_headers or {})
    if config.bearer_token:
        headers["Authorization"] = f"Bearer {config.bearer_token}"
    return headers


class ResilientClient:
    """Async httpx client retrying transient failures per ``ResilienceConfig.retry``."""

    def __init__(self, config: ResilienceConfig) -> None:
        self.config = config
        self._client = httpx.AsyncClient(
            base_url=config.base_url or "",
            timeout=config.timeout_seconds,
            headers=client_headers(config),
            transport=RetryTransport(retry=config.retry.build()),
            event_hooks={"response": [self._log_response]},
        )

    async def __aenter__(self) -> ResilientClient:
        return self

    async def __aexit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        await self._client.aclose()

    async def get(self, url: str, **kwargs: Unpack[RequestOptions]) -> httpx.Response:
        return await self._client.get(url, **kwargs)

    async def _log_response(self, response: httpx.Response) -> None:
        log.debug(
            "[%s] %s %s -> %s",
            self.config.name,
            response.request.method,
            response.request.url.path,
            response.status_code,
        )
