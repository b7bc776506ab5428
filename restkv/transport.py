"""Transport layer: the HTTP client the dispatcher sends requests through."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Protocol, runtime_checkable

import httpx

from restkv import serializer
from restkv.config import ClientConfig
from restkv.errors import TransportError
from restkv.request import Request

logger = logging.getLogger(__name__)

REQUEST_ID_HEADER = "X-ORCHESTRATE-REQ-ID"


@dataclass(frozen=True)
class Outcome:
    """What the transport got back for one request."""

    status: int
    headers: httpx.Headers
    body: Any = None
    url: str = ""

    @property
    def success(self) -> bool:
        return 200 <= self.status < 300

    @property
    def request_id(self) -> str | None:
        return self.headers.get(REQUEST_ID_HEADER)


@runtime_checkable
class Transport(Protocol):
    """Interface the dispatcher drives.

    `supports_parallel` tells the dispatcher whether queued batch requests
    may be in flight at the same time.
    """

    supports_parallel: bool

    async def send(self, request: Request) -> Outcome: ...
    async def close(self) -> None: ...


class HttpxTransport:
    """Transport backed by a single `httpx.AsyncClient`.

    The client multiplexes connections, so batched requests can run
    concurrently on it.
    """

    def __init__(
        self,
        config: ClientConfig | None = None,
        client: httpx.AsyncClient | None = None,
    ) -> None:
        self.config = config or ClientConfig()
        self.supports_parallel = self.config.parallel
        self._client = client or httpx.AsyncClient(**self._client_options())

    def _client_options(self) -> dict[str, Any]:
        """Keyword arguments for the AsyncClient, after the config hook ran."""
        options: dict[str, Any] = {
            "base_url": self.config.base_url,
            "auth": (self.config.api_key, ""),
            "timeout": self.config.timeout,
        }
        if self.config.http_hook is not None:
            self.config.http_hook(options)
        return options

    async def send(self, request: Request) -> Outcome:
        """Send one request and decode the response body."""
        try:
            response = await self._client.request(
                request.method,
                request.url,
                params=request.query,
                headers=request.headers,
                content=request.body,
            )
        except httpx.RequestError as e:
            logger.debug("%s %s failed", request.method, request.url, exc_info=True)
            raise TransportError(f"{request.method} {request.url}: {e}") from e

        logger.debug(
            "%s %s -> %d", request.method, response.url, response.status_code
        )
        return Outcome(
            status=response.status_code,
            headers=response.headers,
            body=serializer.loads(
                response.content, response.headers.get("content-type")
            ),
            url=str(response.url),
        )

    async def close(self) -> None:
        await self._client.aclose()
