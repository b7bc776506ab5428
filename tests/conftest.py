"""Pytest configuration and shared fixtures.

Requests never leave the process: the default HttpxTransport is given an
httpx.MockTransport backed by FakeAPI, which records every request and
answers from canned routes.
"""
# pylint: disable=redefined-outer-name  # pytest fixture injection pattern

from __future__ import annotations

from typing import Any

import httpx
import pytest

from restkv.client import Client
from restkv.config import ClientConfig
from restkv.transport import HttpxTransport

BASE_URL = "https://api.test"


class FakeAPI:
    """Canned responses keyed by (method, path); unmatched requests get 200 {}."""

    def __init__(self) -> None:
        self.requests: list[httpx.Request] = []
        self._routes: dict[tuple[str, str], dict[str, Any]] = {}

    def respond(
        self,
        method: str,
        path: str,
        status: int = 200,
        json: Any = None,
        headers: dict[str, str] | None = None,
        content: bytes | None = None,
    ) -> None:
        self._routes[(method, path)] = {
            "status": status,
            "json": json,
            "headers": headers or {},
            "content": content,
        }

    def handler(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        route = self._routes.get((request.method, request.url.path))
        if route is None:
            return httpx.Response(200, json={})
        if route["content"] is not None:
            return httpx.Response(
                route["status"], content=route["content"], headers=route["headers"]
            )
        if route["json"] is None:
            return httpx.Response(route["status"], headers=route["headers"])
        return httpx.Response(
            route["status"], json=route["json"], headers=route["headers"]
        )

    @property
    def last(self) -> httpx.Request:
        return self.requests[-1]


def make_client(api: FakeAPI, parallel: bool = True) -> Client:
    config = ClientConfig(base_url=BASE_URL, api_key="secret-key", parallel=parallel)
    http = httpx.AsyncClient(
        base_url=BASE_URL,
        auth=(config.api_key, ""),
        transport=httpx.MockTransport(api.handler),
    )
    return Client(config, HttpxTransport(config, client=http))


@pytest.fixture
def api() -> FakeAPI:
    return FakeAPI()


@pytest.fixture
async def client(api: FakeAPI):
    c = make_client(api)
    yield c
    await c.close()
