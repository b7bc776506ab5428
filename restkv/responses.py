"""Typed responses and the classifier that produces them.

A response is built once per completed request and never changes. Each one
keeps a reference to the client that made it, which collection responses
use to fetch the next or previous page.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from datetime import datetime
from email.utils import parsedate_to_datetime
from typing import TYPE_CHECKING, Any, Iterator, Mapping
from urllib.parse import unquote, urlsplit

import httpx

from restkv.errors import error_for
from restkv.request import API_VERSION
from restkv.transport import REQUEST_ID_HEADER, Outcome

if TYPE_CHECKING:
    from restkv.client import Client

logger = logging.getLogger(__name__)


def split_location(location: str | None) -> list[str]:
    """Split a `/v0/...` location into unescaped segments after the version."""
    if not location:
        return []
    segments = [unquote(s) for s in urlsplit(location).path.split("/") if s]
    if segments and segments[0] == API_VERSION:
        segments = segments[1:]
    return segments


@dataclass(frozen=True)
class Response:
    """Bare response: status, headers and body of a successful request."""

    status: int
    headers: Mapping[str, str]
    body: Any
    client: Client | None = field(default=None, repr=False, compare=False)

    @property
    def request_id(self) -> str | None:
        return self.headers.get(REQUEST_ID_HEADER)

    @property
    def date(self) -> datetime | None:
        """Server time from the Date header, if present and parseable."""
        value = self.headers.get("Date")
        if not value:
            return None
        try:
            return parsedate_to_datetime(value)
        except (TypeError, ValueError):
            return None

    @classmethod
    def from_outcome(cls, outcome: Outcome, client: Client | None = None) -> Response:
        return cls(
            status=outcome.status,
            headers=outcome.headers,
            body=outcome.body,
            client=client,
        )


@dataclass(frozen=True)
class ItemResponse(Response):
    """A single value with its collection, key and ref."""

    collection: str | None = None
    key: str | None = None
    ref: str | None = None
    location: str | None = None
    path: dict[str, Any] = field(default_factory=dict)

    @property
    def value(self) -> Any:
        return self.body

    @classmethod
    def from_outcome(
        cls, outcome: Outcome, client: Client | None = None
    ) -> ItemResponse:
        location = outcome.headers.get("Content-Location") or outcome.headers.get(
            "Location"
        )
        segments = split_location(location)
        ref = None
        etag = outcome.headers.get("ETag")
        if etag:
            ref = etag.replace('"', "")
        elif "refs" in segments[2:3]:
            ref = segments[3] if len(segments) > 3 else None
        return cls(
            status=outcome.status,
            headers=outcome.headers,
            body=outcome.body,
            client=client,
            collection=segments[0] if segments else None,
            key=segments[1] if len(segments) > 1 else None,
            ref=ref,
            location=location,
        )

    @classmethod
    def from_result(
        cls, result: dict[str, Any], status: int, client: Client | None = None
    ) -> ItemResponse:
        """Build an item from one entry of a collection response body."""
        path = result.get("path") or {}
        return cls(
            status=status,
            headers=httpx.Headers(),
            body=result.get("value"),
            client=client,
            collection=path.get("collection"),
            key=path.get("key"),
            ref=path.get("ref"),
            path=dict(path),
        )


@dataclass(frozen=True)
class CollectionResponse(Response):
    """An ordered page of items plus the links to neighbouring pages."""

    results: tuple[ItemResponse, ...] = ()
    count: int | None = None
    total_count: int | None = None
    next_link: str | None = None
    prev_link: str | None = None

    def __iter__(self) -> Iterator[ItemResponse]:
        return iter(self.results)

    def __len__(self) -> int:
        return len(self.results)

    @classmethod
    def from_outcome(
        cls, outcome: Outcome, client: Client | None = None
    ) -> CollectionResponse:
        body = outcome.body if isinstance(outcome.body, dict) else {}
        results = tuple(
            ItemResponse.from_result(result, outcome.status, client)
            for result in body.get("results") or []
            if isinstance(result, dict)
        )
        return cls(
            status=outcome.status,
            headers=outcome.headers,
            body=outcome.body,
            client=client,
            results=results,
            count=body.get("count", len(results)),
            total_count=body.get("total_count"),
            next_link=body.get("next"),
            prev_link=body.get("prev"),
        )

    async def next_results(self) -> CollectionResponse | None:
        """Fetch the next page, or None when this is the last one."""
        return await self._follow(self.next_link)

    async def previous_results(self) -> CollectionResponse | None:
        """Fetch the previous page, or None when this is the first one."""
        return await self._follow(self.prev_link)

    async def _follow(self, link: str | None) -> CollectionResponse | None:
        if not link:
            return None
        if self.client is None:
            raise RuntimeError("response is not bound to a client")
        return await self.client.follow(link, CollectionResponse)


def classify(
    outcome: Outcome, kind: type[Response] = Response, client: Client | None = None
) -> Response:
    """Return a typed response for a success outcome, raise otherwise."""
    if not outcome.success:
        raise error_for(outcome)
    return kind.from_outcome(outcome, client)
