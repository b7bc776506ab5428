"""Client: the named operations of the key/value API.

Every operation validates its arguments when called, so validation errors
are raised before anything is sent or queued. The return value is an
awaitable in serial mode, or a Deferred placeholder inside `batch()` /
`in_parallel()`.

Usage:
    async with Client(ClientConfig.from_env()) as client:
        item = await client.get("users", "u1")
        await client.put("users", "u1", {"name": "Ada"}, item.ref)

        responses = await client.in_parallel(lambda r: r.update(
            user=client.get("users", "u1"),
            feed=client.list_events("users", "u1", "notices"),
        ))
"""

from __future__ import annotations

import logging
from contextlib import asynccontextmanager
from typing import Any, AsyncIterator, Awaitable, Callable, Iterable, Mapping
from urllib.parse import parse_qsl, urlsplit

from restkv.conditions import Condition, as_condition, ref_condition
from restkv.config import ClientConfig
from restkv.dispatch import Deferred, Dispatcher, ExecutionMode
from restkv.errors import TypeMismatch
from restkv.ranges import RANGE_KEYS, validate_range
from restkv.request import build_request
from restkv.responses import (
    CollectionResponse,
    ItemResponse,
    Response,
    classify,
    split_location,
)
from restkv.timestamps import Timestamp, normalize_timestamp
from restkv.transport import HttpxTransport, Transport

logger = logging.getLogger(__name__)

Result = Awaitable[Any] | Deferred


class Client:
    """Async client for the key/value, events and graph API."""

    def __init__(
        self,
        config: ClientConfig | None = None,
        transport: Transport | None = None,
    ) -> None:
        self.config = config or ClientConfig()
        self.transport = transport or HttpxTransport(self.config)
        self._dispatcher = Dispatcher(self.transport)

    async def __aenter__(self) -> Client:
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> None:  # noqa: ANN001
        await self.close()

    async def close(self) -> None:
        """Close the underlying transport."""
        await self.transport.close()

    @property
    def mode(self) -> ExecutionMode:
        """Current execution mode of the dispatcher."""
        return self._dispatcher.mode

    def __repr__(self) -> str:
        return f"<Client base_url={self.config.base_url} api_key={self.config.api_key[:8]}...>"

    # -- requests --

    def send_request(
        self,
        method: str,
        path: Iterable[Any],
        *,
        query: Mapping[str, Any] | None = None,
        body: Any = None,
        headers: Mapping[str, str] | None = None,
        response: type[Response] = Response,
    ) -> Result:
        """Build a request and hand it to the dispatcher.

        Args:
            method: one of GET, PUT, POST, DELETE.
            path: segments after the API version, joined with '/'.
            query: query string parameters.
            body: value serialized as the JSON body of PUT/POST.
            headers: extra request headers.
            response: Response class the success outcome is wrapped in.
        """
        request = build_request(method, path, query=query, body=body, headers=headers)
        logger.debug("send_request: %s %s, mode=%s", request.method, request.url, self.mode.value)
        return self._dispatcher.submit(
            request, lambda outcome: classify(outcome, response, self)
        )

    def follow(self, link: str, response: type[Response] = CollectionResponse) -> Result:
        """GET a link returned by the server, such as a `next` page link."""
        parts = urlsplit(link)
        return self.send_request(
            "GET",
            split_location(parts.path),
            query=dict(parse_qsl(parts.query)),
            response=response,
        )

    @asynccontextmanager
    async def batch(self) -> AsyncIterator[dict[str, Any]]:
        """Context manager form of `in_parallel`.

            async with client.batch() as r:
                r["user"] = client.get("users", "u1")
            r["user"].value
        """
        async with self._dispatcher.batch() as accumulator:
            yield accumulator

    async def in_parallel(self, block: Callable[[dict[str, Any]], Any]) -> dict[str, Any]:
        """Run the requests `block` makes against the accumulator together.

        `block` receives the accumulator and should store operation results in
        it without awaiting them. Returns the accumulator once every request
        resolved, with each slot holding its response.
        """
        async with self._dispatcher.batch() as accumulator:
            block(accumulator)
        return accumulator

    # -- authentication --

    def ping(self) -> Result:
        """Check that the API key is accepted. Raises Unauthorized otherwise."""
        return self.send_request("GET", [])

    # -- collections --

    def list(self, collection: str, **options: Any) -> Result:
        """List a collection's values in key order.

        Options: limit (default 10, max 100), start or after, before or end.
        Raises InvalidSearchParam for start+after, before+end or a
        non-numeric limit.
        """
        query = validate_range("key", options)
        return self.send_request(
            "GET", [collection], query=query, response=CollectionResponse
        )

    def search(self, collection: str, query: str, **options: Any) -> Result:
        """Run a search query. Options: limit, offset."""
        return self.send_request(
            "GET",
            [collection],
            query={**options, "query": query},
            response=CollectionResponse,
        )

    def delete_collection(self, collection: str) -> Result:
        """Delete a collection. Succeeds whether or not it exists."""
        return self.send_request("DELETE", [collection], query={"force": True})

    # -- key/value --

    def get(self, collection: str, key: str, ref: str | None = None) -> Result:
        """Get the current value of a key, or the value at `ref`."""
        path = [collection, key]
        if ref is not None:
            path.extend(["refs", ref])
        return self.send_request("GET", path, response=ItemResponse)

    def list_refs(self, collection: str, key: str, **options: Any) -> Result:
        """List the refs of a key, newest first.

        Options: limit, offset, values (include each ref's value; deleted
        refs carry a tombstone marker instead).
        """
        return self.send_request(
            "GET",
            [collection, key, "refs"],
            query=options,
            response=CollectionResponse,
        )

    def put(
        self,
        collection: str,
        key: str,
        body: Any,
        condition: Condition | str | bool | None = None,
    ) -> Result:
        """Create or update a value.

        condition: None writes unconditionally, a ref string sends If-Match,
        False sends If-None-Match: *. A Condition instance may be given
        directly.
        """
        return self.send_request(
            "PUT",
            [collection, key],
            body=body,
            headers=as_condition(condition).headers(),
            response=ItemResponse,
        )

    put_if_unmodified = put

    def put_if_absent(self, collection: str, key: str, body: Any) -> Result:
        """Create a value only if the key has none."""
        return self.put(collection, key, body, False)

    def delete(self, collection: str, key: str, ref: str | None = None) -> Result:
        """Delete a value, only if its ref matches when `ref` is given.

        Earlier refs remain available through `list_refs` and `get`.
        """
        return self.send_request(
            "DELETE", [collection, key], headers=ref_condition(ref).headers()
        )

    def purge(self, collection: str, key: str) -> Result:
        """Delete a value and its whole ref history. Irreversible."""
        return self.send_request("DELETE", [collection, key], query={"purge": True})

    # -- events --

    @staticmethod
    def _event_path(
        collection: str,
        key: str,
        event_type: str,
        timestamp: Timestamp | None = None,
        ordinal: int | None = None,
        *,
        exact: bool = False,
    ) -> list[Any]:
        # exact: the path names one event, so both timestamp and ordinal are needed.
        if exact and (timestamp is None or ordinal is None):
            raise TypeMismatch(
                f"event timestamp and ordinal are required, got {timestamp!r} and {ordinal!r}"
            )
        path: list[Any] = [collection, key, "events", event_type]
        normalized = normalize_timestamp(timestamp)
        if normalized is not None:
            path.append(normalized)
            if ordinal is not None:
                path.append(ordinal)
        return path

    def get_event(
        self,
        collection: str,
        key: str,
        event_type: str,
        timestamp: Timestamp,
        ordinal: int,
    ) -> Result:
        """Get one event by timestamp and ordinal."""
        return self.send_request(
            "GET",
            self._event_path(collection, key, event_type, timestamp, ordinal, exact=True),
            response=ItemResponse,
        )

    def post_event(
        self,
        collection: str,
        key: str,
        event_type: str,
        body: Any,
        timestamp: Timestamp | None = None,
    ) -> Result:
        """Create an event. Without a timestamp the server assigns one."""
        return self.send_request(
            "POST",
            self._event_path(collection, key, event_type, timestamp),
            body=body,
            response=ItemResponse,
        )

    def put_event(
        self,
        collection: str,
        key: str,
        event_type: str,
        timestamp: Timestamp,
        ordinal: int,
        body: Any,
        ref: str | None = None,
    ) -> Result:
        """Update an event, only if its ref matches when `ref` is given."""
        return self.send_request(
            "PUT",
            self._event_path(collection, key, event_type, timestamp, ordinal, exact=True),
            body=body,
            headers=ref_condition(ref).headers(),
            response=ItemResponse,
        )

    def purge_event(
        self,
        collection: str,
        key: str,
        event_type: str,
        timestamp: Timestamp,
        ordinal: int,
        ref: str | None = None,
    ) -> Result:
        """Delete an event, only if its ref matches when `ref` is given."""
        return self.send_request(
            "DELETE",
            self._event_path(collection, key, event_type, timestamp, ordinal, exact=True),
            query={"purge": True},
            headers=ref_condition(ref).headers(),
        )

    def list_events(
        self, collection: str, key: str, event_type: str, **options: Any
    ) -> Result:
        """List events of one type, newest first.

        Options: limit, start or after, before or end. Range bounds are
        timestamps, or strings formatted "timestamp/ordinal".
        """
        options = {
            name: normalize_timestamp(value) if name in RANGE_KEYS else value
            for name, value in options.items()
        }
        query = validate_range("event", options)
        return self.send_request(
            "GET",
            [collection, key, "events", event_type],
            query=query,
            response=CollectionResponse,
        )

    # -- graph --

    def get_relations(self, collection: str, key: str, *kinds: str) -> Result:
        """Walk relations from a key; each kind is one more hop."""
        return self.send_request(
            "GET",
            [collection, key, "relations", *kinds],
            response=CollectionResponse,
        )

    def put_relation(
        self, collection: str, key: str, kind: str, to_collection: str, to_key: str
    ) -> Result:
        """Store a relation from one key to another, in any collection."""
        return self.send_request(
            "PUT", [collection, key, "relation", kind, to_collection, to_key]
        )

    def delete_relation(
        self, collection: str, key: str, kind: str, to_collection: str, to_key: str
    ) -> Result:
        """Delete a relation. Relations keep no history, so this always purges."""
        return self.send_request(
            "DELETE",
            [collection, key, "relation", kind, to_collection, to_key],
            query={"purge": True},
        )
