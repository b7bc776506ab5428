"""Request construction.

Turns an operation's method, path segments, query, headers and body into a
Request ready for the transport. No I/O happens here.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Iterable, Mapping
from urllib.parse import quote

from restkv import serializer
from restkv.version import __version__

API_VERSION = "v0"
METHODS = frozenset({"GET", "PUT", "POST", "DELETE"})
USER_AGENT = f"python/restkv/{__version__}"


@dataclass(frozen=True)
class Request:
    """A fully built HTTP request."""

    method: str
    path: tuple[str, ...]
    query: dict[str, str] = field(default_factory=dict)
    headers: dict[str, str] = field(default_factory=dict)
    body: bytes | None = None

    @property
    def url(self) -> str:
        """Path segments escaped and joined, e.g. `/v0/users/u1`."""
        return "/" + "/".join(quote(segment, safe="") for segment in self.path)


def _query_value(value: Any) -> str:
    if value is True:
        return "true"
    if value is False:
        return "false"
    return str(value)


def build_request(
    method: str,
    path: Iterable[Any],
    *,
    query: Mapping[str, Any] | None = None,
    body: Any = None,
    headers: Mapping[str, str] | None = None,
) -> Request:
    """Build a Request under the API version prefix.

    PUT and POST carry a JSON body (empty when body is None), GET asks for
    JSON back, and every request identifies the client in User-Agent.
    """
    method = method.upper()
    if method not in METHODS:
        raise ValueError(f"unsupported method: {method}")

    request_headers = dict(headers or {})
    request_headers["User-Agent"] = USER_AGENT
    if method == "GET":
        request_headers["Accept"] = serializer.JSON_CONTENT_TYPE

    content = None
    if method in ("PUT", "POST"):
        request_headers["Content-Type"] = serializer.JSON_CONTENT_TYPE
        content = serializer.dumps(body)

    return Request(
        method=method,
        path=(API_VERSION, *(str(segment) for segment in path)),
        query={
            name: _query_value(value)
            for name, value in (query or {}).items()
            if value is not None
        },
        headers=request_headers,
        body=content,
    )
