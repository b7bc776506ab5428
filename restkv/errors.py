"""Error taxonomy for the restkv client.

Client-side validation errors are raised before any request is sent.
Everything derived from an HTTP outcome is a RequestError subclass, chosen
by status code and, where the status is ambiguous, by the `code` field of
the JSON error body.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from restkv.transport import Outcome

logger = logging.getLogger(__name__)


class RestKVError(Exception):
    """Base exception for restkv operations."""


class TypeMismatch(RestKVError, TypeError):
    """Raised when a value is not one of the accepted forms."""


class BatchError(RestKVError):
    """Raised when a batch is started while another one is active."""


class TransportError(RestKVError):
    """Raised when the HTTP transport fails before producing a response."""


class RequestError(RestKVError):
    """A non-success HTTP outcome.

    Carries the status code, the parsed error body (when it was JSON) and the
    `code`/`message` fields the server puts in it.
    """

    def __init__(
        self,
        message: str | None = None,
        *,
        status: int | None = None,
        body: Any = None,
        request_id: str | None = None,
    ) -> None:
        self.status = status
        self.body = body
        self.request_id = request_id
        details = body if isinstance(body, dict) else {}
        self.code: str | None = details.get("code")
        self.message: str | None = message or details.get("message")
        super().__init__(self.message or f"HTTP {status}")

    @classmethod
    def from_outcome(cls, outcome: Outcome) -> RequestError:
        return cls(
            status=outcome.status,
            body=outcome.body,
            request_id=outcome.request_id,
        )


class BadRequest(RequestError):
    """The request body or parameters were malformed."""


class MalformedRef(RequestError):
    """The ref given is not a valid ref."""


class SearchQueryMalformed(RequestError):
    """The server could not parse the search query."""


class InvalidSearchParam(RequestError):
    """Invalid range or paging parameters.

    Raised client-side (status is None) when a mutually exclusive pair of
    range keys is given or `limit` is not numeric, and server-side for a 400
    with the `search_param_invalid` code.
    """

    def __init__(
        self,
        message: str | None = None,
        *,
        pair: tuple[str, str] | None = None,
        **kwargs: Any,
    ) -> None:
        self.pair = pair
        super().__init__(message, **kwargs)


class Unauthorized(RequestError):
    """The API key was rejected."""


class NotFound(RequestError):
    """The collection, key, ref or event does not exist."""


class IndexingConflict(RequestError):
    """A field of the value has a different type than the collection schema."""


class VersionMismatch(RequestError):
    """The If-Match ref does not match the current ref."""


class AlreadyPresent(RequestError):
    """If-None-Match was given but a value already exists."""


class ServiceError(RequestError):
    """The server failed to handle the request (5xx)."""


# (status, code) pairs take precedence over the plain status table.
CODE_ERRORS: dict[tuple[int, str], type[RequestError]] = {
    (400, "api_bad_request"): BadRequest,
    (400, "search_param_invalid"): InvalidSearchParam,
    (400, "search_query_malformed"): SearchQueryMalformed,
    (400, "item_ref_malformed"): MalformedRef,
    (412, "item_version_mismatch"): VersionMismatch,
    (412, "item_already_present"): AlreadyPresent,
}

STATUS_ERRORS: dict[int, type[RequestError]] = {
    400: BadRequest,
    401: Unauthorized,
    404: NotFound,
    409: IndexingConflict,
    412: VersionMismatch,
}


def error_class_for(status: int, code: str | None = None) -> type[RequestError]:
    """Pick the error class for a non-success status and optional body code."""
    if isinstance(code, str) and (status, code) in CODE_ERRORS:
        return CODE_ERRORS[(status, code)]
    if status in STATUS_ERRORS:
        return STATUS_ERRORS[status]
    if status >= 500:
        return ServiceError
    return RequestError


def error_for(outcome: Outcome) -> RequestError:
    """Translate a non-success outcome into a typed error instance."""
    body = outcome.body
    code = body.get("code") if isinstance(body, dict) else None
    error_cls = error_class_for(outcome.status, code)
    logger.debug(
        "error_for: status=%s, code=%s -> %s", outcome.status, code, error_cls.__name__
    )
    return error_cls.from_outcome(outcome)
