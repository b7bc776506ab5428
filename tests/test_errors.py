"""Tests for status/code to error classification."""
# pylint: disable=missing-function-docstring  # test names are self-documenting

import httpx
import pytest

from restkv.errors import (
    AlreadyPresent,
    BadRequest,
    IndexingConflict,
    InvalidSearchParam,
    MalformedRef,
    NotFound,
    RequestError,
    SearchQueryMalformed,
    ServiceError,
    Unauthorized,
    VersionMismatch,
    error_class_for,
    error_for,
)
from restkv.responses import classify
from restkv.transport import Outcome


def _outcome(status, body=None, headers=None):
    return Outcome(status=status, headers=httpx.Headers(headers or {}), body=body)


@pytest.mark.parametrize(
    "status, code, expected",
    [
        (400, "api_bad_request", BadRequest),
        (400, "search_param_invalid", InvalidSearchParam),
        (400, "search_query_malformed", SearchQueryMalformed),
        (400, "item_ref_malformed", MalformedRef),
        (400, "something_new", BadRequest),
        (400, None, BadRequest),
        (401, "security_unauthorized", Unauthorized),
        (404, "items_not_found", NotFound),
        (409, "indexing_conflict", IndexingConflict),
        (412, "item_version_mismatch", VersionMismatch),
        (412, "item_already_present", AlreadyPresent),
        (412, None, VersionMismatch),
        (500, "internal", ServiceError),
        (503, None, ServiceError),
        (418, None, RequestError),
    ],
)
def test_error_class_table(status, code, expected):
    assert error_class_for(status, code) is expected


@pytest.mark.parametrize(
    "body",
    [None, "", "<html>Not Found</html>", {"code": "item_already_present"}, {"x": 1}, [1, 2]],
)
def test_404_is_always_not_found(body):
    err = error_for(_outcome(404, body))
    assert type(err) is NotFound
    assert err.status == 404


def test_error_carries_body_fields():
    body = {"message": "The requested items could not be found.", "code": "items_not_found"}
    err = error_for(_outcome(404, body, {"X-ORCHESTRATE-REQ-ID": "req-1"}))
    assert err.code == "items_not_found"
    assert err.message == "The requested items could not be found."
    assert err.body == body
    assert err.request_id == "req-1"
    assert str(err) == "The requested items could not be found."


def test_error_without_body_uses_status():
    err = error_for(_outcome(502))
    assert isinstance(err, ServiceError)
    assert isinstance(err, RequestError)
    assert err.code is None
    assert str(err) == "HTTP 502"


def test_unhashable_code_falls_back_to_status():
    err = error_for(_outcome(412, {"code": ["weird"]}))
    assert type(err) is VersionMismatch


def test_classify_raises_on_failure():
    with pytest.raises(AlreadyPresent):
        classify(_outcome(412, {"code": "item_already_present"}))
