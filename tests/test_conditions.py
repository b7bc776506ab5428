"""Tests for ref formatting and write conditions."""
# pylint: disable=missing-function-docstring  # test names are self-documenting

import pytest

from restkv.conditions import (
    MatchRef,
    NoCondition,
    RequireAbsent,
    as_condition,
    format_ref,
    ref_condition,
)
from restkv.errors import TypeMismatch


def test_format_ref_wraps_in_quotes():
    assert format_ref("abc123") == '"abc123"'


def test_format_ref_does_not_double_quote():
    assert format_ref('"abc123"') == '"abc123"'


@pytest.mark.parametrize("ref", ["abc123", "0123456789abcdef", "x"])
def test_format_ref_idempotent(ref):
    assert format_ref(format_ref(ref)) == format_ref(ref)


def test_format_ref_strips_embedded_quotes():
    assert format_ref('ab"c') == '"abc"'


def test_condition_headers():
    assert NoCondition().headers() == {}
    assert MatchRef("abc123").headers() == {"If-Match": '"abc123"'}
    assert RequireAbsent().headers() == {"If-None-Match": "*"}


def test_as_condition_short_forms():
    assert as_condition(None) == NoCondition()
    assert as_condition("abc123") == MatchRef("abc123")
    assert as_condition(False) == RequireAbsent()


def test_as_condition_passes_conditions_through():
    cond = MatchRef("r1")
    assert as_condition(cond) is cond


@pytest.mark.parametrize("value", [True, 0, 12, ["r1"]])
def test_as_condition_rejects_other_values(value):
    with pytest.raises(TypeMismatch):
        as_condition(value)


def test_ref_condition():
    assert ref_condition(None) == NoCondition()
    assert ref_condition("r1") == MatchRef("r1")
