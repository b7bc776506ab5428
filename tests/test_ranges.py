"""Tests for range parameter validation."""
# pylint: disable=missing-function-docstring  # test names are self-documenting
# pylint: disable=missing-class-docstring  # test class names are self-documenting

import pytest

from restkv.errors import InvalidSearchParam
from restkv.ranges import RangeOptions, validate_range


class TestExclusivePairs:

    @pytest.mark.parametrize(
        "options, pair",
        [
            ({"start": "a", "after": "b"}, ("start", "after")),
            ({"before": "a", "end": "b"}, ("before", "end")),
            ({"start": "a", "after": "b", "before": "c", "end": "d"}, ("start", "after")),
        ],
    )
    def test_collision_raises(self, options, pair):
        with pytest.raises(InvalidSearchParam) as exc_info:
            validate_range("key", options)
        assert exc_info.value.pair == pair
        assert exc_info.value.status is None

    def test_one_bound_from_each_side_is_fine(self):
        result = validate_range("key", {"start": "a", "end": "z"})
        assert result == {"startKey": "a", "endKey": "z"}

    def test_none_values_do_not_count(self):
        result = validate_range("key", {"start": "a", "after": None})
        assert result == {"startKey": "a"}


class TestNaming:

    def test_key_suffix(self):
        result = validate_range("key", {"after": "k1", "before": "k9"})
        assert result == {"afterKey": "k1", "beforeKey": "k9"}

    def test_event_suffix(self):
        result = validate_range("event", {"start": 1000, "before": "2000/1"})
        assert result == {"startEvent": 1000, "beforeEvent": "2000/1"}

    def test_other_options_pass_through(self):
        result = validate_range("key", {"limit": 5, "offset": 10, "values": True})
        assert result == {"limit": 5, "offset": 10, "values": True}

    def test_input_is_not_mutated(self):
        options = {"start": "a", "limit": "5"}
        validate_range("key", options)
        assert options == {"start": "a", "limit": "5"}

    def test_empty(self):
        assert validate_range("key", None) == {}
        assert validate_range("key", {}) == {}


class TestLimit:

    @pytest.mark.parametrize("value, expected", [(5, 5), ("25", 25), (10.0, 10), (1000, 1000)])
    def test_numeric_accepted(self, value, expected):
        assert validate_range("key", {"limit": value}) == {"limit": expected}

    @pytest.mark.parametrize("value", ["ten", "", True, 2.5, [10], {"n": 1}])
    def test_non_numeric_rejected(self, value):
        with pytest.raises(InvalidSearchParam):
            validate_range("key", {"limit": value})

    def test_model_keeps_extra_fields(self):
        parsed = RangeOptions.model_validate({"limit": "3", "offset": 4})
        assert parsed.limit == 3
        assert parsed.model_extra == {"offset": 4}
