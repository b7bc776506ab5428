"""Validation of paginated range parameters.

Range queries take at most one lower bound (start inclusive, after
exclusive) and at most one upper bound (before exclusive, end inclusive).
On the wire each bound is suffixed with what it ranges over, so `start`
becomes `startKey` for key listings and `startEvent` for event listings.
"""

from __future__ import annotations

from typing import Any, Mapping

from pydantic import BaseModel, ConfigDict, ValidationError, field_validator

from restkv.errors import InvalidSearchParam

RANGE_KEYS = ("start", "after", "before", "end")
EXCLUSIVE_PAIRS = (("start", "after"), ("before", "end"))


class RangeOptions(BaseModel):
    """Paging fields shared by list-style queries; other fields pass through."""

    model_config = ConfigDict(extra="allow")

    limit: int | None = None

    @field_validator("limit", mode="before")
    @classmethod
    def _numeric_limit(cls, value: Any) -> Any:
        if value is None:
            return value
        if isinstance(value, bool):
            raise ValueError("limit must be a number, not a bool")
        if isinstance(value, int):
            return value
        if isinstance(value, float) and value.is_integer():
            return int(value)
        if isinstance(value, str) and value.strip().isdigit():
            return int(value.strip())
        raise ValueError(f"limit must be numeric, got {value!r}")


def check_exclusive(options: Mapping[str, Any]) -> None:
    """Raise InvalidSearchParam if both members of a bound pair are given."""
    for first, second in EXCLUSIVE_PAIRS:
        if options.get(first) is not None and options.get(second) is not None:
            raise InvalidSearchParam(
                f"may only provide one of '{first}' or '{second}'",
                pair=(first, second),
            )


def validate_range(suffix: str, options: Mapping[str, Any] | None) -> dict[str, Any]:
    """Validate range options and return them keyed for the wire.

    The input mapping is left untouched. None values are dropped.
    """
    options = {k: v for k, v in (options or {}).items() if v is not None}
    check_exclusive(options)
    try:
        parsed = RangeOptions.model_validate(options)
    except ValidationError as e:
        raise InvalidSearchParam(str(e.errors()[0]["msg"])) from e

    result: dict[str, Any] = {}
    for name, value in options.items():
        if name == "limit":
            result[name] = parsed.limit
        elif name in RANGE_KEYS:
            result[f"{name}{suffix.capitalize()}"] = value
        else:
            result[name] = value
    return result
