"""Ref formatting and write conditions.

A write may be unconditional, conditional on the current ref (If-Match),
or conditional on no value existing yet (If-None-Match: *).
"""

from __future__ import annotations

from dataclasses import dataclass

from restkv.errors import TypeMismatch


def format_ref(ref: str) -> str:
    """Quote a ref for an If-Match header.

    Embedded quotes are stripped first, so an already quoted ref is not
    quoted twice.
    """
    return '"' + str(ref).replace('"', "") + '"'


@dataclass(frozen=True)
class NoCondition:
    """Write regardless of the current value."""

    def headers(self) -> dict[str, str]:
        return {}


@dataclass(frozen=True)
class MatchRef:
    """Write only if the current value has this ref."""

    ref: str

    def headers(self) -> dict[str, str]:
        return {"If-Match": format_ref(self.ref)}


@dataclass(frozen=True)
class RequireAbsent:
    """Write only if there is no current value."""

    def headers(self) -> dict[str, str]:
        return {"If-None-Match": "*"}


Condition = NoCondition | MatchRef | RequireAbsent


def as_condition(value: Condition | str | bool | None) -> Condition:
    """Map the short forms accepted by write operations to a Condition.

    None is unconditional, a string is a ref to match and False requires
    the key to be absent.
    """
    if isinstance(value, (NoCondition, MatchRef, RequireAbsent)):
        return value
    if value is None:
        return NoCondition()
    if value is False:
        return RequireAbsent()
    if isinstance(value, str):
        return MatchRef(value)
    raise TypeMismatch(
        f"condition must be None, a ref string or False, got {value!r}"
    )


def ref_condition(ref: str | None) -> Condition:
    """Condition for operations that only accept an optional If-Match ref."""
    return NoCondition() if ref is None else MatchRef(ref)
