"""Timestamp normalization for event paths and range parameters.

Event timestamps travel as milliseconds since the Unix epoch. Callers may
pass a datetime, a date, an int (already milliseconds) or a pre-formatted
string; None means the server assigns the timestamp.
"""

from __future__ import annotations

from datetime import date, datetime, time, timedelta, timezone

from restkv.errors import TypeMismatch

EPOCH = datetime(1970, 1, 1, tzinfo=timezone.utc)
_ONE_US = timedelta(microseconds=1)

Timestamp = datetime | date | int | str


def _from_datetime(value: datetime) -> int:
    # Naive datetimes are local time, like datetime.timestamp().
    if value.tzinfo is None:
        value = value.astimezone()
    micros = (value - EPOCH) // _ONE_US
    # Truncate toward zero, so instants before the epoch round up.
    if micros < 0:
        return -(-micros // 1000)
    return micros // 1000


def _from_date(value: date) -> int:
    return _from_datetime(datetime.combine(value, time.min))


def normalize_timestamp(value: Timestamp | None) -> int | str | None:
    """Convert a timestamp to its wire form.

    datetime and date become integer milliseconds (sub-millisecond precision
    is truncated), ints and strings pass through unchanged, None stays None.
    Any other type raises TypeMismatch.
    """
    if value is None:
        return None
    # bool is an int subclass but never a timestamp.
    if isinstance(value, bool):
        raise TypeMismatch(f"bool is not a valid timestamp: {value!r}")
    if isinstance(value, datetime):
        return _from_datetime(value)
    if isinstance(value, date):
        return _from_date(value)
    if isinstance(value, (int, str)):
        return value
    raise TypeMismatch(
        f"timestamp must be a datetime, date, int or str, got {type(value).__name__}"
    )
