"""JSON encoding of request bodies and decoding of response bodies."""

from __future__ import annotations

import json
import re
from typing import Any

JSON_CONTENT_TYPE = "application/json"

_JSON_TYPE = re.compile(r"\bjson$")


def dumps(value: Any) -> bytes:
    """Encode a body for PUT/POST. None encodes to empty content."""
    if value is None:
        return b""
    return json.dumps(value, default=str).encode("utf-8")


def loads(content: bytes, content_type: str | None) -> Any:
    """Decode a response body.

    JSON content types are parsed; anything else, and JSON that fails to
    parse, is returned as text. Empty content decodes to None.
    """
    if not content:
        return None
    text = content.decode("utf-8", errors="replace")
    media_type = (content_type or "").split(";", 1)[0].strip()
    if not _JSON_TYPE.search(media_type):
        return text
    try:
        return json.loads(text)
    except json.JSONDecodeError:
        return text
