"""Client configuration.

Consumed once when a Client is built. Entry points load a `.env` file
(python-dotenv) before calling `ClientConfig.from_env()`.
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from typing import Any, Callable

_FALSE_VALUES = {"0", "false", "no", "off"}


@dataclass(frozen=True)
class ClientConfig:
    base_url: str = "http://localhost:8000"
    api_key: str = ""
    timeout: float = 30.0
    parallel: bool = True  # default transport runs batch requests concurrently
    # Receives the httpx.AsyncClient keyword arguments and may edit them in place.
    http_hook: Callable[[dict[str, Any]], None] | None = None

    @classmethod
    def from_env(cls, **overrides: Any) -> "ClientConfig":
        """Build a config from RESTKV_* environment variables."""
        values: dict[str, Any] = {
            "base_url": os.environ.get("RESTKV_BASE_URL", cls.base_url),
            "api_key": os.environ.get("RESTKV_API_KEY", cls.api_key),
            "timeout": float(os.environ.get("RESTKV_TIMEOUT", cls.timeout)),
            "parallel": os.environ.get("RESTKV_PARALLEL", "true").strip().lower()
            not in _FALSE_VALUES,
        }
        values.update(overrides)
        return cls(**values)
