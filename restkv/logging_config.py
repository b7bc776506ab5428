"""Logging setup for restkv entry points.

The library itself only creates module loggers. Entry points call
log_init(), which loads a dictConfig JSON file (logging.json in the project
root unless RESTKV_LOG_CONFIG or an explicit path says otherwise) and falls
back to basicConfig when no file is found.
"""

import json
import logging
import logging.config
import os

_PROJECT_ROOT = os.path.dirname(os.path.dirname(os.path.abspath(__file__)))

LOG_FORMAT = "%(asctime)s [%(name)s] %(levelname)s: %(message)s"


def log_init(log_config_path: str | None = None, level: int | None = None) -> None:
    """Configure logging for a restkv process.

    Args:
        log_config_path: dictConfig JSON file to load.
        level: if given, overrides the level of the `restkv` logger.
    """
    path = log_config_path or os.environ.get(
        "RESTKV_LOG_CONFIG", os.path.join(_PROJECT_ROOT, "logging.json")
    )
    if os.path.exists(path):
        with open(path) as f:
            logging.config.dictConfig(json.load(f))
    else:
        logging.basicConfig(level=logging.WARNING, format=LOG_FORMAT)
        logging.getLogger("httpx").setLevel(logging.WARNING)
    if level is not None:
        logging.getLogger("restkv").setLevel(level)
