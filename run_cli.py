"""Standalone CLI entry point.

Reads RESTKV_BASE_URL / RESTKV_API_KEY from the environment (or a .env
file) and runs one restkv command:

    python run_cli.py get users u1
    python run_cli.py events users u1 notices --after 1400000000000
"""

from __future__ import annotations

import sys

from dotenv import load_dotenv

load_dotenv()

from restkv.cli import main
from restkv.logging_config import log_init

if __name__ == "__main__":
    log_init()
    sys.exit(main())
