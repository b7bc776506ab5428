import sys

from dotenv import load_dotenv

from restkv.cli import main
from restkv.logging_config import log_init

load_dotenv()
log_init()

sys.exit(main())
