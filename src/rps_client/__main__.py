"""Allow ``python -m rps_client``."""

import sys

from .cli import main

sys.exit(main())
