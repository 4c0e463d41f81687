"""Allow running as ``python -m nasabmatch``."""

import sys

from .ui.cli import main

sys.exit(main())
