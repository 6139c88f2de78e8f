"""Allow running as ``python -m raidctl``."""

import sys

from raidctl.cli import main

sys.exit(main())
