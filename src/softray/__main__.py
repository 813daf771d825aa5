"""Allow running the renderer with ``python -m softray``."""

import sys

from softray.cli import main

sys.exit(main())
