"""Allow ``python -m extreg``."""

from __future__ import annotations

import sys

from extreg.cli import main

sys.exit(main())
