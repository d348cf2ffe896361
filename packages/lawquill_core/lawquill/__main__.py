"""Allow ``python -m lawquill``."""

import sys

from .cli import main

sys.exit(main())
