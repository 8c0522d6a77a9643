"""Allow ``python -m copy_crab``."""

import sys

from copy_crab.cli import main

sys.exit(main())
