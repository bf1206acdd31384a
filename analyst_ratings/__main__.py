"""Allow ``python -m analyst_ratings``."""

import sys

from analyst_ratings.cli import main

sys.exit(main())
