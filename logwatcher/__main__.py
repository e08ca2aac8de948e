"""Allow ``python -m logwatcher``."""

import sys

from logwatcher.cli.main import main

sys.exit(main())
