"""Allow ``python -m lsigcheck``."""

import sys

from lsigcheck.cli import main

sys.exit(main())
