"""Allow ``python -m ghostify``."""

import sys

from ghostify.cli import main

sys.exit(main())
