"""Allow running as `python -m schemadoc`."""

import sys

from schemadoc.cli import main

sys.exit(main())
