"""Allow ``python -m lintbridge``."""

from __future__ import annotations

import sys

from lintbridge.cli import main

if __name__ == "__main__":
    sys.exit(main())
