"""Entry-point for ``python -m repo_traffic``."""

from __future__ import annotations

import sys

from repo_traffic.cli import main

if __name__ == "__main__":
    sys.exit(main())
