"""CLI: Snapshot one repository's traffic, clones or metadata into --out-dir.

Usage::

    python scripts/fetch.py --out-dir data traffic octocat/Hello-World
"""

from __future__ import annotations

import sys

from repo_traffic.cli import main

if __name__ == "__main__":
    sys.exit(main())
