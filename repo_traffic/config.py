"""Centralised configuration and constants."""

from __future__ import annotations

import os

# ── GitHub API ──────────────────────────────────────────────────────────────
GITHUB_TOKEN: str | None = os.getenv("GITHUB_TOKEN")
GITHUB_API_BASE: str = os.getenv("GITHUB_API_BASE", "https://api.github.com")
GITHUB_ACCEPT: str = "application/vnd.github+json"
REQUEST_TIMEOUT: float = float(os.getenv("REPO_TRAFFIC_TIMEOUT", "30"))  # seconds

# ── Transport ──────────────────────────────────────────────────────────────
# "http" talks to the REST API with httpx, "gh" shells out to the GitHub CLI.
TRANSPORT: str = os.getenv("REPO_TRAFFIC_TRANSPORT", "http")
GH_EXECUTABLE: str = os.getenv("REPO_TRAFFIC_GH", "gh")

# ── Output ─────────────────────────────────────────────────────────────────
JSON_INDENT: int = 2

# ── Logging ────────────────────────────────────────────────────────────────
LOG_LEVEL: str = os.getenv("REPO_TRAFFIC_LOG_LEVEL", "INFO").upper()
LOG_FORMAT: str = "%(asctime)s %(levelname)s %(message)s"
