"""GitHub API transports: the REST API over httpx, or the ``gh`` CLI.

Both expose ``async fetch(path) -> bytes`` and leave decoding to the caller.
"""

from __future__ import annotations

import asyncio
import logging
from typing import Any, Protocol

import httpx

from repo_traffic.config import (
    GH_EXECUTABLE,
    GITHUB_ACCEPT,
    GITHUB_API_BASE,
    GITHUB_TOKEN,
    REQUEST_TIMEOUT,
    TRANSPORT,
)
from repo_traffic.errors import MalformedInputError, TransportError

logger = logging.getLogger(__name__)


class ApiClient(Protocol):
    async def fetch(self, path: str) -> bytes: ...


class GitHubClient:
    """Async client for the GitHub REST API."""

    def __init__(
        self,
        token: str | None = None,
        *,
        base_url: str = GITHUB_API_BASE,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self._token = token or GITHUB_TOKEN
        headers = {"Accept": GITHUB_ACCEPT}
        if self._token:
            headers["Authorization"] = f"Bearer {self._token}"
        else:
            logger.warning("GITHUB_TOKEN is not set; traffic endpoints require push access.")
        self._client = httpx.AsyncClient(
            base_url=base_url,
            headers=headers,
            timeout=REQUEST_TIMEOUT,
            transport=transport,
        )

    async def fetch(self, path: str) -> bytes:
        """GET ``/{path}`` and return the raw response body.

        *path* may carry a query string (``repos/o/r/traffic/views?per=day``).
        """
        url = "/" + path.lstrip("/")
        logger.debug("GET %s", url)
        try:
            resp = await self._client.get(url)
        except httpx.HTTPError as exc:
            raise TransportError(f"Failed to execute GitHub API call to {path}: {exc}") from exc

        if resp.is_error:
            raise TransportError(
                f"Failed to execute GitHub API call to {path}:\n"
                f"HTTP {resp.status_code} {resp.text}"
            )
        return resp.content

    # ── Context manager ─────────────────────────────────────────────────────

    async def close(self) -> None:
        """Close the underlying HTTP client."""
        await self._client.aclose()

    async def __aenter__(self) -> GitHubClient:
        return self

    async def __aexit__(self, *args: Any) -> None:
        await self.close()


class GhCliClient:
    """Runs ``gh api <path>``, reusing whatever login the GitHub CLI holds."""

    def __init__(self, executable: str = GH_EXECUTABLE) -> None:
        self._executable = executable

    async def fetch(self, path: str) -> bytes:
        logger.debug("%s api %s", self._executable, path)
        try:
            proc = await asyncio.create_subprocess_exec(
                self._executable,
                "api",
                path,
                stdout=asyncio.subprocess.PIPE,
                stderr=asyncio.subprocess.PIPE,
            )
        except OSError as exc:
            raise TransportError(f"Failed to spawn `{self._executable}`: {exc}") from exc

        stdout, stderr = await proc.communicate()
        if proc.returncode != 0:
            # gh prints the API's JSON error body on stdout and a summary on stderr
            output = (stdout or stderr).decode("utf-8", errors="replace").strip()
            raise TransportError(
                f"Failed to execute GitHub API call to {path}:\n"
                f"{output or 'Unable to read `gh` error.'}"
            )
        return stdout

    async def close(self) -> None:
        pass

    async def __aenter__(self) -> GhCliClient:
        return self

    async def __aexit__(self, *args: Any) -> None:
        await self.close()


def make_client(transport: str | None = None) -> GitHubClient | GhCliClient:
    """Build the client selected by *transport* (default: ``TRANSPORT``)."""
    transport = (transport or TRANSPORT).lower()
    if transport == "http":
        return GitHubClient()
    if transport == "gh":
        return GhCliClient()
    raise MalformedInputError(f"Unknown transport {transport!r}; expected 'http' or 'gh'.")
