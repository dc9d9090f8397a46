"""Resolve a command and drive fetch → write for it.

``traffic`` and ``clones`` fetch the weekly and daily windows concurrently.
Whichever window arrived is written even if its sibling failed; the failure
is raised once writing is done.
"""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Awaitable, Callable
from dataclasses import dataclass
from enum import Enum
from pathlib import Path

from repo_traffic.errors import MalformedInputError
from repo_traffic.fetcher import fetch_clones, fetch_repo, fetch_traffic
from repo_traffic.github_client import ApiClient
from repo_traffic.models import Frequency, RepoId, TimeSeries
from repo_traffic.timestamp import Timestamp
from repo_traffic.writer import write_snapshot, write_stats

logger = logging.getLogger(__name__)


class CommandKind(str, Enum):
    TRAFFIC = "traffic"
    CLONES = "clones"
    REPO = "repo"


@dataclass(frozen=True)
class Command:
    kind: CommandKind
    repo: RepoId

    @classmethod
    def parse(cls, name: str | None, repo: str | None) -> Command:
        """Build a command from its name and ``owner/name`` argument."""
        if not name:
            raise MalformedInputError("No command provided.")
        try:
            kind = CommandKind(name)
        except ValueError:
            raise MalformedInputError(f"Command {name} does not exist.") from None
        if not repo:
            raise MalformedInputError("No repository provided.")
        return cls(kind=kind, repo=RepoId.parse(repo))


def repo_dir(out_dir: Path, repo: RepoId) -> Path:
    return Path(out_dir) / repo.owner / repo.name


# ── Time series ─────────────────────────────────────────────────────────────

Fetch = Callable[[ApiClient, RepoId, Frequency], Awaitable[TimeSeries]]

_SERIES_FETCHERS: dict[CommandKind, Fetch] = {
    CommandKind.TRAFFIC: fetch_traffic,
    CommandKind.CLONES: fetch_clones,
}


async def sync_time_series(
    client: ApiClient,
    repo: RepoId,
    kind: CommandKind,
    out_dir: Path,
) -> list[Path]:
    """Fetch both windows of *kind* and write whatever arrived.

    Writes go weekly first, then daily. A write error propagates at once.
    A fetch error is raised after the other window has been written; when
    both fail, the weekly error is raised and the daily one is logged.
    """
    fetch = _SERIES_FETCHERS[kind]
    target = repo_dir(out_dir, repo) / kind.value

    results = await asyncio.gather(
        fetch(client, repo, Frequency.WEEK),
        fetch(client, repo, Frequency.DAY),
        return_exceptions=True,
    )

    written: list[Path] = []
    errors: list[BaseException] = []
    for frequency, result in zip((Frequency.WEEK, Frequency.DAY), results):
        if isinstance(result, BaseException):
            logger.error("Fetching %s %s data for %s failed: %s", frequency.value, kind.value, repo, result)
            errors.append(result)
            continue
        paths = write_stats(target, result)
        logger.info("Wrote %d %s %s files for %s", len(paths), frequency.value, kind.value, repo)
        written.extend(paths)

    if errors:
        raise errors[0]
    return written


# ── Repository snapshot ─────────────────────────────────────────────────────


async def sync_repo(
    client: ApiClient,
    repo: RepoId,
    out_dir: Path,
    now: Timestamp | None = None,
) -> list[Path]:
    container = await fetch_repo(client, repo)
    path = write_snapshot(repo_dir(out_dir, repo) / "repo", container.payload, now=now)
    return [path]


async def run_command(
    command: Command,
    out_dir: Path,
    client: ApiClient,
    now: Timestamp | None = None,
) -> list[Path]:
    """Execute *command* against *client*, writing under *out_dir*.

    Returns the paths written.
    """
    logger.info("Running %s for %s into %s", command.kind.value, command.repo, out_dir)
    if command.kind is CommandKind.REPO:
        return await sync_repo(client, command.repo, out_dir, now=now)
    return await sync_time_series(client, command.repo, command.kind, out_dir)
