"""Fetch traffic, clones and repository data and decode them into containers."""

from __future__ import annotations

import json
import logging
from collections.abc import Callable
from typing import Any, TypeVar

from repo_traffic.errors import DecodeError, MalformedInputError
from repo_traffic.github_client import ApiClient
from repo_traffic.models import (
    Clones,
    ClonesContainer,
    Frequency,
    RepoContainer,
    RepoId,
    RepoLicense,
    RepoMetadata,
    Traffic,
    TrafficContainer,
    TrafficStat,
)
from repo_traffic.timestamp import Timestamp

logger = logging.getLogger(__name__)

T = TypeVar("T")


# ── Field readers ───────────────────────────────────────────────────────────


def _load(raw: bytes, path: str) -> dict[str, Any]:
    try:
        data = json.loads(raw)
    except (json.JSONDecodeError, UnicodeDecodeError) as exc:
        raise DecodeError(f"Failed to parse response of {path}: {exc}") from exc
    if not isinstance(data, dict):
        raise DecodeError(f"Expected a JSON object from {path}, got {type(data).__name__}.")
    return data


def _field(data: dict[str, Any], key: str, kind: type | tuple[type, ...]) -> Any:
    if key not in data:
        raise DecodeError(f"Missing field {key!r}.")
    value = data[key]
    # bool is an int subclass; refuse it where a count is expected
    if not isinstance(value, kind) or (kind is int and isinstance(value, bool)):
        raise DecodeError(f"Field {key!r} has unexpected type {type(value).__name__}.")
    return value


def _count(data: dict[str, Any], key: str) -> int:
    value = _field(data, key, int)
    if value < 0:
        raise DecodeError(f"Field {key!r} must be non-negative, got {value}.")
    return value


def _stats(data: dict[str, Any], key: str) -> list[TrafficStat]:
    stats: list[TrafficStat] = []
    for entry in _field(data, key, list):
        if not isinstance(entry, dict):
            raise DecodeError(f"Entries of {key!r} must be objects.")
        try:
            timestamp = Timestamp.parse(_field(entry, "timestamp", str))
        except MalformedInputError as exc:
            raise DecodeError(str(exc)) from exc
        stats.append(
            TrafficStat(
                timestamp=timestamp,
                count=_count(entry, "count"),
                uniques=_count(entry, "uniques"),
            )
        )
    return stats


def _decode(parser: Callable[[dict[str, Any]], T], raw: bytes, path: str) -> T:
    data = _load(raw, path)
    try:
        return parser(data)
    except DecodeError as exc:
        raise DecodeError(f"Unexpected response shape from {path}: {exc}") from exc


# ── Decoders ────────────────────────────────────────────────────────────────


def parse_traffic(data: dict[str, Any]) -> Traffic:
    return Traffic(
        count=_count(data, "count"),
        uniques=_count(data, "uniques"),
        views=_stats(data, "views"),
    )


def parse_clones(data: dict[str, Any]) -> Clones:
    return Clones(
        count=_count(data, "count"),
        uniques=_count(data, "uniques"),
        clones=_stats(data, "clones"),
    )


def parse_repo(data: dict[str, Any]) -> RepoMetadata:
    """Keep the snapshot fields of a repository object; ignore the rest."""
    license_data = data.get("license")
    if license_data is None:
        repo_license = None
    elif isinstance(license_data, dict):
        repo_license = RepoLicense(
            key=_field(license_data, "key", str),
            name=_field(license_data, "name", str),
        )
    else:
        raise DecodeError("Field 'license' must be an object or null.")

    topics = _field(data, "topics", list)
    if not all(isinstance(topic, str) for topic in topics):
        raise DecodeError("Field 'topics' must be a list of strings.")

    return RepoMetadata(
        full_name=_field(data, "full_name", str),
        forks_count=_count(data, "forks_count"),
        stargazers_count=_count(data, "stargazers_count"),
        watchers_count=_count(data, "watchers_count"),
        open_issues_count=_count(data, "open_issues_count"),
        subscribers_count=_count(data, "subscribers_count"),
        has_wiki=_field(data, "has_wiki", bool),
        archived=_field(data, "archived", bool),
        has_projects=_field(data, "has_projects", bool),
        size=_count(data, "size"),
        topics=topics,
        license=repo_license,
    )


# ── Fetchers ────────────────────────────────────────────────────────────────


def traffic_path(repo: RepoId, frequency: Frequency) -> str:
    return f"repos/{repo.slug}/traffic/views?per={frequency.value}"


def clones_path(repo: RepoId, frequency: Frequency) -> str:
    return f"repos/{repo.slug}/traffic/clones?per={frequency.value}"


def repo_path(repo: RepoId) -> str:
    return f"repos/{repo.slug}"


async def fetch_traffic(
    client: ApiClient, repo: RepoId, frequency: Frequency
) -> TrafficContainer:
    """Fetch the views window of *repo* at *frequency*."""
    path = traffic_path(repo, frequency)
    payload = _decode(parse_traffic, await client.fetch(path), path)
    logger.info("Fetched %d %s view records for %s", len(payload.views), frequency.value, repo)
    return TrafficContainer(repo=repo, frequency=frequency, payload=payload)


async def fetch_clones(
    client: ApiClient, repo: RepoId, frequency: Frequency
) -> ClonesContainer:
    """Fetch the clones window of *repo* at *frequency*."""
    path = clones_path(repo, frequency)
    payload = _decode(parse_clones, await client.fetch(path), path)
    logger.info("Fetched %d %s clone records for %s", len(payload.clones), frequency.value, repo)
    return ClonesContainer(repo=repo, frequency=frequency, payload=payload)


async def fetch_repo(client: ApiClient, repo: RepoId) -> RepoContainer:
    path = repo_path(repo)
    payload = _decode(parse_repo, await client.fetch(path), path)
    logger.info("Fetched repository metadata for %s", repo)
    return RepoContainer(repo=repo, payload=payload)
