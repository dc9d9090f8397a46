"""Domain models for GitHub traffic, clone and repository snapshots."""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Protocol

from repo_traffic.errors import MalformedInputError
from repo_traffic.timestamp import Timestamp


class Frequency(str, Enum):
    """Granularity of a traffic window; also the output subdirectory name."""

    DAY = "day"
    WEEK = "week"

    def __str__(self) -> str:
        return self.value


@dataclass(frozen=True)
class RepoId:
    """A repository identified by owner and name."""

    owner: str
    name: str

    @classmethod
    def parse(cls, text: str) -> RepoId:
        """Split ``owner/name`` on the first ``/``."""
        owner, sep, name = text.partition("/")
        if not sep:
            raise MalformedInputError(f'Failed to parse GitHub repository "{text}".')
        return cls(owner=owner, name=name)

    @property
    def slug(self) -> str:
        return f"{self.owner}/{self.name}"

    def __str__(self) -> str:
        return self.slug


# ── Time series ─────────────────────────────────────────────────────────────


@dataclass
class TrafficStat:
    """One data point of a views or clones window."""

    timestamp: Timestamp
    count: int
    uniques: int

    def to_json(self) -> dict[str, Any]:
        return {
            "timestamp": self.timestamp.to_json(),
            "count": self.count,
            "uniques": self.uniques,
        }


@dataclass
class Traffic:
    """Payload of ``GET /repos/{owner}/{repo}/traffic/views``."""

    count: int
    uniques: int
    views: list[TrafficStat] = field(default_factory=list)


@dataclass
class Clones:
    """Payload of ``GET /repos/{owner}/{repo}/traffic/clones``."""

    count: int
    uniques: int
    clones: list[TrafficStat] = field(default_factory=list)


class TimeSeries(Protocol):
    """Anything that can be written as one file per data point."""

    @property
    def frequency(self) -> Frequency: ...

    @property
    def records(self) -> Sequence[TrafficStat]: ...


@dataclass
class TrafficContainer:
    repo: RepoId
    frequency: Frequency
    payload: Traffic

    @property
    def records(self) -> Sequence[TrafficStat]:
        return self.payload.views


@dataclass
class ClonesContainer:
    repo: RepoId
    frequency: Frequency
    payload: Clones

    @property
    def records(self) -> Sequence[TrafficStat]:
        return self.payload.clones


# ── Repository metadata ─────────────────────────────────────────────────────


@dataclass
class RepoLicense:
    key: str
    name: str


@dataclass
class RepoMetadata:
    """The subset of ``GET /repos/{owner}/{repo}`` kept in snapshots."""

    full_name: str
    forks_count: int
    stargazers_count: int
    watchers_count: int
    open_issues_count: int
    subscribers_count: int
    has_wiki: bool
    archived: bool
    has_projects: bool
    size: int
    topics: list[str] = field(default_factory=list)
    license: RepoLicense | None = None


@dataclass
class RepoContainer:
    repo: RepoId
    payload: RepoMetadata
