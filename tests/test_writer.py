"""Tests for the per-record partitioned writer and the snapshot writer."""

from __future__ import annotations

import json
import os
import stat
import sys
from datetime import datetime, timezone

import pytest

from conftest import REPO_PAYLOAD, clones_payload, views_payload
from repo_traffic.errors import PersistenceError
from repo_traffic.fetcher import parse_clones, parse_repo, parse_traffic
from repo_traffic.models import ClonesContainer, Frequency, RepoId, TrafficContainer
from repo_traffic.timestamp import Timestamp
from repo_traffic.writer import write_json, write_snapshot, write_stats

REPO = RepoId("octocat", "Hello-World")


def _traffic(frequency: Frequency, *days: str) -> TrafficContainer:
    return TrafficContainer(REPO, frequency, parse_traffic(views_payload(*days)))


def _at(year: int, month: int, day: int) -> Timestamp:
    return Timestamp.now_utc(datetime(year, month, day, 12, 0, 0, tzinfo=timezone.utc))


# ── write_json ──────────────────────────────────────────────────────────────


def test_write_json_creates_parents(tmp_path) -> None:
    path = write_json(tmp_path / "a" / "b" / "c.json", {"x": 1})
    assert path.read_text() == '{\n  "x": 1\n}'


def test_write_json_overwrites(tmp_path) -> None:
    target = tmp_path / "c.json"
    write_json(target, {"x": 1})
    write_json(target, {"x": 2})
    assert json.loads(target.read_text()) == {"x": 2}


def test_write_json_unencodable_text_keeps_previous_file(tmp_path) -> None:
    target = tmp_path / "c.json"
    write_json(target, {"name": "ok"})

    # a lone surrogate survives json.loads but cannot be encoded as UTF-8
    with pytest.raises(PersistenceError):
        write_json(target, {"name": "\ud800"})

    assert json.loads(target.read_text()) == {"name": "ok"}
    assert [p.name for p in tmp_path.iterdir()] == ["c.json"]


def test_write_json_failed_replace_leaves_no_temp_file(tmp_path) -> None:
    (tmp_path / "c.json").mkdir()
    with pytest.raises(PersistenceError):
        write_json(tmp_path / "c.json", {"x": 1})
    assert [p.name for p in tmp_path.iterdir()] == ["c.json"]


@pytest.mark.skipif(sys.platform == "win32", reason="POSIX permission bits")
def test_write_json_honours_umask(tmp_path) -> None:
    mask = os.umask(0o022)
    try:
        path = write_json(tmp_path / "c.json", {"x": 1})
    finally:
        os.umask(mask)
    assert stat.S_IMODE(path.stat().st_mode) == 0o644


def test_write_json_blocked_parent(tmp_path) -> None:
    blocker = tmp_path / "blocker"
    blocker.write_text("")
    with pytest.raises(PersistenceError):
        write_json(blocker / "c.json", {"x": 1})


# ── write_stats ─────────────────────────────────────────────────────────────


def test_write_stats_one_file_per_record(tmp_path) -> None:
    written = write_stats(tmp_path, _traffic(Frequency.DAY, "2024-01-01", "2024-01-02"))

    assert written == [tmp_path / "day" / "2024-01-01.json", tmp_path / "day" / "2024-01-02.json"]
    assert sorted(p.name for p in (tmp_path / "day").iterdir()) == [
        "2024-01-01.json",
        "2024-01-02.json",
    ]
    assert json.loads((tmp_path / "day" / "2024-01-01.json").read_text()) == {
        "timestamp": "2024-01-01T00:00:00Z",
        "count": 10,
        "uniques": 5,
    }


def test_write_stats_keeps_raw_timestamp_and_key_order(tmp_path) -> None:
    payload = {
        "count": 3,
        "uniques": 1,
        "views": [{"timestamp": "2024-02-05T00:00:00+00:00", "count": 3, "uniques": 1}],
    }
    container = TrafficContainer(REPO, Frequency.WEEK, parse_traffic(payload))
    write_stats(tmp_path, container)

    text = (tmp_path / "week" / "2024-02-05.json").read_text()
    assert text == '{\n  "timestamp": "2024-02-05T00:00:00+00:00",\n  "count": 3,\n  "uniques": 1\n}'


def test_write_stats_handles_clones(tmp_path) -> None:
    container = ClonesContainer(REPO, Frequency.WEEK, parse_clones(clones_payload("2024-01-08")))
    write_stats(tmp_path, container)
    assert json.loads((tmp_path / "week" / "2024-01-08.json").read_text())["count"] == 4


def test_write_stats_is_idempotent(tmp_path) -> None:
    container = _traffic(Frequency.DAY, "2024-01-01", "2024-01-02")
    first = [p.read_bytes() for p in write_stats(tmp_path, container)]
    second = [p.read_bytes() for p in write_stats(tmp_path, container)]
    assert first == second


def test_write_stats_stops_at_first_failure(tmp_path) -> None:
    # a directory where the second file should go makes that write fail
    (tmp_path / "day" / "2024-01-02.json").mkdir(parents=True)
    container = _traffic(Frequency.DAY, "2024-01-01", "2024-01-02", "2024-01-03")

    with pytest.raises(PersistenceError):
        write_stats(tmp_path, container)

    assert (tmp_path / "day" / "2024-01-01.json").is_file()
    assert not (tmp_path / "day" / "2024-01-03.json").exists()


def test_write_stats_empty_window_writes_nothing(tmp_path) -> None:
    assert write_stats(tmp_path, _traffic(Frequency.DAY)) == []
    assert not (tmp_path / "day").exists()


# ── write_snapshot ──────────────────────────────────────────────────────────


def test_write_snapshot_named_by_today(tmp_path) -> None:
    meta = parse_repo(REPO_PAYLOAD)
    path = write_snapshot(tmp_path, meta, now=_at(2024, 5, 1))

    assert path == tmp_path / "2024-05-01.json"
    data = json.loads(path.read_text())
    assert list(data) == [
        "full_name",
        "forks_count",
        "stargazers_count",
        "watchers_count",
        "open_issues_count",
        "subscribers_count",
        "has_wiki",
        "archived",
        "has_projects",
        "size",
        "topics",
        "license",
    ]
    assert data["license"] == {"key": "mit", "name": "MIT License"}


def test_write_snapshot_distinct_days(tmp_path) -> None:
    meta = parse_repo(REPO_PAYLOAD)
    write_snapshot(tmp_path, meta, now=_at(2024, 5, 1))
    write_snapshot(tmp_path, meta, now=_at(2024, 5, 2))
    assert sorted(p.name for p in tmp_path.iterdir()) == ["2024-05-01.json", "2024-05-02.json"]


def test_write_snapshot_same_day_overwrites(tmp_path) -> None:
    write_snapshot(tmp_path, {"stars": 1}, now=_at(2024, 5, 1))
    write_snapshot(tmp_path, {"stars": 2}, now=_at(2024, 5, 1))
    assert [p.name for p in tmp_path.iterdir()] == ["2024-05-01.json"]
    assert json.loads((tmp_path / "2024-05-01.json").read_text()) == {"stars": 2}


def test_write_snapshot_defaults_to_current_day(tmp_path) -> None:
    path = write_snapshot(tmp_path, {"stars": 1})
    assert path.name == f"{Timestamp.now_utc().as_date_str()}.json"
