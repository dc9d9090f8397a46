"""Persist time series as one dated JSON file per data point."""

from __future__ import annotations

import dataclasses
import json
import logging
import os
import tempfile
from pathlib import Path
from typing import Any

from repo_traffic.config import JSON_INDENT
from repo_traffic.errors import PersistenceError
from repo_traffic.models import TimeSeries
from repo_traffic.timestamp import Timestamp

logger = logging.getLogger(__name__)


def _to_jsonable(value: Any) -> Any:
    if hasattr(value, "to_json"):
        return value.to_json()
    if dataclasses.is_dataclass(value) and not isinstance(value, type):
        return dataclasses.asdict(value)
    return value


def _umask() -> int:
    mask = os.umask(0)
    os.umask(mask)
    return mask


def write_json(path: Path, value: Any) -> Path:
    """Write *value* as indented JSON at *path*, creating parent directories.

    The body goes to a temporary sibling first and is then moved over *path*,
    so an existing file is either fully replaced or left untouched. Output is
    deterministic for equal input, so rewriting unchanged data yields
    byte-identical files.
    """
    path = Path(path)
    try:
        body = json.dumps(
            _to_jsonable(value), indent=JSON_INDENT, ensure_ascii=False
        ).encode("utf-8")
    except (TypeError, ValueError) as exc:
        # UnicodeEncodeError (lone surrogates) is a ValueError
        raise PersistenceError(f"Failed to serialize JSON for {path}: {exc}") from exc

    tmp_name: str | None = None
    try:
        path.parent.mkdir(parents=True, exist_ok=True)
        logger.info("Writing JSON file at %s", path.resolve())
        with tempfile.NamedTemporaryFile(
            dir=path.parent, prefix=f".{path.name}.", suffix=".tmp", delete=False
        ) as tmp:
            tmp_name = tmp.name
            tmp.write(body)
        # NamedTemporaryFile creates 0600; match what a plain open() would give
        os.chmod(tmp_name, 0o666 & ~_umask())
        os.replace(tmp_name, path)
    except OSError as exc:
        if tmp_name is not None:
            Path(tmp_name).unlink(missing_ok=True)
        raise PersistenceError(f"Failed to write {path}: {exc}") from exc
    return path


def write_stats(out_dir: Path, stats: TimeSeries) -> list[Path]:
    """Write every record of *stats* to ``out_dir/<frequency>/<YYYY-MM-DD>.json``.

    Records are written in order. The first failure propagates; files written
    before it are left in place and the remaining records are skipped.
    """
    freq_dir = Path(out_dir) / stats.frequency.value
    written: list[Path] = []
    for stat in stats.records:
        path = freq_dir / f"{stat.timestamp.as_date_str()}.json"
        written.append(write_json(path, stat))
    return written


def write_snapshot(out_dir: Path, payload: Any, now: Timestamp | None = None) -> Path:
    """Write *payload* to ``out_dir/<today UTC>.json``.

    *now* names the file; it defaults to the current UTC instant.
    """
    if now is None:
        now = Timestamp.now_utc()
    return write_json(Path(out_dir) / f"{now.as_date_str()}.json", payload)
