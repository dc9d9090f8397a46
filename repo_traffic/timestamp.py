"""Raw-preserving ISO 8601 timestamps as returned by the GitHub traffic API.

A :class:`Timestamp` is a parsed *view* over the original text: it exposes the
numeric date/time fields (used to derive file names) but always renders back
to the exact string it was parsed from.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, timezone

from repo_traffic.errors import MalformedInputError

_TIME_WIDTH = 8  # "HH:MM:SS"

# field -> (lowest, highest) accepted value
_RANGES: dict[str, tuple[int, int]] = {
    "year": (0, 9999),
    "month": (1, 12),
    "day": (1, 31),
    "hours": (0, 23),
    "minutes": (0, 59),
    "seconds": (0, 59),
}


def _strip_padding(part: str) -> str:
    """Drop leading zeros; an all-zero component becomes ``"0"``."""
    return part.lstrip("0") or "0"


def _parse_component(part: str, field: str) -> int | None:
    """Return the component as an int, or None if it is not a valid value."""
    digits = _strip_padding(part)
    if not (digits.isascii() and digits.isdigit()):
        return None
    value = int(digits)
    low, high = _RANGES[field]
    if not low <= value <= high:
        return None
    return value


@dataclass(frozen=True)
class Timestamp:
    """A date-time split into fields, remembering the text it came from."""

    year: int
    month: int
    day: int
    hours: int
    minutes: int
    seconds: int
    tz: str
    raw: str

    # ── Construction ────────────────────────────────────────────────────────

    @classmethod
    def parse(cls, text: str) -> Timestamp:
        """Parse ``YYYY-MM-DDTHH:MM:SS<tz>``.

        Raises :class:`MalformedInputError` naming the date or time part when
        either cannot be read.
        """
        if not isinstance(text, str):
            raise MalformedInputError(f"Expected a timestamp string, got {type(text).__name__}.")
        year, month, day = cls._parse_date(text)
        hours, minutes, seconds, tz = cls._parse_time(text)
        return cls(year, month, day, hours, minutes, seconds, tz, raw=text)

    @classmethod
    def now_utc(cls, now: datetime | None = None) -> Timestamp:
        """Capture *now* (default: the current instant) in UTC.

        The raw text is the canonical ``YYYY-MM-DDTHH:MM:SSZ`` rendering, so
        the result parses back to the same fields.
        """
        if now is None:
            now = datetime.now(timezone.utc)
        elif now.tzinfo is not None:
            now = now.astimezone(timezone.utc)
        raw = now.strftime("%Y-%m-%dT%H:%M:%S") + "Z"
        return cls(
            year=now.year,
            month=now.month,
            day=now.day,
            hours=now.hour,
            minutes=now.minute,
            seconds=now.second,
            tz="Z",
            raw=raw,
        )

    @staticmethod
    def _parse_date(text: str) -> tuple[int, int, int]:
        date, sep, _ = text.partition("T")
        if not sep:
            raise MalformedInputError(f"Failed to parse date ({text}).")
        parts = date.split("-")
        if len(parts) >= 3:
            year = _parse_component(parts[0], "year")
            month = _parse_component(parts[1], "month")
            day = _parse_component(parts[2], "day")
            if year is not None and month is not None and day is not None:
                return year, month, day
        raise MalformedInputError(f"Failed to parse year, month, day ({text}).")

    @staticmethod
    def _parse_time(text: str) -> tuple[int, int, int, str]:
        _, sep, time = text.partition("T")
        if not sep:
            raise MalformedInputError(f"Failed to parse time component ({text}).")
        parts = time[:_TIME_WIDTH].split(":")
        if len(time) >= _TIME_WIDTH and len(parts) == 3:
            hours = _parse_component(parts[0], "hours")
            minutes = _parse_component(parts[1], "minutes")
            seconds = _parse_component(parts[2], "seconds")
            if hours is not None and minutes is not None and seconds is not None:
                return hours, minutes, seconds, time[_TIME_WIDTH:]
        raise MalformedInputError(f"Failed to parse hours, minutes, seconds, tz ({text}).")

    # ── Rendering ───────────────────────────────────────────────────────────

    def as_date_str(self) -> str:
        """Zero-padded ``YYYY-MM-DD`` key used as the output file stem."""
        return f"{self.year}-{self.month:02d}-{self.day:02d}"

    @property
    def date_key(self) -> str:
        return self.as_date_str()

    def to_json(self) -> str:
        """JSON form: the original text, unchanged."""
        return self.raw

    def __str__(self) -> str:
        return self.raw
