from __future__ import annotations

import calendar
import re
from dataclasses import dataclass
from datetime import date, datetime, time
from typing import Optional

from ..core.exceptions import InvalidInputError

_HHMM = re.compile(r"^([01]\d|2[0-3]):([0-5]\d)$")
_YYYY_MM = re.compile(r"^(\d{4})-(\d{2})$")


def parse_iso_date(value: str) -> date:
    """Parse YYYY-MM-DD string into date."""
    try:
        return datetime.strptime(value, "%Y-%m-%d").date()
    except (TypeError, ValueError):
        raise InvalidInputError(f"Invalid date (YYYY-MM-DD): {value!r}")


def now_local() -> datetime:
    """Current local time.

    Note: Wrapped so tests can patch/mocked easier.
    """
    return datetime.now()


def require_hhmm(value: str, field_name: str) -> str:
    v = (value or "").strip()
    if not _HHMM.match(v):
        raise InvalidInputError(f"{field_name} must be HH:MM (24h), got {value!r}")
    return v


def minutes_of(value: str) -> int:
    """Minutes since midnight for an HH:MM string."""
    hours, minutes = require_hhmm(value, "time").split(":")
    return int(hours) * 60 + int(minutes)


def duration_minutes(start_time: str, end_time: str) -> int:
    """Length of [start, end) in minutes.

    Both values are zero-padded HH:MM so lexical order equals time order.
    """
    start = require_hhmm(start_time, "start_time")
    end = require_hhmm(end_time, "end_time")
    if not start < end:
        raise InvalidInputError(f"start_time {start} must be before end_time {end}")
    minutes = minutes_of(end) - minutes_of(start)
    if minutes <= 0:
        raise InvalidInputError("Session duration must be positive")
    return minutes


def local_midnight(value: date) -> datetime:
    return datetime.combine(value, time.min)


def is_past(session_date: date, now: datetime) -> bool:
    """A session dated D is past once ``now`` is strictly after D 00:00 local."""
    return local_midnight(session_date) < now


@dataclass(frozen=True, order=True)
class MonthWindow:
    """Calendar month in local time."""

    year: int
    month: int

    def __post_init__(self):
        if not 1 <= int(self.month) <= 12:
            raise InvalidInputError(f"Month out of range: {self.month}")

    @classmethod
    def parse(cls, value: str) -> "MonthWindow":
        """Parse ``YYYY-MM``."""
        m = _YYYY_MM.match((value or "").strip())
        if not m:
            raise InvalidInputError(f"Invalid month (YYYY-MM): {value!r}")
        return cls(int(m.group(1)), int(m.group(2)))

    @classmethod
    def of(cls, value: date) -> "MonthWindow":
        return cls(value.year, value.month)

    @property
    def start(self) -> datetime:
        return datetime(self.year, self.month, 1)

    @property
    def end(self) -> datetime:
        last_day = calendar.monthrange(self.year, self.month)[1]
        return datetime.combine(date(self.year, self.month, last_day), time.max)

    def contains(self, value: date | datetime) -> bool:
        if isinstance(value, datetime):
            return self.start <= value <= self.end
        return value.year == self.year and value.month == self.month

    def previous(self) -> "MonthWindow":
        if self.month == 1:
            return MonthWindow(self.year - 1, 12)
        return MonthWindow(self.year, self.month - 1)

    def __str__(self) -> str:
        return f"{self.year:04d}-{self.month:02d}"


def is_new_student(first_enrolled_at: Optional[datetime], now: datetime) -> bool:
    """True when the first-ever enrollment happened in the same month as ``now``."""
    if first_enrolled_at is None:
        return False
    return MonthWindow.of(first_enrolled_at) == MonthWindow.of(now)
