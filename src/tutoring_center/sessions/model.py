from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime
from typing import Optional

from ..common.datetime_utils import is_past


@dataclass(frozen=True)
class Session:
    """Domain entity: one scheduled lesson of a course."""

    session_id: int
    course_id: int
    seq: int
    session_code: str
    session_date: date
    start_time: str
    end_time: str
    duration_minutes: int

    def is_past(self, now: datetime) -> bool:
        return is_past(self.session_date, now)


@dataclass(frozen=True)
class SessionEdit:
    """Desired state of one session in a schedule edit.

    Without ``session_id`` the entry is a new session.
    """

    session_date: date
    start_time: str
    end_time: str
    session_id: Optional[int] = None


@dataclass(frozen=True)
class TimetableEntry:
    """A session as shown on the teaching calendar."""

    session_id: int
    session_code: str
    session_date: date
    start_time: str
    end_time: str
    duration_minutes: int
    course_id: int
    course_code: str
    teacher_id: int
    teacher_name: str
    active_students: int
