from __future__ import annotations

from enum import Enum


class TeacherStatus(str, Enum):
    ACTIVE = "active"
    INACTIVE = "inactive"


class AttendanceStatus(str, Enum):
    """Attendance marks stored per (session, student)."""

    PRESENT = "present"
    ABSENT = "absent"


class ReactivationPolicy(str, Enum):
    """How a removed student re-added to the same course is recorded.

    REUSE_ROW reopens the most recent enrollment row in place.
    NEW_INTERVAL inserts a fresh row so every closed interval is kept.
    """

    REUSE_ROW = "reuse_row"
    NEW_INTERVAL = "new_interval"


class StatsMode(str, Enum):
    MONTHLY = "monthly"
    CUMULATIVE = "cumulative"


class StatsView(str, Enum):
    TEACHER = "teacher"
    SUBJECT = "subject"
