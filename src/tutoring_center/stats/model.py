from __future__ import annotations

import math
from dataclasses import dataclass, field
from datetime import date, datetime
from typing import Optional, Union

from ..common.datetime_utils import MonthWindow
from ..core.constants import HOURS_DISPLAY_DECIMALS, RETENTION_DISPLAY_DECIMALS

StatsKey = Union[int, str]


@dataclass(frozen=True)
class TeacherFact:
    teacher_id: int
    teacher_code: str
    name: str
    subjects: tuple[str, ...] = ()


@dataclass(frozen=True)
class SessionFact:
    """A session joined with the teacher who owns its course."""

    session_id: int
    course_id: int
    teacher_id: int
    session_date: date
    duration_minutes: int
    course_code: str = ""
    session_code: str = ""
    start_time: str = ""
    end_time: str = ""


@dataclass(frozen=True)
class MemberFact:
    """One enrollment row of a course, reduced to what the statistics need."""

    student_code: str
    first_enrolled_at: Optional[datetime] = None


@dataclass(frozen=True)
class CourseFact:
    course_id: int
    course_code: str
    teacher: TeacherFact
    session_dates: tuple[date, ...] = ()
    members: tuple[MemberFact, ...] = ()
    is_deleted: bool = False

    def qualifies(self, month: Optional[MonthWindow]) -> bool:
        """A course counts for a month if at least one of its sessions falls in it.

        ``month=None`` is cumulative mode, where every course counts.
        """
        if month is None:
            return True
        return any(month.contains(d) for d in self.session_dates)

    @property
    def student_codes(self) -> set[str]:
        return {m.student_code for m in self.members}


@dataclass(frozen=True)
class HoursRow:
    key: StatsKey
    label: str
    minutes: float
    name: Optional[str] = None

    @property
    def rounded_minutes(self) -> int:
        # Half minutes round up.
        return int(math.floor(self.minutes + 0.5))

    @property
    def hours(self) -> float:
        return round(self.minutes / 60, HOURS_DISPLAY_DECIMALS)


@dataclass(frozen=True)
class EnrollmentCountRow:
    key: StatsKey
    label: str
    count: int
    name: Optional[str] = None


@dataclass(frozen=True)
class RetentionRow:
    key: StatsKey
    label: str
    previous_count: int
    retained_count: int
    name: Optional[str] = None

    @property
    def rate(self) -> float:
        """Percentage of last month's cohort that continued."""
        return self.retained_count / self.previous_count * 100

    @property
    def display_rate(self) -> float:
        return round(self.rate, RETENTION_DISPLAY_DECIMALS)


@dataclass(frozen=True)
class HoursDetailRow:
    session_date: date
    start_time: str
    end_time: str
    duration_minutes: int
    course_code: str
    session_code: str


@dataclass(frozen=True)
class HoursDetail:
    teacher: TeacherFact
    month: MonthWindow
    rows: list[HoursDetailRow] = field(default_factory=list)

    @property
    def total_minutes(self) -> int:
        return sum(r.duration_minutes for r in self.rows)

    @property
    def total_hours(self) -> float:
        return round(self.total_minutes / 60, HOURS_DISPLAY_DECIMALS)
