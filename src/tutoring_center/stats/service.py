from __future__ import annotations

import logging
from collections import defaultdict
from dataclasses import dataclass
from typing import Union

from ..common.datetime_utils import MonthWindow
from ..core.enums import StatsMode, StatsView
from ..core.exceptions import NotFoundError
from ..database.store import Store
from .aggregators.enrollments import EnrollmentAggregator
from .aggregators.hours import HoursAggregator
from .aggregators.retention import RetentionAggregator
from .model import (
    CourseFact,
    EnrollmentCountRow,
    HoursDetail,
    HoursDetailRow,
    HoursRow,
    MemberFact,
    RetentionRow,
    SessionFact,
    TeacherFact,
)

logger = logging.getLogger(__name__)

MonthArg = Union[MonthWindow, str, None]


@dataclass(frozen=True)
class StatsSnapshot:
    """Committed state loaded once per request and shared by the aggregators."""

    teachers: tuple[TeacherFact, ...]
    sessions: tuple[SessionFact, ...]
    courses: tuple[CourseFact, ...]


class StatisticsService:
    """Read-only reporting over the latest committed state."""

    def __init__(self, store: Store):
        self._store = store

    def snapshot(self) -> StatsSnapshot:
        with self._store.reader() as rd:
            teachers = list(rd.teachers.list_all())
            students = {s.student_id: s for s in rd.students.list_all()}
            courses = list(rd.courses.list_all())
            sessions = list(rd.sessions.list_all())
            enrollments = list(rd.enrollments.list_all())

        teacher_facts = {
            t.teacher_id: TeacherFact(
                teacher_id=t.teacher_id,
                teacher_code=t.teacher_code,
                name=t.name,
                subjects=tuple(t.subjects),
            )
            for t in teachers
        }
        course_by_id = {c.course_id: c for c in courses}

        dates_by_course = defaultdict(list)
        session_facts = []
        for s in sessions:
            course = course_by_id.get(s.course_id)
            if course is None:
                continue
            dates_by_course[s.course_id].append(s.session_date)
            session_facts.append(
                SessionFact(
                    session_id=s.session_id,
                    course_id=s.course_id,
                    teacher_id=course.teacher_id,
                    session_date=s.session_date,
                    duration_minutes=s.duration_minutes,
                    course_code=course.course_code,
                    session_code=s.session_code,
                    start_time=s.start_time,
                    end_time=s.end_time,
                )
            )

        members_by_course = defaultdict(list)
        for e in enrollments:
            student = students.get(e.student_id)
            if student is None:
                continue
            members_by_course[e.course_id].append(
                MemberFact(
                    student_code=student.student_code,
                    first_enrolled_at=student.first_enrolled_at,
                )
            )

        course_facts = []
        for c in courses:
            teacher = teacher_facts.get(c.teacher_id) or TeacherFact(c.teacher_id, str(c.teacher_id), "")
            course_facts.append(
                CourseFact(
                    course_id=c.course_id,
                    course_code=c.course_code,
                    teacher=teacher,
                    session_dates=tuple(dates_by_course.get(c.course_id, ())),
                    members=tuple(members_by_course.get(c.course_id, ())),
                    is_deleted=c.is_deleted,
                )
            )

        logger.debug(
            "Stats snapshot: %d teachers, %d courses, %d sessions, %d enrollments",
            len(teacher_facts),
            len(course_facts),
            len(session_facts),
            len(enrollments),
        )
        return StatsSnapshot(
            teachers=tuple(teacher_facts.values()),
            sessions=tuple(session_facts),
            courses=tuple(course_facts),
        )

    def compute_hours(
        self,
        mode: StatsMode,
        month: MonthArg = None,
        view: StatsView = StatsView.TEACHER,
    ) -> list[HoursRow]:
        snap = self.snapshot()
        return HoursAggregator(view).compute(mode, month, snap.teachers, snap.sessions)

    def compute_enrollments(
        self,
        mode: StatsMode,
        month: MonthArg = None,
        view: StatsView = StatsView.TEACHER,
    ) -> list[EnrollmentCountRow]:
        snap = self.snapshot()
        return EnrollmentAggregator(view).compute(mode, month, snap.courses)

    def compute_retention(
        self,
        month: Union[MonthWindow, str],
        view: StatsView = StatsView.TEACHER,
    ) -> list[RetentionRow]:
        snap = self.snapshot()
        return RetentionAggregator(view).compute(month, snap.courses)

    def hours_detail(self, teacher_id: int, month: Union[MonthWindow, str]) -> HoursDetail:
        """Sessions a teacher taught in a month, in date order, for billing."""

        window = month if isinstance(month, MonthWindow) else MonthWindow.parse(month)
        snap = self.snapshot()
        teacher = next((t for t in snap.teachers if t.teacher_id == teacher_id), None)
        if teacher is None:
            raise NotFoundError(f"Teacher {teacher_id} does not exist")

        sessions = sorted(
            (s for s in snap.sessions if s.teacher_id == teacher_id and window.contains(s.session_date)),
            key=lambda s: (s.session_date, s.start_time, s.session_code),
        )
        rows = [
            HoursDetailRow(
                session_date=s.session_date,
                start_time=s.start_time,
                end_time=s.end_time,
                duration_minutes=s.duration_minutes,
                course_code=s.course_code,
                session_code=s.session_code,
            )
            for s in sessions
        ]
        return HoursDetail(teacher=teacher, month=window, rows=rows)
