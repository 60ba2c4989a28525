from __future__ import annotations

import logging
from collections import Counter
from dataclasses import dataclass
from datetime import datetime
from typing import Iterable, Optional, Sequence, Union

from ..audit.model import AuditEvent
from ..common.datetime_utils import MonthWindow, duration_minutes, now_local
from ..core.exceptions import ConflictError, InvalidInputError, NotFoundError
from ..courses.model import Course, session_code
from ..database.store import Store, StoreSession
from .model import Session, SessionEdit, TimetableEntry

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class _ValidEdit:
    edit: SessionEdit
    duration_minutes: int


def _validate(edits: Iterable[SessionEdit]) -> list[_ValidEdit]:
    out: list[_ValidEdit] = []
    seen_ids: set[int] = set()
    for edit in edits:
        if edit.session_date is None:
            raise InvalidInputError("Session date is required")
        if edit.session_id is not None:
            if edit.session_id in seen_ids:
                raise InvalidInputError(f"Session {edit.session_id} appears twice")
            seen_ids.add(edit.session_id)
        out.append(_ValidEdit(edit=edit, duration_minutes=duration_minutes(edit.start_time, edit.end_time)))
    return out


def mint_sessions(tx: StoreSession, course: Course, edits: Sequence[SessionEdit]) -> list[int]:
    """Create new sessions numbered after the course's highest-ever sequence.

    Numbers are never handed out twice, even when earlier sessions were deleted.
    """

    valid = _validate(edits)
    seq = course.session_seq
    created: list[int] = []
    for v in valid:
        seq += 1
        created.append(
            tx.sessions.create(
                course_id=course.course_id,
                seq=seq,
                session_code=session_code(course.course_code, seq),
                session_date=v.edit.session_date,
                start_time=v.edit.start_time.strip(),
                end_time=v.edit.end_time.strip(),
                duration_minutes=v.duration_minutes,
            )
        )
    if created:
        tx.courses.set_session_seq(course.course_id, session_seq=seq)
    return created


class SessionScheduler:
    def __init__(self, store: Store):
        self._store = store

    @staticmethod
    def _load_course(tx: StoreSession, course_id: int) -> Course:
        course = tx.courses.get_by_id(course_id, for_update=True)
        if not course:
            raise NotFoundError(f"Course {course_id} does not exist")
        if course.is_deleted:
            raise ConflictError(f"Course {course.course_code} has been deleted")
        return course

    def create_sessions(
        self,
        course_id: int,
        entries: Sequence[SessionEdit],
        *,
        actor_id: int,
        now: Optional[datetime] = None,
    ) -> list[Session]:
        """Append sessions to a course without touching existing ones."""

        now = now or now_local()
        if any(e.session_id is not None for e in entries):
            raise InvalidInputError("New sessions must not carry a session id")

        with self._store.transaction() as tx:
            course = self._load_course(tx, course_id)
            created = mint_sessions(tx, course, entries)
            tx.audit.append(
                AuditEvent(
                    actor_id=actor_id,
                    action="sessions_create",
                    entity_type="course",
                    entity_id=course.course_id,
                    details={"course_code": course.course_code, "created": len(created)},
                    timestamp=now,
                )
            )
            sessions = list(tx.sessions.list_for_course(course.course_id))

        logger.info("Created %d sessions for course %s", len(created), course.course_code)
        return sessions

    def schedule_sessions(
        self,
        course_id: int,
        edits: Sequence[SessionEdit],
        *,
        actor_id: int,
        now: Optional[datetime] = None,
    ) -> list[Session]:
        """Make the course's session list equal to ``edits``.

        Entries with an id update that session's date and times (its code never
        changes), entries without an id become new sessions, and existing
        sessions missing from ``edits`` are deleted together with their
        attendance rows.
        """

        now = now or now_local()
        valid = _validate(edits)

        with self._store.transaction() as tx:
            course = self._load_course(tx, course_id)
            existing = {s.session_id: s for s in tx.sessions.list_for_course(course.course_id)}

            kept_ids = {v.edit.session_id for v in valid if v.edit.session_id is not None}
            unknown = kept_ids - set(existing)
            if unknown:
                raise NotFoundError(f"Sessions {sorted(unknown)} do not belong to course {course.course_code}")

            to_delete = sorted(set(existing) - kept_ids)
            if to_delete:
                removed_marks = tx.attendance.delete_for_sessions(to_delete)
                tx.sessions.delete_many(to_delete)
                logger.debug("Deleted sessions %s and %d attendance rows", to_delete, removed_marks)

            updated = 0
            for v in valid:
                if v.edit.session_id is None:
                    continue
                tx.sessions.update_times(
                    v.edit.session_id,
                    session_date=v.edit.session_date,
                    start_time=v.edit.start_time.strip(),
                    end_time=v.edit.end_time.strip(),
                    duration_minutes=v.duration_minutes,
                )
                updated += 1

            created = mint_sessions(tx, course, [v.edit for v in valid if v.edit.session_id is None])

            tx.audit.append(
                AuditEvent(
                    actor_id=actor_id,
                    action="sessions_update",
                    entity_type="course",
                    entity_id=course.course_id,
                    details={
                        "course_code": course.course_code,
                        "created": len(created),
                        "updated": updated,
                        "deleted": to_delete,
                    },
                    timestamp=now,
                )
            )
            sessions = list(tx.sessions.list_for_course(course.course_id))

        logger.info(
            "Sessions for course %s scheduled: created=%d updated=%d deleted=%d",
            course.course_code,
            len(created),
            updated,
            len(to_delete),
        )
        return sessions

    def timetable(
        self,
        teacher_id: Optional[int] = None,
        month: Union[MonthWindow, str, None] = None,
    ) -> list[TimetableEntry]:
        """Sessions of live courses, optionally for one teacher or one month.

        Each entry carries the number of students currently on the roster.
        """

        window = None
        if month is not None:
            window = month if isinstance(month, MonthWindow) else MonthWindow.parse(month)

        with self._store.reader() as rd:
            teachers = {t.teacher_id: t for t in rd.teachers.list_all()}
            courses = {c.course_id: c for c in rd.courses.list_all() if not c.is_deleted}
            sessions = list(rd.sessions.list_all())
            active = Counter(e.course_id for e in rd.enrollments.list_all() if e.is_active)

        entries = []
        for s in sessions:
            course = courses.get(s.course_id)
            if course is None:
                continue
            if teacher_id is not None and course.teacher_id != teacher_id:
                continue
            if window is not None and not window.contains(s.session_date):
                continue
            teacher = teachers.get(course.teacher_id)
            entries.append(
                TimetableEntry(
                    session_id=s.session_id,
                    session_code=s.session_code,
                    session_date=s.session_date,
                    start_time=s.start_time,
                    end_time=s.end_time,
                    duration_minutes=s.duration_minutes,
                    course_id=course.course_id,
                    course_code=course.course_code,
                    teacher_id=course.teacher_id,
                    teacher_name=teacher.name if teacher else "",
                    active_students=active.get(course.course_id, 0),
                )
            )

        entries.sort(key=lambda e: (e.session_date, e.start_time, e.session_code))
        return entries
