from __future__ import annotations

import logging
from datetime import datetime
from typing import Iterable, Optional, Sequence

from ..audit.model import AuditEvent
from ..common.datetime_utils import now_local
from ..common.validators import require_non_empty, require_tags
from ..core.exceptions import ConflictError, InvalidInputError, InvalidStateError, NotFoundError
from ..database.store import Store
from ..sessions.model import SessionEdit
from ..sessions.scheduler import mint_sessions
from .model import Course

logger = logging.getLogger(__name__)


class CourseService:
    def __init__(self, store: Store):
        self._store = store

    def create_course(
        self,
        *,
        course_code: str,
        teacher_id: int,
        grades: Iterable[str],
        sessions: Sequence[SessionEdit],
        actor_id: int,
        now: Optional[datetime] = None,
    ) -> Course:
        """Create a course together with its first sessions (coded -01, -02, ...)."""

        course_code = require_non_empty(course_code, "Course code")
        grades = require_tags(grades, "Grades")
        if not sessions:
            raise InvalidInputError("A course needs at least one session")
        if any(s.session_id is not None for s in sessions):
            raise InvalidInputError("New sessions must not carry a session id")

        with self._store.transaction() as tx:
            if tx.courses.get_by_code(course_code):
                raise ConflictError(f"Course code {course_code} already exists")
            if not tx.teachers.get_by_id(teacher_id):
                raise NotFoundError(f"Teacher {teacher_id} does not exist")

            course_id = tx.courses.create(course_code=course_code, teacher_id=teacher_id, grades=grades)
            course = tx.courses.get_by_id(course_id, for_update=True)
            mint_sessions(tx, course, sessions)
            tx.audit.append(
                AuditEvent(
                    actor_id=actor_id,
                    action="create",
                    entity_type="course",
                    entity_id=course_id,
                    details={
                        "course_code": course_code,
                        "teacher_id": teacher_id,
                        "grades": list(grades),
                        "session_count": len(sessions),
                    },
                    timestamp=now or now_local(),
                )
            )
            course = tx.courses.get_by_id(course_id)

        logger.info("Created course %s with %d sessions", course_code, len(sessions))
        return course

    def update_course(
        self,
        course_id: int,
        *,
        teacher_id: Optional[int] = None,
        grades: Optional[Iterable[str]] = None,
        actor_id: int,
        now: Optional[datetime] = None,
    ) -> Course:
        with self._store.transaction() as tx:
            course = tx.courses.get_by_id(course_id, for_update=True)
            if not course:
                raise NotFoundError(f"Course {course_id} does not exist")
            if course.is_deleted:
                raise ConflictError(f"Course {course.course_code} has been deleted")

            new_teacher_id = course.teacher_id if teacher_id is None else teacher_id
            if new_teacher_id != course.teacher_id and not tx.teachers.get_by_id(new_teacher_id):
                raise NotFoundError(f"Teacher {new_teacher_id} does not exist")
            new_grades = course.grades if grades is None else require_tags(grades, "Grades")

            tx.courses.update(course.course_id, teacher_id=new_teacher_id, grades=new_grades)
            tx.audit.append(
                AuditEvent(
                    actor_id=actor_id,
                    action="update",
                    entity_type="course",
                    entity_id=course.course_id,
                    details={"course_code": course.course_code},
                    timestamp=now or now_local(),
                )
            )
            updated = tx.courses.get_by_id(course.course_id)

        return updated

    def delete_course(self, course_id: int, *, actor_id: int, now: Optional[datetime] = None) -> None:
        """Soft delete. Sessions and enrollments stay for reporting."""

        with self._store.transaction() as tx:
            course = tx.courses.get_by_id(course_id, for_update=True)
            if not course:
                raise NotFoundError(f"Course {course_id} does not exist")
            if course.is_deleted:
                raise InvalidStateError(f"Course {course.course_code} is already deleted")

            tx.courses.mark_deleted(course.course_id)
            tx.audit.append(
                AuditEvent(
                    actor_id=actor_id,
                    action="delete",
                    entity_type="course",
                    entity_id=course.course_id,
                    details={"course_code": course.course_code},
                    timestamp=now or now_local(),
                )
            )

        logger.info("Soft-deleted course %s", course.course_code)

    def get_course(self, course_id: int) -> Course:
        with self._store.reader() as rd:
            course = rd.courses.get_by_id(course_id)
        if not course:
            raise NotFoundError(f"Course {course_id} does not exist")
        return course
