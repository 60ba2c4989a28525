from __future__ import annotations

import logging
from datetime import datetime
from typing import Iterable, Optional

from ..audit.model import AuditEvent
from ..common.datetime_utils import now_local
from ..common.validators import require_positive_id
from ..core.enums import ReactivationPolicy
from ..core.exceptions import ConflictError, NotFoundError, UnauthorizedError
from ..database.store import Store, StoreSession
from .model import RosterChange

logger = logging.getLogger(__name__)


class RosterReconciler:
    """Bring a course's active roster in line with a desired set of students.

    Membership is never deleted: removing a student closes the open interval,
    adding one opens (or reopens) an interval. Students already on the roster
    are not touched, so repeating a call is a no-op.
    """

    def __init__(
        self,
        store: Store,
        *,
        reactivation: ReactivationPolicy = ReactivationPolicy.REUSE_ROW,
    ):
        self._store = store
        self._reactivation = ReactivationPolicy(reactivation)

    def apply_roster(
        self,
        course_id: int,
        student_ids: Iterable[int],
        *,
        authorized: bool,
        actor_id: int,
        now: Optional[datetime] = None,
    ) -> RosterChange:
        if not authorized:
            raise UnauthorizedError("Not allowed to change this course's roster")

        now = now or now_local()
        desired = {require_positive_id(sid, "student_id") for sid in student_ids}

        with self._store.transaction() as tx:
            course = tx.courses.get_by_id(course_id, for_update=True)
            if not course:
                raise NotFoundError(f"Course {course_id} does not exist")
            if course.is_deleted:
                raise ConflictError(f"Course {course.course_code} has been deleted")

            active = {e.student_id: e for e in tx.enrollments.list_active_for_course(course.course_id)}
            current = set(active)
            to_remove = sorted(current - desired)
            to_add = sorted(desired - current)

            for student_id in to_remove:
                tx.enrollments.close(active[student_id].enrollment_id, ended_at=now)

            if to_remove:
                tx.audit.append(
                    AuditEvent(
                        actor_id=actor_id,
                        action="enrollment_remove",
                        entity_type="enrollment",
                        entity_id=course.course_id,
                        details={"course_id": course.course_id, "removed_students": to_remove},
                        timestamp=now,
                    )
                )

            for student_id in to_add:
                self._open_interval(tx, course_id=course.course_id, student_id=student_id, now=now)

            if to_add:
                tx.audit.append(
                    AuditEvent(
                        actor_id=actor_id,
                        action="enrollment_add",
                        entity_type="enrollment",
                        entity_id=course.course_id,
                        details={"course_id": course.course_id, "added_students": to_add},
                        timestamp=now,
                    )
                )

        logger.info(
            "Roster for course %s applied: added=%d removed=%d",
            course.course_code,
            len(to_add),
            len(to_remove),
        )
        return RosterChange(added=len(to_add), removed=len(to_remove))

    def _open_interval(self, tx: StoreSession, *, course_id: int, student_id: int, now: datetime) -> None:
        student = tx.students.get_by_id(student_id)
        if not student:
            raise NotFoundError(f"Student {student_id} does not exist")
        if student.is_deleted:
            raise ConflictError(f"Student {student.student_code} has been deleted")

        previous = None
        if self._reactivation == ReactivationPolicy.REUSE_ROW:
            previous = tx.enrollments.find_latest(course_id=course_id, student_id=student_id)

        if previous is not None:
            tx.enrollments.reactivate(previous.enrollment_id, joined_at=now)
            logger.debug("Reactivated enrollment %s (student %s)", previous.enrollment_id, student_id)
        else:
            enrollment_id = tx.enrollments.create(course_id=course_id, student_id=student_id, joined_at=now)
            logger.debug("Opened enrollment %s (student %s)", enrollment_id, student_id)

        if student.first_enrolled_at is None:
            tx.students.mark_first_enrolled(student_id, at=now)
