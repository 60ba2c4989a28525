from __future__ import annotations

import logging
from datetime import datetime
from typing import Optional

from ..audit.model import AuditEvent
from ..common.datetime_utils import now_local
from ..common.validators import require_non_empty
from ..core.exceptions import ConflictError, InvalidStateError, NotFoundError
from ..database.store import Store
from .model import Student

logger = logging.getLogger(__name__)


class StudentService:
    """Use case: maintain student records.

    ``first_enrolled_at`` is owned by the roster reconciler and is never
    written here.
    """

    def __init__(self, store: Store):
        self._store = store

    def create_student(
        self,
        *,
        student_code: str,
        name: str,
        phone: str,
        grade: str,
        actor_id: int,
        now: Optional[datetime] = None,
    ) -> Student:
        student_code = require_non_empty(student_code, "Student code")
        name = require_non_empty(name, "Name")
        phone = require_non_empty(phone, "Phone")
        grade = require_non_empty(grade, "Grade")

        with self._store.transaction() as tx:
            if tx.students.get_by_code(student_code):
                raise ConflictError(f"Student code {student_code} already exists")

            student_id = tx.students.create(student_code=student_code, name=name, phone=phone, grade=grade)
            tx.audit.append(
                AuditEvent(
                    actor_id=actor_id,
                    action="create",
                    entity_type="student",
                    entity_id=student_id,
                    details={"student_code": student_code, "name": name, "grade": grade},
                    timestamp=now or now_local(),
                )
            )
            student = tx.students.get_by_id(student_id)

        logger.info("Created student %s", student_code)
        return student

    def update_student(
        self,
        student_id: int,
        *,
        name: Optional[str] = None,
        phone: Optional[str] = None,
        grade: Optional[str] = None,
        actor_id: int,
        now: Optional[datetime] = None,
    ) -> Student:
        with self._store.transaction() as tx:
            before = tx.students.get_by_id(student_id)
            if not before:
                raise NotFoundError(f"Student {student_id} does not exist")
            if before.is_deleted:
                raise ConflictError(f"Student {before.student_code} has been deleted")

            tx.students.update_profile(
                before.student_id,
                name=require_non_empty(name, "Name") if name is not None else before.name,
                phone=require_non_empty(phone, "Phone") if phone is not None else before.phone,
                grade=require_non_empty(grade, "Grade") if grade is not None else before.grade,
            )
            after = tx.students.get_by_id(before.student_id)
            tx.audit.append(
                AuditEvent(
                    actor_id=actor_id,
                    action="update",
                    entity_type="student",
                    entity_id=before.student_id,
                    details={
                        "before": {"name": before.name, "phone": before.phone, "grade": before.grade},
                        "after": {"name": after.name, "phone": after.phone, "grade": after.grade},
                    },
                    timestamp=now or now_local(),
                )
            )

        return after

    def delete_student(self, student_id: int, *, actor_id: int, now: Optional[datetime] = None) -> None:
        """Soft delete. Enrollment and attendance rows stay for reporting."""

        with self._store.transaction() as tx:
            student = tx.students.get_by_id(student_id)
            if not student:
                raise NotFoundError(f"Student {student_id} does not exist")
            if student.is_deleted:
                raise InvalidStateError(f"Student {student.student_code} is already deleted")

            tx.students.mark_deleted(student.student_id)
            tx.audit.append(
                AuditEvent(
                    actor_id=actor_id,
                    action="delete",
                    entity_type="student",
                    entity_id=student.student_id,
                    details={"student_code": student.student_code, "name": student.name},
                    timestamp=now or now_local(),
                )
            )

        logger.info("Soft-deleted student %s", student.student_code)

    def get_student(self, student_id: int) -> Student:
        with self._store.reader() as rd:
            student = rd.students.get_by_id(student_id)
        if not student:
            raise NotFoundError(f"Student {student_id} does not exist")
        return student

    def list_students(self, *, include_deleted: bool = False) -> list[Student]:
        with self._store.reader() as rd:
            students = list(rd.students.list_all())
        if include_deleted:
            return students
        return [s for s in students if not s.is_deleted]
