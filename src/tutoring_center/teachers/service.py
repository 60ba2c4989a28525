from __future__ import annotations

import logging
from datetime import date, datetime
from typing import Iterable, Optional, Union

from ..audit.model import AuditEvent
from ..common.datetime_utils import now_local
from ..common.validators import normalize_tags, require_non_empty, require_tags
from ..core.enums import TeacherStatus
from ..core.exceptions import ConflictError, InvalidInputError, NotFoundError
from ..database.store import Store
from .model import Teacher

logger = logging.getLogger(__name__)


class TeacherService:
    def __init__(self, store: Store):
        self._store = store

    def create_teacher(
        self,
        *,
        teacher_code: str,
        name: str,
        subjects: Iterable[str],
        hire_date: date,
        status: Union[str, TeacherStatus] = TeacherStatus.ACTIVE,
        actor_id: int,
        now: Optional[datetime] = None,
    ) -> Teacher:
        teacher_code = require_non_empty(teacher_code, "Teacher code")
        name = require_non_empty(name, "Name")
        if hire_date is None:
            raise InvalidInputError("Hire date is required")
        try:
            status = TeacherStatus(status)
        except ValueError:
            raise InvalidInputError(f"Unknown teacher status: {status!r}")
        subjects = normalize_tags(subjects)

        with self._store.transaction() as tx:
            if tx.teachers.get_by_code(teacher_code):
                raise ConflictError(f"Teacher code {teacher_code} already exists")

            teacher_id = tx.teachers.create(
                teacher_code=teacher_code,
                name=name,
                subjects=subjects,
                hire_date=hire_date,
                status=status,
            )
            tx.audit.append(
                AuditEvent(
                    actor_id=actor_id,
                    action="create",
                    entity_type="teacher",
                    entity_id=teacher_id,
                    details={"teacher_code": teacher_code, "subjects": list(subjects)},
                    timestamp=now or now_local(),
                )
            )
            teacher = tx.teachers.get_by_id(teacher_id)

        logger.info("Created teacher %s", teacher_code)
        return teacher

    def update_teacher(
        self,
        teacher_id: int,
        *,
        name: Optional[str] = None,
        status: Union[str, TeacherStatus, None] = None,
        subjects: Optional[Iterable[str]] = None,
        actor_id: int,
        now: Optional[datetime] = None,
    ) -> Teacher:
        """Change name, status or subjects; fields left as None keep their value.

        Subject changes apply to every statistic computed afterwards, past
        months included.
        """

        new_status = None
        if status is not None:
            try:
                new_status = TeacherStatus(status)
            except ValueError:
                raise InvalidInputError(f"Unknown teacher status: {status!r}")

        with self._store.transaction() as tx:
            before = tx.teachers.get_by_id(teacher_id)
            if not before:
                raise NotFoundError(f"Teacher {teacher_id} does not exist")

            tx.teachers.update(
                before.teacher_id,
                name=require_non_empty(name, "Name") if name is not None else before.name,
                subjects=require_tags(subjects, "Subjects") if subjects is not None else before.subjects,
                status=new_status or before.status,
            )
            after = tx.teachers.get_by_id(before.teacher_id)
            tx.audit.append(
                AuditEvent(
                    actor_id=actor_id,
                    action="update",
                    entity_type="teacher",
                    entity_id=before.teacher_id,
                    details={
                        "before": {"name": before.name, "subjects": list(before.subjects), "status": before.status.value},
                        "after": {"name": after.name, "subjects": list(after.subjects), "status": after.status.value},
                    },
                    timestamp=now or now_local(),
                )
            )

        logger.info("Updated teacher %s", before.teacher_code)
        return after

    def get_teacher(self, teacher_id: int) -> Teacher:
        with self._store.reader() as rd:
            teacher = rd.teachers.get_by_id(teacher_id)
        if not teacher:
            raise NotFoundError(f"Teacher {teacher_id} does not exist")
        return teacher

    def list_teachers(self) -> list[Teacher]:
        with self._store.reader() as rd:
            return list(rd.teachers.list_all())
