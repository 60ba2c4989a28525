from __future__ import annotations

import logging
from datetime import datetime
from typing import Optional, Union

from ..audit.model import AuditEvent
from ..common.datetime_utils import now_local
from ..core.enums import AttendanceStatus
from ..core.exceptions import InvalidInputError, InvalidStateError, NotFoundError
from ..database.store import Store
from .model import AttendanceRecord

logger = logging.getLogger(__name__)


def _parse_status(value: Union[str, AttendanceStatus]) -> AttendanceStatus:
    try:
        return AttendanceStatus(value)
    except ValueError:
        raise InvalidInputError(f"Unknown attendance status: {value!r}")


class AttendanceRecorder:
    """Record one attendance mark per (session, student); re-recording overwrites."""

    def __init__(self, store: Store):
        self._store = store

    def record(
        self,
        session_id: int,
        student_id: int,
        status: Union[str, AttendanceStatus],
        *,
        actor_id: int,
        now: Optional[datetime] = None,
    ) -> AttendanceRecord:
        status = _parse_status(status)
        now = now or now_local()

        with self._store.transaction() as tx:
            session = tx.sessions.get_by_id(session_id)
            if not session:
                raise NotFoundError(f"Session {session_id} does not exist")

            student = tx.students.get_by_id(student_id)
            if not student:
                raise NotFoundError(f"Student {student_id} does not exist")

            if not session.is_past(now):
                raise InvalidStateError(f"Session {session.session_code} has not taken place yet")

            record = tx.attendance.upsert(
                session_id=session.session_id,
                student_id=student.student_id,
                status=status,
                recorded_at=now,
            )
            tx.audit.append(
                AuditEvent(
                    actor_id=actor_id,
                    action="attendance",
                    entity_type="attendance",
                    entity_id=record.attendance_id,
                    details={
                        "session_code": session.session_code,
                        "student_code": student.student_code,
                        "status": status.value,
                    },
                    timestamp=now,
                )
            )

        logger.info("Attendance %s for %s in %s", status.value, student.student_code, session.session_code)
        return record

    def list_for_session(self, session_id: int) -> list[AttendanceRecord]:
        with self._store.reader() as rd:
            if not rd.sessions.get_by_id(session_id):
                raise NotFoundError(f"Session {session_id} does not exist")
            return list(rd.attendance.list_for_session(session_id))
