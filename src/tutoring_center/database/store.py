from __future__ import annotations

from typing import ContextManager, Protocol

from ..attendance.repository import AttendanceRepository
from ..audit.repository import AuditSink
from ..courses.repository import CourseRepository
from ..enrollments.repository import EnrollmentRepository
from ..sessions.repository import SessionRepository
from ..students.repository import StudentRepository
from ..teachers.repository import TeacherRepository


class StoreSession(Protocol):
    """Repositories bound to one unit of work (one connection, one transaction)."""

    teachers: TeacherRepository
    students: StudentRepository
    courses: CourseRepository
    sessions: SessionRepository
    enrollments: EnrollmentRepository
    attendance: AttendanceRepository
    audit: AuditSink


class Store(Protocol):
    """Storage boundary used by every service.

    ``transaction()`` commits when the block exits normally and rolls back
    every write when it raises. ``reader()`` gives read-only access to the
    latest committed state.
    """

    def transaction(self) -> ContextManager[StoreSession]:
        raise NotImplementedError

    def reader(self) -> ContextManager[StoreSession]:
        raise NotImplementedError
