from __future__ import annotations

from contextlib import contextmanager
from dataclasses import dataclass
from typing import Iterator

from ..attendance.mysql_attendance_repository import MySQLAttendanceRepository
from ..audit.mysql_audit_sink import MySQLAuditSink
from ..courses.mysql_course_repository import MySQLCourseRepository
from ..enrollments.mysql_enrollment_repository import MySQLEnrollmentRepository
from ..sessions.mysql_session_repository import MySQLSessionRepository
from ..students.mysql_student_repository import MySQLStudentRepository
from ..teachers.mysql_teacher_repository import MySQLTeacherRepository
from .connection import DatabaseConnection
from .mysql_base import db_cursor
from .store import Store

WRITE_ISOLATION = "SERIALIZABLE"
READ_ISOLATION = "READ COMMITTED"


@dataclass(frozen=True)
class MySQLStoreSession:
    teachers: MySQLTeacherRepository
    students: MySQLStudentRepository
    courses: MySQLCourseRepository
    sessions: MySQLSessionRepository
    enrollments: MySQLEnrollmentRepository
    attendance: MySQLAttendanceRepository
    audit: MySQLAuditSink

    @classmethod
    def bind(cls, cur) -> "MySQLStoreSession":
        return cls(
            teachers=MySQLTeacherRepository(cur),
            students=MySQLStudentRepository(cur),
            courses=MySQLCourseRepository(cur),
            sessions=MySQLSessionRepository(cur),
            enrollments=MySQLEnrollmentRepository(cur),
            attendance=MySQLAttendanceRepository(cur),
            audit=MySQLAuditSink(cur),
        )


class MySQLStore(Store):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    @contextmanager
    def transaction(self) -> Iterator[MySQLStoreSession]:
        with db_cursor(self._conn_factory, isolation_level=WRITE_ISOLATION) as (_, cur):
            yield MySQLStoreSession.bind(cur)

    @contextmanager
    def reader(self) -> Iterator[MySQLStoreSession]:
        with db_cursor(self._conn_factory, isolation_level=READ_ISOLATION, readonly=True) as (_, cur):
            yield MySQLStoreSession.bind(cur)
