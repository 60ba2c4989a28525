from __future__ import annotations

from dataclasses import dataclass

from .attendance.service import AttendanceRecorder
from .core.constants import DEFAULT_REACTIVATION_POLICY
from .core.enums import ReactivationPolicy
from .courses.service import CourseService
from .database.connection import DBConfig, DatabaseConnection
from .database.mysql_store import MySQLStore
from .database.store import Store
from .enrollments.reconciler import RosterReconciler
from .sessions.scheduler import SessionScheduler
from .stats.service import StatisticsService
from .students.service import StudentService
from .teachers.service import TeacherService


@dataclass(frozen=True)
class Container:
    store: Store

    teacher_service: TeacherService
    student_service: StudentService
    course_service: CourseService
    roster_reconciler: RosterReconciler
    session_scheduler: SessionScheduler
    attendance_recorder: AttendanceRecorder
    statistics_service: StatisticsService


def build_services(
    store: Store,
    *,
    reactivation: ReactivationPolicy | str = DEFAULT_REACTIVATION_POLICY,
) -> Container:
    return Container(
        store=store,
        teacher_service=TeacherService(store),
        student_service=StudentService(store),
        course_service=CourseService(store),
        roster_reconciler=RosterReconciler(store, reactivation=ReactivationPolicy(reactivation)),
        session_scheduler=SessionScheduler(store),
        attendance_recorder=AttendanceRecorder(store),
        statistics_service=StatisticsService(store),
    )


def build_container(
    *,
    db_config: dict,
    reactivation: ReactivationPolicy | str = DEFAULT_REACTIVATION_POLICY,
) -> Container:
    conn = DatabaseConnection(DBConfig.from_dict(db_config))
    return build_services(MySQLStore(conn), reactivation=reactivation)
