from __future__ import annotations

from datetime import datetime
from typing import Optional, Sequence

from ..database.mysql_base import fetchall, fetchone
from .model import Enrollment
from .repository import EnrollmentRepository

_COLUMNS = "enrollment_id, course_id, student_id, joined_at, ended_at"


def _to_enrollment(r: dict) -> Enrollment:
    return Enrollment(
        enrollment_id=int(r["enrollment_id"]),
        course_id=int(r["course_id"]),
        student_id=int(r["student_id"]),
        joined_at=r["joined_at"],
        ended_at=r.get("ended_at"),
    )


class MySQLEnrollmentRepository(EnrollmentRepository):
    def __init__(self, cur):
        self._cur = cur

    def list_active_for_course(self, course_id: int) -> Sequence[Enrollment]:
        self._cur.execute(
            f"SELECT {_COLUMNS} FROM enrollments WHERE course_id=%s AND is_active=1 FOR UPDATE",
            (int(course_id),),
        )
        return [_to_enrollment(r) for r in fetchall(self._cur)]

    def list_for_course(self, course_id: int) -> Sequence[Enrollment]:
        self._cur.execute(
            f"SELECT {_COLUMNS} FROM enrollments WHERE course_id=%s ORDER BY joined_at ASC, enrollment_id ASC",
            (int(course_id),),
        )
        return [_to_enrollment(r) for r in fetchall(self._cur)]

    def find_latest(self, *, course_id: int, student_id: int) -> Optional[Enrollment]:
        self._cur.execute(
            f"""
            SELECT {_COLUMNS}
            FROM enrollments
            WHERE course_id=%s AND student_id=%s
            ORDER BY joined_at DESC, enrollment_id DESC
            LIMIT 1
            FOR UPDATE
            """,
            (int(course_id), int(student_id)),
        )
        r = fetchone(self._cur)
        return _to_enrollment(r) if r else None

    def create(self, *, course_id: int, student_id: int, joined_at: datetime) -> int:
        self._cur.execute(
            """
            INSERT INTO enrollments(course_id, student_id, joined_at, ended_at, is_active)
            VALUES(%s,%s,%s,NULL,1)
            """,
            (int(course_id), int(student_id), joined_at),
        )
        return int(self._cur.lastrowid)

    def close(self, enrollment_id: int, *, ended_at: datetime) -> bool:
        self._cur.execute(
            """
            UPDATE enrollments
            SET ended_at=%s, is_active=0
            WHERE enrollment_id=%s AND is_active=1
            """,
            (ended_at, int(enrollment_id)),
        )
        return self._cur.rowcount > 0

    def reactivate(self, enrollment_id: int, *, joined_at: datetime) -> bool:
        self._cur.execute(
            """
            UPDATE enrollments
            SET joined_at=%s, ended_at=NULL, is_active=1
            WHERE enrollment_id=%s AND is_active=0
            """,
            (joined_at, int(enrollment_id)),
        )
        return self._cur.rowcount > 0

    def list_all(self) -> Sequence[Enrollment]:
        self._cur.execute(f"SELECT {_COLUMNS} FROM enrollments ORDER BY course_id ASC, joined_at ASC")
        return [_to_enrollment(r) for r in fetchall(self._cur)]
