from __future__ import annotations

from typing import Optional, Sequence

from ..database.mysql_base import decode_tags, encode_tags, fetchall, fetchone
from .model import Course
from .repository import CourseRepository

_COLUMNS = "course_id, course_code, teacher_id, grades, session_seq, is_deleted"


def _to_course(r: dict) -> Course:
    return Course(
        course_id=int(r["course_id"]),
        course_code=r["course_code"],
        teacher_id=int(r["teacher_id"]),
        grades=decode_tags(r.get("grades")),
        session_seq=int(r.get("session_seq") or 0),
        is_deleted=bool(r.get("is_deleted")),
    )


class MySQLCourseRepository(CourseRepository):
    def __init__(self, cur):
        self._cur = cur

    def get_by_id(self, course_id: int, *, for_update: bool = False) -> Optional[Course]:
        lock = " FOR UPDATE" if for_update else ""
        self._cur.execute(f"SELECT {_COLUMNS} FROM courses WHERE course_id=%s{lock}", (int(course_id),))
        r = fetchone(self._cur)
        return _to_course(r) if r else None

    def get_by_code(self, course_code: str) -> Optional[Course]:
        self._cur.execute(f"SELECT {_COLUMNS} FROM courses WHERE course_code=%s", (course_code,))
        r = fetchone(self._cur)
        return _to_course(r) if r else None

    def create(self, *, course_code: str, teacher_id: int, grades: Sequence[str]) -> int:
        self._cur.execute(
            """
            INSERT INTO courses(course_code, teacher_id, grades, session_seq, is_deleted)
            VALUES(%s,%s,%s,0,0)
            """,
            (course_code, int(teacher_id), encode_tags(grades)),
        )
        return int(self._cur.lastrowid)

    def update(self, course_id: int, *, teacher_id: int, grades: Sequence[str]) -> bool:
        self._cur.execute(
            "UPDATE courses SET teacher_id=%s, grades=%s WHERE course_id=%s",
            (int(teacher_id), encode_tags(grades), int(course_id)),
        )
        return self._cur.rowcount > 0

    def set_session_seq(self, course_id: int, *, session_seq: int) -> bool:
        # Never lowers the counter.
        self._cur.execute(
            "UPDATE courses SET session_seq=GREATEST(session_seq, %s) WHERE course_id=%s",
            (int(session_seq), int(course_id)),
        )
        return self._cur.rowcount > 0

    def mark_deleted(self, course_id: int) -> bool:
        self._cur.execute(
            "UPDATE courses SET is_deleted=1 WHERE course_id=%s AND is_deleted=0",
            (int(course_id),),
        )
        return self._cur.rowcount > 0

    def list_all(self) -> Sequence[Course]:
        self._cur.execute(f"SELECT {_COLUMNS} FROM courses ORDER BY course_id ASC")
        return [_to_course(r) for r in fetchall(self._cur)]
