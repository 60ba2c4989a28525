from __future__ import annotations

from datetime import date
from typing import Optional, Sequence

from ..core.enums import TeacherStatus
from ..database.mysql_base import decode_tags, encode_tags, fetchall, fetchone
from .model import Teacher
from .repository import TeacherRepository

_COLUMNS = "teacher_id, teacher_code, name, subjects, hire_date, status"


def _to_teacher(r: dict) -> Teacher:
    return Teacher(
        teacher_id=int(r["teacher_id"]),
        teacher_code=r["teacher_code"],
        name=r["name"],
        subjects=decode_tags(r.get("subjects")),
        hire_date=r["hire_date"],
        status=TeacherStatus(r["status"]),
    )


class MySQLTeacherRepository(TeacherRepository):
    def __init__(self, cur):
        self._cur = cur

    def get_by_id(self, teacher_id: int) -> Optional[Teacher]:
        self._cur.execute(f"SELECT {_COLUMNS} FROM teachers WHERE teacher_id=%s", (int(teacher_id),))
        r = fetchone(self._cur)
        return _to_teacher(r) if r else None

    def get_by_code(self, teacher_code: str) -> Optional[Teacher]:
        self._cur.execute(f"SELECT {_COLUMNS} FROM teachers WHERE teacher_code=%s", (teacher_code,))
        r = fetchone(self._cur)
        return _to_teacher(r) if r else None

    def create(
        self,
        *,
        teacher_code: str,
        name: str,
        subjects: Sequence[str],
        hire_date: date,
        status: TeacherStatus,
    ) -> int:
        self._cur.execute(
            """
            INSERT INTO teachers(teacher_code, name, subjects, hire_date, status)
            VALUES(%s,%s,%s,%s,%s)
            """,
            (teacher_code, name, encode_tags(subjects), hire_date, status.value),
        )
        return int(self._cur.lastrowid)

    def list_all(self) -> Sequence[Teacher]:
        self._cur.execute(f"SELECT {_COLUMNS} FROM teachers ORDER BY name ASC")
        return [_to_teacher(r) for r in fetchall(self._cur)]

    def update(
        self,
        teacher_id: int,
        *,
        name: str,
        subjects: Sequence[str],
        status: TeacherStatus,
    ) -> bool:
        self._cur.execute(
            "UPDATE teachers SET name=%s, subjects=%s, status=%s WHERE teacher_id=%s",
            (name, encode_tags(subjects), status.value, int(teacher_id)),
        )
        return self._cur.rowcount > 0
