from __future__ import annotations

from datetime import datetime
from typing import Optional, Sequence

from ..database.mysql_base import fetchall, fetchone
from .model import Student
from .repository import StudentRepository

_COLUMNS = "student_id, student_code, name, phone, grade, first_enrolled_at, is_deleted"


def _to_student(r: dict) -> Student:
    return Student(
        student_id=int(r["student_id"]),
        student_code=r["student_code"],
        name=r["name"],
        phone=r["phone"],
        grade=r["grade"],
        first_enrolled_at=r.get("first_enrolled_at"),
        is_deleted=bool(r.get("is_deleted")),
    )


class MySQLStudentRepository(StudentRepository):
    def __init__(self, cur):
        self._cur = cur

    def get_by_id(self, student_id: int) -> Optional[Student]:
        self._cur.execute(f"SELECT {_COLUMNS} FROM students WHERE student_id=%s", (int(student_id),))
        r = fetchone(self._cur)
        return _to_student(r) if r else None

    def get_by_code(self, student_code: str) -> Optional[Student]:
        self._cur.execute(f"SELECT {_COLUMNS} FROM students WHERE student_code=%s", (student_code,))
        r = fetchone(self._cur)
        return _to_student(r) if r else None

    def create(self, *, student_code: str, name: str, phone: str, grade: str) -> int:
        self._cur.execute(
            """
            INSERT INTO students(student_code, name, phone, grade)
            VALUES(%s,%s,%s,%s)
            """,
            (student_code, name, phone, grade),
        )
        return int(self._cur.lastrowid)

    def update_profile(self, student_id: int, *, name: str, phone: str, grade: str) -> bool:
        self._cur.execute(
            "UPDATE students SET name=%s, phone=%s, grade=%s WHERE student_id=%s",
            (name, phone, grade, int(student_id)),
        )
        return self._cur.rowcount > 0

    def mark_first_enrolled(self, student_id: int, *, at: datetime) -> bool:
        self._cur.execute(
            """
            UPDATE students
            SET first_enrolled_at=%s
            WHERE student_id=%s AND first_enrolled_at IS NULL
            """,
            (at, int(student_id)),
        )
        return self._cur.rowcount > 0

    def mark_deleted(self, student_id: int) -> bool:
        self._cur.execute(
            "UPDATE students SET is_deleted=1 WHERE student_id=%s AND is_deleted=0",
            (int(student_id),),
        )
        return self._cur.rowcount > 0

    def list_all(self) -> Sequence[Student]:
        self._cur.execute(f"SELECT {_COLUMNS} FROM students ORDER BY student_code ASC")
        return [_to_student(r) for r in fetchall(self._cur)]
