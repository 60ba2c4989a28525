from __future__ import annotations

from dataclasses import dataclass

from ..core.constants import SESSION_CODE_DIGITS


@dataclass(frozen=True)
class Course:
    """Domain entity: a course owned by one teacher.

    ``session_seq`` is the highest session number ever minted for the course.
    """

    course_id: int
    course_code: str
    teacher_id: int
    grades: tuple[str, ...]
    session_seq: int = 0
    is_deleted: bool = False


def session_code(course_code: str, seq: int) -> str:
    return f"{course_code}-{int(seq):0{SESSION_CODE_DIGITS}d}"
