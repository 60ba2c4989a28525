from __future__ import annotations

from dataclasses import dataclass
from datetime import date

from ..core.enums import TeacherStatus


@dataclass(frozen=True)
class Teacher:
    """Domain entity: a teacher and the subjects they are registered for."""

    teacher_id: int
    teacher_code: str
    name: str
    subjects: tuple[str, ...]
    hire_date: date
    status: TeacherStatus = TeacherStatus.ACTIVE
