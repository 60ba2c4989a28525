from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Optional


@dataclass(frozen=True)
class Student:
    """Domain entity: a student.

    ``first_enrolled_at`` is written once, by the roster reconciler, on the
    student's first-ever course membership.
    """

    student_id: int
    student_code: str
    name: str
    phone: str
    grade: str
    first_enrolled_at: Optional[datetime] = None
    is_deleted: bool = False
