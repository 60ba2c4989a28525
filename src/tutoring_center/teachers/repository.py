from __future__ import annotations

from datetime import date
from typing import Optional, Protocol, Sequence

from ..core.enums import TeacherStatus
from .model import Teacher


class TeacherRepository(Protocol):
    def get_by_id(self, teacher_id: int) -> Optional[Teacher]:
        raise NotImplementedError

    def get_by_code(self, teacher_code: str) -> Optional[Teacher]:
        raise NotImplementedError

    def create(
        self,
        *,
        teacher_code: str,
        name: str,
        subjects: Sequence[str],
        hire_date: date,
        status: TeacherStatus,
    ) -> int:
        raise NotImplementedError

    def list_all(self) -> Sequence[Teacher]:
        raise NotImplementedError

    def update(
        self,
        teacher_id: int,
        *,
        name: str,
        subjects: Sequence[str],
        status: TeacherStatus,
    ) -> bool:
        raise NotImplementedError
