from __future__ import annotations

from datetime import datetime
from typing import Optional, Protocol, Sequence

from .model import Student


class StudentRepository(Protocol):
    def get_by_id(self, student_id: int) -> Optional[Student]:
        raise NotImplementedError

    def get_by_code(self, student_code: str) -> Optional[Student]:
        raise NotImplementedError

    def create(self, *, student_code: str, name: str, phone: str, grade: str) -> int:
        raise NotImplementedError

    def update_profile(self, student_id: int, *, name: str, phone: str, grade: str) -> bool:
        raise NotImplementedError

    def mark_first_enrolled(self, student_id: int, *, at: datetime) -> bool:
        """Set first_enrolled_at only if it is still NULL.

        Returns True when the value was written.
        """

        raise NotImplementedError

    def mark_deleted(self, student_id: int) -> bool:
        raise NotImplementedError

    def list_all(self) -> Sequence[Student]:
        raise NotImplementedError
