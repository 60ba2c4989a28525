from __future__ import annotations

from typing import Optional, Protocol, Sequence

from .model import Course


class CourseRepository(Protocol):
    def get_by_id(self, course_id: int, *, for_update: bool = False) -> Optional[Course]:
        """Load a course; ``for_update`` locks the row until the transaction ends."""

        raise NotImplementedError

    def get_by_code(self, course_code: str) -> Optional[Course]:
        raise NotImplementedError

    def create(self, *, course_code: str, teacher_id: int, grades: Sequence[str]) -> int:
        raise NotImplementedError

    def update(self, course_id: int, *, teacher_id: int, grades: Sequence[str]) -> bool:
        raise NotImplementedError

    def set_session_seq(self, course_id: int, *, session_seq: int) -> bool:
        raise NotImplementedError

    def mark_deleted(self, course_id: int) -> bool:
        raise NotImplementedError

    def list_all(self) -> Sequence[Course]:
        """All courses including soft-deleted ones."""

        raise NotImplementedError
