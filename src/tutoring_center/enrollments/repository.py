from __future__ import annotations

from datetime import datetime
from typing import Optional, Protocol, Sequence

from .model import Enrollment


class EnrollmentRepository(Protocol):
    """Interval storage for course membership.

    ``create``, ``close`` and ``reactivate`` are the only writers and each one
    sets ``ended_at`` and the ``is_active`` column together.
    """

    def list_active_for_course(self, course_id: int) -> Sequence[Enrollment]:
        raise NotImplementedError

    def list_for_course(self, course_id: int) -> Sequence[Enrollment]:
        raise NotImplementedError

    def find_latest(self, *, course_id: int, student_id: int) -> Optional[Enrollment]:
        """Most recent row for the pair regardless of active state."""

        raise NotImplementedError

    def create(self, *, course_id: int, student_id: int, joined_at: datetime) -> int:
        raise NotImplementedError

    def close(self, enrollment_id: int, *, ended_at: datetime) -> bool:
        raise NotImplementedError

    def reactivate(self, enrollment_id: int, *, joined_at: datetime) -> bool:
        raise NotImplementedError

    def list_all(self) -> Sequence[Enrollment]:
        raise NotImplementedError
