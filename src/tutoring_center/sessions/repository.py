from __future__ import annotations

from datetime import date
from typing import Iterable, Optional, Protocol, Sequence

from .model import Session


class SessionRepository(Protocol):
    def get_by_id(self, session_id: int) -> Optional[Session]:
        raise NotImplementedError

    def list_for_course(self, course_id: int) -> Sequence[Session]:
        """Sessions of a course ordered by date, then seq."""

        raise NotImplementedError

    def create(
        self,
        *,
        course_id: int,
        seq: int,
        session_code: str,
        session_date: date,
        start_time: str,
        end_time: str,
        duration_minutes: int,
    ) -> int:
        raise NotImplementedError

    def update_times(
        self,
        session_id: int,
        *,
        session_date: date,
        start_time: str,
        end_time: str,
        duration_minutes: int,
    ) -> bool:
        raise NotImplementedError

    def delete_many(self, session_ids: Iterable[int]) -> int:
        raise NotImplementedError

    def list_all(self) -> Sequence[Session]:
        raise NotImplementedError
