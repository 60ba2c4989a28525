from __future__ import annotations

from datetime import datetime
from typing import Iterable, Optional, Protocol, Sequence

from ..core.enums import AttendanceStatus
from .model import AttendanceRecord


class AttendanceRepository(Protocol):
    def get_for_session_and_student(self, *, session_id: int, student_id: int) -> Optional[AttendanceRecord]:
        raise NotImplementedError

    def upsert(
        self,
        *,
        session_id: int,
        student_id: int,
        status: AttendanceStatus,
        recorded_at: datetime,
    ) -> AttendanceRecord:
        """Insert or overwrite the row keyed by (session_id, student_id)."""

        raise NotImplementedError

    def list_for_session(self, session_id: int) -> Sequence[AttendanceRecord]:
        raise NotImplementedError

    def delete_for_sessions(self, session_ids: Iterable[int]) -> int:
        raise NotImplementedError
