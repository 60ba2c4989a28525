from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime

from ..core.enums import AttendanceStatus


@dataclass(frozen=True)
class AttendanceRecord:
    """Domain entity: attendance mark, unique per (session_id, student_id)."""

    attendance_id: int
    session_id: int
    student_id: int
    status: AttendanceStatus
    recorded_at: datetime
