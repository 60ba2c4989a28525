from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Optional


@dataclass(frozen=True)
class Enrollment:
    """One contiguous membership interval ``[joined_at, ended_at)``.

    ``ended_at is None`` means the interval is still open.
    """

    enrollment_id: int
    course_id: int
    student_id: int
    joined_at: datetime
    ended_at: Optional[datetime] = None

    @property
    def is_active(self) -> bool:
        return self.ended_at is None


@dataclass(frozen=True)
class RosterChange:
    added: int
    removed: int
