from __future__ import annotations

from datetime import date
from typing import Iterable, Optional, Sequence

from ..database.mysql_base import fetchall, fetchone, in_clause, to_hhmm
from .model import Session
from .repository import SessionRepository

_COLUMNS = "session_id, course_id, seq, session_code, session_date, start_time, end_time, duration_minutes"


def _to_session(r: dict) -> Session:
    return Session(
        session_id=int(r["session_id"]),
        course_id=int(r["course_id"]),
        seq=int(r["seq"]),
        session_code=r["session_code"],
        session_date=r["session_date"],
        start_time=to_hhmm(r["start_time"]),
        end_time=to_hhmm(r["end_time"]),
        duration_minutes=int(r["duration_minutes"]),
    )


class MySQLSessionRepository(SessionRepository):
    def __init__(self, cur):
        self._cur = cur

    def get_by_id(self, session_id: int) -> Optional[Session]:
        self._cur.execute(f"SELECT {_COLUMNS} FROM sessions WHERE session_id=%s", (int(session_id),))
        r = fetchone(self._cur)
        return _to_session(r) if r else None

    def list_for_course(self, course_id: int) -> Sequence[Session]:
        self._cur.execute(
            f"SELECT {_COLUMNS} FROM sessions WHERE course_id=%s ORDER BY session_date ASC, seq ASC",
            (int(course_id),),
        )
        return [_to_session(r) for r in fetchall(self._cur)]

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
        self._cur.execute(
            """
            INSERT INTO sessions(course_id, seq, session_code, session_date, start_time, end_time, duration_minutes)
            VALUES(%s,%s,%s,%s,%s,%s,%s)
            """,
            (int(course_id), int(seq), session_code, session_date, start_time, end_time, int(duration_minutes)),
        )
        return int(self._cur.lastrowid)

    def update_times(
        self,
        session_id: int,
        *,
        session_date: date,
        start_time: str,
        end_time: str,
        duration_minutes: int,
    ) -> bool:
        self._cur.execute(
            """
            UPDATE sessions
            SET session_date=%s, start_time=%s, end_time=%s, duration_minutes=%s
            WHERE session_id=%s
            """,
            (session_date, start_time, end_time, int(duration_minutes), int(session_id)),
        )
        return self._cur.rowcount > 0

    def delete_many(self, session_ids: Iterable[int]) -> int:
        ids = [int(i) for i in session_ids]
        if not ids:
            return 0
        self._cur.execute(f"DELETE FROM sessions WHERE session_id IN ({in_clause(ids)})", tuple(ids))
        return int(self._cur.rowcount)

    def list_all(self) -> Sequence[Session]:
        self._cur.execute(f"SELECT {_COLUMNS} FROM sessions ORDER BY session_date ASC, course_id ASC, seq ASC")
        return [_to_session(r) for r in fetchall(self._cur)]
