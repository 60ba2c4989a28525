from __future__ import annotations

from datetime import datetime
from typing import Iterable, Optional, Sequence

from ..core.enums import AttendanceStatus
from ..database.mysql_base import fetchall, fetchone, in_clause
from .model import AttendanceRecord
from .repository import AttendanceRepository

_COLUMNS = "attendance_id, session_id, student_id, status, recorded_at"


def _to_record(r: dict) -> AttendanceRecord:
    return AttendanceRecord(
        attendance_id=int(r["attendance_id"]),
        session_id=int(r["session_id"]),
        student_id=int(r["student_id"]),
        status=AttendanceStatus(r["status"]),
        recorded_at=r["recorded_at"],
    )


class MySQLAttendanceRepository(AttendanceRepository):
    def __init__(self, cur):
        self._cur = cur

    def get_for_session_and_student(self, *, session_id: int, student_id: int) -> Optional[AttendanceRecord]:
        self._cur.execute(
            f"SELECT {_COLUMNS} FROM attendance_records WHERE session_id=%s AND student_id=%s",
            (int(session_id), int(student_id)),
        )
        r = fetchone(self._cur)
        return _to_record(r) if r else None

    def upsert(
        self,
        *,
        session_id: int,
        student_id: int,
        status: AttendanceStatus,
        recorded_at: datetime,
    ) -> AttendanceRecord:
        self._cur.execute(
            """
            INSERT INTO attendance_records(session_id, student_id, status, recorded_at)
            VALUES(%s,%s,%s,%s)
            ON DUPLICATE KEY UPDATE status=VALUES(status), recorded_at=VALUES(recorded_at)
            """,
            (int(session_id), int(student_id), status.value, recorded_at),
        )

        # lastrowid is not reliable on the update branch; read the row back.
        record = self.get_for_session_and_student(session_id=session_id, student_id=student_id)
        if record is None:
            raise RuntimeError("Attendance upsert did not persist a row")
        return record

    def list_for_session(self, session_id: int) -> Sequence[AttendanceRecord]:
        self._cur.execute(
            f"SELECT {_COLUMNS} FROM attendance_records WHERE session_id=%s ORDER BY student_id ASC",
            (int(session_id),),
        )
        return [_to_record(r) for r in fetchall(self._cur)]

    def delete_for_sessions(self, session_ids: Iterable[int]) -> int:
        ids = [int(i) for i in session_ids]
        if not ids:
            return 0
        self._cur.execute(f"DELETE FROM attendance_records WHERE session_id IN ({in_clause(ids)})", tuple(ids))
        return int(self._cur.rowcount)
