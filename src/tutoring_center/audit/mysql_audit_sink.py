from __future__ import annotations

from ..database.mysql_base import encode_details
from .model import AuditEvent
from .repository import AuditSink


class MySQLAuditSink(AuditSink):
    """Writes audit rows with the caller's cursor, so they commit or roll back with it."""

    def __init__(self, cur):
        self._cur = cur

    def append(self, event: AuditEvent) -> None:
        self._cur.execute(
            """
            INSERT INTO audit_logs(actor_id, action, entity_type, entity_id, details, created_at)
            VALUES(%s,%s,%s,%s,%s,%s)
            """,
            (
                int(event.actor_id),
                event.action,
                event.entity_type,
                int(event.entity_id),
                encode_details(event.details),
                event.timestamp,
            ),
        )
