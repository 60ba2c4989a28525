from __future__ import annotations

import json
import logging
from contextlib import contextmanager
from datetime import time, timedelta
from typing import Any, Dict, Iterable, List, Optional, Sequence

from ..core.constants import SECONDS_PER_DAY
from .connection import DatabaseConnection

logger = logging.getLogger(__name__)


@contextmanager
def db_cursor(
    conn_factory: DatabaseConnection,
    *,
    dictionary: bool = True,
    isolation_level: Optional[str] = None,
    readonly: bool = False,
):
    """Open a connection, run one transaction and yield ``(conn, cur)``.

    Commits on normal exit; any exception rolls back and is re-raised as is.
    """

    conn = conn_factory.connect()
    try:
        conn.start_transaction(isolation_level=isolation_level, readonly=readonly)
        cur = conn.cursor(dictionary=dictionary)
        try:
            yield conn, cur
            conn.commit()
        finally:
            cur.close()
    except Exception as exc:
        logger.warning("Transaction rolled back: %s: %s", type(exc).__name__, exc)
        conn.rollback()
        raise
    finally:
        conn.close()


def fetchone(cur) -> Optional[Dict[str, Any]]:
    row = cur.fetchone()
    return row if row else None


def fetchall(cur) -> List[Dict[str, Any]]:
    rows = cur.fetchall()
    return list(rows or [])


def in_clause(values: Sequence[Any]) -> str:
    """Placeholder list for ``IN (...)``; callers must not pass an empty sequence."""
    return ", ".join(["%s"] * len(values))


def normalize_mysql_time(value: Any) -> Optional[time]:
    """Coerce a TIME column value to ``datetime.time``.

    The C extension returns ``timedelta``, the pure driver sometimes ``str``.
    """

    if value is None or isinstance(value, time):
        return value
    if isinstance(value, timedelta):
        seconds = int(value.total_seconds()) % SECONDS_PER_DAY
        return time(seconds // 3600, seconds // 60 % 60, seconds % 60)
    if isinstance(value, str):
        fields = [int(p) for p in value.strip().split(":") if p != ""]
        if not 2 <= len(fields) <= 3:
            raise ValueError(f"Invalid time string: {value!r}")
        return time(*fields)
    raise TypeError(f"Unsupported TIME value: {type(value).__name__}")


def to_hhmm(value: Any) -> str:
    """Sessions keep HH:MM strings; seconds from the column are dropped."""
    t = normalize_mysql_time(value)
    if t is None:
        raise ValueError("TIME column is NULL")
    return f"{t.hour:02d}:{t.minute:02d}"


def encode_tags(tags: Iterable[str]) -> str:
    return json.dumps(list(tags or ()), ensure_ascii=False)


def decode_tags(value: Any) -> tuple[str, ...]:
    """Decode a JSON tag column; NULL, blanks and non-lists read as no tags."""

    if value is None:
        return ()
    if isinstance(value, (bytes, bytearray)):
        value = value.decode("utf-8")
    if isinstance(value, (list, tuple)):
        parsed = value
    else:
        try:
            parsed = json.loads(value)
        except (TypeError, ValueError):
            return ()
    if not isinstance(parsed, list):
        return ()
    return tuple(str(v) for v in parsed)


def encode_details(details: dict) -> str:
    return json.dumps(details or {}, ensure_ascii=False, default=str, sort_keys=True)
