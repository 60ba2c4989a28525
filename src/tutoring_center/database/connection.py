from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

import mysql.connector


@dataclass(frozen=True)
class DBConfig:
    host: str
    port: int
    user: str
    password: str
    database: str
    connection_timeout: Optional[int] = None

    @classmethod
    def from_dict(cls, db_config: dict) -> "DBConfig":
        timeout = db_config.get("connection_timeout")
        return cls(
            host=str(db_config.get("host", "localhost")),
            port=int(db_config.get("port", 3306)),
            user=str(db_config.get("user", "root")),
            password=str(db_config.get("password", "")),
            database=str(db_config.get("database", "tutoring_center")),
            connection_timeout=int(timeout) if timeout else None,
        )


class DatabaseConnection:
    """Connection factory handed to the store.

    Note: One short-lived connection per transaction; nothing is pooled or
    shared between calls.
    """

    def __init__(self, config: DBConfig):
        self._config = config

    @property
    def config(self) -> DBConfig:
        return self._config

    def connect(self, *, with_database: bool = True):
        kwargs = dict(
            host=self._config.host,
            port=int(self._config.port),
            user=self._config.user,
            password=self._config.password,
            autocommit=False,
        )
        if with_database:
            kwargs["database"] = self._config.database
        if self._config.connection_timeout:
            kwargs["connection_timeout"] = self._config.connection_timeout
        return mysql.connector.connect(**kwargs)
