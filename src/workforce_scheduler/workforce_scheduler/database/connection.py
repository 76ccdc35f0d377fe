from __future__ import annotations

from dataclasses import dataclass

import mysql.connector


@dataclass
class DBConfig:
    host: str
    port: int
    user: str
    password: str
    database: str

    @classmethod
    def from_dict(cls, db_config: dict) -> "DBConfig":
        return cls(
            host=str(db_config.get("host", "localhost")),
            port=int(db_config.get("port", 3306)),
            user=str(db_config.get("user", "root")),
            password=str(db_config.get("password", "")),
            database=str(db_config.get("database", "workforce_db")),
        )


class DatabaseConnection:
    """Connection factory injected into every MySQL repository.

    Note: We create short-lived connections per operation; sessions run in UTC
    so DATETIME columns always hold UTC wall time.
    """

    def __init__(self, config: DBConfig):
        self._config = config

    @property
    def config(self) -> DBConfig:
        return self._config

    def connect(self, *, use_database: bool = True):
        kwargs = {
            "host": self._config.host,
            "port": int(self._config.port),
            "user": self._config.user,
            "password": self._config.password,
            "use_pure": True,
        }
        if use_database:
            kwargs["database"] = self._config.database
        conn = mysql.connector.connect(**kwargs)
        cur = conn.cursor()
        try:
            cur.execute("SET time_zone = '+00:00'")
        finally:
            cur.close()
        return conn
