"""MySQL connection settings and the connection factory handed to every repository."""
from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict, Mapping

import mysql.connector


@dataclass(frozen=True)
class DBConfig:
    host: str = "localhost"
    port: int = 3306
    user: str = "root"
    password: str = ""
    database: str = "coopvote_db"
    connect_timeout: int = 10

    @classmethod
    def from_mapping(cls, db_config: Mapping[str, Any]) -> "DBConfig":
        """Build from the ``DB_CONFIG`` settings dict; missing keys fall back to local defaults."""
        defaults = cls()
        return cls(
            host=str(db_config.get("host") or defaults.host),
            port=int(db_config.get("port") or defaults.port),
            user=str(db_config.get("user") or defaults.user),
            password=str(db_config.get("password") or ""),
            database=str(db_config.get("database") or defaults.database),
            connect_timeout=int(db_config.get("connect_timeout") or defaults.connect_timeout),
        )

    def connect_kwargs(self, *, with_database: bool = True) -> Dict[str, Any]:
        kwargs: Dict[str, Any] = dict(
            host=self.host,
            port=self.port,
            user=self.user,
            password=self.password,
            charset="utf8mb4",
            collation="utf8mb4_unicode_ci",
            connection_timeout=self.connect_timeout,
        )
        if with_database:
            kwargs["database"] = self.database
        return kwargs


class ConnectionFactory:
    """Opens a new connection per repository call; ``db_cursor`` closes it again."""

    def __init__(self, config: DBConfig):
        self.config = config

    @property
    def database(self) -> str:
        return self.config.database

    def connect(self, *, with_database: bool = True):
        return mysql.connector.connect(**self.config.connect_kwargs(with_database=with_database))
