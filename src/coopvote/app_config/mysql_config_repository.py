from __future__ import annotations

from typing import Optional, Sequence

from ..database.connection import ConnectionFactory
from ..database.mysql_base import db_cursor, fetchall, fetchone
from .model import ConfigEntry
from .repository import ConfigRepository

_COLUMNS = "config_key, config_value, category, description, updated_by, updated_at"


def _to_entry(r: dict) -> ConfigEntry:
    return ConfigEntry(
        key=r["config_key"],
        value=r["config_value"],
        category=r.get("category") or "general",
        description=r.get("description"),
        updated_by=r.get("updated_by"),
        updated_at=r.get("updated_at"),
    )


class MySQLConfigRepository(ConfigRepository):
    def __init__(self, conn_factory: ConnectionFactory):
        self._conn_factory = conn_factory

    def get(self, key: str) -> Optional[ConfigEntry]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_COLUMNS} FROM app_config WHERE config_key=%s", (key,))
            row = fetchone(cur)
            return _to_entry(row) if row else None

    def list_all(self) -> Sequence[ConfigEntry]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_COLUMNS} FROM app_config ORDER BY category, config_key")
            return [_to_entry(r) for r in fetchall(cur)]

    def upsert(self, key: str, value: str, *, updated_by: Optional[str]) -> None:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                INSERT INTO app_config(config_key, config_value, updated_by)
                VALUES(%s,%s,%s)
                ON DUPLICATE KEY UPDATE config_value=VALUES(config_value), updated_by=VALUES(updated_by)
                """,
                (key, value, updated_by),
            )

    def ping(self) -> None:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("SELECT 1 AS ok")
            fetchone(cur)
