from __future__ import annotations

from typing import Optional, Sequence

from ..core.enums import Council
from ..database.connection import ConnectionFactory
from ..database.mysql_base import db_cursor, fetchall, fetchone
from .model import Position
from .repository import PositionRepository

_COLUMNS = "p.position_id, p.name, p.council, p.sort_order, p.created_at"


def _to_position(r: dict) -> Position:
    return Position(
        position_id=int(r["position_id"]),
        name=r["name"],
        council=Council(r["council"]),
        sort_order=int(r["sort_order"]),
        created_at=r.get("created_at"),
    )


class MySQLPositionRepository(PositionRepository):
    def __init__(self, conn_factory: ConnectionFactory):
        self._conn_factory = conn_factory

    def list_positions(self, *, council: Optional[Council] = None) -> Sequence[Position]:
        sql = f"SELECT {_COLUMNS} FROM positions p"
        params: list[object] = []
        if council is not None:
            sql += " WHERE p.council=%s"
            params.append(council.value)
        sql += " ORDER BY p.council, p.sort_order, p.position_id"
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(sql, tuple(params))
            return [_to_position(r) for r in fetchall(cur)]

    def get_by_id(self, position_id: int) -> Optional[Position]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_COLUMNS} FROM positions p WHERE p.position_id=%s", (int(position_id),))
            row = fetchone(cur)
            return _to_position(row) if row else None

    def get_by_name_and_council(self, name: str, council: Council) -> Optional[Position]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"SELECT {_COLUMNS} FROM positions p WHERE p.name=%s AND p.council=%s",
                (name, council.value),
            )
            row = fetchone(cur)
            return _to_position(row) if row else None

    def create_position(self, *, name: str, council: Council, sort_order: int) -> int:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                "INSERT INTO positions(name, council, sort_order) VALUES(%s,%s,%s)",
                (name, council.value, int(sort_order)),
            )
            return int(cur.lastrowid)

    def update_position(self, position_id: int, *, name: str, council: Council, sort_order: int) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                "UPDATE positions SET name=%s, council=%s, sort_order=%s WHERE position_id=%s",
                (name, council.value, int(sort_order), int(position_id)),
            )
            return cur.rowcount > 0

    def delete_by_id(self, position_id: int) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("DELETE FROM positions WHERE position_id=%s", (int(position_id),))
            return cur.rowcount > 0
