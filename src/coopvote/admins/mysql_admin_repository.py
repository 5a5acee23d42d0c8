from __future__ import annotations

from datetime import datetime
from typing import Optional

from ..core.enums import Role
from ..database.connection import ConnectionFactory
from ..database.mysql_base import db_cursor, fetchone
from .model import Admin
from .repository import AdminRepository

_COLUMNS = "admin_id, username, password_hash, name, email, role, last_login, created_at"


def _to_admin(row: dict) -> Admin:
    return Admin(
        admin_id=int(row["admin_id"]),
        username=row["username"],
        password_hash=row["password_hash"],
        name=row["name"],
        email=row["email"],
        role=Role(row["role"]),
        last_login=row.get("last_login"),
        created_at=row.get("created_at"),
    )


class MySQLAdminRepository(AdminRepository):
    def __init__(self, conn_factory: ConnectionFactory):
        self._conn_factory = conn_factory

    def get_by_id(self, admin_id: int) -> Optional[Admin]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_COLUMNS} FROM admins WHERE admin_id=%s", (int(admin_id),))
            row = fetchone(cur)
            return _to_admin(row) if row else None

    def get_by_username(self, username: str) -> Optional[Admin]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_COLUMNS} FROM admins WHERE username=%s", (username,))
            row = fetchone(cur)
            return _to_admin(row) if row else None

    def create_admin(self, *, username: str, password_hash: str, name: str, email: str, role: Role) -> int:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                INSERT INTO admins(username, password_hash, name, email, role)
                VALUES(%s,%s,%s,%s,%s)
                """,
                (username, password_hash, name, email, role.value),
            )
            return int(cur.lastrowid)

    def touch_last_login(self, admin_id: int, *, at: datetime) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("UPDATE admins SET last_login=%s WHERE admin_id=%s", (at, int(admin_id)))
            return cur.rowcount > 0
