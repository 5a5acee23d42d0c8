from __future__ import annotations

from typing import Optional, Sequence

from ..core.enums import MemberStatus
from ..database.connection import ConnectionFactory
from ..database.mysql_base import db_cursor, fetchall, fetchone, like_pattern
from .model import Member, MemberOverview
from .repository import MemberRepository

_MEMBER_COLUMNS = "m.member_id, m.name, m.email, m.cedula, m.phone, m.status, m.created_at"

_OVERVIEW_SELECT = f"""
    SELECT {_MEMBER_COLUMNS},
           (a.attendance_id IS NOT NULL) AS has_attendance,
           EXISTS(SELECT 1 FROM votes v WHERE v.member_id = m.member_id) AS has_voted
    FROM members m
    LEFT JOIN attendance a ON a.member_id = m.member_id
"""


def _to_member(r: dict) -> Member:
    return Member(
        member_id=int(r["member_id"]),
        name=r["name"],
        email=r["email"],
        cedula=r["cedula"],
        phone=r.get("phone"),
        status=MemberStatus(r["status"]),
        created_at=r.get("created_at"),
    )


def _to_overview(r: dict) -> MemberOverview:
    return MemberOverview(
        member=_to_member(r),
        has_attendance=bool(r["has_attendance"]),
        has_voted=bool(r["has_voted"]),
    )


class MySQLMemberRepository(MemberRepository):
    def __init__(self, conn_factory: ConnectionFactory):
        self._conn_factory = conn_factory

    def get_by_id(self, member_id: int) -> Optional[Member]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_MEMBER_COLUMNS} FROM members m WHERE m.member_id=%s", (member_id,))
            row = fetchone(cur)
            return _to_member(row) if row else None

    def find_conflict(self, *, email: str, cedula: str, exclude_id: Optional[int] = None) -> Optional[Member]:
        sql = f"SELECT {_MEMBER_COLUMNS} FROM members m WHERE (m.email=%s OR m.cedula=%s)"
        params: list[object] = [email, cedula]
        if exclude_id is not None:
            sql += " AND m.member_id<>%s"
            params.append(int(exclude_id))
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(sql + " LIMIT 1", tuple(params))
            row = fetchone(cur)
            return _to_member(row) if row else None

    def search(self, query: str, *, limit: int) -> Sequence[MemberOverview]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                _OVERVIEW_SELECT
                + """
                WHERE LOWER(m.name) LIKE %s ESCAPE '\\\\' OR m.cedula LIKE %s ESCAPE '\\\\'
                ORDER BY m.name
                LIMIT %s
                """,
                (like_pattern(query.lower()), like_pattern(query), int(limit)),
            )
            return [_to_overview(r) for r in fetchall(cur)]

    def list_overview(self) -> Sequence[MemberOverview]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(_OVERVIEW_SELECT + " ORDER BY m.name")
            return [_to_overview(r) for r in fetchall(cur)]

    def list_all(self) -> Sequence[Member]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_MEMBER_COLUMNS} FROM members m ORDER BY m.name")
            return [_to_member(r) for r in fetchall(cur)]

    def count_all(self) -> int:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("SELECT COUNT(*) AS n FROM members")
            return int(fetchone(cur)["n"])

    def count_active(self) -> int:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("SELECT COUNT(*) AS n FROM members WHERE status=%s", (MemberStatus.ACTIVE.value,))
            return int(fetchone(cur)["n"])

    def create_member(
        self,
        *,
        name: str,
        email: str,
        cedula: str,
        phone: Optional[str],
        status: MemberStatus,
    ) -> int:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                INSERT INTO members(name, email, cedula, phone, status)
                VALUES(%s,%s,%s,%s,%s)
                """,
                (name, email, cedula, phone, status.value),
            )
            return int(cur.lastrowid)

    def update_member(
        self,
        member_id: int,
        *,
        name: str,
        email: str,
        cedula: str,
        phone: Optional[str],
        status: MemberStatus,
    ) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                UPDATE members
                SET name=%s, email=%s, cedula=%s, phone=%s, status=%s
                WHERE member_id=%s
                """,
                (name, email, cedula, phone, status.value, int(member_id)),
            )
            return cur.rowcount > 0

    def delete_by_id(self, member_id: int) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("DELETE FROM members WHERE member_id=%s", (int(member_id),))
            return cur.rowcount > 0
