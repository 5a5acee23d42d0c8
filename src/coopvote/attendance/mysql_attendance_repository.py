from __future__ import annotations

from datetime import datetime
from typing import Optional, Sequence

import mysql.connector

from ..core.enums import AttendanceStatus, MemberStatus
from ..core.exceptions import ConflictError
from ..database.connection import ConnectionFactory
from ..database.mysql_base import db_cursor, fetchall, fetchone, is_duplicate_key
from ..members.model import Member
from .model import AttendanceRecord, AttendanceView
from .repository import AttendanceRepository

_COLUMNS = """
    a.attendance_id, a.member_id, a.code, a.confirmed_at, a.email_sent,
    a.email_sent_at, a.status, a.regenerated_count
"""


def _to_record(r: dict) -> AttendanceRecord:
    return AttendanceRecord(
        attendance_id=int(r["attendance_id"]),
        member_id=int(r["member_id"]),
        code=r["code"],
        confirmed_at=r["confirmed_at"],
        email_sent=bool(r["email_sent"]),
        email_sent_at=r.get("email_sent_at"),
        status=AttendanceStatus(r["status"]),
        regenerated_count=int(r.get("regenerated_count") or 0),
    )


class MySQLAttendanceRepository(AttendanceRepository):
    def __init__(self, conn_factory: ConnectionFactory):
        self._conn_factory = conn_factory

    def _get_one(self, where: str, value) -> Optional[AttendanceRecord]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_COLUMNS} FROM attendance a WHERE {where}", (value,))
            row = fetchone(cur)
            return _to_record(row) if row else None

    def get_by_id(self, attendance_id: int) -> Optional[AttendanceRecord]:
        return self._get_one("a.attendance_id=%s", int(attendance_id))

    def get_by_member(self, member_id: int) -> Optional[AttendanceRecord]:
        return self._get_one("a.member_id=%s", int(member_id))

    def get_by_code(self, code: str) -> Optional[AttendanceRecord]:
        return self._get_one("a.code=%s", code)

    def create_attendance(self, *, member_id: int, code: str, confirmed_at: datetime) -> int:
        try:
            with db_cursor(self._conn_factory) as (_, cur):
                cur.execute(
                    """
                    INSERT INTO attendance(member_id, code, confirmed_at, status)
                    VALUES(%s,%s,%s,%s)
                    """,
                    (int(member_id), code, confirmed_at, AttendanceStatus.ACTIVE.value),
                )
                return int(cur.lastrowid)
        except mysql.connector.IntegrityError as err:
            # uq_attendance_member (or, very rarely, uq_attendance_code)
            if is_duplicate_key(err):
                raise ConflictError("Este miembro ya confirmó su asistencia")
            raise

    def mark_email_sent(self, attendance_id: int, *, sent_at: datetime) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                "UPDATE attendance SET email_sent=1, email_sent_at=%s WHERE attendance_id=%s",
                (sent_at, int(attendance_id)),
            )
            return cur.rowcount > 0

    def replace_code(self, attendance_id: int, *, code: str, status: AttendanceStatus, regenerated_count: int) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                UPDATE attendance
                SET code=%s, status=%s, regenerated_count=%s
                WHERE attendance_id=%s
                """,
                (code, status.value, int(regenerated_count), int(attendance_id)),
            )
            return cur.rowcount > 0

    def set_status(self, attendance_id: int, *, status: AttendanceStatus) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("UPDATE attendance SET status=%s WHERE attendance_id=%s", (status.value, int(attendance_id)))
            return cur.rowcount > 0

    def delete_for_member(self, member_id: int) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("DELETE FROM attendance WHERE member_id=%s", (int(member_id),))
            return cur.rowcount > 0

    def list_with_members(self, *, newest_first: bool = True) -> Sequence[AttendanceView]:
        order = "DESC" if newest_first else "ASC"
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT {_COLUMNS},
                       m.name, m.email, m.cedula, m.phone, m.status AS member_status, m.created_at
                FROM attendance a
                JOIN members m ON m.member_id = a.member_id
                ORDER BY a.confirmed_at {order}, a.attendance_id {order}
                """
            )
            rows = fetchall(cur)
            return [
                AttendanceView(
                    record=_to_record(r),
                    member=Member(
                        member_id=int(r["member_id"]),
                        name=r["name"],
                        email=r["email"],
                        cedula=r["cedula"],
                        phone=r.get("phone"),
                        status=MemberStatus(r["member_status"]),
                        created_at=r.get("created_at"),
                    ),
                )
                for r in rows
            ]

    def count_all(self) -> int:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("SELECT COUNT(*) AS n FROM attendance")
            return int(fetchone(cur)["n"])

    def count_active(self) -> int:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("SELECT COUNT(*) AS n FROM attendance WHERE status=%s", (AttendanceStatus.ACTIVE.value,))
            return int(fetchone(cur)["n"])
