from __future__ import annotations

from datetime import date
from typing import Dict, Optional, Sequence

from ..core.enums import Council
from ..database.connection import ConnectionFactory
from ..database.mysql_base import db_cursor, fetchall, fetchone
from .model import Assignment, AssignmentView
from .repository import AssignmentRepository

_SELECT = """
    SELECT pa.assignment_id, pa.position_id, pa.member_id,
           pa.term_start_date, pa.term_end_date, pa.created_at,
           p.name AS position_name, p.council,
           m.name AS member_name, m.cedula AS member_cedula
    FROM position_assignments pa
    JOIN positions p ON p.position_id = pa.position_id
    JOIN members m ON m.member_id = pa.member_id
"""


def _to_view(r: dict) -> AssignmentView:
    return AssignmentView(
        assignment=Assignment(
            assignment_id=int(r["assignment_id"]),
            position_id=int(r["position_id"]),
            member_id=int(r["member_id"]),
            term_start_date=r["term_start_date"],
            term_end_date=r["term_end_date"],
            created_at=r.get("created_at"),
        ),
        position_name=r["position_name"],
        council=Council(r["council"]),
        member_name=r["member_name"],
        member_cedula=r["member_cedula"],
    )


class MySQLAssignmentRepository(AssignmentRepository):
    def __init__(self, conn_factory: ConnectionFactory):
        self._conn_factory = conn_factory

    def list_assignments(
        self,
        *,
        council: Optional[Council] = None,
        current_on: Optional[date] = None,
    ) -> Sequence[AssignmentView]:
        where = []
        params: list[object] = []
        if council is not None:
            where.append("p.council=%s")
            params.append(council.value)
        if current_on is not None:
            where.append("pa.term_end_date >= %s")
            params.append(current_on)

        sql = _SELECT
        if where:
            sql += " WHERE " + " AND ".join(where)
        sql += " ORDER BY p.council, p.sort_order, pa.term_start_date DESC"

        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(sql, tuple(params))
            return [_to_view(r) for r in fetchall(cur)]

    def get_by_id(self, assignment_id: int) -> Optional[AssignmentView]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(_SELECT + " WHERE pa.assignment_id=%s", (int(assignment_id),))
            row = fetchone(cur)
            return _to_view(row) if row else None

    def count_by_position(self) -> Dict[int, int]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("SELECT position_id, COUNT(*) AS n FROM position_assignments GROUP BY position_id")
            return {int(r["position_id"]): int(r["n"]) for r in fetchall(cur)}

    def create_assignment(self, *, position_id: int, member_id: int, term_start_date: date, term_end_date: date) -> int:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                INSERT INTO position_assignments(position_id, member_id, term_start_date, term_end_date)
                VALUES(%s,%s,%s,%s)
                """,
                (int(position_id), int(member_id), term_start_date, term_end_date),
            )
            return int(cur.lastrowid)

    def update_terms(self, assignment_id: int, *, term_start_date: date, term_end_date: date) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                "UPDATE position_assignments SET term_start_date=%s, term_end_date=%s WHERE assignment_id=%s",
                (term_start_date, term_end_date, int(assignment_id)),
            )
            return cur.rowcount > 0

    def delete_by_id(self, assignment_id: int) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("DELETE FROM position_assignments WHERE assignment_id=%s", (int(assignment_id),))
            return cur.rowcount > 0
