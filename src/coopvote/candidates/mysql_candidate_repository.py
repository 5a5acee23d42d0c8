from __future__ import annotations

from typing import Dict, Iterable, Optional, Sequence

from ..core.enums import CandidateStatus, Council
from ..database.connection import ConnectionFactory
from ..database.mysql_base import db_cursor, fetchall, fetchone, in_clause
from .model import Candidate, CandidateView
from .repository import CandidateRepository

_SELECT = """
    SELECT c.candidate_id, c.member_id, c.position_id, c.bio, c.photo_url,
           c.status, c.display_order, c.created_at,
           m.name AS member_name,
           p.name AS position_name, p.sort_order AS position_order, p.council,
           (SELECT COUNT(*) FROM votes v WHERE v.candidate_id = c.candidate_id) AS vote_count
    FROM candidates c
    JOIN members m ON m.member_id = c.member_id
    JOIN positions p ON p.position_id = c.position_id
"""

_ORDER = " ORDER BY p.council, p.sort_order, c.display_order, m.name"


def _to_view(r: dict) -> CandidateView:
    return CandidateView(
        candidate=Candidate(
            candidate_id=int(r["candidate_id"]),
            member_id=int(r["member_id"]),
            position_id=int(r["position_id"]),
            bio=r.get("bio"),
            photo_url=r.get("photo_url"),
            status=CandidateStatus(r["status"]),
            display_order=int(r.get("display_order") or 0),
            created_at=r.get("created_at"),
        ),
        member_name=r["member_name"],
        position_name=r["position_name"],
        position_order=int(r["position_order"]),
        council=Council(r["council"]),
        vote_count=int(r.get("vote_count") or 0),
    )


class MySQLCandidateRepository(CandidateRepository):
    def __init__(self, conn_factory: ConnectionFactory):
        self._conn_factory = conn_factory

    def list_candidates(
        self,
        *,
        council: Optional[Council] = None,
        status: Optional[CandidateStatus] = None,
    ) -> Sequence[CandidateView]:
        where = []
        params: list[object] = []
        if council is not None:
            where.append("p.council=%s")
            params.append(council.value)
        if status is not None:
            where.append("c.status=%s")
            params.append(status.value)

        sql = _SELECT
        if where:
            sql += " WHERE " + " AND ".join(where)
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(sql + _ORDER, tuple(params))
            return [_to_view(r) for r in fetchall(cur)]

    def get_by_id(self, candidate_id: int) -> Optional[CandidateView]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(_SELECT + " WHERE c.candidate_id=%s", (int(candidate_id),))
            row = fetchone(cur)
            return _to_view(row) if row else None

    def get_many(self, candidate_ids: Iterable[int]) -> Sequence[CandidateView]:
        ids = [int(i) for i in candidate_ids]
        if not ids:
            return []
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(_SELECT + f" WHERE c.candidate_id IN ({in_clause(ids)})", tuple(ids))
            return [_to_view(r) for r in fetchall(cur)]

    def exists_for(self, *, member_id: int, position_id: int) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                "SELECT 1 AS found FROM candidates WHERE member_id=%s AND position_id=%s LIMIT 1",
                (int(member_id), int(position_id)),
            )
            return fetchone(cur) is not None

    def count_for_member(self, member_id: int) -> int:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("SELECT COUNT(*) AS n FROM candidates WHERE member_id=%s", (int(member_id),))
            return int(fetchone(cur)["n"])

    def count_for_position(self, position_id: int) -> int:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("SELECT COUNT(*) AS n FROM candidates WHERE position_id=%s", (int(position_id),))
            return int(fetchone(cur)["n"])

    def count_active_by_council(self) -> Dict[Council, int]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                SELECT p.council, COUNT(*) AS n
                FROM candidates c
                JOIN positions p ON p.position_id = c.position_id
                WHERE c.status=%s
                GROUP BY p.council
                """,
                (CandidateStatus.ACTIVE.value,),
            )
            return {Council(r["council"]): int(r["n"]) for r in fetchall(cur)}

    def create_candidate(
        self,
        *,
        member_id: int,
        position_id: int,
        bio: Optional[str],
        photo_url: Optional[str],
        display_order: int,
    ) -> int:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                INSERT INTO candidates(member_id, position_id, bio, photo_url, status, display_order)
                VALUES(%s,%s,%s,%s,%s,%s)
                """,
                (int(member_id), int(position_id), bio, photo_url, CandidateStatus.ACTIVE.value, int(display_order)),
            )
            return int(cur.lastrowid)

    def update_candidate(
        self,
        candidate_id: int,
        *,
        bio: Optional[str],
        photo_url: Optional[str],
        status: CandidateStatus,
        display_order: int,
    ) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                UPDATE candidates
                SET bio=%s, photo_url=%s, status=%s, display_order=%s
                WHERE candidate_id=%s
                """,
                (bio, photo_url, status.value, int(display_order), int(candidate_id)),
            )
            return cur.rowcount > 0

    def delete_by_id(self, candidate_id: int) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("DELETE FROM candidates WHERE candidate_id=%s", (int(candidate_id),))
            return cur.rowcount > 0
