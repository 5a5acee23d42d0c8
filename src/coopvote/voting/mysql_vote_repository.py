from __future__ import annotations

import logging
from datetime import datetime
from typing import Dict, Sequence, Tuple

import mysql.connector

from ..core.exceptions import ConflictError
from ..database.connection import ConnectionFactory
from ..database.mysql_base import db_cursor, fetchall, fetchone, is_duplicate_key
from .model import Vote
from .repository import VoteRepository

logger = logging.getLogger(__name__)


class MySQLVoteRepository(VoteRepository):
    def __init__(self, conn_factory: ConnectionFactory):
        self._conn_factory = conn_factory

    def list_for_member(self, member_id: int) -> Sequence[Vote]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                SELECT vote_id, member_id, candidate_id, position_id, voted_at
                FROM votes WHERE member_id=%s ORDER BY voted_at, vote_id
                """,
                (int(member_id),),
            )
            return [
                Vote(
                    vote_id=int(r["vote_id"]),
                    member_id=int(r["member_id"]),
                    candidate_id=int(r["candidate_id"]),
                    position_id=int(r["position_id"]),
                    voted_at=r.get("voted_at"),
                )
                for r in fetchall(cur)
            ]

    def has_voted(self, member_id: int) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("SELECT 1 AS found FROM votes WHERE member_id=%s LIMIT 1", (int(member_id),))
            return fetchone(cur) is not None

    def create_votes(self, *, member_id: int, selections: Sequence[Tuple[int, int]], voted_at: datetime) -> int:
        try:
            with db_cursor(self._conn_factory) as (_, cur):
                for candidate_id, position_id in selections:
                    cur.execute(
                        """
                        INSERT INTO votes(member_id, candidate_id, position_id, voted_at)
                        VALUES(%s,%s,%s,%s)
                        """,
                        (int(member_id), int(candidate_id), int(position_id), voted_at),
                    )
        except mysql.connector.IntegrityError as err:
            if is_duplicate_key(err):
                logger.warning("Duplicate vote rejected for member %s", member_id)
                raise ConflictError("Ya has votado en una o más de estas posiciones")
            raise
        return len(selections)

    def count_all(self) -> int:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("SELECT COUNT(*) AS n FROM votes")
            return int(fetchone(cur)["n"])

    def count_unique_voters(self) -> int:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("SELECT COUNT(DISTINCT member_id) AS n FROM votes")
            return int(fetchone(cur)["n"])

    def count_by_position(self) -> Dict[int, int]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("SELECT position_id, COUNT(*) AS n FROM votes GROUP BY position_id")
            return {int(r["position_id"]): int(r["n"]) for r in fetchall(cur)}

    def list_vote_times(self) -> Sequence[datetime]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("SELECT voted_at FROM votes ORDER BY voted_at")
            return [r["voted_at"] for r in fetchall(cur)]
