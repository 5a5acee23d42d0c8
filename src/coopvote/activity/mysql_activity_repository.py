from __future__ import annotations

from typing import Optional, Sequence, Tuple

from ..database.connection import ConnectionFactory
from ..database.mysql_base import db_cursor, fetchall, fetchone
from .model import ActivityLog, LogFilter
from .repository import ActivityRepository


def _where(filters: LogFilter) -> Tuple[str, tuple]:
    clauses = []
    params: list[object] = []
    if filters.action:
        clauses.append("l.action=%s")
        params.append(filters.action)
    if filters.entity:
        clauses.append("l.entity=%s")
        params.append(filters.entity)
    if filters.admin_id is not None:
        clauses.append("l.admin_id=%s")
        params.append(int(filters.admin_id))
    if filters.date_from is not None:
        clauses.append("l.created_at >= %s")
        params.append(filters.date_from)
    if filters.date_to is not None:
        clauses.append("l.created_at <= %s")
        params.append(filters.date_to)
    sql = (" WHERE " + " AND ".join(clauses)) if clauses else ""
    return sql, tuple(params)


class MySQLActivityRepository(ActivityRepository):
    def __init__(self, conn_factory: ConnectionFactory):
        self._conn_factory = conn_factory

    def create_log(
        self,
        *,
        admin_id: Optional[int],
        action: str,
        entity: Optional[str],
        entity_id: Optional[str],
        details: Optional[str],
        ip_address: Optional[str],
        user_agent: Optional[str],
    ) -> int:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                INSERT INTO activity_logs(admin_id, action, entity, entity_id, details, ip_address, user_agent)
                VALUES(%s,%s,%s,%s,%s,%s,%s)
                """,
                (admin_id, action, entity, entity_id, details, ip_address, (user_agent or "")[:255] or None),
            )
            return int(cur.lastrowid)

    def list_logs(self, filters: LogFilter, *, limit: int, offset: int) -> Sequence[ActivityLog]:
        where, params = _where(filters)
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT l.log_id, l.admin_id, l.action, l.entity, l.entity_id, l.details,
                       l.ip_address, l.user_agent, l.created_at,
                       a.name AS admin_name, a.username AS admin_username
                FROM activity_logs l
                LEFT JOIN admins a ON a.admin_id = l.admin_id
                {where}
                ORDER BY l.created_at DESC, l.log_id DESC
                LIMIT %s OFFSET %s
                """,
                params + (int(limit), int(offset)),
            )
            return [
                ActivityLog(
                    log_id=int(r["log_id"]),
                    admin_id=r.get("admin_id"),
                    action=r["action"],
                    entity=r.get("entity"),
                    entity_id=r.get("entity_id"),
                    details=r.get("details"),
                    ip_address=r.get("ip_address"),
                    user_agent=r.get("user_agent"),
                    created_at=r["created_at"],
                    admin_name=r.get("admin_name"),
                    admin_username=r.get("admin_username"),
                )
                for r in fetchall(cur)
            ]

    def count_logs(self, filters: LogFilter) -> int:
        where, params = _where(filters)
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT COUNT(*) AS n FROM activity_logs l{where}", params)
            return int(fetchone(cur)["n"])

    def distinct_actions(self) -> Sequence[str]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("SELECT DISTINCT action FROM activity_logs ORDER BY action")
            return [r["action"] for r in fetchall(cur)]

    def distinct_entities(self) -> Sequence[str]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("SELECT DISTINCT entity FROM activity_logs WHERE entity IS NOT NULL ORDER BY entity")
            return [r["entity"] for r in fetchall(cur)]
