from __future__ import annotations

from typing import Optional, Protocol, Sequence

from .model import ActivityLog, LogFilter


class ActivityRepository(Protocol):
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
        raise NotImplementedError

    def list_logs(self, filters: LogFilter, *, limit: int, offset: int) -> Sequence[ActivityLog]:
        raise NotImplementedError

    def count_logs(self, filters: LogFilter) -> int:
        raise NotImplementedError

    def distinct_actions(self) -> Sequence[str]:
        raise NotImplementedError

    def distinct_entities(self) -> Sequence[str]:
        raise NotImplementedError
