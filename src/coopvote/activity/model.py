from __future__ import annotations

import json
from dataclasses import dataclass
from datetime import datetime
from typing import Optional

from ..common.datetime_utils import isoformat


@dataclass(frozen=True)
class ActivityLog:
    log_id: int
    admin_id: Optional[int]
    action: str
    entity: Optional[str]
    entity_id: Optional[str]
    details: Optional[str]
    ip_address: Optional[str]
    user_agent: Optional[str]
    created_at: datetime
    admin_name: Optional[str] = None
    admin_username: Optional[str] = None

    def parsed_details(self):
        if not self.details:
            return None
        try:
            return json.loads(self.details)
        except ValueError:
            return self.details

    def to_dict(self) -> dict:
        return {
            "id": self.log_id,
            "admin_id": self.admin_id,
            "admin": {"name": self.admin_name, "username": self.admin_username} if self.admin_id else None,
            "action": self.action,
            "entity": self.entity,
            "entity_id": self.entity_id,
            "details": self.parsed_details(),
            "ip_address": self.ip_address,
            "user_agent": self.user_agent,
            "timestamp": isoformat(self.created_at),
        }


@dataclass(frozen=True)
class LogFilter:
    action: Optional[str] = None
    entity: Optional[str] = None
    admin_id: Optional[int] = None
    date_from: Optional[datetime] = None
    date_to: Optional[datetime] = None
