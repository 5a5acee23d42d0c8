from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Optional

from ..common.datetime_utils import isoformat


@dataclass(frozen=True)
class ConfigEntry:
    """Runtime setting stored in the ``app_config`` table."""

    key: str
    value: str
    category: str = "general"
    description: Optional[str] = None
    updated_by: Optional[str] = None
    updated_at: Optional[datetime] = None

    def to_dict(self) -> dict:
        return {
            "key": self.key,
            "value": self.value,
            "category": self.category,
            "description": self.description,
            "updated_by": self.updated_by,
            "updated_at": isoformat(self.updated_at),
        }
