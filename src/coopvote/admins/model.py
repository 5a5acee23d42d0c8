from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Optional

from ..common.datetime_utils import isoformat
from ..core.enums import Role


@dataclass(frozen=True)
class Admin:
    """Domain entity: an administrator account (password stored as a werkzeug hash)."""

    admin_id: int
    username: str
    password_hash: str
    name: str
    email: str
    role: Role
    last_login: Optional[datetime] = None
    created_at: Optional[datetime] = None

    def to_dict(self) -> dict:
        return {
            "id": self.admin_id,
            "username": self.username,
            "name": self.name,
            "email": self.email,
            "role": self.role.value,
            "last_login": isoformat(self.last_login),
        }
