from __future__ import annotations

from datetime import datetime
from typing import Optional, Protocol

from ..core.enums import Role
from .model import Admin


class AdminRepository(Protocol):
    def get_by_id(self, admin_id: int) -> Optional[Admin]:
        raise NotImplementedError

    def get_by_username(self, username: str) -> Optional[Admin]:
        raise NotImplementedError

    def create_admin(self, *, username: str, password_hash: str, name: str, email: str, role: Role) -> int:
        raise NotImplementedError

    def touch_last_login(self, admin_id: int, *, at: datetime) -> bool:
        raise NotImplementedError
