from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Optional

from ..common.datetime_utils import isoformat
from ..core.enums import MemberStatus


@dataclass(frozen=True)
class Member:
    """Domain entity: a cooperative member (socio)."""

    member_id: int
    name: str
    email: str
    cedula: str
    phone: Optional[str]
    status: MemberStatus
    created_at: Optional[datetime] = None

    @property
    def is_active(self) -> bool:
        return self.status == MemberStatus.ACTIVE

    def to_dict(self) -> dict:
        return {
            "id": self.member_id,
            "name": self.name,
            "email": self.email,
            "cedula": self.cedula,
            "phone": self.phone,
            "status": self.status.value,
            "created_at": isoformat(self.created_at),
        }


@dataclass(frozen=True)
class MemberOverview:
    """Read-model for admin/search listings."""

    member: Member
    has_attendance: bool
    has_voted: bool

    def to_dict(self) -> dict:
        data = self.member.to_dict()
        data["has_attendance"] = self.has_attendance
        data["has_voted"] = self.has_voted
        return data
