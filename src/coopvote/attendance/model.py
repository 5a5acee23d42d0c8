from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Optional

from ..common.datetime_utils import isoformat
from ..core.enums import AttendanceStatus, WindowStatus
from ..members.model import Member


@dataclass(frozen=True)
class AttendanceRecord:
    """Domain entity: a confirmed attendance and its voting code."""

    attendance_id: int
    member_id: int
    code: str
    confirmed_at: datetime
    email_sent: bool
    email_sent_at: Optional[datetime]
    status: AttendanceStatus
    regenerated_count: int = 0

    @property
    def is_active(self) -> bool:
        return self.status == AttendanceStatus.ACTIVE

    def to_dict(self) -> dict:
        return {
            "id": self.attendance_id,
            "member_id": self.member_id,
            "code": self.code,
            "confirmed_at": isoformat(self.confirmed_at),
            "email_sent": self.email_sent,
            "email_sent_at": isoformat(self.email_sent_at),
            "status": self.status.value,
            "regenerated_count": self.regenerated_count,
        }


@dataclass(frozen=True)
class AttendanceView:
    """Read-model: attendance joined with its member (admin list, exports)."""

    record: AttendanceRecord
    member: Member

    def to_dict(self) -> dict:
        data = self.record.to_dict()
        data["member"] = {
            "id": self.member.member_id,
            "name": self.member.name,
            "email": self.member.email,
            "cedula": self.member.cedula,
            "phone": self.member.phone,
        }
        return data


@dataclass(frozen=True)
class WindowState:
    restricted: bool
    open: bool
    status: WindowStatus
    message: str
    start: Optional[datetime] = None
    end: Optional[datetime] = None

    def to_dict(self) -> dict:
        data = {
            "restricted": self.restricted,
            "open": self.open,
            "status": self.status.value,
            "message": self.message,
        }
        if self.restricted:
            data["window"] = {"start": isoformat(self.start), "end": isoformat(self.end)}
        return data


@dataclass(frozen=True)
class ConfirmationResult:
    record: AttendanceRecord
    member: Member
    email_sent: bool
