from __future__ import annotations

from datetime import datetime
from typing import Optional, Protocol, Sequence

from ..core.enums import AttendanceStatus
from .model import AttendanceRecord, AttendanceView


class AttendanceRepository(Protocol):
    def get_by_id(self, attendance_id: int) -> Optional[AttendanceRecord]:
        raise NotImplementedError

    def get_by_member(self, member_id: int) -> Optional[AttendanceRecord]:
        raise NotImplementedError

    def get_by_code(self, code: str) -> Optional[AttendanceRecord]:
        raise NotImplementedError

    def create_attendance(self, *, member_id: int, code: str, confirmed_at: datetime) -> int:
        """Insert an active attendance row; raises ConflictError when the member already has one."""
        raise NotImplementedError

    def mark_email_sent(self, attendance_id: int, *, sent_at: datetime) -> bool:
        raise NotImplementedError

    def replace_code(self, attendance_id: int, *, code: str, status: AttendanceStatus, regenerated_count: int) -> bool:
        raise NotImplementedError

    def set_status(self, attendance_id: int, *, status: AttendanceStatus) -> bool:
        raise NotImplementedError

    def delete_for_member(self, member_id: int) -> bool:
        raise NotImplementedError

    def list_with_members(self, *, newest_first: bool = True) -> Sequence[AttendanceView]:
        raise NotImplementedError

    def count_all(self) -> int:
        raise NotImplementedError

    def count_active(self) -> int:
        raise NotImplementedError
