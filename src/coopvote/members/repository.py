from __future__ import annotations

from typing import Optional, Protocol, Sequence

from ..core.enums import MemberStatus
from .model import Member, MemberOverview


class MemberRepository(Protocol):
    def get_by_id(self, member_id: int) -> Optional[Member]:
        raise NotImplementedError

    def find_conflict(self, *, email: str, cedula: str, exclude_id: Optional[int] = None) -> Optional[Member]:
        """Another member already using this email or cédula."""

        raise NotImplementedError

    def search(self, query: str, *, limit: int) -> Sequence[MemberOverview]:
        raise NotImplementedError

    def list_overview(self) -> Sequence[MemberOverview]:
        raise NotImplementedError

    def list_all(self) -> Sequence[Member]:
        raise NotImplementedError

    def count_all(self) -> int:
        raise NotImplementedError

    def count_active(self) -> int:
        raise NotImplementedError

    def create_member(
        self,
        *,
        name: str,
        email: str,
        cedula: str,
        phone: Optional[str],
        status: MemberStatus,
    ) -> int:
        raise NotImplementedError

    def update_member(
        self,
        member_id: int,
        *,
        name: str,
        email: str,
        cedula: str,
        phone: Optional[str],
        status: MemberStatus,
    ) -> bool:
        raise NotImplementedError

    def delete_by_id(self, member_id: int) -> bool:
        raise NotImplementedError
