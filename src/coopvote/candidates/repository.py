from __future__ import annotations

from typing import Dict, Iterable, Optional, Protocol, Sequence

from ..core.enums import CandidateStatus, Council
from .model import CandidateView


class CandidateRepository(Protocol):
    def list_candidates(
        self,
        *,
        council: Optional[Council] = None,
        status: Optional[CandidateStatus] = None,
    ) -> Sequence[CandidateView]:
        raise NotImplementedError

    def get_by_id(self, candidate_id: int) -> Optional[CandidateView]:
        raise NotImplementedError

    def get_many(self, candidate_ids: Iterable[int]) -> Sequence[CandidateView]:
        raise NotImplementedError

    def exists_for(self, *, member_id: int, position_id: int) -> bool:
        raise NotImplementedError

    def count_for_member(self, member_id: int) -> int:
        raise NotImplementedError

    def count_for_position(self, position_id: int) -> int:
        raise NotImplementedError

    def count_active_by_council(self) -> Dict[Council, int]:
        raise NotImplementedError

    def create_candidate(
        self,
        *,
        member_id: int,
        position_id: int,
        bio: Optional[str],
        photo_url: Optional[str],
        display_order: int,
    ) -> int:
        raise NotImplementedError

    def update_candidate(
        self,
        candidate_id: int,
        *,
        bio: Optional[str],
        photo_url: Optional[str],
        status: CandidateStatus,
        display_order: int,
    ) -> bool:
        raise NotImplementedError

    def delete_by_id(self, candidate_id: int) -> bool:
        raise NotImplementedError
