from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Optional

from ..core.constants import COUNCIL_LABELS
from ..core.enums import CandidateStatus, Council


@dataclass(frozen=True)
class Candidate:
    candidate_id: int
    member_id: int
    position_id: int
    bio: Optional[str]
    photo_url: Optional[str]
    status: CandidateStatus
    display_order: int = 0
    created_at: Optional[datetime] = None

    @property
    def is_active(self) -> bool:
        return self.status == CandidateStatus.ACTIVE


@dataclass(frozen=True)
class CandidateView:
    """Read-model: candidate with member/position names and its vote tally."""

    candidate: Candidate
    member_name: str
    position_name: str
    position_order: int
    council: Council
    vote_count: int = 0

    @property
    def candidate_id(self) -> int:
        return self.candidate.candidate_id

    @property
    def position_id(self) -> int:
        return self.candidate.position_id

    def to_dict(self, *, with_votes: bool = False) -> dict:
        c = self.candidate
        data = {
            "id": c.candidate_id,
            "member_id": c.member_id,
            "name": self.member_name,
            "position_id": c.position_id,
            "position_name": self.position_name,
            "council": self.council.value,
            "council_label": COUNCIL_LABELS.get(self.council, self.council.value),
            "bio": c.bio,
            "photo_url": c.photo_url,
            "status": c.status.value,
            "order": c.display_order,
        }
        if with_votes:
            data["vote_count"] = self.vote_count
        return data
