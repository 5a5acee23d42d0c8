from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from typing import Dict, List, Optional, Sequence

from ..candidates.model import CandidateView
from ..members.model import Member
from ..positions.model import PositionOverview


@dataclass(frozen=True)
class Vote:
    vote_id: int
    member_id: int
    candidate_id: int
    position_id: int
    voted_at: Optional[datetime] = None


@dataclass(frozen=True)
class VotingPosition:
    """A position as shown on the ballot: its active candidates and availability."""

    overview: PositionOverview
    candidates: Sequence[CandidateView]

    @property
    def is_available(self) -> bool:
        return not self.overview.is_occupied

    def to_dict(self) -> dict:
        data = self.overview.to_dict()
        data.update(
            {
                "is_available": self.is_available,
                "is_blocked": not self.is_available,
                "candidates": [c.to_dict() for c in self.candidates],
            }
        )
        return data


@dataclass(frozen=True)
class VoterStatus:
    member: Member
    votes_count: int
    votes_by_position: Dict[int, dict]
    available_position_ids: List[int]
    has_completed_all_votes: bool

    @property
    def has_voted(self) -> bool:
        return self.has_completed_all_votes and len(self.available_position_ids) > 0

    def to_dict(self) -> dict:
        return {
            "member_id": self.member.member_id,
            "member_name": self.member.name,
            "votes_count": self.votes_count,
            "votes_by_position": {str(k): v for k, v in self.votes_by_position.items()},
            "available_positions": self.available_position_ids,
            "has_completed_all_votes": self.has_completed_all_votes,
            "has_voted": self.has_voted,
        }


@dataclass(frozen=True)
class SubmitResult:
    votes_count: int
    total_votes: int
    has_completed_all_votes: bool
    voted_position_ids: List[int] = field(default_factory=list)

    def to_dict(self) -> dict:
        return {
            "success": True,
            "message": "Voto registrado exitosamente",
            "votes_count": self.votes_count,
            "total_votes": self.total_votes,
            "has_completed_all_votes": self.has_completed_all_votes,
            "voted_position_ids": self.voted_position_ids,
        }
