from __future__ import annotations

from datetime import datetime
from typing import Dict, Protocol, Sequence, Tuple

from .model import Vote


class VoteRepository(Protocol):
    def list_for_member(self, member_id: int) -> Sequence[Vote]:
        raise NotImplementedError

    def has_voted(self, member_id: int) -> bool:
        raise NotImplementedError

    def create_votes(self, *, member_id: int, selections: Sequence[Tuple[int, int]], voted_at: datetime) -> int:
        """Insert one vote per ``(candidate_id, position_id)`` atomically.

        Raises ConflictError when the member already voted for one of the positions.
        """
        raise NotImplementedError

    def count_all(self) -> int:
        raise NotImplementedError

    def count_unique_voters(self) -> int:
        raise NotImplementedError

    def count_by_position(self) -> Dict[int, int]:
        raise NotImplementedError

    def list_vote_times(self) -> Sequence[datetime]:
        raise NotImplementedError
