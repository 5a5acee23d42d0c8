from __future__ import annotations

from datetime import date
from typing import Dict, Optional, Protocol, Sequence

from ..core.enums import Council
from .model import Assignment, AssignmentView, Position


class PositionRepository(Protocol):
    def list_positions(self, *, council: Optional[Council] = None) -> Sequence[Position]:
        raise NotImplementedError

    def get_by_id(self, position_id: int) -> Optional[Position]:
        raise NotImplementedError

    def get_by_name_and_council(self, name: str, council: Council) -> Optional[Position]:
        raise NotImplementedError

    def create_position(self, *, name: str, council: Council, sort_order: int) -> int:
        raise NotImplementedError

    def update_position(self, position_id: int, *, name: str, council: Council, sort_order: int) -> bool:
        raise NotImplementedError

    def delete_by_id(self, position_id: int) -> bool:
        raise NotImplementedError


class AssignmentRepository(Protocol):
    def list_assignments(
        self,
        *,
        council: Optional[Council] = None,
        current_on: Optional[date] = None,
    ) -> Sequence[AssignmentView]:
        """List assignments; with ``current_on`` only those whose term ends on/after that day."""
        raise NotImplementedError

    def get_by_id(self, assignment_id: int) -> Optional[AssignmentView]:
        raise NotImplementedError

    def count_by_position(self) -> Dict[int, int]:
        raise NotImplementedError

    def create_assignment(self, *, position_id: int, member_id: int, term_start_date: date, term_end_date: date) -> int:
        raise NotImplementedError

    def update_terms(self, assignment_id: int, *, term_start_date: date, term_end_date: date) -> bool:
        raise NotImplementedError

    def delete_by_id(self, assignment_id: int) -> bool:
        raise NotImplementedError
