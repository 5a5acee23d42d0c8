from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime
from typing import Optional

from ..common.datetime_utils import isoformat
from ..core.constants import COUNCIL_LABELS
from ..core.enums import Council


@dataclass(frozen=True)
class Position:
    """Domain entity: a seat on a council, e.g. "Presidente" of administracion."""

    position_id: int
    name: str
    council: Council
    sort_order: int
    created_at: Optional[datetime] = None

    @property
    def council_label(self) -> str:
        return COUNCIL_LABELS.get(self.council, self.council.value)

    def to_dict(self) -> dict:
        return {
            "id": self.position_id,
            "name": self.name,
            "council": self.council.value,
            "council_label": self.council_label,
            "order": self.sort_order,
        }


@dataclass(frozen=True)
class Assignment:
    assignment_id: int
    position_id: int
    member_id: int
    term_start_date: date
    term_end_date: date
    created_at: Optional[datetime] = None

    def is_current(self, today: date) -> bool:
        return self.term_end_date >= today


@dataclass(frozen=True)
class AssignmentView:
    """Read-model: assignment joined with its position and member."""

    assignment: Assignment
    position_name: str
    council: Council
    member_name: str
    member_cedula: str

    def to_dict(self, today: date) -> dict:
        a = self.assignment
        return {
            "id": a.assignment_id,
            "position_id": a.position_id,
            "position_name": self.position_name,
            "council": self.council.value,
            "member_id": a.member_id,
            "member_name": self.member_name,
            "member_cedula": self.member_cedula,
            "term_start_date": isoformat(a.term_start_date),
            "term_end_date": isoformat(a.term_end_date),
            "is_active": a.is_current(today),
        }


@dataclass(frozen=True)
class PositionOverview:
    position: Position
    assignment_count: int
    current: Optional[AssignmentView] = None

    @property
    def is_occupied(self) -> bool:
        return self.current is not None

    def to_dict(self) -> dict:
        data = self.position.to_dict()
        data.update(
            {
                "is_occupied": self.is_occupied,
                "current_holder": self.current.member_name if self.current else None,
                "term_end_date": isoformat(self.current.assignment.term_end_date) if self.current else None,
                "assignment_count": self.assignment_count,
            }
        )
        return data
