from __future__ import annotations

import logging
from datetime import date
from typing import Dict, Optional, Sequence, Set, Tuple

from ..common.datetime_utils import format_date_es, now_local, parse_iso_date
from ..common.validators import require_choice, require_int, require_non_empty
from ..core.enums import Council
from ..core.exceptions import NotFoundError, ValidationError
from ..members.repository import MemberRepository
from .model import AssignmentView, Position, PositionOverview
from .repository import AssignmentRepository, PositionRepository

logger = logging.getLogger(__name__)


def _today(today: Optional[date]) -> date:
    return today or now_local().date()


def _parse_order(value) -> int:
    try:
        order = int(value)
    except (TypeError, ValueError):
        raise ValidationError("Orden no válido")
    if order < 0:
        raise ValidationError("Orden no válido")
    return order


def _parse_council(value) -> Council:
    return require_choice(value, Council, "Consejo no válido")


def _parse_optional_council(value) -> Optional[Council]:
    if value in (None, ""):
        return None
    return _parse_council(value)


class PositionService:
    """Use cases: positions, their term assignments, and occupancy.

    A position is occupied while it has an assignment whose term ends today
    or later; only unoccupied positions are open for voting.
    """

    def __init__(
        self,
        positions: PositionRepository,
        assignments: AssignmentRepository,
        members: MemberRepository,
        candidates,
    ):
        self._positions = positions
        self._assignments = assignments
        self._members = members
        self._candidates = candidates

    # ---- occupancy ----

    def current_assignments(self, today: Optional[date] = None) -> Dict[int, AssignmentView]:
        current: Dict[int, AssignmentView] = {}
        for view in self._assignments.list_assignments(current_on=_today(today)):
            held = current.get(view.assignment.position_id)
            if held is None or view.assignment.term_end_date > held.assignment.term_end_date:
                current[view.assignment.position_id] = view
        return current

    def occupied_position_ids(self, today: Optional[date] = None) -> Set[int]:
        return set(self.current_assignments(today))

    # ---- positions ----

    def list_positions(
        self,
        *,
        council=None,
        available_only: bool = False,
        today: Optional[date] = None,
    ) -> Sequence[PositionOverview]:
        council = _parse_optional_council(council)
        current = self.current_assignments(today)
        counts = self._assignments.count_by_position()

        rows = []
        for position in self._positions.list_positions(council=council):
            overview = PositionOverview(
                position=position,
                assignment_count=counts.get(position.position_id, 0),
                current=current.get(position.position_id),
            )
            if available_only and overview.is_occupied:
                continue
            rows.append(overview)
        return rows

    def get(self, position_id: int) -> Position:
        position = self._positions.get_by_id(int(position_id))
        if not position:
            raise NotFoundError("Posición no encontrada")
        return position

    def create_position(self, *, name, council, sort_order) -> Position:
        if not name or not council or sort_order in (None, ""):
            raise ValidationError("Nombre, consejo y orden son requeridos")
        name = require_non_empty(name, "Nombre")
        council = _parse_council(council)
        sort_order = _parse_order(sort_order)

        if self._positions.get_by_name_and_council(name, council):
            raise ValidationError("Ya existe una posición con ese nombre en este consejo")

        position_id = self._positions.create_position(name=name, council=council, sort_order=sort_order)
        logger.info("Created position %s (%s/%s)", position_id, council.value, name)
        return self.get(position_id)

    def update_position(self, position_id: int, *, name=None, council=None, sort_order=None) -> Tuple[Position, dict]:
        current = self.get(position_id)

        new_name = require_non_empty(name, "Nombre") if name is not None else current.name
        new_council = _parse_council(council) if council is not None else current.council
        new_order = _parse_order(sort_order) if sort_order is not None else current.sort_order

        if (new_name, new_council) != (current.name, current.council):
            clash = self._positions.get_by_name_and_council(new_name, new_council)
            if clash and clash.position_id != current.position_id:
                raise ValidationError("Ya existe una posición con ese nombre en este consejo")

        changes = {}
        if new_name != current.name:
            changes["name"] = {"old": current.name, "new": new_name}
        if new_council != current.council:
            changes["council"] = {"old": current.council.value, "new": new_council.value}
        if new_order != current.sort_order:
            changes["order"] = {"old": current.sort_order, "new": new_order}

        self._positions.update_position(current.position_id, name=new_name, council=new_council, sort_order=new_order)
        return self.get(current.position_id), changes

    def delete_position(self, position_id: int) -> Position:
        position = self.get(position_id)

        assignments = self._assignments.count_by_position().get(position.position_id, 0)
        if assignments:
            raise ValidationError(f"No se puede eliminar. Esta posición tiene {assignments} asignaciones registradas.")
        candidates = self._candidates.count_for_position(position.position_id)
        if candidates:
            raise ValidationError(f"No se puede eliminar. Esta posición tiene {candidates} candidatos registrados.")

        self._positions.delete_by_id(position.position_id)
        logger.info("Deleted position %s", position.position_id)
        return position

    # ---- assignments ----

    def list_assignments(self, *, council=None, active_only: bool = False, today: Optional[date] = None) -> Sequence[AssignmentView]:
        return self._assignments.list_assignments(
            council=_parse_optional_council(council),
            current_on=_today(today) if active_only else None,
        )

    def get_assignment(self, assignment_id: int) -> AssignmentView:
        view = self._assignments.get_by_id(int(assignment_id))
        if not view:
            raise NotFoundError("Asignación no encontrada")
        return view

    @staticmethod
    def _check_range(start: date, end: date) -> None:
        if end <= start:
            raise ValidationError("La fecha de término debe ser posterior a la fecha de inicio")

    def create_assignment(
        self,
        *,
        position_id,
        member_id,
        term_start_date=None,
        term_end_date=None,
        today: Optional[date] = None,
    ) -> AssignmentView:
        if not position_id or not member_id or not term_end_date:
            raise ValidationError("Posición, miembro y fecha de término son requeridos")
        today = _today(today)

        start = parse_iso_date(term_start_date) if term_start_date else today
        end = parse_iso_date(term_end_date)
        self._check_range(start, end)

        position = self.get(require_int(position_id, "Posición"))
        member = self._members.get_by_id(require_int(member_id, "Miembro"))
        if not member:
            raise NotFoundError("Miembro no encontrado")

        holder = self.current_assignments(today).get(position.position_id)
        if holder:
            raise ValidationError(
                f"Esta posición ya está asignada a {holder.member_name} "
                f"hasta {format_date_es(holder.assignment.term_end_date)}"
            )

        assignment_id = self._assignments.create_assignment(
            position_id=position.position_id,
            member_id=member.member_id,
            term_start_date=start,
            term_end_date=end,
        )
        logger.info("Assigned member %s to position %s", member.member_id, position.position_id)
        return self.get_assignment(assignment_id)

    def update_assignment(self, assignment_id: int, *, term_start_date=None, term_end_date=None) -> AssignmentView:
        view = self.get_assignment(assignment_id)
        start = parse_iso_date(term_start_date) if term_start_date else view.assignment.term_start_date
        end = parse_iso_date(term_end_date) if term_end_date else view.assignment.term_end_date
        self._check_range(start, end)

        self._assignments.update_terms(view.assignment.assignment_id, term_start_date=start, term_end_date=end)
        return self.get_assignment(view.assignment.assignment_id)

    def delete_assignment(self, assignment_id: int) -> AssignmentView:
        view = self.get_assignment(assignment_id)
        self._assignments.delete_by_id(view.assignment.assignment_id)
        return view
