from __future__ import annotations

import logging
from collections import OrderedDict
from typing import Dict, List, Optional, Sequence

from ..common.validators import optional_text, require_choice, require_int
from ..core.enums import CandidateStatus, Council
from ..core.exceptions import NotFoundError, ValidationError
from ..members.repository import MemberRepository
from ..positions.repository import PositionRepository
from .model import CandidateView
from .repository import CandidateRepository

logger = logging.getLogger(__name__)


def _parse_display_order(value, default: int = 0) -> int:
    if value in (None, ""):
        return default
    try:
        return int(value)
    except (TypeError, ValueError):
        raise ValidationError("Orden no válido")


class CandidateService:
    """Use cases: candidate listing (public/admin) and candidacy management."""

    def __init__(self, candidates: CandidateRepository, members: MemberRepository, positions: PositionRepository):
        self._candidates = candidates
        self._members = members
        self._positions = positions

    def list_public(self) -> Dict[str, Dict[str, List[CandidateView]]]:
        """Active candidates grouped by council, then by position name."""
        grouped: Dict[str, Dict[str, List[CandidateView]]] = OrderedDict()
        for view in self._candidates.list_candidates(status=CandidateStatus.ACTIVE):
            by_position = grouped.setdefault(view.council.value, OrderedDict())
            by_position.setdefault(view.position_name, []).append(view)
        return grouped

    def list_admin(self, *, council=None, status=None) -> Sequence[CandidateView]:
        return self._candidates.list_candidates(
            council=require_choice(council, Council, "Consejo no válido") if council else None,
            status=require_choice(status, CandidateStatus, "Estado no válido") if status else None,
        )

    def get(self, candidate_id: int) -> CandidateView:
        view = self._candidates.get_by_id(int(candidate_id))
        if not view:
            raise NotFoundError("Candidato no encontrado")
        return view

    def create_candidate(self, *, member_id, position_id, bio=None, photo_url=None, display_order=None) -> CandidateView:
        if not member_id or not position_id:
            raise ValidationError("Miembro y posición son requeridos")

        member = self._members.get_by_id(require_int(member_id, "Miembro"))
        if not member:
            raise NotFoundError("Miembro no encontrado")
        if not member.is_active:
            raise ValidationError("El miembro no está activo")

        position = self._positions.get_by_id(require_int(position_id, "Posición"))
        if not position:
            raise NotFoundError("Posición no encontrada")

        if self._candidates.exists_for(member_id=member.member_id, position_id=position.position_id):
            raise ValidationError("Este miembro ya es candidato para esta posición")

        candidate_id = self._candidates.create_candidate(
            member_id=member.member_id,
            position_id=position.position_id,
            bio=optional_text(bio),
            photo_url=optional_text(photo_url),
            display_order=_parse_display_order(display_order),
        )
        logger.info("Created candidate %s for position %s", candidate_id, position.position_id)
        return self.get(candidate_id)

    def update_candidate(self, candidate_id: int, *, bio=None, photo_url=None, status=None, display_order=None) -> CandidateView:
        """Update the given fields; ``None`` leaves a field unchanged, ``""`` clears bio/photo."""
        current = self.get(candidate_id).candidate

        new_status = current.status
        if status is not None:
            new_status = require_choice(status, CandidateStatus, "Estado no válido")

        self._candidates.update_candidate(
            current.candidate_id,
            bio=current.bio if bio is None else optional_text(bio),
            photo_url=current.photo_url if photo_url is None else optional_text(photo_url),
            status=new_status,
            display_order=_parse_display_order(display_order, current.display_order),
        )
        return self.get(current.candidate_id)

    def delete_candidate(self, candidate_id: int) -> CandidateView:
        view = self.get(candidate_id)
        if view.vote_count > 0:
            raise ValidationError(f"No se puede eliminar. El candidato tiene {view.vote_count} votos registrados.")
        self._candidates.delete_by_id(view.candidate_id)
        logger.info("Deleted candidate %s", view.candidate_id)
        return view
