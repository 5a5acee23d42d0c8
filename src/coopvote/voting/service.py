from __future__ import annotations

import logging
from collections import Counter
from datetime import date, datetime
from typing import Dict, List, Optional, Sequence, Set, Tuple

from ..attendance.model import AttendanceRecord
from ..attendance.repository import AttendanceRepository
from ..candidates.model import CandidateView
from ..candidates.repository import CandidateRepository
from ..common.codes import normalize_code
from ..common.datetime_utils import now_local
from ..core.enums import CandidateStatus
from ..core.exceptions import ConflictError, NotFoundError, ValidationError
from ..members.model import Member
from ..members.repository import MemberRepository
from ..positions.service import PositionService
from .model import SubmitResult, VoterStatus, VotingPosition
from .repository import VoteRepository

logger = logging.getLogger(__name__)


def _candidate_ids(candidate_ids, candidate_id) -> List[int]:
    raw = candidate_ids if candidate_ids is not None else ([candidate_id] if candidate_id not in (None, "") else [])
    if not isinstance(raw, (list, tuple)):
        raw = [raw]
    if not raw:
        raise ValidationError("Debe seleccionar al menos un candidato")
    try:
        return [int(value) for value in raw]
    except (TypeError, ValueError):
        raise ValidationError("Uno o más candidatos no son válidos")


class VotingService:
    """Use cases: ballot listing, code validation and vote submission."""

    def __init__(
        self,
        attendance: AttendanceRepository,
        members: MemberRepository,
        positions: PositionService,
        candidates: CandidateRepository,
        votes: VoteRepository,
    ):
        self._attendance = attendance
        self._members = members
        self._positions = positions
        self._candidates = candidates
        self._votes = votes

    # ---- ballot ----

    def voting_positions(self, *, council=None, today: Optional[date] = None) -> Sequence[VotingPosition]:
        by_position: Dict[int, List[CandidateView]] = {}
        for view in self._candidates.list_candidates(status=CandidateStatus.ACTIVE):
            by_position.setdefault(view.position_id, []).append(view)

        ballot = []
        for overview in self._positions.list_positions(council=council, today=today):
            candidates = sorted(by_position.get(overview.position.position_id, []), key=lambda c: c.member_name)
            ballot.append(VotingPosition(overview=overview, candidates=candidates))
        return ballot

    def available_position_ids(self, today: Optional[date] = None) -> List[int]:
        """Unoccupied positions that have at least one active candidate."""
        occupied = self._positions.occupied_position_ids(today)
        with_candidates: Set[int] = {
            view.position_id for view in self._candidates.list_candidates(status=CandidateStatus.ACTIVE)
        }
        return sorted(with_candidates - occupied)

    # ---- codes ----

    def _lookup(self, code) -> Tuple[AttendanceRecord, Member]:
        record = self._attendance.get_by_code(normalize_code(code))
        if not record:
            raise NotFoundError("Código de votación inválido")
        member = self._members.get_by_id(record.member_id)
        if not member:
            raise NotFoundError("Miembro no encontrado")
        return record, member

    def validate_code(self, code) -> Tuple[Member, bool]:
        _, member = self._lookup(code)
        return member, self._votes.has_voted(member.member_id)

    def verify(self, code, *, today: Optional[date] = None) -> VoterStatus:
        record, member = self._lookup(code)
        if not record.is_active:
            raise ValidationError("Este código de votación no está activo")

        votes = self._votes.list_for_member(member.member_id)
        names = {view.candidate_id: view for view in self._candidates.get_many({v.candidate_id for v in votes})}
        votes_by_position = {}
        for vote in votes:
            view = names.get(vote.candidate_id)
            votes_by_position[vote.position_id] = {
                "candidate_id": vote.candidate_id,
                "candidate_name": view.member_name if view else None,
                "position_name": view.position_name if view else None,
            }

        available = self.available_position_ids(today)
        return VoterStatus(
            member=member,
            votes_count=len(votes),
            votes_by_position=votes_by_position,
            available_position_ids=available,
            has_completed_all_votes=all(pid in votes_by_position for pid in available),
        )

    # ---- submit ----

    def submit(
        self,
        code,
        *,
        candidate_ids=None,
        candidate_id=None,
        now: Optional[datetime] = None,
        today: Optional[date] = None,
    ) -> SubmitResult:
        code = normalize_code(code)
        ids = _candidate_ids(candidate_ids, candidate_id)
        now = now or now_local()
        today = today or now.date()

        record, member = self._lookup(code)
        if not record.is_active:
            raise ValidationError("Este código de votación no está activo")
        if not member.is_active:
            raise ValidationError("El miembro no está activo")

        found = {view.candidate_id: view for view in self._candidates.get_many(set(ids))}
        if len(found) != len(set(ids)):
            raise ValidationError("Uno o más candidatos no son válidos")
        selected = [found[i] for i in ids]

        inactive = [view for view in selected if not view.candidate.is_active]
        if inactive:
            raise ValidationError(f"El candidato {inactive[0].member_name} no está activo")

        occupied = self._positions.occupied_position_ids(today)
        blocked = [view for view in selected if view.position_id in occupied]
        if blocked:
            raise ValidationError(f"La posición {blocked[0].position_name} no está disponible para votación")

        per_position = Counter(view.position_id for view in selected)
        for view in selected:
            if per_position[view.position_id] > 1:
                raise ValidationError(f"No puedes votar por más de un candidato en {view.position_name}")

        already = {vote.position_id for vote in self._votes.list_for_member(member.member_id)}
        repeated = [view.position_name for view in selected if view.position_id in already]
        if repeated:
            raise ConflictError(f"Ya has votado en: {', '.join(repeated)}")

        try:
            self._votes.create_votes(
                member_id=member.member_id,
                selections=[(view.candidate_id, view.position_id) for view in selected],
                voted_at=now,
            )
        except ConflictError:
            raise ConflictError(f"Ya has votado en: {', '.join(view.position_name for view in selected)}")

        logger.info("Member %s cast %s vote(s)", member.member_id, len(selected))

        voted = {vote.position_id for vote in self._votes.list_for_member(member.member_id)}
        available = self.available_position_ids(today)
        return SubmitResult(
            votes_count=len(selected),
            total_votes=len(voted),
            has_completed_all_votes=all(pid in voted for pid in available),
            voted_position_ids=sorted(voted),
        )
