from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Optional, Sequence

from ..common.validators import optional_text, require_cedula, require_choice, require_email, require_non_empty
from ..core.constants import DEFAULT_SEARCH_LIMIT
from ..core.enums import MemberStatus
from ..core.exceptions import NotFoundError, ValidationError
from .model import Member, MemberOverview
from .repository import MemberRepository

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class MemberInput:
    name: str
    email: str
    cedula: str
    phone: Optional[str]
    status: MemberStatus


class MemberService:
    """Use cases: member lookup (public) and member management (admin)."""

    def __init__(self, members: MemberRepository, attendance, votes, candidates):
        self._members = members
        self._attendance = attendance
        self._votes = votes
        self._candidates = candidates

    def search(self, query: Optional[str], *, limit: int = DEFAULT_SEARCH_LIMIT) -> Sequence[MemberOverview]:
        q = (query or "").strip()
        if not q:
            raise ValidationError("Se requiere un término de búsqueda")
        return self._members.search(q, limit=limit)

    def list_admin_view(self) -> Sequence[MemberOverview]:
        return self._members.list_overview()

    def get(self, member_id: int) -> Member:
        member = self._members.get_by_id(int(member_id))
        if not member:
            raise NotFoundError("Miembro no encontrado")
        return member

    @staticmethod
    def _clean(*, name, email, cedula, phone, status) -> MemberInput:
        if not name or not email or not cedula:
            raise ValidationError("Nombre, email y cédula son requeridos")
        return MemberInput(
            name=require_non_empty(name, "Nombre"),
            email=require_email(email),
            cedula=require_cedula(cedula),
            phone=optional_text(phone),
            status=require_choice(status or MemberStatus.ACTIVE.value, MemberStatus, "Estado no válido"),
        )

    def create_member(self, *, name, email, cedula, phone=None, status=None) -> Member:
        data = self._clean(name=name, email=email, cedula=cedula, phone=phone, status=status)

        if self._members.find_conflict(email=data.email, cedula=data.cedula):
            raise ValidationError("Ya existe un miembro con ese email o cédula")

        member_id = self._members.create_member(
            name=data.name,
            email=data.email,
            cedula=data.cedula,
            phone=data.phone,
            status=data.status,
        )
        logger.info("Created member %s (%s)", member_id, data.cedula)
        return self.get(member_id)

    def update_member(self, member_id: int, *, name, email, cedula, phone=None, status=None) -> Member:
        self.get(member_id)
        data = self._clean(name=name, email=email, cedula=cedula, phone=phone, status=status)

        if self._members.find_conflict(email=data.email, cedula=data.cedula, exclude_id=int(member_id)):
            raise ValidationError("Ya existe otro miembro con ese email o cédula")

        self._members.update_member(
            int(member_id),
            name=data.name,
            email=data.email,
            cedula=data.cedula,
            phone=data.phone,
            status=data.status,
        )
        return self.get(member_id)

    def delete_member(self, member_id: int) -> Member:
        member = self.get(member_id)

        if self._votes.has_voted(member.member_id):
            raise ValidationError("No se puede eliminar un miembro que ya votó")
        if self._candidates.count_for_member(member.member_id) > 0:
            raise ValidationError("No se puede eliminar un miembro que es candidato. Elimine primero la candidatura")

        self._attendance.delete_for_member(member.member_id)
        if not self._members.delete_by_id(member.member_id):
            raise ValidationError("Error al eliminar miembro")

        logger.info("Deleted member %s", member.member_id)
        return member
