from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import datetime
from typing import List, Optional, Sequence, Tuple

from ..common.codes import generate_code, normalize_code
from ..common.datetime_utils import format_date_es, now_local, parse_iso_datetime
from ..common.numbers import percentage
from ..common.validators import require_choice, require_int
from ..core.constants import (
    ATTENDANCE_WINDOW_ENABLED,
    ATTENDANCE_WINDOW_END,
    ATTENDANCE_WINDOW_START,
    CODE_LENGTH,
    MAX_CODE_ATTEMPTS,
)
from ..core.enums import AttendanceStatus, WindowStatus
from ..core.exceptions import ConflictError, DomainError, NotFoundError, ValidationError
from ..members.model import Member
from ..members.repository import MemberRepository
from .model import AttendanceRecord, AttendanceView, ConfirmationResult, WindowState
from .repository import AttendanceRepository

logger = logging.getLogger(__name__)

OPEN_MESSAGE = "La confirmación de asistencia está disponible"


@dataclass(frozen=True)
class AttendanceStats:
    total_members: int
    attendance_count: int
    attendance_percentage: float
    attendees: Sequence[AttendanceView]


@dataclass(frozen=True)
class CodeChange:
    record: AttendanceRecord
    old_code: str


@dataclass(frozen=True)
class StatusChange:
    record: AttendanceRecord
    old_status: AttendanceStatus


class AttendanceService:
    """Use cases: attendance window, confirmation with voting code, code management."""

    def __init__(self, attendance: AttendanceRepository, members: MemberRepository, config, mailer):
        self._attendance = attendance
        self._members = members
        self._config = config
        self._mailer = mailer

    # ---- window ----

    def _config_value(self, key: str) -> Optional[str]:
        entry = self._config.get(key)
        if not entry or entry.value is None:
            return None
        return entry.value.strip() or None

    def _window_bound(self, key: str) -> Optional[datetime]:
        raw = self._config_value(key)
        if not raw:
            return None
        try:
            return parse_iso_datetime(raw)
        except ValidationError:
            logger.warning("Ignoring invalid %s value: %r", key, raw)
            return None

    def window_status(self, now: Optional[datetime] = None) -> WindowState:
        if (self._config_value(ATTENDANCE_WINDOW_ENABLED) or "").lower() != "true":
            return WindowState(restricted=False, open=True, status=WindowStatus.DURING, message=OPEN_MESSAGE)

        now = now or now_local()
        start = self._window_bound(ATTENDANCE_WINDOW_START)
        end = self._window_bound(ATTENDANCE_WINDOW_END)

        status = WindowStatus.DURING
        message = OPEN_MESSAGE
        if start and now < start:
            status = WindowStatus.BEFORE
            message = (
                "La confirmación de asistencia aún no está disponible. "
                f"Inicia el {format_date_es(start)} a las {start.strftime('%H:%M')}"
            )
        if end and now > end:
            status = WindowStatus.AFTER
            message = (
                "El período de confirmación de asistencia ha finalizado. "
                f"Cerró el {format_date_es(end)} a las {end.strftime('%H:%M')}"
            )

        return WindowState(
            restricted=True,
            open=status == WindowStatus.DURING,
            status=status,
            message=message,
            start=start,
            end=end,
        )

    # ---- codes ----

    def _new_unique_code(self) -> str:
        for _ in range(MAX_CODE_ATTEMPTS):
            code = generate_code(CODE_LENGTH)
            if not self._attendance.get_by_code(code):
                return code
        raise DomainError("No se pudo generar un código único. Intente nuevamente")

    def get(self, attendance_id: int) -> AttendanceRecord:
        record = self._attendance.get_by_id(int(attendance_id))
        if not record:
            raise NotFoundError("Registro de asistencia no encontrado")
        return record

    def get_by_code(self, code: Optional[str]) -> AttendanceRecord:
        record = self._attendance.get_by_code(normalize_code(code))
        if not record:
            raise NotFoundError("Código de votación no válido")
        return record

    # ---- public flow ----

    def confirm(self, member_id, now: Optional[datetime] = None) -> ConfirmationResult:
        if member_id in (None, ""):
            raise ValidationError("Se requiere el ID del miembro")
        member_id = require_int(member_id, "ID del miembro")

        now = now or now_local()
        window = self.window_status(now)
        if not window.open:
            raise ValidationError(window.message)

        member = self._members.get_by_id(member_id)
        if not member:
            raise NotFoundError("Miembro no encontrado")
        if not member.is_active:
            raise ValidationError("El miembro no está activo")
        if self._attendance.get_by_member(member.member_id):
            raise ConflictError("Este miembro ya confirmó su asistencia")

        code = self._new_unique_code()
        attendance_id = self._attendance.create_attendance(member_id=member.member_id, code=code, confirmed_at=now)
        logger.info("Attendance confirmed for member %s", member.member_id)

        delivery = self._mailer.send_voting_code(to=member.email, name=member.name, code=code)
        if delivery.sent:
            self._attendance.mark_email_sent(attendance_id, sent_at=now_local())

        return ConfirmationResult(record=self.get(attendance_id), member=member, email_sent=delivery.sent)

    def stats(self) -> AttendanceStats:
        total = self._members.count_all()
        attendees = self._attendance.list_with_members(newest_first=True)
        return AttendanceStats(
            total_members=total,
            attendance_count=len(attendees),
            attendance_percentage=percentage(len(attendees), total),
            attendees=attendees,
        )

    # ---- admin ----

    def list_admin_view(self) -> Sequence[AttendanceView]:
        return self._attendance.list_with_members(newest_first=True)

    def export_rows(self) -> Sequence[AttendanceView]:
        return self._attendance.list_with_members(newest_first=False)

    def regenerate_code(self, attendance_id: int) -> CodeChange:
        record = self.get(attendance_id)
        code = self._new_unique_code()
        self._attendance.replace_code(
            record.attendance_id,
            code=code,
            status=AttendanceStatus.ACTIVE,
            regenerated_count=record.regenerated_count + 1,
        )
        logger.info("Regenerated code for attendance %s", record.attendance_id)
        return CodeChange(record=self.get(record.attendance_id), old_code=record.code)

    def resend_email(self, attendance_id: int):
        record = self.get(attendance_id)
        member = self._members.get_by_id(record.member_id)
        if not member:
            raise NotFoundError("Miembro no encontrado")

        delivery = self._mailer.send_voting_code(to=member.email, name=member.name, code=record.code)
        if delivery.sent:
            self._attendance.mark_email_sent(record.attendance_id, sent_at=now_local())
        else:
            logger.warning("Could not resend code to member %s: %s", member.member_id, delivery.error)
        return member, delivery

    def change_status(self, attendance_id: int, status: Optional[str]) -> StatusChange:
        new_status = require_choice(
            status,
            AttendanceStatus,
            "Estado inválido. Debe ser: active, cancelled o regenerated",
        )
        record = self.get(attendance_id)
        self._attendance.set_status(record.attendance_id, status=new_status)
        return StatusChange(record=self.get(record.attendance_id), old_status=record.status)

    def issue_missing_codes(self, now: Optional[datetime] = None) -> Tuple[List[Tuple[Member, str]], List[Tuple[Member, str]]]:
        """Give every member without attendance a code, without sending email.

        Returns ``(created, skipped)`` as ``(member, code)`` pairs.
        """
        now = now or now_local()
        created, skipped = [], []
        for member in self._members.list_all():
            existing = self._attendance.get_by_member(member.member_id)
            if existing:
                skipped.append((member, existing.code))
                continue
            code = self._new_unique_code()
            self._attendance.create_attendance(member_id=member.member_id, code=code, confirmed_at=now)
            created.append((member, code))
        logger.info("Issued %s codes (%s already present)", len(created), len(skipped))
        return created, skipped
