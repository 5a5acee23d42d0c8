"""Print every confirmed attendee with their voting code and status."""
from __future__ import annotations

from _bootstrap import load_settings

from coopvote.attendance.export import STATUS_LABELS
from coopvote.common.datetime_utils import format_datetime_es
from coopvote.container import build_container


def main() -> None:
    settings = load_settings()
    container = build_container(db_config=dict(settings.DB_CONFIG))

    rows = container.attendance_service.list_admin_view()
    if not rows:
        print("No hay miembros que hayan confirmado asistencia todavía.")
        return

    print(f"CÓDIGOS DE VOTACIÓN ({len(rows)} asistentes confirmados)")
    print("-" * 60)
    for index, view in enumerate(rows, start=1):
        record, member = view.record, view.member
        print(f"{index}. {member.name}")
        print(f"   Cédula: {member.cedula}")
        print(f"   Email: {member.email}")
        print(f"   Código: {record.code} ({STATUS_LABELS[record.status]})")
        print(f"   Confirmado: {format_datetime_es(record.confirmed_at)}")
        print(f"   Email enviado: {'Sí' if record.email_sent else 'No'}")
        print("-" * 60)


if __name__ == "__main__":
    main()
