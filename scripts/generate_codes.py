"""Issue voting codes to every member without attendance (test helper; no email is sent)."""
from __future__ import annotations

from _bootstrap import load_settings

from coopvote.container import build_container


def main() -> None:
    settings = load_settings()
    container = build_container(db_config=dict(settings.DB_CONFIG))

    members = container.members_repo.count_all()
    if not members:
        raise SystemExit("No hay miembros en la base de datos. Ejecuta: python scripts/seed_db.py")

    created, skipped = container.attendance_service.issue_missing_codes()
    for member, code in created:
        print(f"+ {member.name} - Código generado: {code}")
    for member, code in skipped:
        print(f"= {member.name} - Ya tiene código: {code}")

    print()
    print(f"Códigos generados: {len(created)}")
    print(f"Ya existían: {len(skipped)}")
    print(f"Total: {members}")


if __name__ == "__main__":
    main()
