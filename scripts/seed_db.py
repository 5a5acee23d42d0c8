from __future__ import annotations

from _bootstrap import DATABASE_DIR, describe, load_settings

from coopvote.database.bootstrap import apply_seed_sql, ensure_default_admin


def main() -> None:
    settings = load_settings()
    db_config = dict(settings.DB_CONFIG)

    apply_seed_sql(db_config, seed_path=DATABASE_DIR / "seed.sql")
    username = settings.DEFAULT_ADMIN_USERNAME
    created = ensure_default_admin(db_config, username=username, password=settings.DEFAULT_ADMIN_PASSWORD)

    print(f"OK: Seeded database -> {describe(db_config)}")
    if created:
        print(f"    Admin '{username}' created (change the password after the first login)")


if __name__ == "__main__":
    main()
