from __future__ import annotations

from _bootstrap import DATABASE_DIR, describe, load_settings

from coopvote.database.bootstrap import apply_schema, list_tables


def main() -> None:
    settings = load_settings()
    db_config = dict(settings.DB_CONFIG)

    apply_schema(db_config, schema_path=DATABASE_DIR / "schema.sql")
    tables = list_tables(db_config)
    print(f"OK: Applied schema.sql -> {describe(db_config)} (tables={len(tables)})")


if __name__ == "__main__":
    main()
