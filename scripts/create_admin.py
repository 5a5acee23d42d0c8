"""Create an administrator account.

Usage:
    python scripts/create_admin.py --username maria --name "María Pérez" --email maria@coop.do
"""
from __future__ import annotations

import argparse
import getpass

from _bootstrap import load_settings

from coopvote.container import build_container
from coopvote.core.exceptions import DomainError


def parse_args(argv=None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Create an admin account")
    parser.add_argument("--username", required=True)
    parser.add_argument("--name", required=True)
    parser.add_argument("--email", required=True)
    parser.add_argument("--role", default="admin", choices=["admin", "superadmin"])
    parser.add_argument("--password", help="Prompted for when omitted")
    return parser.parse_args(argv)


def main(argv=None) -> None:
    args = parse_args(argv)
    settings = load_settings()
    password = args.password or getpass.getpass("Contraseña: ")

    container = build_container(db_config=dict(settings.DB_CONFIG))
    try:
        admin = container.auth_service.create_admin(
            username=args.username,
            password=password,
            name=args.name,
            email=args.email,
            role=args.role,
        )
    except DomainError as e:
        raise SystemExit(f"Error: {e}")

    print(f"OK: Admin '{admin.username}' ({admin.role.value}) created with id {admin.admin_id}")


if __name__ == "__main__":
    main()
