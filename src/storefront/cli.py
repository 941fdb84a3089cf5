"""
Command-line interface for Storefront maintenance tasks.

Schema management, account bootstrap (including admins, who cannot
self-register), token housekeeping and running the API server.
"""

import argparse
import json
import sys
from datetime import datetime
from typing import List, Optional

from storefront.utils.exceptions import StorefrontError
from storefront.utils.logger import get_logger, setup_logging

cli_logger = get_logger(__name__)


class StorefrontCLI:
    """Command-line interface for Storefront operations."""

    def cmd_init_db(self, args) -> int:
        from storefront.database.connection import init_db

        init_db()
        print("✅ Database tables created")
        return 0

    def cmd_drop_db(self, args) -> int:
        from storefront.database.connection import drop_db

        if not args.yes:
            print("❌ Refusing to drop tables without --yes")
            return 1

        drop_db()
        print("✅ Database tables dropped")
        return 0

    def cmd_create_user(self, args) -> int:
        from storefront.auth import get_password_manager
        from storefront.database.connection import get_db_context
        from storefront.database.models import User, UserRole
        from storefront.repositories import UserRepository
        from storefront.services.auth_service import normalize_email

        passwords = get_password_manager()
        email = normalize_email(args.email)
        passwords.validate_strength(args.password)

        with get_db_context() as db:
            users = UserRepository(db)
            if users.get_by_email(email):
                print(f"❌ User '{email}' already exists")
                return 1

            user = users.add(
                User(
                    email=email,
                    password_hash=passwords.hash(args.password),
                    full_name=args.full_name,
                    role=UserRole(args.role),
                    is_active=True,
                )
            )
            print(f"✅ Created {user.role.value} '{user.email}' ({user.id})")

        return 0

    def cmd_purge_tokens(self, args) -> int:
        from storefront.database.connection import get_db_context
        from storefront.repositories import RefreshTokenRepository

        with get_db_context() as db:
            purged = RefreshTokenRepository(db).purge_expired(datetime.utcnow())

        print(f"✅ Purged {purged} expired refresh tokens")
        return 0

    def cmd_config(self, args) -> int:
        from storefront.utils.config import get_settings

        print(json.dumps(get_settings().summary(), indent=2))
        return 0

    def cmd_serve(self, args) -> int:
        import uvicorn
        from storefront.utils.config import get_settings

        settings = get_settings()
        uvicorn.run(
            "storefront.api.main:app",
            host=args.host or settings.api_host,
            port=args.port or settings.api_port,
            reload=args.reload,
        )
        return 0


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="storefront",
        description="Storefront API maintenance commands",
    )
    subparsers = parser.add_subparsers(dest="command", required=True)

    subparsers.add_parser("init-db", help="Create all database tables")

    drop = subparsers.add_parser("drop-db", help="Drop all database tables")
    drop.add_argument("--yes", action="store_true", help="Confirm dropping every table")

    create_user = subparsers.add_parser("create-user", help="Create an account with any role")
    create_user.add_argument("email")
    create_user.add_argument("password")
    create_user.add_argument("--role", choices=["buyer", "seller", "admin"], default="buyer")
    create_user.add_argument("--full-name", dest="full_name", default=None)

    subparsers.add_parser("purge-tokens", help="Delete expired refresh tokens")
    subparsers.add_parser("config", help="Show the sanitized configuration")

    serve = subparsers.add_parser("serve", help="Run the API server")
    serve.add_argument("--host", default=None)
    serve.add_argument("--port", type=int, default=None)
    serve.add_argument("--reload", action="store_true")

    return parser


COMMANDS = {
    "init-db": StorefrontCLI.cmd_init_db,
    "drop-db": StorefrontCLI.cmd_drop_db,
    "create-user": StorefrontCLI.cmd_create_user,
    "purge-tokens": StorefrontCLI.cmd_purge_tokens,
    "config": StorefrontCLI.cmd_config,
    "serve": StorefrontCLI.cmd_serve,
}


def main(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)
    setup_logging()

    try:
        return COMMANDS[args.command](StorefrontCLI(), args)
    except StorefrontError as e:
        cli_logger.error(f"{args.command} failed: {e}")
        print(f"❌ {e.message}")
        return 1


if __name__ == "__main__":
    sys.exit(main())
