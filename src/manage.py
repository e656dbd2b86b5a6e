"""GameVault database management CLI.

Creates and drops the tables of every bounded context.

Usage:
    python src/manage.py setup-db   # Create all tables
    python src/manage.py drop-db    # Drop all tables
    python src/manage.py create-admin --email admin@gamevault.dev --password s3cret-pass --name Admin
"""

import argparse
import sys


def _domains():
    from app import DOMAINS, init_domains

    init_domains()
    return DOMAINS


def setup_database():
    from shared.domain import setup_db

    print("Creating database schema...")
    for domain in _domains():
        setup_db(domain)
    print("Done.")


def drop_database():
    from shared.domain import drop_db

    print("Dropping database schema...")
    for domain in _domains():
        drop_db(domain)
    print("Done.")


def create_admin(email: str, password: str, name: str):
    from identity.domain import identity
    from identity.user.registration import confirm_email, register_user
    from identity.user.user import UserRole
    from notifications.dispatch import get_mailer

    _domains()
    with identity.domain_context():
        user = register_user(get_mailer(), email, password, name, role=UserRole.ADMIN)
        confirm_email(user.token_confirmation)
    print(f"Admin {user.email} created.")


def main():
    parser = argparse.ArgumentParser(description="GameVault database management")
    subparsers = parser.add_subparsers(dest="command", required=True)

    subparsers.add_parser("setup-db", help="Create all database tables")
    subparsers.add_parser("drop-db", help="Drop all database tables")

    admin_parser = subparsers.add_parser("create-admin", help="Register a confirmed admin account")
    admin_parser.add_argument("--email", required=True)
    admin_parser.add_argument("--password", required=True)
    admin_parser.add_argument("--name", required=True)

    args = parser.parse_args()

    if args.command == "setup-db":
        setup_database()
    elif args.command == "drop-db":
        drop_database()
    elif args.command == "create-admin":
        create_admin(args.email, args.password, args.name)
    else:
        parser.print_help()
        sys.exit(1)


if __name__ == "__main__":
    main()
