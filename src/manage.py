"""Pizzeria management CLI.

Creates or drops the database schema and bootstraps the first
administrator.

Usage:
    python src/manage.py setup-db
    python src/manage.py drop-db
    python src/manage.py create-admin --email admin@jwt.com --password secret
"""

import argparse
import sys


def setup_database():
    """Create the database schema for every aggregate and entity."""
    from pizzeria.domain import pizzeria
    from pizzeria.utils.db import setup_db

    print("Initializing pizzeria domain...")
    pizzeria.init()
    print("Creating pizzeria database schema...")
    setup_db(pizzeria)
    print("Done.")


def drop_database():
    from pizzeria.domain import pizzeria
    from pizzeria.utils.db import drop_db

    print("Initializing pizzeria domain...")
    pizzeria.init()
    print("Dropping pizzeria database schema...")
    drop_db(pizzeria)
    print("Done.")


def create_admin(name, email, password):
    from pizzeria.domain import pizzeria
    from pizzeria.user.seed import ensure_admin

    pizzeria.init()
    with pizzeria.domain_context():
        user_id = ensure_admin(name, email, password)
    print(f"Admin {email} ready (id {user_id}).")


def main():
    parser = argparse.ArgumentParser(description="Pizzeria database management")
    subparsers = parser.add_subparsers(dest="command", required=True)

    subparsers.add_parser("setup-db", help="Create all database tables")
    subparsers.add_parser("drop-db", help="Drop all database tables")

    admin_parser = subparsers.add_parser("create-admin", help="Register an administrator account")
    admin_parser.add_argument("--name", default="pizza admin")
    admin_parser.add_argument("--email", required=True)
    admin_parser.add_argument("--password", required=True)

    args = parser.parse_args()

    if args.command == "setup-db":
        setup_database()
    elif args.command == "drop-db":
        drop_database()
    elif args.command == "create-admin":
        create_admin(args.name, args.email, args.password)
    else:
        parser.print_help()
        sys.exit(1)


if __name__ == "__main__":
    main()
