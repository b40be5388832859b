"""Storefront database management CLI.

Creates and drops the schema and seeds administrator accounts. The
``PROTEAN_ENV`` environment variable selects the ``domain.toml`` overlay.

Usage:
    python src/manage.py setup-db       # Create all tables
    python src/manage.py drop-db        # Drop all tables
    python src/manage.py create-admin --name Admin --email admin@example.com --password ...
"""

import argparse
import sys

from protean.exceptions import ValidationError


def _storefront():
    from storefront.domain import storefront

    storefront.init()
    return storefront


def setup_database():
    """Create every storefront table."""
    from storefront.utils.db import setup_db

    domain = _storefront()
    print("Creating storefront schema...")
    setup_db(domain)
    print("Done.")


def drop_database():
    """Drop every storefront table."""
    from storefront.utils.db import drop_db

    domain = _storefront()
    print("Dropping storefront schema...")
    drop_db(domain)
    print("Done.")


def create_admin(name, email, password):
    """Register an administrator account. Returns the new user id."""
    from storefront.identity.user.registration import registration
    from storefront.identity.user.user import Role

    domain = _storefront()
    with domain.domain_context():
        number = domain.process(registration(name, email, password, role=Role.ADMIN), asynchronous=False)
    print(f"Administrator {email.strip().lower()} created with id {number}.")
    return number


def main(argv=None):
    from storefront.shared.logging import configure_logging

    parser = argparse.ArgumentParser(description="Storefront database management")
    subparsers = parser.add_subparsers(dest="command", required=True)

    subparsers.add_parser("setup-db", help="Create all database tables")
    subparsers.add_parser("drop-db", help="Drop all database tables")

    admin_parser = subparsers.add_parser("create-admin", help="Create an administrator account")
    admin_parser.add_argument("--name", required=True)
    admin_parser.add_argument("--email", required=True)
    admin_parser.add_argument("--password", required=True)

    args = parser.parse_args(argv)
    configure_logging()

    if args.command == "setup-db":
        setup_database()
    elif args.command == "drop-db":
        drop_database()
    elif args.command == "create-admin":
        try:
            create_admin(args.name, args.email, args.password)
        except ValidationError as exc:
            from storefront.shared.exceptions import summarize

            print(f"Invalid input: {summarize(exc.messages)}", file=sys.stderr)
            sys.exit(2)
    else:
        parser.print_help()
        sys.exit(1)


if __name__ == "__main__":
    main()
