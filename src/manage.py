"""Storefront management CLI.

Creates and drops the database schema and bootstraps roles for users who
have already signed in once.

Usage:
    python src/manage.py setup-db                       # Create all tables
    python src/manage.py drop-db                        # Drop all tables
    python src/manage.py assign-role jane@example.com ADMIN
"""

import argparse
import sys


def setup_database():
    """Create the storefront database schema."""
    from storefront.domain import storefront
    from storefront.utils.db import setup_db

    print("Initializing storefront domain...")
    storefront.init()
    print("Creating storefront database schema...")
    setup_db(storefront)
    print("Done.")


def drop_database():
    """Drop the storefront database schema."""
    from storefront.domain import storefront
    from storefront.utils.db import drop_db

    print("Initializing storefront domain...")
    storefront.init()
    print("Dropping storefront database schema...")
    drop_db(storefront)
    print("Done.")


def assign_role(email, role):
    """Set a user's role directly, bypassing the admin-only command.

    This is how the first administrator is created.
    """
    from protean.utils.globals import current_domain
    from storefront.domain import storefront
    from storefront.errors import StorefrontError
    from storefront.identity.user import User

    storefront.init()
    with storefront.domain_context():
        repo = current_domain.repository_for(User)
        user = repo.find_by_email(email)
        if user is None:
            print(f"No user with email {email}. The user must sign in once first.")
            return 1

        try:
            user.assign_role(role.upper(), assigned_by="manage.py")
        except StorefrontError as exc:
            print(f"Cannot assign role: {exc.message}")
            return 1
        repo.add(user)

    print(f"{user.email} is now {user.role}.")
    return 0


def main():
    parser = argparse.ArgumentParser(description="Storefront management")
    subparsers = parser.add_subparsers(dest="command", required=True)

    subparsers.add_parser("setup-db", help="Create all database tables")
    subparsers.add_parser("drop-db", help="Drop all database tables")

    role_parser = subparsers.add_parser("assign-role", help="Set the role of an existing user")
    role_parser.add_argument("email", help="Email the user signed in with")
    role_parser.add_argument("role", choices=["CUSTOMER", "MANAGER", "ADMIN"], type=str.upper)

    args = parser.parse_args()

    if args.command == "setup-db":
        setup_database()
    elif args.command == "drop-db":
        drop_database()
    elif args.command == "assign-role":
        sys.exit(assign_role(args.email, args.role))
    else:
        parser.print_help()
        sys.exit(1)


if __name__ == "__main__":
    main()
