"""Create an academy or student account from the command line."""

import argparse
import sys

from app.db.session import SessionLocal
from app.models.user import UserRole
from app.services.auth import create_user, get_user_by_email


def main():
    parser = argparse.ArgumentParser(description="Create a catalog account")
    parser.add_argument("--email", required=True, help="Login email for the account")
    parser.add_argument("--password", required=True, help="Password for the account")
    parser.add_argument("--name", default="User", help="Display name")
    parser.add_argument(
        "--role",
        choices=[role.value for role in UserRole],
        default=UserRole.ACADEMY.value,
        help="Account role (default: academy)",
    )
    args = parser.parse_args()

    db = SessionLocal()
    try:
        if get_user_by_email(db, args.email):
            print(f"Account '{args.email}' already exists.")
            sys.exit(1)

        user = create_user(db, args.email, args.password, role=args.role, display_name=args.name)
        print(f"Created {user.role} account '{user.email}' with ID {user.id}")
    finally:
        db.close()


if __name__ == "__main__":
    main()
