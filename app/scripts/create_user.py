"""
Create a pre-verified account (e.g. an additional admin). Run from project root:
  python -m app.scripts.create_user EMAIL PASSWORD NAME [role]
Example:
  python -m app.scripts.create_user ops@example.com 'S3curePass' "Ops Admin" Admin
"""
import argparse
import sys
import uuid

from app.core.database import SessionLocal
from app.core.security import hash_password, password_policy_violations
from app.models import Account, Role, RoleName
from app.repositories.sql import SqlUnitOfWork
from app.services.accounts import normalize_email


def main() -> int:
    parser = argparse.ArgumentParser(description="Create a verified account (bypasses email verification).")
    parser.add_argument("email", help="Email address")
    parser.add_argument("password", help="Password (6-128 chars, digit, lower and upper case)")
    parser.add_argument("name", help="Display name")
    parser.add_argument(
        "role",
        nargs="?",
        default=RoleName.USER.value,
        choices=[r.value for r in RoleName],
    )
    args = parser.parse_args()

    email = normalize_email(args.email)
    if "@" not in email or len(email) > 320:
        print("Invalid email address.", file=sys.stderr)
        return 1
    problems = password_policy_violations(args.password)
    if problems:
        print(" ".join(problems), file=sys.stderr)
        return 1

    db = SessionLocal()
    uow = SqlUnitOfWork(db)
    try:
        if uow.accounts.get_by_email(email):
            print(f"Account '{email}' already exists.", file=sys.stderr)
            return 1
        if uow.roles.get(args.role) is None:
            uow.roles.add(Role(name=args.role))
        uow.accounts.add(
            Account(
                id=str(uuid.uuid4()),
                email=email,
                name=args.name.strip() or email,
                password_hash=hash_password(args.password),
                email_verified=True,
                role=args.role,
            )
        )
        uow.commit()
        print(f"Created account '{email}' with role '{args.role}'.")
        return 0
    finally:
        db.close()


if __name__ == "__main__":
    sys.exit(main())
