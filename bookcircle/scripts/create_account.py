"""
Create an account (e.g. the first admin). Run from project root:
  python -m bookcircle.scripts.create_account USERNAME PASSWORD [role] [--name NAME] [--email EMAIL]
Example:
  python -m bookcircle.scripts.create_account admin your-secure-password admin
"""
import argparse
import sys

from bookcircle.core.config import get_settings
from bookcircle.core.database import SessionLocal
from bookcircle.core.errors import AuthServiceError
from bookcircle.models.account import DEFAULT_ROLE, ROLES
from bookcircle.services.auth import AuthService


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(
        description="Create a BookCircle account (the only way to create admins)."
    )
    parser.add_argument("username", help="Username (1-64 chars)")
    parser.add_argument("password", help="Password (8-128 chars)")
    parser.add_argument("role", nargs="?", default=DEFAULT_ROLE, choices=list(ROLES))
    parser.add_argument("--name", default=None, help="Display name (defaults to username)")
    parser.add_argument("--email", default=None, help="Email address")
    args = parser.parse_args(argv)

    db = SessionLocal()
    try:
        service = AuthService.from_settings(db, get_settings())
        result = service.register(
            username=args.username,
            password=args.password,
            name=args.name or args.username,
            email=args.email,
            role=args.role,
        )
    except AuthServiceError as e:
        print(e.message, file=sys.stderr)
        return 1
    finally:
        db.close()
    print(f"Created account '{result.account.username}' with role '{result.account.role}'.")
    return 0


if __name__ == "__main__":
    sys.exit(main())
