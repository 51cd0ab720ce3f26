# advisor_booking/commands/create_admin.py
"""
Create an admin account.

Usage:
    python -m advisor_booking.commands.create_admin admin@example.com 's3cretpass'
"""

import argparse
import sys
from typing import Optional, Sequence

from ..core.config import settings
from ..core.exceptions import DomainException
from ..core.logging_config import configure_logging
from ..database import SessionLocal, session_scope
from ..services.auth_service import AuthService


def main(argv: Optional[Sequence[str]] = None) -> int:
    parser = argparse.ArgumentParser(description="Create an admin account")
    parser.add_argument("email", help="Admin email address")
    parser.add_argument("password", help="Admin password (at least 8 characters)")
    args = parser.parse_args(argv)

    configure_logging(settings.log_level, structured=settings.log_json)

    try:
        with session_scope(SessionLocal) as db:
            admin = AuthService(db).create_admin(args.email, args.password)
            email = admin.email
    except DomainException as exc:
        print(f"Could not create admin: {exc.message} ({exc.code})", file=sys.stderr)
        return 1

    print(f"Admin created: {email}")
    return 0


if __name__ == "__main__":
    sys.exit(main())
