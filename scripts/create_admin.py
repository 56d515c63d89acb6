#!/usr/bin/env python3
"""Create the first ADMIN account.

Self-registration cannot grant ADMIN, so the initial administrator is
created from the command line.

Usage:
    python scripts/create_admin.py <email> <password> [first_name] [last_name]
"""

import sys
from pathlib import Path

from dotenv import load_dotenv

load_dotenv()

# Add parent directory to path so we can import organiser
sys.path.insert(0, str(Path(__file__).parent.parent))

from organiser.config.database import SessionLocal, init_db
from organiser.middleware.error_handler import APIError
from organiser.models import UserRole
from organiser.schemas.auth import RegisterRequest
from organiser.services.auth_service import AuthService


def main():
    if len(sys.argv) < 3:
        print(__doc__)
        sys.exit(1)

    email, password = sys.argv[1], sys.argv[2]
    first_name = sys.argv[3] if len(sys.argv) > 3 else "Admin"
    last_name = sys.argv[4] if len(sys.argv) > 4 else "User"

    init_db()
    db = SessionLocal()
    try:
        user = AuthService(db).register(
            RegisterRequest(
                email=email,
                password=password,
                first_name=first_name,
                last_name=last_name,
                roles=[UserRole.ADMIN],
            ),
            allow_privileged=True,
        )
        print(f"Created admin user {user.email} (id={user.id})")
    except APIError as e:
        print(f"ERROR: {e.message}")
        sys.exit(1)
    finally:
        db.close()


if __name__ == "__main__":
    main()
