"""Reset the password of an existing user account from the shell."""
from __future__ import annotations

import argparse
import sys
from pathlib import Path

# Ensure the project root is on sys.path so ``salon_pos`` can be imported when the script is executed directly.
PROJECT_ROOT = Path(__file__).resolve().parents[1]
if str(PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(PROJECT_ROOT))

from dotenv import load_dotenv

load_dotenv()

from salon_pos import create_app
from salon_pos.extensions import db
from salon_pos.models import User
from salon_pos.security import hash_password


def set_password(email: str, password: str) -> bool:
    app = create_app()

    with app.app_context():
        user = User.query.filter_by(email=email.strip().lower()).first()
        if user is None:
            print(f"Error: no user with email '{email}'")
            return False

        user.password_hash = hash_password(password)
        db.session.commit()

        print(f"Password for {user.role} user '{user.email}' has been set successfully.")
        return True


def parse_args() -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Set a user's password.")
    parser.add_argument("email", help="User email address")
    parser.add_argument("password", help="Plain-text password to hash and store")
    return parser.parse_args()


def main() -> None:
    args = parse_args()
    if not set_password(args.email, args.password):
        sys.exit(1)


if __name__ == "__main__":
    main()
