"""pytest fixtures: an app bound to in-memory SQLite and a test client."""
from __future__ import annotations

import sys
from pathlib import Path

import pytest

# Ensure the project root is available on sys.path so tests can import the package.
PROJECT_ROOT = Path(__file__).resolve().parents[1]
if str(PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(PROJECT_ROOT))

from salon_pos import create_app  # noqa: E402
from salon_pos.config import TestingConfig  # noqa: E402
from salon_pos.extensions import db  # noqa: E402
from salon_pos.models import Salon, User  # noqa: E402
from salon_pos.security import hash_password, issue_token  # noqa: E402


@pytest.fixture
def app():
    app = create_app(TestingConfig)
    with app.app_context():
        db.create_all()
        yield app
        db.session.remove()
        db.drop_all()


@pytest.fixture
def client(app):
    return app.test_client()


@pytest.fixture
def salon(app) -> Salon:
    salon = Salon(name="Glow Salon", location="12 Main St", phone="555-0100")
    db.session.add(salon)
    db.session.commit()
    return salon


@pytest.fixture
def staff_user(app, salon) -> User:
    user = User(
        salon_id=salon.id,
        name="Sam Stylist",
        email="sam@example.com",
        phone="555-0101",
        role="staff",
        password_hash=hash_password("Secret123!"),
        commission_rate=10,
    )
    db.session.add(user)
    db.session.commit()
    return user


@pytest.fixture
def auth_headers(app, staff_user) -> dict[str, str]:
    token = issue_token(staff_user.id, staff_user.role)
    return {"Authorization": f"Bearer {token}"}
