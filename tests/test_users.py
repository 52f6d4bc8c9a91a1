"""Tests for the user endpoints."""
from __future__ import annotations

import pytest

from salon_pos.extensions import db
from salon_pos.models import User
from salon_pos.security import verify_password


def _user_payload(salon_id: int, **overrides) -> dict[str, object]:
    payload = {
        "salonId": salon_id,
        "name": "Riley Reception",
        "email": "riley@example.com",
        "phone": "555-0200",
        "role": "receptionist",
        "password": "Passw0rd!",
    }
    payload.update(overrides)
    return payload


def _assert_sanitized(body: dict[str, object]) -> None:
    assert "password" not in body
    assert "passwordHash" not in body
    assert "password_hash" not in body


def test_create_user_201_hashes_password(client, salon) -> None:
    response = client.post("/users", json=_user_payload(salon.id))

    assert response.status_code == 201
    body = response.get_json()
    _assert_sanitized(body)
    assert body["email"] == "riley@example.com"
    assert body["commissionRate"] == 0

    stored = db.session.get(User, body["id"])
    assert stored.password_hash != "Passw0rd!"
    assert verify_password("Passw0rd!", stored.password_hash)


@pytest.mark.parametrize("missing", ["salonId", "name", "email", "role", "password"])
def test_create_user_missing_required_field_400(client, salon, missing) -> None:
    payload = _user_payload(salon.id)
    del payload[missing]

    response = client.post("/users", json=payload)

    assert response.status_code == 400
    assert response.get_json()["error"] == "invalid_payload"
    assert db.session.query(User).count() == 0


def test_create_user_unknown_salon_400(client, salon) -> None:
    response = client.post("/users", json=_user_payload(999))

    assert response.status_code == 400
    assert "salonId" in response.get_json()["message"]


def test_create_user_duplicate_email_409(client, salon) -> None:
    assert client.post("/users", json=_user_payload(salon.id)).status_code == 201

    response = client.post("/users", json=_user_payload(salon.id, phone="555-0299"))

    assert response.status_code == 409
    assert response.get_json()["error"] == "conflict"


def test_create_user_duplicate_email_is_case_insensitive_409(client, salon) -> None:
    assert client.post("/users", json=_user_payload(salon.id)).status_code == 201

    response = client.post(
        "/users", json=_user_payload(salon.id, email="RILEY@example.com", phone="555-0299")
    )

    assert response.status_code == 409


def test_create_user_duplicate_phone_409(client, salon) -> None:
    assert client.post("/users", json=_user_payload(salon.id)).status_code == 201

    response = client.post("/users", json=_user_payload(salon.id, email="other@example.com"))

    assert response.status_code == 409
    assert response.get_json()["error"] == "conflict"


def test_list_users_requires_token(client, staff_user) -> None:
    response = client.get("/users")

    assert response.status_code == 401


def test_list_users_filters_by_salon_and_hides_hash(client, salon, staff_user, auth_headers) -> None:
    other = client.post("/salons", json={"name": "Other Salon"}).get_json()
    client.post("/users", json=_user_payload(other["id"]))

    response = client.get(f"/users?salonId={salon.id}", headers=auth_headers)

    assert response.status_code == 200
    rows = response.get_json()
    assert [row["email"] for row in rows] == ["sam@example.com"]
    for row in rows:
        _assert_sanitized(row)


def test_list_users_bad_filter_400(client, auth_headers) -> None:
    response = client.get("/users?salonId=abc", headers=auth_headers)

    assert response.status_code == 400


def test_get_user_sanitized(client, staff_user) -> None:
    response = client.get(f"/users/{staff_user.id}")

    assert response.status_code == 200
    body = response.get_json()
    _assert_sanitized(body)
    assert body["name"] == "Sam Stylist"
    assert body["commissionRate"] == 10


def test_update_user_rehashes_password(client, staff_user) -> None:
    old_hash = staff_user.password_hash

    response = client.put(f"/users/{staff_user.id}", json={"password": "N3wSecret!"})

    assert response.status_code == 200
    _assert_sanitized(response.get_json())
    stored = db.session.get(User, staff_user.id)
    assert stored.password_hash != old_hash
    assert verify_password("N3wSecret!", stored.password_hash)
    assert not verify_password("Secret123!", stored.password_hash)


def test_update_user_leaves_omitted_fields(client, staff_user) -> None:
    response = client.put(f"/users/{staff_user.id}", json={"commissionRate": 12.5})

    assert response.status_code == 200
    body = response.get_json()
    assert body["commissionRate"] == 12.5
    assert body["email"] == "sam@example.com"
    assert body["phone"] == "555-0101"


def test_update_user_email_conflict_409(client, salon, staff_user) -> None:
    client.post("/users", json=_user_payload(salon.id))

    response = client.put(f"/users/{staff_user.id}", json={"email": "riley@example.com"})

    assert response.status_code == 409
    assert db.session.get(User, staff_user.id).email == "sam@example.com"


def test_update_user_not_found_404(client) -> None:
    response = client.put("/users/999", json={"name": "Nobody"})

    assert response.status_code == 404


def test_delete_user_then_get_404(client, staff_user) -> None:
    user_id = staff_user.id

    response = client.delete(f"/users/{user_id}")

    assert response.status_code == 200
    assert response.get_json() == {"message": "User deleted"}
    assert client.get(f"/users/{user_id}").status_code == 404


def test_delete_user_not_found_404(client) -> None:
    response = client.delete("/users/999")

    assert response.status_code == 404
