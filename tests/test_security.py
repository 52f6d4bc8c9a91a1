"""Tests for password hashing and token signing."""
from __future__ import annotations

import time
from unittest.mock import patch

import pytest

from salon_pos import create_app
from salon_pos.security import (TokenExpired, TokenInvalidSignature, TokenMalformed,
                                hash_password, issue_token, verify_password, verify_token)


def test_hash_password_is_salted(app) -> None:
    first = hash_password("Secret123!")
    second = hash_password("Secret123!")

    assert first != second
    assert verify_password("Secret123!", first)
    assert verify_password("Secret123!", second)


def test_verify_password_rejects_wrong_password(app) -> None:
    digest = hash_password("Secret123!")

    assert not verify_password("secret123!", digest)
    assert not verify_password("", digest)


@pytest.mark.parametrize("digest", ["", "not-a-hash", "bogus$salt$value", None])
def test_verify_password_fails_closed_on_malformed_digest(app, digest) -> None:
    assert verify_password("Secret123!", digest) is False


def test_token_round_trip_carries_claims_and_expiry(app) -> None:
    before = int(time.time())
    claims = verify_token(issue_token(7, "manager"))

    assert claims["user_id"] == 7
    assert claims["role"] == "manager"
    assert before + 3600 <= claims["exp"] <= int(time.time()) + 3600


def test_expired_token_rejected(app) -> None:
    with patch("time.time", return_value=time.time() - 7200):
        token = issue_token(1, "staff")

    with pytest.raises(TokenExpired):
        verify_token(token)


def test_tampered_token_rejected(app) -> None:
    token = issue_token(1, "staff")
    tampered = ("A" if token[0] != "A" else "B") + token[1:]

    with pytest.raises(TokenInvalidSignature):
        verify_token(tampered)


def test_token_signed_with_other_key_rejected(app) -> None:
    other = create_app({"SECRET_KEY": "another-key", "SQLALCHEMY_DATABASE_URI": "sqlite://"})
    with other.app_context():
        token = issue_token(1, "staff")

    with pytest.raises(TokenInvalidSignature):
        verify_token(token)


def test_garbage_token_rejected(app) -> None:
    with pytest.raises((TokenInvalidSignature, TokenMalformed)):
        verify_token("not.a.token")


def test_missing_secret_key_generates_ephemeral_key() -> None:
    first = create_app({"SECRET_KEY": None, "SQLALCHEMY_DATABASE_URI": "sqlite://"})
    second = create_app({"SECRET_KEY": None, "SQLALCHEMY_DATABASE_URI": "sqlite://"})

    assert first.config["SECRET_KEY"]
    assert first.config["SECRET_KEY"] != second.config["SECRET_KEY"]
