"""Password hashing and bearer token helpers.

Passwords go through werkzeug's salted hash functions; the hash method
(and therefore its cost) comes from ``PASSWORD_HASH_METHOD``.

Tokens are ``itsdangerous`` URL-safe timed signatures over the claims
``{"user_id", "role", "exp"}``. The signature embeds the issue time, and
``loads`` rejects anything older than ``TOKEN_MAX_AGE`` seconds.
"""
from __future__ import annotations

import time

from flask import current_app
from itsdangerous import BadPayload, BadSignature, BadData, SignatureExpired, URLSafeTimedSerializer
from werkzeug.security import check_password_hash, generate_password_hash

TOKEN_SALT = "auth-token"


class TokenError(Exception):
    """Raised when a bearer token cannot be accepted."""

    reason = "invalid"


class TokenExpired(TokenError):
    reason = "expired"


class TokenInvalidSignature(TokenError):
    reason = "invalid_signature"


class TokenMalformed(TokenError):
    reason = "malformed"


def hash_password(password: str) -> str:
    method = current_app.config.get("PASSWORD_HASH_METHOD", "scrypt")
    return generate_password_hash(password, method=method)


def verify_password(password: str, password_hash: str | None) -> bool:
    """Check ``password`` against a stored hash, failing closed on bad input."""
    if not password or not password_hash:
        return False
    try:
        return check_password_hash(password_hash, password)
    except (ValueError, TypeError):
        # Unknown hash method or a truncated hash string.
        return False


def _serializer() -> URLSafeTimedSerializer:
    return URLSafeTimedSerializer(current_app.config["SECRET_KEY"], salt=TOKEN_SALT)


def issue_token(user_id: int, role: str) -> str:
    max_age = int(current_app.config["TOKEN_MAX_AGE"])
    claims = {"user_id": user_id, "role": role, "exp": int(time.time()) + max_age}
    return _serializer().dumps(claims)


def verify_token(token: str) -> dict[str, object]:
    """Decode ``token`` and return its claims.

    Raises ``TokenExpired``, ``TokenInvalidSignature`` or
    ``TokenMalformed``.
    """
    max_age = int(current_app.config["TOKEN_MAX_AGE"])
    try:
        claims = _serializer().loads(token, max_age=max_age)
    except SignatureExpired as exc:
        raise TokenExpired("token has expired") from exc
    except BadPayload as exc:
        raise TokenMalformed("token payload could not be decoded") from exc
    except BadSignature as exc:
        raise TokenInvalidSignature("token signature does not match") from exc
    except BadData as exc:
        raise TokenMalformed("token could not be parsed") from exc

    if not isinstance(claims, dict) or "user_id" not in claims or "role" not in claims:
        raise TokenMalformed("token is missing required claims")

    exp = claims.get("exp")
    if isinstance(exp, int) and exp < time.time():
        raise TokenExpired("token has expired")

    return claims
