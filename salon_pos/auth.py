"""Bearer token gate applied before the API routes run.

Every endpoint on the blueprint is listed in ``ROUTE_POLICIES`` as either
``PUBLIC`` or ``PROTECTED``. The gate looks the endpoint up before the
view runs; endpoints missing from the table are treated as protected.
"""
from __future__ import annotations

from collections.abc import Mapping

from flask import Blueprint, current_app, g, request

from .errors import Forbidden, Unauthorized
from .security import TokenError, verify_token

PUBLIC = "public"
PROTECTED = "protected"

ROUTE_POLICIES: dict[str, str] = {
    "api.index": PUBLIC,
    "api.health_check": PUBLIC,
    "api.database_health": PUBLIC,
    "api.login": PUBLIC,
    # Salons
    "api.list_salons": PUBLIC,
    "api.get_salon": PUBLIC,
    "api.create_salon": PUBLIC,
    "api.update_salon": PUBLIC,
    "api.delete_salon": PUBLIC,
    # Users: the staff directory needs a token, account maintenance does not.
    "api.list_users": PROTECTED,
    "api.get_user": PUBLIC,
    "api.create_user": PUBLIC,
    "api.update_user": PUBLIC,
    "api.delete_user": PUBLIC,
    # Services
    "api.list_services": PUBLIC,
    "api.get_service": PUBLIC,
    "api.create_service": PUBLIC,
    "api.update_service": PUBLIC,
    "api.delete_service": PUBLIC,
    # Appointments
    "api.list_appointments": PUBLIC,
    "api.get_appointment": PUBLIC,
    "api.create_appointment": PUBLIC,
    "api.update_appointment": PUBLIC,
    "api.delete_appointment": PUBLIC,
    # Payments
    "api.list_payments": PROTECTED,
    "api.get_payment": PROTECTED,
    "api.create_payment": PROTECTED,
    "api.update_payment": PROTECTED,
    "api.delete_payment": PROTECTED,
}


def bearer_token() -> str | None:
    """Return the token from an ``Authorization: Bearer`` header, if any."""
    auth_header = request.headers.get("Authorization", "")
    scheme, _, token = auth_header.partition(" ")
    if scheme.lower() != "bearer":
        return None
    return token.strip() or None


def authenticate() -> dict[str, object]:
    """Verify the request's bearer token and expose its claims on ``g``."""
    token = bearer_token()
    if token is None:
        raise Unauthorized("missing bearer token")

    try:
        claims = verify_token(token)
    except TokenError as exc:
        current_app.logger.warning(
            "Rejected bearer token for %s %s: %s", request.method, request.path, exc.reason
        )
        raise Forbidden("invalid or expired token") from exc

    g.current_claims = claims
    return claims


def install_gate(blueprint: Blueprint, policies: Mapping[str, str]) -> None:
    """Run the token check for every protected endpoint of ``blueprint``."""

    @blueprint.before_request
    def enforce_route_policy() -> None:
        # Preflight requests carry no credentials; Flask-CORS answers them.
        if request.method == "OPTIONS":
            return None
        if policies.get(request.endpoint or "", PROTECTED) == PUBLIC:
            return None
        authenticate()
        return None
