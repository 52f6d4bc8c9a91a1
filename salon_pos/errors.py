"""Error taxonomy and the JSON error handlers shared by every route."""
from __future__ import annotations

from flask import Flask, current_app, jsonify
from sqlalchemy.exc import IntegrityError
from werkzeug.exceptions import HTTPException


class ApiError(Exception):
    """Base class for failures that map onto a client-facing response."""

    status_code = 500
    error = "internal_error"

    def __init__(self, message: str | None = None) -> None:
        super().__init__(message)
        self.message = message

    def to_dict(self) -> dict[str, object]:
        body: dict[str, object] = {"error": self.error}
        if self.message:
            body["message"] = self.message
        return body


class ValidationError(ApiError):
    status_code = 400
    error = "invalid_payload"


class Unauthorized(ApiError):
    status_code = 401
    error = "unauthorized"


class Forbidden(ApiError):
    status_code = 403
    error = "forbidden"


class NotFound(ApiError):
    status_code = 404
    error = "not_found"


class Conflict(ApiError):
    status_code = 409
    error = "conflict"


class DatabaseError(ApiError):
    status_code = 500
    error = "database_error"


def is_unique_violation(exc: IntegrityError) -> bool:
    """Return True when ``exc`` was raised by a UNIQUE constraint."""
    orig = getattr(exc, "orig", None)
    # psycopg / psycopg2 expose the SQLSTATE directly.
    sqlstate = getattr(orig, "sqlstate", None) or getattr(orig, "pgcode", None)
    if sqlstate == "23505":
        return True
    text = str(orig if orig is not None else exc).lower()
    return "unique" in text or "duplicate" in text


def register_error_handlers(app: Flask) -> None:
    @app.errorhandler(ApiError)
    def handle_api_error(exc: ApiError):
        return jsonify(exc.to_dict()), exc.status_code

    @app.errorhandler(HTTPException)
    def handle_http_error(exc: HTTPException):
        if exc.code is None or exc.code < 400:
            # Routing redirects such as a missing trailing slash.
            return exc
        error = (exc.name or "error").lower().replace(" ", "_")
        return jsonify({"error": error, "message": exc.description}), exc.code

    @app.errorhandler(Exception)
    def handle_unexpected_error(exc: Exception):
        current_app.logger.exception("Unhandled error while processing request", exc_info=exc)
        return jsonify({"error": "internal_error", "message": "an unexpected error occurred"}), 500
