"""HTTP routes for the salon point-of-sale backend."""
from __future__ import annotations

from flask import Blueprint, Flask, current_app, jsonify, request
from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError

from .auth import ROUTE_POLICIES, install_gate
from .errors import Unauthorized, ValidationError
from .extensions import db
from .models import Appointment, Payment, Salon, Service, User
from .resources import ResourceHandler
from .schemas import (APPOINTMENT_SCHEMA, PAYMENT_SCHEMA, SALON_SCHEMA,
                      SERVICE_SCHEMA, USER_SCHEMA)
from .security import issue_token, verify_password

bp = Blueprint("api", __name__)

salons = ResourceHandler(Salon, SALON_SCHEMA, db.session, "salon")
users = ResourceHandler(User, USER_SCHEMA, db.session, "user")
services = ResourceHandler(Service, SERVICE_SCHEMA, db.session, "service")
appointments = ResourceHandler(Appointment, APPOINTMENT_SCHEMA, db.session, "appointment")
payments = ResourceHandler(Payment, PAYMENT_SCHEMA, db.session, "payment")


def _json_body() -> dict[str, object]:
    payload = request.get_json(silent=True)
    if payload is None:
        payload = {}
    if not isinstance(payload, dict):
        raise ValidationError("request body must be a JSON object")
    return payload


@bp.get("/")
def index():
    return "Salon POS API is running!", 200, {"Content-Type": "text/plain; charset=utf-8"}


@bp.get("/health")
def health_check() -> tuple[dict[str, str], int]:
    """
    Expose a simple uptime check endpoint.
    ---
    tags:
      - Health
    responses:
      200:
        description: Service is healthy and running.
    """
    return jsonify({"status": "ok"}), 200


@bp.get("/db-health")
def database_health() -> tuple[dict[str, str], int]:
    """Check connectivity to the configured database.
    ---
    tags:
      - Health
    responses:
      200:
        description: Database connection is ok.
      500:
        description: Database connection failed.
    """
    try:
        db.session.execute(text("SELECT 1"))
    except SQLAlchemyError as exc:
        db.session.rollback()
        current_app.logger.exception("Database connectivity check failed", exc_info=exc)
        return jsonify({"database": "unavailable"}), 500

    return jsonify({"database": "ok"}), 200


# --- Authentication ---


@bp.post("/login")
def login():
    """Authenticate a user by email/password and return a bearer token.
    ---
    tags:
      - Authentication
    parameters:
      - name: body
        in: body
        required: true
        schema:
          type: object
          properties:
            email:
              type: string
            password:
              type: string
    responses:
      200:
        description: Login successful, returns a token valid for one hour
      401:
        description: Invalid email or password
    """
    payload = _json_body()
    email = payload.get("email")
    password = payload.get("password")

    # Unknown email, wrong password and missing fields share one response.
    invalid = Unauthorized("invalid email or password")
    if not isinstance(email, str) or not isinstance(password, str) or not email.strip() or not password:
        raise invalid

    user = users.find_one(email=email.strip().lower())
    if user is None or not verify_password(password, user.password_hash):
        raise invalid

    token = issue_token(user.id, user.role)
    current_app.logger.info("User %s logged in", user.id)
    return jsonify({"message": "Login successful", "token": token}), 200


# --- Salons ---


@bp.get("/salons")
def list_salons():
    return jsonify(salons.list(request.args)), 200


@bp.get("/salons/<int:salon_id>")
def get_salon(salon_id: int):
    return jsonify(salons.get(salon_id)), 200


@bp.post("/salons")
def create_salon():
    """Create a salon.
    ---
    tags:
      - Salons
    parameters:
      - name: body
        in: body
        required: true
        schema:
          type: object
          properties:
            name:
              type: string
            location:
              type: string
            phone:
              type: string
          required:
            - name
    responses:
      201:
        description: Salon created
      400:
        description: Name missing or blank
    """
    return jsonify(salons.create(_json_body())), 201


@bp.put("/salons/<int:salon_id>")
def update_salon(salon_id: int):
    return jsonify(salons.update(salon_id, _json_body())), 200


@bp.delete("/salons/<int:salon_id>")
def delete_salon(salon_id: int):
    return jsonify(salons.delete(salon_id)), 200


# --- Users ---


@bp.get("/users")
def list_users():
    """List users, optionally filtered by salonId or role. Requires a token."""
    return jsonify(users.list(request.args)), 200


@bp.get("/users/<int:user_id>")
def get_user(user_id: int):
    return jsonify(users.get(user_id)), 200


@bp.post("/users")
def create_user():
    """Create a staff or customer account.
    ---
    tags:
      - Users
    parameters:
      - name: body
        in: body
        required: true
        schema:
          type: object
          properties:
            salonId:
              type: integer
            name:
              type: string
            email:
              type: string
            phone:
              type: string
            role:
              type: string
            password:
              type: string
            commissionRate:
              type: number
    responses:
      201:
        description: User created; the password hash is never returned
      400:
        description: Missing or invalid fields
      409:
        description: Email or phone already in use
    """
    return jsonify(users.create(_json_body())), 201


@bp.put("/users/<int:user_id>")
def update_user(user_id: int):
    return jsonify(users.update(user_id, _json_body())), 200


@bp.delete("/users/<int:user_id>")
def delete_user(user_id: int):
    return jsonify(users.delete(user_id)), 200


# --- Services ---


@bp.get("/services")
def list_services():
    return jsonify(services.list(request.args)), 200


@bp.get("/services/<int:service_id>")
def get_service(service_id: int):
    return jsonify(services.get(service_id)), 200


@bp.post("/services")
def create_service():
    return jsonify(services.create(_json_body())), 201


@bp.put("/services/<int:service_id>")
def update_service(service_id: int):
    """Update only the fields present in the body.
    ---
    tags:
      - Services
    responses:
      200:
        description: Updated service
      404:
        description: Service not found
    """
    return jsonify(services.update(service_id, _json_body())), 200


@bp.delete("/services/<int:service_id>")
def delete_service(service_id: int):
    return jsonify(services.delete(service_id)), 200


# --- Appointments ---


@bp.get("/appointments")
def list_appointments():
    return jsonify(appointments.list(request.args)), 200


@bp.get("/appointments/<int:appointment_id>")
def get_appointment(appointment_id: int):
    return jsonify(appointments.get(appointment_id)), 200


@bp.post("/appointments")
def create_appointment():
    """Book an appointment; status defaults to scheduled and paymentStatus to unpaid."""
    return jsonify(appointments.create(_json_body())), 201


@bp.put("/appointments/<int:appointment_id>")
def update_appointment(appointment_id: int):
    return jsonify(appointments.update(appointment_id, _json_body())), 200


@bp.delete("/appointments/<int:appointment_id>")
def delete_appointment(appointment_id: int):
    return jsonify(appointments.delete(appointment_id)), 200


# --- Payments (token required) ---


@bp.get("/payments")
def list_payments():
    return jsonify(payments.list(request.args)), 200


@bp.get("/payments/<int:payment_id>")
def get_payment(payment_id: int):
    return jsonify(payments.get(payment_id)), 200


@bp.post("/payments")
def create_payment():
    """Record a payment against an appointment.
    ---
    tags:
      - Payments
    security:
      - Bearer: []
    responses:
      201:
        description: Payment recorded
      400:
        description: appointmentId, amount or method missing
      401:
        description: No bearer token supplied
      403:
        description: Token invalid or expired
    """
    return jsonify(payments.create(_json_body())), 201


@bp.put("/payments/<int:payment_id>")
def update_payment(payment_id: int):
    return jsonify(payments.update(payment_id, _json_body())), 200


@bp.delete("/payments/<int:payment_id>")
def delete_payment(payment_id: int):
    return jsonify(payments.delete(payment_id)), 200


install_gate(bp, ROUTE_POLICIES)


def register_routes(app: Flask) -> None:
    app.register_blueprint(bp)
