"""Database models for the salon point-of-sale backend."""
from __future__ import annotations

from datetime import datetime, timezone

from .extensions import db


def utc_now() -> datetime:
    """Return a timezone-aware UTC datetime."""
    return datetime.now(timezone.utc)


def _isoformat(value: datetime | None) -> str | None:
    return value.isoformat() if value else None


class Salon(db.Model):
    __tablename__ = "salons"

    id = db.Column(db.Integer, primary_key=True)
    name = db.Column(db.String(150), nullable=False)
    location = db.Column(db.String(255))
    phone = db.Column(db.String(30))
    created_at = db.Column(db.DateTime, nullable=False, default=utc_now)

    users = db.relationship("User", back_populates="salon", lazy="dynamic", passive_deletes="all")
    services = db.relationship("Service", back_populates="salon", lazy="dynamic", passive_deletes="all")
    appointments = db.relationship("Appointment", back_populates="salon", lazy="dynamic", passive_deletes="all")

    def to_dict(self) -> dict[str, object]:
        return {
            "id": self.id,
            "name": self.name,
            "location": self.location,
            "phone": self.phone,
            "createdAt": _isoformat(self.created_at),
        }


class User(db.Model):
    """Staff or customer account belonging to a salon."""

    __tablename__ = "users"

    id = db.Column(db.Integer, primary_key=True)
    salon_id = db.Column(db.Integer, db.ForeignKey("salons.id"), nullable=False)
    name = db.Column(db.String(100), nullable=False)
    email = db.Column(db.String(255), unique=True, nullable=False)
    phone = db.Column(db.String(30), unique=True)
    role = db.Column(db.String(50), nullable=False)
    password_hash = db.Column(db.String(255), nullable=False)
    commission_rate = db.Column(db.Numeric(5, 2, asdecimal=False), nullable=False, default=0)
    created_at = db.Column(db.DateTime, nullable=False, default=utc_now)

    salon = db.relationship("Salon", back_populates="users")

    def to_dict(self) -> dict[str, object]:
        # password_hash is deliberately absent from every serialized form.
        return {
            "id": self.id,
            "salonId": self.salon_id,
            "name": self.name,
            "email": self.email,
            "phone": self.phone,
            "role": self.role,
            "commissionRate": self.commission_rate,
            "createdAt": _isoformat(self.created_at),
        }


class Service(db.Model):
    """Services offered by a salon."""

    __tablename__ = "services"

    id = db.Column(db.Integer, primary_key=True)
    salon_id = db.Column(db.Integer, db.ForeignKey("salons.id"), nullable=False)
    name = db.Column(db.String(150), nullable=False)
    description = db.Column(db.Text)
    price = db.Column(db.Numeric(10, 2, asdecimal=False), nullable=False)
    duration_min = db.Column(db.Integer, nullable=False)
    created_at = db.Column(db.DateTime, nullable=False, default=utc_now)

    salon = db.relationship("Salon", back_populates="services")

    def to_dict(self) -> dict[str, object]:
        return {
            "id": self.id,
            "salonId": self.salon_id,
            "name": self.name,
            "description": self.description,
            "price": self.price,
            "durationMin": self.duration_min,
            "createdAt": _isoformat(self.created_at),
        }


class Appointment(db.Model):
    """A customer booking at a salon, optionally tied to staff and a service."""

    __tablename__ = "appointments"

    id = db.Column(db.Integer, primary_key=True)
    salon_id = db.Column(db.Integer, db.ForeignKey("salons.id"), nullable=False)
    staff_id = db.Column(db.Integer, db.ForeignKey("users.id"))
    service_id = db.Column(db.Integer, db.ForeignKey("services.id"))
    customer_name = db.Column(db.String(150), nullable=False)
    customer_phone = db.Column(db.String(30))
    appointment_time = db.Column(db.DateTime)
    status = db.Column(db.String(50), nullable=False, default="scheduled")
    payment_status = db.Column(db.String(50), nullable=False, default="unpaid")
    created_at = db.Column(db.DateTime, nullable=False, default=utc_now)

    salon = db.relationship("Salon", back_populates="appointments")
    staff = db.relationship("User")
    service = db.relationship("Service")
    payments = db.relationship("Payment", back_populates="appointment", lazy="dynamic", passive_deletes="all")

    def to_dict(self) -> dict[str, object]:
        return {
            "id": self.id,
            "salonId": self.salon_id,
            "staffId": self.staff_id,
            "serviceId": self.service_id,
            "customerName": self.customer_name,
            "customerPhone": self.customer_phone,
            "appointmentTime": _isoformat(self.appointment_time),
            "status": self.status,
            "paymentStatus": self.payment_status,
            "createdAt": _isoformat(self.created_at),
        }


class Payment(db.Model):
    """Payment recorded against an appointment."""

    __tablename__ = "payments"

    id = db.Column(db.Integer, primary_key=True)
    appointment_id = db.Column(db.Integer, db.ForeignKey("appointments.id"), nullable=False)
    amount = db.Column(db.Numeric(10, 2, asdecimal=False), nullable=False)
    method = db.Column(db.String(50), nullable=False)
    status = db.Column(db.String(50), nullable=False, default="pending")
    created_at = db.Column(db.DateTime, nullable=False, default=utc_now)

    appointment = db.relationship("Appointment", back_populates="payments")

    def to_dict(self) -> dict[str, object]:
        return {
            "id": self.id,
            "appointmentId": self.appointment_id,
            "amount": self.amount,
            "method": self.method,
            "status": self.status,
            "createdAt": _isoformat(self.created_at),
        }
