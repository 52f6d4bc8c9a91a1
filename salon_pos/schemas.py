"""Request field declarations for each resource.

A ``Schema`` lists the JSON keys a resource accepts, how each value is
parsed, and which keys are required when a row is created. Update
requests go through ``parse_update``, which only returns the keys that
were actually present in the body, so omitted fields are never touched.
"""
from __future__ import annotations

import math
from collections.abc import Callable, Mapping
from dataclasses import dataclass, field
from datetime import datetime, timezone

from .errors import ValidationError
from .models import Appointment, Salon, Service, User
from .security import hash_password

Parser = Callable[[str, object], object]

# Range of the INTEGER columns every id and duration is stored in.
INTEGER_MIN = -(2**31)
INTEGER_MAX = 2**31 - 1


def fits_in_integer_column(value: int) -> bool:
    return INTEGER_MIN <= value <= INTEGER_MAX


def parse_text(key: str, value: object) -> str | None:
    if not isinstance(value, str):
        raise ValidationError(f"{key} must be a string")
    return value.strip() or None


def parse_email(key: str, value: object) -> str | None:
    email = parse_text(key, value)
    if email is None:
        return None
    if "@" not in email:
        raise ValidationError(f"{key} must be a valid email address")
    return email.lower()


def parse_integer(key: str, value: object) -> int:
    if isinstance(value, bool):
        raise ValidationError(f"{key} must be an integer")
    if isinstance(value, str):
        text = value.strip()
        digits = text[1:] if text[:1] in ("+", "-") else text
        if not (digits.isascii() and digits.isdecimal()):
            raise ValidationError(f"{key} must be an integer")
        value = int(text)
    if not isinstance(value, int):
        raise ValidationError(f"{key} must be an integer")
    if not fits_in_integer_column(value):
        raise ValidationError(f"{key} is out of range")
    return value


def parse_positive_integer(key: str, value: object) -> int:
    number = parse_integer(key, value)
    if number <= 0:
        raise ValidationError(f"{key} must be greater than zero")
    return number


def parse_amount(key: str, value: object) -> float:
    if isinstance(value, bool):
        raise ValidationError(f"{key} must be a number")
    try:
        number = float(value)  # type: ignore[arg-type]
    except (TypeError, ValueError):
        raise ValidationError(f"{key} must be a number") from None
    if not math.isfinite(number) or number < 0:
        raise ValidationError(f"{key} must be a non-negative number")
    return number


def parse_timestamp(key: str, value: object) -> datetime:
    if not isinstance(value, str):
        raise ValidationError(f"{key} must be an ISO-8601 timestamp")
    text = value.strip()
    if text.endswith("Z"):
        text = text[:-1] + "+00:00"
    try:
        parsed = datetime.fromisoformat(text)
    except ValueError:
        raise ValidationError(f"{key} must be an ISO-8601 timestamp") from None
    # Stored as naive UTC.
    if parsed.tzinfo is not None:
        parsed = parsed.astimezone(timezone.utc).replace(tzinfo=None)
    return parsed


def parse_password(key: str, value: object) -> str:
    if not isinstance(value, str) or not value:
        raise ValidationError(f"{key} must be a non-empty string")
    return hash_password(value)


@dataclass(frozen=True)
class Field:
    key: str
    attr: str
    parse: Parser = parse_text
    required: bool = False
    default: object = None
    references: type | None = None

    @property
    def nullable(self) -> bool:
        return not self.required and self.default is None

    def coerce(self, value: object) -> object:
        if value is None:
            if not self.nullable:
                raise ValidationError(f"{self.key} cannot be null")
            return None
        parsed = self.parse(self.key, value)
        if parsed is None and not self.nullable:
            raise ValidationError(f"{self.key} cannot be blank")
        return parsed


@dataclass(frozen=True)
class Schema:
    fields: tuple[Field, ...]
    filters: tuple[str, ...] = ()
    unique: tuple[str, ...] = ()
    _by_key: dict[str, Field] = field(init=False, repr=False, compare=False)

    def __post_init__(self) -> None:
        object.__setattr__(self, "_by_key", {f.key: f for f in self.fields})

    def parse_create(self, payload: Mapping[str, object]) -> dict[str, object]:
        missing = [
            f.key for f in self.fields
            if f.required and (payload.get(f.key) is None or payload.get(f.key) == "")
        ]
        if missing:
            raise ValidationError(f"missing required fields: {', '.join(missing)}")

        values: dict[str, object] = {}
        for f in self.fields:
            raw = payload.get(f.key)
            values[f.attr] = f.default if raw is None or raw == "" else f.coerce(raw)
        return values

    def parse_update(self, payload: Mapping[str, object]) -> dict[str, object]:
        return {
            f.attr: f.coerce(payload[f.key])
            for f in self.fields
            if f.key in payload
        }

    def parse_filters(self, args: Mapping[str, str]) -> dict[str, object]:
        criteria: dict[str, object] = {}
        for key in self.filters:
            raw = args.get(key)
            if raw is None or raw == "":
                continue
            f = self._by_key[key]
            value = f.parse(key, raw)
            if value is not None:
                criteria[f.attr] = value
        return criteria

    def references(self, values: Mapping[str, object]) -> list[tuple[Field, object]]:
        """Return ``(field, value)`` pairs for foreign keys set in ``values``."""
        return [
            (f, values[f.attr])
            for f in self.fields
            if f.references is not None and values.get(f.attr) is not None
        ]


SALON_SCHEMA = Schema(
    fields=(
        Field("name", "name", required=True),
        Field("location", "location"),
        Field("phone", "phone"),
    ),
)

USER_SCHEMA = Schema(
    fields=(
        Field("salonId", "salon_id", parse_integer, required=True, references=Salon),
        Field("name", "name", required=True),
        Field("email", "email", parse_email, required=True),
        Field("phone", "phone"),
        Field("role", "role", required=True),
        Field("password", "password_hash", parse_password, required=True),
        Field("commissionRate", "commission_rate", parse_amount, default=0),
    ),
    filters=("salonId", "role"),
    unique=("email", "phone"),
)

SERVICE_SCHEMA = Schema(
    fields=(
        Field("salonId", "salon_id", parse_integer, required=True, references=Salon),
        Field("name", "name", required=True),
        Field("description", "description"),
        Field("price", "price", parse_amount, required=True),
        Field("durationMin", "duration_min", parse_positive_integer, required=True),
    ),
    filters=("salonId",),
)

APPOINTMENT_SCHEMA = Schema(
    fields=(
        Field("salonId", "salon_id", parse_integer, required=True, references=Salon),
        Field("staffId", "staff_id", parse_integer, references=User),
        Field("serviceId", "service_id", parse_integer, references=Service),
        Field("customerName", "customer_name", required=True),
        Field("customerPhone", "customer_phone"),
        Field("appointmentTime", "appointment_time", parse_timestamp),
        Field("status", "status", default="scheduled"),
        Field("paymentStatus", "payment_status", default="unpaid"),
    ),
    filters=("salonId", "staffId", "serviceId", "status", "paymentStatus"),
)

PAYMENT_SCHEMA = Schema(
    fields=(
        Field("appointmentId", "appointment_id", parse_integer, required=True, references=Appointment),
        Field("amount", "amount", parse_amount, required=True),
        Field("method", "method", required=True),
        Field("status", "status", default="pending"),
    ),
    filters=("appointmentId", "status"),
)
