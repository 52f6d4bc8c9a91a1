"""Generic create/read/update/delete logic shared by every resource."""
from __future__ import annotations

from collections.abc import Mapping
from typing import NoReturn

from flask import current_app
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session, scoped_session

from .errors import Conflict, DatabaseError, NotFound, ValidationError, is_unique_violation
from .schemas import Schema, fits_in_integer_column


class ResourceHandler:
    """Persist one model through the session it was constructed with.

    Every public method returns plain dictionaries built from the
    model's ``to_dict`` and raises ``ApiError`` subclasses on failure.
    """

    def __init__(
        self,
        model: type,
        schema: Schema,
        session: Session | scoped_session,
        label: str,
    ) -> None:
        self.model = model
        self.schema = schema
        self.session = session
        self.label = label

    def list(self, args: Mapping[str, str]) -> list[dict[str, object]]:
        criteria = self.schema.parse_filters(args)
        try:
            rows = (
                self.session.query(self.model)
                .filter_by(**criteria)
                .order_by(self.model.id.asc())
                .all()
            )
        except SQLAlchemyError as exc:
            self._fail(f"Failed to list {self.label}s", exc)
        return [row.to_dict() for row in rows]

    def find_one(self, **criteria):
        """Return the first matching model instance, or None."""
        try:
            return self.session.query(self.model).filter_by(**criteria).first()
        except SQLAlchemyError as exc:
            self._fail(f"Failed to look up {self.label}", exc)

    def get(self, record_id: int) -> dict[str, object]:
        return self._load(record_id).to_dict()

    def create(self, payload: Mapping[str, object]) -> dict[str, object]:
        values = self.schema.parse_create(payload)
        self._check_references(values)

        record = self.model(**values)
        self.session.add(record)
        self._commit(f"Failed to create {self.label}")
        return record.to_dict()

    def update(self, record_id: int, payload: Mapping[str, object]) -> dict[str, object]:
        record = self._load(record_id)
        changes = self.schema.parse_update(payload)
        self._check_references(changes)

        for attr, value in changes.items():
            setattr(record, attr, value)
        self._commit(f"Failed to update {self.label} {record_id}")
        return record.to_dict()

    def delete(self, record_id: int) -> dict[str, object]:
        record = self._load(record_id)
        self.session.delete(record)
        try:
            self.session.commit()
        except IntegrityError as exc:
            self.session.rollback()
            current_app.logger.warning("Refused to delete %s %s: %s", self.label, record_id, exc.orig)
            raise Conflict(f"{self.label} {record_id} is still referenced by other records") from exc
        except SQLAlchemyError as exc:
            self._fail(f"Failed to delete {self.label} {record_id}", exc)
        return {"message": f"{self.label.capitalize()} deleted"}

    def _load(self, record_id: int):
        if not fits_in_integer_column(record_id):
            raise NotFound(f"{self.label} {record_id} does not exist")
        try:
            record = self.session.get(self.model, record_id)
        except SQLAlchemyError as exc:
            self._fail(f"Failed to fetch {self.label} {record_id}", exc)
        if record is None:
            raise NotFound(f"{self.label} {record_id} does not exist")
        return record

    def _check_references(self, values: Mapping[str, object]) -> None:
        for field, value in self.schema.references(values):
            try:
                exists = self.session.get(field.references, value) is not None
            except SQLAlchemyError as exc:
                self._fail(f"Failed to look up {field.key} {value}", exc)
            if not exists:
                raise ValidationError(f"{field.key} {value} does not exist")

    def _commit(self, failure_message: str) -> None:
        try:
            self.session.commit()
        except IntegrityError as exc:
            self.session.rollback()
            if is_unique_violation(exc):
                fields = " or ".join(self.schema.unique) or "record"
                raise Conflict(f"{fields} is already in use") from exc
            current_app.logger.warning("%s: %s", failure_message, exc.orig)
            raise ValidationError("the record violates a database constraint") from exc
        except SQLAlchemyError as exc:
            self._fail(failure_message, exc)

    def _fail(self, message: str, exc: SQLAlchemyError) -> NoReturn:
        self.session.rollback()
        current_app.logger.exception(message, exc_info=exc)
        raise DatabaseError() from exc
