# cropsight/storage/database.py
from __future__ import annotations

import logging
from contextlib import contextmanager
from typing import Any, Iterator, Mapping, Optional

from sqlalchemy.exc import SQLAlchemyError

from ..errors import NotFound, StoreFailure, ValidationError
from ..extensions import db
from ..models import (
    Alert,
    Field,
    SatelliteReading,
    User,
    WeatherReading,
    YieldPrediction,
    utcnow_naive,
)
from .base import R, ReadingStore, Storage, check_new_field, field_changes

logger = logging.getLogger(__name__)


# =========================================================
# Small DB helper
# =========================================================
@contextmanager
def _store_call(action: str) -> Iterator[None]:
    """Roll back and raise StoreFailure on any SQLAlchemy error."""
    try:
        yield
    except SQLAlchemyError as exc:
        db.session.rollback()
        logger.exception("%s failed", action)
        raise StoreFailure(f"{action} failed") from exc


def _require_field(field_id: str) -> Field:
    field = db.session.get(Field, field_id) if field_id else None
    if field is None:
        raise NotFound("Field not found")
    return field


# =========================================================
# Readings
# =========================================================
class SqlReadingStore(ReadingStore[R]):
    def _ordered(self, field_id: str):
        date_col = getattr(self.model, self.date_attr)
        return self.model.query.filter_by(field_id=field_id).order_by(
            date_col.desc(),
            self.model.created_at.desc(),
            self.model.id.desc(),
        )

    def create(self, attrs: Mapping[str, Any]) -> R:
        if attrs.get(self.date_attr) is None:
            raise ValidationError(f"{self.date_attr} is required")

        with _store_call(f"Create {self.name} row"):
            _require_field(attrs.get("field_id"))
            row = self.model(**attrs)
            db.session.add(row)
            db.session.commit()
        return row

    def latest_for(self, field_id: str) -> Optional[R]:
        with _store_call(f"Fetch latest {self.name}"):
            return self._ordered(field_id).first()

    def all_for(self, field_id: str) -> list[R]:
        with _store_call(f"Fetch {self.name}"):
            return self._ordered(field_id).all()


# =========================================================
# Storage adapter
# =========================================================
class DatabaseStorage(Storage):
    def __init__(self) -> None:
        self.satellite = SqlReadingStore(SatelliteReading, "date")
        self.weather = SqlReadingStore(WeatherReading, "date")
        self.predictions = SqlReadingStore(YieldPrediction, "prediction_date")

    # ======================
    # Users
    # ======================
    def get_user(self, user_id: str) -> Optional[User]:
        if not user_id:
            return None
        with _store_call("Fetch user"):
            return db.session.get(User, user_id)

    def upsert_user(self, attrs: Mapping[str, Any]) -> User:
        user_id = attrs.get("id")
        if not user_id:
            raise ValidationError("User id is required")

        with _store_call("Upsert user"):
            user = db.session.get(User, user_id)
            if user is None:
                user = User(**attrs)
                db.session.add(user)
            else:
                for key, value in attrs.items():
                    setattr(user, key, value)
                user.updated_at = utcnow_naive()
            db.session.commit()
        return user

    # ======================
    # Fields
    # ======================
    def create_field(self, user_id: str, attrs: Mapping[str, Any]) -> Field:
        check_new_field(attrs)
        values = field_changes(attrs)

        with _store_call("Create field"):
            field = Field(user_id=user_id, **values)
            db.session.add(field)
            db.session.commit()
        return field

    def list_fields(self, user_id: str) -> list[Field]:
        with _store_call("Fetch fields"):
            return (
                Field.query.filter_by(user_id=user_id)
                .order_by(Field.name.asc(), Field.created_at.asc())
                .all()
            )

    def get_field(self, field_id: str) -> Field:
        with _store_call("Fetch field"):
            return _require_field(field_id)

    def update_field(self, field_id: str, changes: Mapping[str, Any]) -> Field:
        values = field_changes(changes)

        with _store_call("Update field"):
            field = _require_field(field_id)
            for key, value in values.items():
                setattr(field, key, value)
            field.updated_at = utcnow_naive()
            db.session.commit()
        return field

    def delete_field(self, field_id: str) -> None:
        with _store_call("Delete field"):
            field = db.session.get(Field, field_id)
            if field is None:
                return
            db.session.delete(field)
            db.session.commit()

    # ======================
    # Alerts
    # ======================
    def create_alert(self, attrs: Mapping[str, Any]) -> Alert:
        with _store_call("Create alert"):
            if attrs.get("field_id"):
                _require_field(attrs["field_id"])
            alert = Alert(**attrs)
            db.session.add(alert)
            db.session.commit()
        return alert

    def _alerts(self, user_id: str, **filters):
        return (
            Alert.query.filter_by(user_id=user_id, **filters)
            .order_by(Alert.created_at.desc(), Alert.id.desc())
            .all()
        )

    def list_alerts(self, user_id: str) -> list[Alert]:
        with _store_call("Fetch alerts"):
            return self._alerts(user_id)

    def list_unread_alerts(self, user_id: str) -> list[Alert]:
        with _store_call("Fetch unread alerts"):
            return self._alerts(user_id, is_read=False)

    def list_active_alerts(self, user_id: str) -> list[Alert]:
        with _store_call("Fetch active alerts"):
            return self._alerts(user_id, is_active=True)

    def mark_alert_read(self, alert_id: str, user_id: str) -> bool:
        with _store_call("Mark alert as read"):
            changed = (
                Alert.query.filter_by(id=alert_id, user_id=user_id, is_read=False)
                .update({"is_read": True}, synchronize_session="fetch")
            )
            db.session.commit()
        return bool(changed)
