# cropsight/storage/memory.py
"""
In-process Storage adapter.

Holds transient (never session-attached) model instances in dicts. Used by the
test-suite and for database-less demos (STORAGE_BACKEND=memory). Column defaults
are applied here by hand since nothing is ever flushed.
"""

from __future__ import annotations

import itertools
from typing import Any, Mapping, Optional

from ..errors import NotFound, StoreFailure, ValidationError
from ..models import (
    DEFAULT_CROP_TYPE,
    Alert,
    Field,
    SatelliteReading,
    User,
    WeatherReading,
    YieldPrediction,
    new_id,
    utcnow_naive,
)
from .base import R, ReadingStore, Storage, check_new_field, field_changes


class MemoryReadingStore(ReadingStore[R]):
    def __init__(self, model: type[R], date_attr: str, storage: "MemoryStorage"):
        super().__init__(model, date_attr)
        self._storage = storage
        self._rows: list[tuple[int, R]] = []

    def _sort_key(self, entry: tuple[int, R]):
        seq, row = entry
        return (getattr(row, self.date_attr), row.created_at, seq)

    def create(self, attrs: Mapping[str, Any]) -> R:
        if attrs.get(self.date_attr) is None:
            raise ValidationError(f"{self.date_attr} is required")
        self._storage.get_field(attrs.get("field_id"))

        row = self.model(**attrs)
        row.id = row.id or new_id()
        row.created_at = row.created_at or utcnow_naive()
        self._rows.append((next(self._storage._seq), row))
        return row

    def all_for(self, field_id: str) -> list[R]:
        entries = [e for e in self._rows if e[1].field_id == field_id]
        entries.sort(key=self._sort_key, reverse=True)
        return [row for _, row in entries]

    def latest_for(self, field_id: str) -> Optional[R]:
        rows = self.all_for(field_id)
        return rows[0] if rows else None

    def drop_field(self, field_id: str) -> None:
        self._rows = [e for e in self._rows if e[1].field_id != field_id]


class MemoryStorage(Storage):
    def __init__(self) -> None:
        self._seq = itertools.count()
        self._users: dict[str, User] = {}
        self._fields: dict[str, Field] = {}
        self._alerts: list[tuple[int, Alert]] = []

        self.satellite = MemoryReadingStore(SatelliteReading, "date", self)
        self.weather = MemoryReadingStore(WeatherReading, "date", self)
        self.predictions = MemoryReadingStore(YieldPrediction, "prediction_date", self)

    # ======================
    # Users
    # ======================
    def get_user(self, user_id: str) -> Optional[User]:
        return self._users.get(user_id) if user_id else None

    def upsert_user(self, attrs: Mapping[str, Any]) -> User:
        user_id = attrs.get("id")
        if not user_id:
            raise ValidationError("User id is required")

        email = attrs.get("email")
        if email and any(u.email == email and u.id != user_id for u in self._users.values()):
            # users.email is unique
            raise StoreFailure("Upsert user failed")

        now = utcnow_naive()
        user = self._users.get(user_id)
        if user is None:
            user = User(**attrs)
            user.user_type = user.user_type or "farmer"
            user.created_at = now
            self._users[user_id] = user
        else:
            for key, value in attrs.items():
                setattr(user, key, value)
        user.updated_at = now
        return user

    # ======================
    # Fields
    # ======================
    def create_field(self, user_id: str, attrs: Mapping[str, Any]) -> Field:
        check_new_field(attrs)
        values = field_changes(attrs)

        now = utcnow_naive()
        field = Field(user_id=user_id, **values)
        field.id = new_id()
        if "crop_type" not in values:
            field.crop_type = DEFAULT_CROP_TYPE
        field.created_at = now
        field.updated_at = now
        self._fields[field.id] = field
        return field

    def list_fields(self, user_id: str) -> list[Field]:
        fields = [f for f in self._fields.values() if f.user_id == user_id]
        return sorted(fields, key=lambda f: (f.name, f.created_at))

    def get_field(self, field_id: str) -> Field:
        field = self._fields.get(field_id) if field_id else None
        if field is None:
            raise NotFound("Field not found")
        return field

    def update_field(self, field_id: str, changes: Mapping[str, Any]) -> Field:
        values = field_changes(changes)
        field = self.get_field(field_id)
        for key, value in values.items():
            setattr(field, key, value)
        field.updated_at = utcnow_naive()
        return field

    def delete_field(self, field_id: str) -> None:
        if self._fields.pop(field_id, None) is None:
            return
        for store in (self.satellite, self.weather, self.predictions):
            store.drop_field(field_id)
        for _, alert in self._alerts:
            if alert.field_id == field_id:
                alert.field_id = None

    # ======================
    # Alerts
    # ======================
    def create_alert(self, attrs: Mapping[str, Any]) -> Alert:
        if attrs.get("field_id"):
            self.get_field(attrs["field_id"])

        alert = Alert(**attrs)
        alert.id = new_id()
        alert.is_read = bool(alert.is_read) if alert.is_read is not None else False
        alert.is_active = bool(alert.is_active) if alert.is_active is not None else True
        alert.created_at = alert.created_at or utcnow_naive()
        self._alerts.append((next(self._seq), alert))
        return alert

    def _user_alerts(self, user_id: str, predicate=None) -> list[Alert]:
        entries = [
            (seq, a) for seq, a in self._alerts
            if a.user_id == user_id and (predicate is None or predicate(a))
        ]
        entries.sort(key=lambda e: (e[1].created_at, e[0]), reverse=True)
        return [a for _, a in entries]

    def list_alerts(self, user_id: str) -> list[Alert]:
        return self._user_alerts(user_id)

    def list_unread_alerts(self, user_id: str) -> list[Alert]:
        return self._user_alerts(user_id, lambda a: not a.is_read)

    def list_active_alerts(self, user_id: str) -> list[Alert]:
        return self._user_alerts(user_id, lambda a: a.is_active)

    def mark_alert_read(self, alert_id: str, user_id: str) -> bool:
        for _, alert in self._alerts:
            if alert.id == alert_id and alert.user_id == user_id:
                if alert.is_read:
                    return False
                alert.is_read = True
                return True
        return False
