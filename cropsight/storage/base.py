# cropsight/storage/base.py
"""
Storage contracts.

`Storage` is the one interface blueprints and services talk to. Two adapters
implement it:

- `DatabaseStorage` (SQLAlchemy, production)
- `MemoryStorage` (in-process, tests and demos)

Identity is always passed in explicitly (`user_id`); nothing here reads the
request or the logged-in user.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Any, Generic, Mapping, Optional, TypeVar

from ..errors import ValidationError
from ..models import Alert, Field, SatelliteReading, User, WeatherReading, YieldPrediction

R = TypeVar("R", SatelliteReading, WeatherReading, YieldPrediction)

REQUIRED_FIELD_ATTRS = ("name", "latitude", "longitude")

# Attributes a caller may never set on a field directly.
PROTECTED_FIELD_ATTRS = frozenset({"id", "user_id", "created_at", "updated_at"})


def check_new_field(attrs: Mapping[str, Any]) -> None:
    missing = [
        key for key in REQUIRED_FIELD_ATTRS
        if attrs.get(key) is None or (isinstance(attrs.get(key), str) and not attrs[key].strip())
    ]
    if missing:
        raise ValidationError(f"Missing required field attributes: {', '.join(missing)}")


def field_changes(changes: Mapping[str, Any]) -> dict[str, Any]:
    """Drop protected keys and reject clearing a required attribute."""
    clean = {k: v for k, v in changes.items() if k not in PROTECTED_FIELD_ATTRS}
    for key in REQUIRED_FIELD_ATTRS:
        if key in clean and clean[key] is None:
            raise ValidationError(f"{key} cannot be empty")
    return clean


# =========================================================
# Time-series reading store (one per record type)
# =========================================================
class ReadingStore(ABC, Generic[R]):
    """
    Append-only readings keyed by field, ordered by `date_attr`.

    Latest = maximum date; equal dates fall back to the newest created_at, then to
    an adapter-specific stable order.
    """

    def __init__(self, model: type[R], date_attr: str):
        self.model = model
        self.date_attr = date_attr

    @property
    def name(self) -> str:
        return self.model.__tablename__

    @abstractmethod
    def create(self, attrs: Mapping[str, Any]) -> R: ...

    @abstractmethod
    def latest_for(self, field_id: str) -> Optional[R]: ...

    @abstractmethod
    def all_for(self, field_id: str) -> list[R]: ...


# =========================================================
# Storage interface
# =========================================================
class Storage(ABC):
    satellite: ReadingStore[SatelliteReading]
    weather: ReadingStore[WeatherReading]
    predictions: ReadingStore[YieldPrediction]

    # ---------- users ----------
    @abstractmethod
    def get_user(self, user_id: str) -> Optional[User]: ...

    @abstractmethod
    def upsert_user(self, attrs: Mapping[str, Any]) -> User: ...

    # ---------- fields ----------
    @abstractmethod
    def create_field(self, user_id: str, attrs: Mapping[str, Any]) -> Field: ...

    @abstractmethod
    def list_fields(self, user_id: str) -> list[Field]: ...

    @abstractmethod
    def get_field(self, field_id: str) -> Field:
        """Raises NotFound when the id does not exist."""

    @abstractmethod
    def update_field(self, field_id: str, changes: Mapping[str, Any]) -> Field: ...

    @abstractmethod
    def delete_field(self, field_id: str) -> None:
        """Deleting an absent field is a no-op."""

    # ---------- alerts ----------
    @abstractmethod
    def create_alert(self, attrs: Mapping[str, Any]) -> Alert: ...

    @abstractmethod
    def list_alerts(self, user_id: str) -> list[Alert]: ...

    @abstractmethod
    def list_unread_alerts(self, user_id: str) -> list[Alert]: ...

    @abstractmethod
    def list_active_alerts(self, user_id: str) -> list[Alert]: ...

    @abstractmethod
    def mark_alert_read(self, alert_id: str, user_id: str) -> bool:
        """
        unread -> read. Returns True only when a row changed state.
        Missing ids and alerts owned by someone else are a silent no-op.
        """

    # ---------- convenience ----------
    def reading_store(self, name: str) -> ReadingStore:
        stores = {
            "satellite": self.satellite,
            "weather": self.weather,
            "predictions": self.predictions,
        }
        try:
            return stores[name]
        except KeyError:
            raise ValueError(f"Unknown reading store: {name}") from None
