# cropsight/models.py
from __future__ import annotations

import uuid
from datetime import datetime, timezone

from flask_login import UserMixin

from .extensions import db


# Naive UTC everywhere: the DB columns are "timestamp without time zone".
def utcnow_naive() -> datetime:
    return datetime.now(timezone.utc).replace(tzinfo=None)


def new_id() -> str:
    return str(uuid.uuid4())


# =========================================================
# Vocabularies
# =========================================================
USER_TYPES = ("farmer", "cooperative", "policymaker")
CROP_TYPES = ("maize", "wheat", "rice", "sorghum", "millet", "beans")
ALERT_TYPES = ("health", "weather", "yield")
ALERT_PRIORITIES = ("low", "medium", "high", "critical")

DEFAULT_CROP_TYPE = "maize"


# =========================================================
# User (identity supplied by the identity provider)
# =========================================================
class User(UserMixin, db.Model):
    __tablename__ = "users"

    # External subject id; upserted on every login.
    id = db.Column(db.String(64), primary_key=True, default=new_id)

    email = db.Column(db.String(120), unique=True, nullable=True)
    first_name = db.Column(db.String(120), nullable=True)
    last_name = db.Column(db.String(120), nullable=True)
    profile_image_url = db.Column(db.String(500), nullable=True)

    # farmer / cooperative / policymaker
    user_type = db.Column(db.String(30), nullable=False, default="farmer")

    created_at = db.Column(db.DateTime, nullable=False, default=utcnow_naive)
    updated_at = db.Column(
        db.DateTime,
        nullable=False,
        default=utcnow_naive,
        onupdate=utcnow_naive,
    )

    fields = db.relationship(
        "Field",
        back_populates="user",
        lazy="select",
        cascade="all, delete-orphan",
    )

    @property
    def display_name(self) -> str:
        name = " ".join(p for p in (self.first_name, self.last_name) if p)
        return name or (self.email or self.id)

    def __repr__(self) -> str:
        return f"<User {self.id} {self.email}>"


# =========================================================
# Field (a registered plot of land)
# =========================================================
class Field(db.Model):
    __tablename__ = "fields"

    id = db.Column(db.String(36), primary_key=True, default=new_id)

    name = db.Column(db.String(160), nullable=False)

    user_id = db.Column(
        db.String(64),
        db.ForeignKey("users.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    user = db.relationship("User", back_populates="fields")

    latitude = db.Column(db.Numeric(10, 8), nullable=False)
    longitude = db.Column(db.Numeric(11, 8), nullable=False)

    size = db.Column(db.Numeric(10, 2), nullable=True)  # acres
    crop_type = db.Column(db.String(30), nullable=True, default=DEFAULT_CROP_TYPE)

    planting_date = db.Column(db.DateTime, nullable=True)
    expected_harvest_date = db.Column(db.DateTime, nullable=True)

    location = db.Column(db.Text, nullable=True)  # descriptive location

    created_at = db.Column(db.DateTime, nullable=False, default=utcnow_naive)
    updated_at = db.Column(
        db.DateTime,
        nullable=False,
        default=utcnow_naive,
        onupdate=utcnow_naive,
    )

    # Readings go with the field; alerts are detached (field_id -> NULL) and kept.
    satellite_readings = db.relationship(
        "SatelliteReading",
        back_populates="field",
        lazy="select",
        cascade="all, delete-orphan",
    )
    weather_readings = db.relationship(
        "WeatherReading",
        back_populates="field",
        lazy="select",
        cascade="all, delete-orphan",
    )
    yield_predictions = db.relationship(
        "YieldPrediction",
        back_populates="field",
        lazy="select",
        cascade="all, delete-orphan",
    )
    alerts = db.relationship("Alert", back_populates="field", lazy="select")

    __table_args__ = (
        db.Index("ix_fields_user_name", "user_id", "name"),
    )

    def __repr__(self) -> str:
        return f"<Field {self.id} {self.name}>"


# =========================================================
# Time-series readings
# =========================================================
class SatelliteReading(db.Model):
    __tablename__ = "satellite_data"

    id = db.Column(db.String(36), primary_key=True, default=new_id)

    field_id = db.Column(
        db.String(36),
        db.ForeignKey("fields.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    field = db.relationship("Field", back_populates="satellite_readings")

    date = db.Column(db.DateTime, nullable=False)

    # Vegetation indices, conventionally 0..1 (not enforced)
    ndvi = db.Column(db.Numeric(5, 3), nullable=True)
    evi = db.Column(db.Numeric(5, 3), nullable=True)
    sarvi = db.Column(db.Numeric(5, 3), nullable=True)

    created_at = db.Column(db.DateTime, nullable=False, default=utcnow_naive)

    __table_args__ = (
        db.Index("ix_satellite_data_field_date", "field_id", "date"),
    )

    def __repr__(self) -> str:
        return f"<SatelliteReading {self.id} field={self.field_id} ndvi={self.ndvi}>"


class WeatherReading(db.Model):
    __tablename__ = "weather_data"

    id = db.Column(db.String(36), primary_key=True, default=new_id)

    field_id = db.Column(
        db.String(36),
        db.ForeignKey("fields.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    field = db.relationship("Field", back_populates="weather_readings")

    date = db.Column(db.DateTime, nullable=False)

    temperature = db.Column(db.Numeric(5, 2), nullable=True)  # deg C
    humidity = db.Column(db.Numeric(5, 2), nullable=True)  # %
    rainfall = db.Column(db.Numeric(7, 2), nullable=True)  # mm
    wind_speed = db.Column(db.Numeric(5, 2), nullable=True)  # km/h
    condition = db.Column(db.String(60), nullable=True)

    created_at = db.Column(db.DateTime, nullable=False, default=utcnow_naive)

    __table_args__ = (
        db.Index("ix_weather_data_field_date", "field_id", "date"),
    )

    def __repr__(self) -> str:
        return f"<WeatherReading {self.id} field={self.field_id}>"


class YieldPrediction(db.Model):
    __tablename__ = "yield_predictions"

    id = db.Column(db.String(36), primary_key=True, default=new_id)

    field_id = db.Column(
        db.String(36),
        db.ForeignKey("fields.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    field = db.relationship("Field", back_populates="yield_predictions")

    prediction_date = db.Column(db.DateTime, nullable=False)

    predicted_yield = db.Column(db.Numeric(10, 2), nullable=True)  # tonnes
    confidence = db.Column(db.Numeric(5, 2), nullable=True)  # %
    model_version = db.Column(db.String(30), nullable=True)

    created_at = db.Column(db.DateTime, nullable=False, default=utcnow_naive)

    __table_args__ = (
        db.Index("ix_yield_predictions_field_date", "field_id", "prediction_date"),
    )

    def __repr__(self) -> str:
        return f"<YieldPrediction {self.id} field={self.field_id} yield={self.predicted_yield}>"


# =========================================================
# Alerts
# =========================================================
class Alert(db.Model):
    __tablename__ = "alerts"

    id = db.Column(db.String(36), primary_key=True, default=new_id)

    user_id = db.Column(
        db.String(64),
        db.ForeignKey("users.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    user = db.relationship("User", foreign_keys=[user_id])

    field_id = db.Column(
        db.String(36),
        db.ForeignKey("fields.id", ondelete="SET NULL"),
        nullable=True,
        index=True,
    )
    field = db.relationship("Field", back_populates="alerts")

    type = db.Column(db.String(20), nullable=False)  # health / weather / yield
    priority = db.Column(db.String(20), nullable=False)  # low / medium / high / critical
    title = db.Column(db.Text, nullable=False)
    description = db.Column(db.Text, nullable=True)

    # unread -> read is the only transition
    is_read = db.Column(db.Boolean, nullable=False, default=False)
    is_active = db.Column(db.Boolean, nullable=False, default=True)

    created_at = db.Column(db.DateTime, nullable=False, default=utcnow_naive)

    __table_args__ = (
        db.Index("ix_alerts_user_read", "user_id", "is_read"),
    )

    def __repr__(self) -> str:
        return f"<Alert {self.id} {self.type}/{self.priority} read={self.is_read}>"
