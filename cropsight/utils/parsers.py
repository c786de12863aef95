# cropsight/utils/parsers.py
"""
JSON payload -> model attributes.

The API speaks camelCase (fieldId, predictedYield, ...); models use snake_case.
Every parser raises ValidationError with a readable message on bad input.
"""

from __future__ import annotations

from datetime import date, datetime, timezone
from decimal import Decimal, InvalidOperation
from typing import Any, Iterable, Optional

from flask import request

from ..errors import ValidationError
from ..models import (
    ALERT_PRIORITIES,
    ALERT_TYPES,
    CROP_TYPES,
    USER_TYPES,
    utcnow_naive,
)


# ======================
# Scalars
# ======================
def _blank(val: Any) -> bool:
    return val is None or (isinstance(val, str) and val.strip() == "")


def parse_text(val: Any, label: str, max_length: Optional[int] = None) -> Optional[str]:
    if _blank(val):
        return None
    if not isinstance(val, (str, int, float)):
        raise ValidationError(f"{label} must be text")
    s = str(val).strip()
    if max_length and len(s) > max_length:
        raise ValidationError(f"{label} must be at most {max_length} characters")
    return s


def parse_decimal(
    val: Any,
    label: str,
    places: int,
    min_value: Optional[Decimal] = None,
    max_value: Optional[Decimal] = None,
    precision: Optional[int] = None,
) -> Optional[Decimal]:
    """
    Number -> Decimal quantized to `places`. With `precision`, the value must fit
    a Numeric(precision, places) column.
    """
    if _blank(val):
        return None
    if isinstance(val, bool):
        raise ValidationError(f"{label} must be a number")
    try:
        num = Decimal(str(val).strip())
    except (InvalidOperation, ValueError):
        raise ValidationError(f"{label} must be a number") from None
    if not num.is_finite():
        raise ValidationError(f"{label} must be a number")

    if min_value is not None and num < min_value:
        raise ValidationError(f"{label} must be at least {min_value}")
    if max_value is not None and num > max_value:
        raise ValidationError(f"{label} must be at most {max_value}")
    try:
        num = num.quantize(Decimal(1).scaleb(-places))
    except InvalidOperation:
        raise ValidationError(f"{label} is out of range") from None

    if precision is not None and abs(num) >= Decimal(10) ** (precision - places):
        raise ValidationError(f"{label} is out of range")
    return num


def parse_datetime(val: Any, label: str) -> Optional[datetime]:
    """ISO date or datetime -> naive UTC datetime."""
    if _blank(val):
        return None
    if not isinstance(val, str):
        raise ValidationError(f"{label} must be an ISO-8601 date")
    s = val.strip()
    if s.endswith("Z"):
        s = s[:-1] + "+00:00"
    try:
        dt = datetime.fromisoformat(s)
    except ValueError:
        try:
            d = date.fromisoformat(s)
        except ValueError:
            raise ValidationError(f"{label} must be an ISO-8601 date") from None
        dt = datetime(d.year, d.month, d.day)

    if dt.tzinfo is not None:
        dt = dt.astimezone(timezone.utc).replace(tzinfo=None)
    return dt


def parse_choice(val: Any, label: str, choices: Iterable[str]) -> Optional[str]:
    if _blank(val):
        return None
    s = str(val).strip().lower()
    if s not in choices:
        raise ValidationError(f"{label} must be one of: {', '.join(choices)}")
    return s


def parse_bool(val: Any, label: str) -> Optional[bool]:
    if val is None:
        return None
    if isinstance(val, bool):
        return val
    raise ValidationError(f"{label} must be true or false")


# ======================
# Request body
# ======================
def json_body() -> dict:
    payload = request.get_json(silent=True)
    if payload is None:
        return {}
    if not isinstance(payload, dict):
        raise ValidationError("Request body must be a JSON object")
    return payload


def _collect(payload: dict, spec, partial: bool) -> dict[str, Any]:
    """spec: iterable of (json_key, attr, parse_fn)."""
    out: dict[str, Any] = {}
    for key, attr, parse in spec:
        if key not in payload:
            if partial:
                continue
            out[attr] = None
            continue
        out[attr] = parse(payload[key])
    return out


# ======================
# Fields
# ======================
FIELD_SPEC = (
    ("name", "name", lambda v: parse_text(v, "name", 160)),
    ("latitude", "latitude", lambda v: parse_decimal(v, "latitude", 8, Decimal(-90), Decimal(90), precision=10)),
    ("longitude", "longitude", lambda v: parse_decimal(v, "longitude", 8, Decimal(-180), Decimal(180), precision=11)),
    ("size", "size", lambda v: parse_decimal(v, "size", 2, min_value=Decimal(0), precision=10)),
    ("cropType", "crop_type", lambda v: parse_choice(v, "cropType", CROP_TYPES)),
    ("plantingDate", "planting_date", lambda v: parse_datetime(v, "plantingDate")),
    ("expectedHarvestDate", "expected_harvest_date", lambda v: parse_datetime(v, "expectedHarvestDate")),
    ("location", "location", lambda v: parse_text(v, "location")),
)


def field_attrs(payload: dict, partial: bool = False) -> dict[str, Any]:
    attrs = _collect(payload, FIELD_SPEC, partial)
    if not partial and attrs.get("crop_type") is None:
        # Let the column default apply.
        attrs.pop("crop_type", None)
    return attrs


# ======================
# Readings
# ======================
READING_SPECS = {
    "satellite": (
        ("date", "date", lambda v: parse_datetime(v, "date")),
        ("ndvi", "ndvi", lambda v: parse_decimal(v, "ndvi", 3, precision=5)),
        ("evi", "evi", lambda v: parse_decimal(v, "evi", 3, precision=5)),
        ("sarvi", "sarvi", lambda v: parse_decimal(v, "sarvi", 3, precision=5)),
    ),
    "weather": (
        ("date", "date", lambda v: parse_datetime(v, "date")),
        ("temperature", "temperature", lambda v: parse_decimal(v, "temperature", 2, precision=5)),
        ("humidity", "humidity", lambda v: parse_decimal(v, "humidity", 2, precision=5)),
        ("rainfall", "rainfall", lambda v: parse_decimal(v, "rainfall", 2, precision=7)),
        ("windSpeed", "wind_speed", lambda v: parse_decimal(v, "windSpeed", 2, precision=5)),
        ("condition", "condition", lambda v: parse_text(v, "condition", 60)),
    ),
    "predictions": (
        ("predictionDate", "prediction_date", lambda v: parse_datetime(v, "predictionDate")),
        ("predictedYield", "predicted_yield", lambda v: parse_decimal(v, "predictedYield", 2, precision=10)),
        ("confidence", "confidence", lambda v: parse_decimal(v, "confidence", 2, precision=5)),
        ("modelVersion", "model_version", lambda v: parse_text(v, "modelVersion", 30)),
    ),
}

READING_DATE_ATTRS = {
    "satellite": "date",
    "weather": "date",
    "predictions": "prediction_date",
}


def reading_attrs(store_name: str, payload: dict) -> dict[str, Any]:
    """Reading payload -> attrs. A missing date means "now"."""
    attrs = _collect(payload, READING_SPECS[store_name], partial=False)
    date_attr = READING_DATE_ATTRS[store_name]
    if attrs.get(date_attr) is None:
        attrs[date_attr] = utcnow_naive()
    return attrs


def required_field_id(payload: dict) -> str:
    field_id = parse_text(payload.get("fieldId"), "fieldId", 36)
    if not field_id:
        raise ValidationError("fieldId is required")
    return field_id


# ======================
# Alerts
# ======================
def alert_attrs(payload: dict) -> dict[str, Any]:
    attrs = {
        "field_id": parse_text(payload.get("fieldId"), "fieldId", 36),
        "type": parse_choice(payload.get("type"), "type", ALERT_TYPES),
        "priority": parse_choice(payload.get("priority"), "priority", ALERT_PRIORITIES),
        "title": parse_text(payload.get("title"), "title"),
        "description": parse_text(payload.get("description"), "description"),
    }
    for key in ("type", "priority", "title"):
        if attrs[key] is None:
            raise ValidationError(f"{key} is required")

    is_active = parse_bool(payload.get("isActive"), "isActive")
    if is_active is not None:
        attrs["is_active"] = is_active
    return attrs


# ======================
# Users (identity proxy payload)
# ======================
def user_attrs(payload: dict) -> dict[str, Any]:
    user_id = parse_text(payload.get("id"), "id", 64)
    if not user_id:
        raise ValidationError("id is required")

    attrs: dict[str, Any] = {"id": user_id}
    optional = (
        ("email", "email", lambda v: (parse_text(v, "email", 120) or "").lower() or None),
        ("firstName", "first_name", lambda v: parse_text(v, "firstName", 120)),
        ("lastName", "last_name", lambda v: parse_text(v, "lastName", 120)),
        ("profileImageUrl", "profile_image_url", lambda v: parse_text(v, "profileImageUrl", 500)),
        ("userType", "user_type", lambda v: parse_choice(v, "userType", USER_TYPES)),
    )
    attrs.update(_collect(payload, optional, partial=True))
    if "user_type" in attrs and attrs["user_type"] is None:
        attrs.pop("user_type")
    return attrs
