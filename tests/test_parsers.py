# tests/test_parsers.py
from datetime import datetime
from decimal import Decimal

import pytest

from cropsight.errors import ValidationError
from cropsight.utils.parsers import (
    alert_attrs,
    field_attrs,
    parse_datetime,
    parse_decimal,
    reading_attrs,
    user_attrs,
)
from cropsight.utils.serializers import camel


def test_parse_decimal_quantizes_to_column_scale():
    assert parse_decimal("0.8", "ndvi", 3) == Decimal("0.800")
    assert str(parse_decimal(12, "size", 2)) == "12.00"
    assert parse_decimal("", "size", 2) is None


@pytest.mark.parametrize("bad", ["abc", "NaN", "Infinity", True, [1]])
def test_parse_decimal_rejects_non_numbers(bad):
    with pytest.raises(ValidationError):
        parse_decimal(bad, "size", 2)


def test_parse_decimal_enforces_column_precision():
    assert parse_decimal("99.999", "ndvi", 3, precision=5) == Decimal("99.999")
    assert parse_decimal("-99.999", "ndvi", 3, precision=5) == Decimal("-99.999")

    for bad in ("150", "-100", "99.9996"):
        with pytest.raises(ValidationError):
            parse_decimal(bad, "ndvi", 3, precision=5)

    with pytest.raises(ValidationError):
        field_attrs({"size": "1e12"}, partial=True)


def test_parse_datetime_accepts_dates_and_utc_offsets():
    assert parse_datetime("2026-03-01", "d") == datetime(2026, 3, 1)
    assert parse_datetime("2026-03-01T12:30:00Z", "d") == datetime(2026, 3, 1, 12, 30)
    assert parse_datetime("2026-03-01T15:30:00+03:00", "d") == datetime(2026, 3, 1, 12, 30)
    assert parse_datetime(None, "d") is None


def test_field_attrs_partial_only_returns_sent_keys():
    assert field_attrs({"size": "3.5"}, partial=True) == {"size": Decimal("3.50")}


def test_field_attrs_full_fills_missing_optionals_with_none():
    attrs = field_attrs({"name": "A", "latitude": "1", "longitude": "2"})

    assert attrs["size"] is None
    assert attrs["location"] is None
    assert "crop_type" not in attrs


def test_reading_attrs_defaults_date_to_now():
    attrs = reading_attrs("predictions", {"predictedYield": "2"})

    assert isinstance(attrs["prediction_date"], datetime)
    assert attrs["predicted_yield"] == Decimal("2.00")


def test_alert_attrs_requires_title_type_priority():
    with pytest.raises(ValidationError):
        alert_attrs({"type": "health", "priority": "low"})

    attrs = alert_attrs({"type": "Health", "priority": "HIGH", "title": "Dry spell", "isActive": False})
    assert attrs["type"] == "health"
    assert attrs["priority"] == "high"
    assert attrs["is_active"] is False
    assert attrs["field_id"] is None


def test_user_attrs_only_keeps_sent_profile_keys():
    assert user_attrs({"id": "u1", "firstName": "Amina"}) == {"id": "u1", "first_name": "Amina"}


def test_camel_case_keys():
    assert camel("field_id") == "fieldId"
    assert camel("profile_image_url") == "profileImageUrl"
    assert camel("ndvi") == "ndvi"
