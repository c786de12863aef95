# tests/test_dashboard.py
from datetime import datetime, timedelta
from decimal import Decimal

import pytest

from cropsight.services.dashboard import (
    DashboardStats,
    compute_dashboard_stats,
    health_band,
    summarize_field_map,
)

DAY = datetime(2026, 8, 1)


def _add_field(storage, user_id, name, size=None):
    return storage.create_field(user_id, {
        "name": name,
        "latitude": Decimal("-1.0"),
        "longitude": Decimal("37.0"),
        "size": size,
    }).id


def _ndvi(storage, field_id, value, days=0):
    storage.satellite.create({"field_id": field_id, "date": DAY + timedelta(days=days), "ndvi": Decimal(value)})


def _prediction(storage, field_id, value, days=0):
    storage.predictions.create({
        "field_id": field_id,
        "prediction_date": DAY + timedelta(days=days),
        "predicted_yield": None if value is None else Decimal(value),
    })


def test_user_without_fields_gets_all_zeros(storage, user_id):
    stats = compute_dashboard_stats(storage, user_id)

    assert stats == DashboardStats(0, 0, Decimal("0"), Decimal("0"))
    assert stats.to_dict() == {"totalFields": 0, "healthyFields": 0, "totalAcres": 0.0, "predictedYield": 0.0}


def test_two_field_scenario(storage, user_id):
    a = _add_field(storage, user_id, "A", Decimal("10"))
    _add_field(storage, user_id, "B", Decimal("5"))
    _ndvi(storage, a, "0.8")
    _prediction(storage, a, "3.0")

    stats = compute_dashboard_stats(storage, user_id)

    assert stats.to_dict() == {"totalFields": 2, "healthyFields": 1, "totalAcres": 15.0, "predictedYield": 3.0}


def test_total_acres_treats_missing_size_as_zero(storage, user_id):
    _add_field(storage, user_id, "A", Decimal("2.25"))
    _add_field(storage, user_id, "B", None)
    _add_field(storage, user_id, "C", Decimal("0.75"))

    assert compute_dashboard_stats(storage, user_id).total_acres == Decimal("3.00")


@pytest.mark.parametrize(
    "ndvi, healthy",
    [("0.6", 0), ("0.601", 1), ("0.599", 0), ("0.95", 1)],
)
def test_healthy_threshold_is_strictly_above_point_six(storage, user_id, ndvi, healthy):
    field_id = _add_field(storage, user_id, "A", Decimal("1"))
    _ndvi(storage, field_id, ndvi)

    assert compute_dashboard_stats(storage, user_id).healthy_fields == healthy


def test_only_latest_reading_decides_health(storage, user_id):
    field_id = _add_field(storage, user_id, "A")
    _ndvi(storage, field_id, "0.85", days=0)
    _ndvi(storage, field_id, "0.40", days=3)

    assert compute_dashboard_stats(storage, user_id).healthy_fields == 0


def test_reading_without_ndvi_is_not_healthy(storage, user_id):
    field_id = _add_field(storage, user_id, "A")
    storage.satellite.create({"field_id": field_id, "date": DAY, "evi": Decimal("0.5")})

    assert compute_dashboard_stats(storage, user_id).healthy_fields == 0


def test_predicted_yield_sums_latest_prediction_per_field(storage, user_id):
    a = _add_field(storage, user_id, "A")
    b = _add_field(storage, user_id, "B")
    c = _add_field(storage, user_id, "C")
    _prediction(storage, a, "1.50", days=0)
    _prediction(storage, a, "2.50", days=5)
    _prediction(storage, b, "4.00")
    _prediction(storage, c, None)

    assert compute_dashboard_stats(storage, user_id).predicted_yield == Decimal("6.50")


def test_other_users_fields_are_ignored(storage, user_id):
    other = storage.upsert_user({"id": "farmer-2"}).id
    theirs = _add_field(storage, other, "Theirs", Decimal("100"))
    _ndvi(storage, theirs, "0.9")
    _prediction(storage, theirs, "9.0")

    assert compute_dashboard_stats(storage, user_id).total_fields == 0


@pytest.mark.parametrize(
    "ndvi, band",
    [(None, "unknown"), ("0.71", "healthy"), ("0.7", "warning"), ("0.51", "warning"), ("0.5", "critical")],
)
def test_health_band(ndvi, band):
    assert health_band(None if ndvi is None else Decimal(ndvi)) == band


def test_field_map_uses_latest_ndvi(storage, user_id):
    a = _add_field(storage, user_id, "A")
    _add_field(storage, user_id, "B")
    _ndvi(storage, a, "0.45", days=0)
    _ndvi(storage, a, "0.75", days=1)

    markers = summarize_field_map(storage, user_id)

    assert [(m["name"], m["ndvi"], m["health"]) for m in markers] == [
        ("A", 0.75, "healthy"),
        ("B", None, "unknown"),
    ]
    assert markers[0]["latitude"] == -1.0
