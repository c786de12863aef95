# cropsight/services/dashboard.py
from __future__ import annotations

from dataclasses import dataclass
from decimal import Decimal
from typing import Any, Optional

from ..storage.base import Storage

# Latest NDVI strictly above this counts a field as healthy.
HEALTHY_NDVI_THRESHOLD = Decimal("0.6")

# Map bands (same scale as the dashboard legend)
MAP_HEALTHY_NDVI = Decimal("0.7")
MAP_WARNING_NDVI = Decimal("0.5")


def _num(value: Any) -> Decimal:
    """Numeric coercion with null/missing as zero."""
    if value is None or value == "":
        return Decimal("0")
    if isinstance(value, Decimal):
        return value
    return Decimal(str(value))


# =========================================================
# Types
# =========================================================
@dataclass(frozen=True)
class DashboardStats:
    total_fields: int = 0
    healthy_fields: int = 0
    total_acres: Decimal = Decimal("0")
    predicted_yield: Decimal = Decimal("0")

    def to_dict(self) -> dict:
        return {
            "totalFields": self.total_fields,
            "healthyFields": self.healthy_fields,
            "totalAcres": float(self.total_acres),
            "predictedYield": float(self.predicted_yield),
        }


# =========================================================
# Rollups
# =========================================================
def compute_dashboard_stats(storage: Storage, user_id: str) -> DashboardStats:
    """
    Four-number rollup over a user's fields.

    Recomputed from the store on every call. Per field it looks at the latest
    satellite reading (healthy iff NDVI > 0.6) and the latest yield prediction
    (summed, missing value = 0). Fields without readings still count toward
    total_fields and total_acres.
    """
    fields = storage.list_fields(user_id)

    total_acres = sum((_num(f.size) for f in fields), Decimal("0"))

    healthy = 0
    predicted = Decimal("0")
    for field in fields:
        latest = storage.satellite.latest_for(field.id)
        if latest is not None and latest.ndvi is not None and _num(latest.ndvi) > HEALTHY_NDVI_THRESHOLD:
            healthy += 1

        prediction = storage.predictions.latest_for(field.id)
        if prediction is not None:
            predicted += _num(prediction.predicted_yield)

    return DashboardStats(
        total_fields=len(fields),
        healthy_fields=healthy,
        total_acres=total_acres,
        predicted_yield=predicted,
    )


def health_band(ndvi: Optional[Decimal]) -> str:
    if ndvi is None:
        return "unknown"
    value = _num(ndvi)
    if value > MAP_HEALTHY_NDVI:
        return "healthy"
    if value > MAP_WARNING_NDVI:
        return "warning"
    return "critical"


def summarize_field_map(storage: Storage, user_id: str) -> list[dict]:
    """One marker per field: coordinates, latest NDVI and its health band."""
    markers = []
    for field in storage.list_fields(user_id):
        latest = storage.satellite.latest_for(field.id)
        ndvi = latest.ndvi if latest is not None else None
        markers.append(
            {
                "id": field.id,
                "name": field.name,
                "latitude": float(field.latitude),
                "longitude": float(field.longitude),
                "ndvi": float(ndvi) if ndvi is not None else None,
                "health": health_band(ndvi),
            }
        )
    return markers
