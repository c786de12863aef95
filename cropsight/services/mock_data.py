# cropsight/services/mock_data.py
"""
Synthetic readings for demos.

Nothing in the dashboard rollup depends on this module; generated rows go through
the same ReadingStore.create as real ingestion would.
"""

from __future__ import annotations

import random
from decimal import Decimal
from typing import Any, Optional

from ..models import utcnow_naive

WEATHER_CONDITIONS = ("Sunny", "Partly Cloudy", "Cloudy", "Light Rain", "Heavy Rain")
MOCK_MODEL_VERSION = "v1.0"


def _uniform(rng: random.Random, low: float, high: float, places: int) -> Decimal:
    return Decimal(str(round(rng.uniform(low, high), places)))


def mock_satellite_reading(field_id: str, rng: Optional[random.Random] = None) -> dict[str, Any]:
    rng = rng or random.Random()
    return {
        "field_id": field_id,
        "date": utcnow_naive(),
        "ndvi": _uniform(rng, 0.5, 0.9, 3),
        "evi": _uniform(rng, 0.4, 0.7, 3),
        "sarvi": _uniform(rng, 0.5, 0.8, 3),
    }


def mock_weather_reading(field_id: str, rng: Optional[random.Random] = None) -> dict[str, Any]:
    rng = rng or random.Random()
    return {
        "field_id": field_id,
        "date": utcnow_naive(),
        "temperature": _uniform(rng, 15, 30, 1),  # deg C
        "humidity": _uniform(rng, 40, 80, 1),  # %
        "rainfall": _uniform(rng, 0, 50, 1),  # mm
        "wind_speed": _uniform(rng, 5, 25, 1),  # km/h
        "condition": rng.choice(WEATHER_CONDITIONS),
    }


def mock_yield_prediction(field_id: str, rng: Optional[random.Random] = None) -> dict[str, Any]:
    rng = rng or random.Random()
    return {
        "field_id": field_id,
        "prediction_date": utcnow_naive(),
        "predicted_yield": _uniform(rng, 1, 4, 1),  # tonnes
        "confidence": _uniform(rng, 70, 90, 1),  # %
        "model_version": MOCK_MODEL_VERSION,
    }


# store name -> generator
MOCK_GENERATORS = {
    "satellite": mock_satellite_reading,
    "weather": mock_weather_reading,
    "predictions": mock_yield_prediction,
}
