# tests/test_mock_data.py
import random
from decimal import Decimal

from cropsight.services.mock_data import (
    WEATHER_CONDITIONS,
    mock_satellite_reading,
    mock_weather_reading,
    mock_yield_prediction,
)


def test_mock_values_stay_in_demo_ranges():
    rng = random.Random(7)
    for _ in range(50):
        sat = mock_satellite_reading("f1", rng)
        weather = mock_weather_reading("f1", rng)
        prediction = mock_yield_prediction("f1", rng)

        assert Decimal("0.5") <= sat["ndvi"] <= Decimal("0.9")
        assert Decimal("0.4") <= sat["evi"] <= Decimal("0.7")
        assert Decimal("0.5") <= sat["sarvi"] <= Decimal("0.8")
        assert Decimal("15") <= weather["temperature"] <= Decimal("30")
        assert weather["condition"] in WEATHER_CONDITIONS
        assert Decimal("1") <= prediction["predicted_yield"] <= Decimal("4")
        assert prediction["model_version"] == "v1.0"


def test_seeded_generators_are_repeatable():
    a = mock_satellite_reading("f1", random.Random(1))
    b = mock_satellite_reading("f1", random.Random(1))

    assert (a["ndvi"], a["evi"], a["sarvi"]) == (b["ndvi"], b["evi"], b["sarvi"])
