"""Seed a demo farmer with a few fields and mock readings.

    python seed_demo.py
"""
import random
from decimal import Decimal

from cropsight import create_app
from cropsight.services.dashboard import compute_dashboard_stats
from cropsight.services.mock_data import MOCK_GENERATORS
from cropsight.storage import get_storage

DEMO_USER = {
    "id": "demo-farmer",
    "email": "farmer@cropsight.demo",
    "first_name": "Demo",
    "last_name": "Farmer",
    "user_type": "farmer",
}

DEMO_FIELDS = [
    {"name": "North Plot", "latitude": Decimal("-1.28638900"), "longitude": Decimal("36.81722300"),
     "size": Decimal("12.50"), "crop_type": "maize", "location": "Kiambu"},
    {"name": "River Bend", "latitude": Decimal("-0.30309900"), "longitude": Decimal("36.08002600"),
     "size": Decimal("7.00"), "crop_type": "beans", "location": "Nakuru"},
    {"name": "Upper Terrace", "latitude": Decimal("0.51427700"), "longitude": Decimal("35.26978000"),
     "size": Decimal("4.25"), "crop_type": "sorghum", "location": "Eldoret"},
]

app = create_app()
rng = random.Random(42)

with app.app_context():
    storage = get_storage()

    print("🔁 Upserting demo user...")
    user = storage.upsert_user(DEMO_USER)

    existing = {f.name for f in storage.list_fields(user.id)}
    for attrs in DEMO_FIELDS:
        if attrs["name"] in existing:
            print("⏭️  Field exists:", attrs["name"])
            continue
        field = storage.create_field(user.id, attrs)
        for store_name, generate in MOCK_GENERATORS.items():
            storage.reading_store(store_name).create(generate(field.id, rng))
        print("🌱 Field created:", field.name)

    print("✅ Dashboard:", compute_dashboard_stats(storage, user.id).to_dict())
