# tests/conftest.py
import pytest

from cropsight import create_app
from cropsight.extensions import db
from cropsight.settings import TestingConfig
from cropsight.storage import get_storage


class MemoryTestingConfig(TestingConfig):
    STORAGE_BACKEND = "memory"


# ======================
# App / client
# ======================
@pytest.fixture
def app():
    # No app context stays pushed: each test-client request gets its own,
    # so Flask-Login never reuses a user cached on `g`.
    app = create_app(TestingConfig)
    with app.app_context():
        db.create_all()

    yield app

    with app.app_context():
        db.session.remove()
        db.drop_all()


@pytest.fixture
def client(app):
    return app.test_client()


def login(client, user_id="farmer-1", **profile):
    return client.post("/api/login", json={"id": user_id, **profile})


@pytest.fixture
def farmer(app):
    """Logged-in client for user farmer-1."""
    c = app.test_client()
    resp = login(c, "farmer-1", firstName="Amina", email="amina@example.com")
    assert resp.status_code == 200
    return c


@pytest.fixture
def neighbour(app):
    """A second, unrelated logged-in user."""
    c = app.test_client()
    resp = login(c, "farmer-2", firstName="Otieno")
    assert resp.status_code == 200
    return c


# ======================
# Storage (both adapters)
# ======================
@pytest.fixture(params=["database", "memory"])
def storage(request):
    config = TestingConfig if request.param == "database" else MemoryTestingConfig
    app = create_app(config)
    with app.app_context():
        db.create_all()
        yield get_storage()
        db.session.remove()
        db.drop_all()


@pytest.fixture
def user_id(storage):
    return storage.upsert_user({"id": "farmer-1", "email": "amina@example.com"}).id
