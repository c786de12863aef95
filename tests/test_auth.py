# tests/test_auth.py
import pytest

from cropsight import create_app
from cropsight.extensions import db
from cropsight.settings import TestingConfig

from .conftest import login


def test_api_requires_login(client):
    for path in ("/api/fields", "/api/alerts", "/api/dashboard/stats", "/api/auth/user"):
        resp = client.get(path)
        assert resp.status_code == 401
        assert resp.get_json() == {"message": "Unauthorized"}


def test_login_creates_user_and_starts_session(client):
    resp = login(client, "oidc|123", email="Wanjiru@Example.com", firstName="Wanjiru", userType="cooperative")

    assert resp.status_code == 200
    body = resp.get_json()
    assert body["id"] == "oidc|123"
    assert body["email"] == "wanjiru@example.com"
    assert body["userType"] == "cooperative"

    me = client.get("/api/auth/user").get_json()
    assert me["id"] == "oidc|123"
    assert me["firstName"] == "Wanjiru"


def test_second_login_updates_profile(client):
    login(client, "oidc|123", firstName="Old", lastName="Name")
    resp = login(client, "oidc|123", firstName="New")

    body = resp.get_json()
    assert body["firstName"] == "New"
    assert body["lastName"] == "Name"
    assert body["userType"] == "farmer"


def test_login_requires_id(client):
    resp = client.post("/api/login", json={"email": "a@b.c"})

    assert resp.status_code == 400
    assert "id" in resp.get_json()["message"]


def test_login_rejects_unknown_user_type(client):
    resp = login(client, "u-1", userType="banker")

    assert resp.status_code == 400


def test_logout_ends_session(farmer):
    assert farmer.post("/api/logout").status_code == 200
    assert farmer.get("/api/fields").status_code == 401


class ProxyConfig(TestingConfig):
    IDENTITY_PROXY_SECRET = "s3cret"


@pytest.fixture
def proxied_client():
    app = create_app(ProxyConfig)
    with app.app_context():
        db.create_all()
    yield app.test_client()
    with app.app_context():
        db.drop_all()


def test_identity_proxy_secret_is_enforced(proxied_client):
    denied = proxied_client.post("/api/login", json={"id": "u-1"})
    wrong = proxied_client.post("/api/login", json={"id": "u-1"}, headers={"X-Identity-Proxy-Secret": "nope"})
    allowed = proxied_client.post("/api/login", json={"id": "u-1"}, headers={"X-Identity-Proxy-Secret": "s3cret"})

    assert denied.status_code == 401
    assert wrong.status_code == 401
    assert allowed.status_code == 200
