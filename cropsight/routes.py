# cropsight/routes.py
from __future__ import annotations

from flask import Blueprint, current_app, jsonify
from flask_login import current_user, login_required

from .errors import NotFound, api_action
from .extensions import limiter
from .services.dashboard import compute_dashboard_stats, summarize_field_map
from .services.mock_data import MOCK_GENERATORS
from .storage import get_storage
from .utils.guards import owned_field
from .utils.parsers import (
    alert_attrs,
    field_attrs,
    json_body,
    reading_attrs,
    required_field_id,
)
from .utils.serializers import to_json, to_json_list

api = Blueprint("api", __name__, url_prefix="/api")


def _user_id() -> str:
    return current_user.id


# =========================================================
# Fields
# =========================================================
@api.route("/fields", methods=["GET"])
@login_required
@api_action("fetch fields")
def list_fields():
    return jsonify(to_json_list(get_storage().list_fields(_user_id())))


@api.route("/fields", methods=["POST"])
@login_required
@api_action("create field")
def create_field():
    attrs = field_attrs(json_body())
    field = get_storage().create_field(_user_id(), attrs)
    current_app.logger.info("Field %s created for user %s", field.id, field.user_id)
    return jsonify(to_json(field)), 201


@api.route("/fields/<field_id>", methods=["GET"])
@login_required
@api_action("fetch field")
def get_field(field_id: str):
    return jsonify(to_json(owned_field(get_storage(), field_id, _user_id())))


@api.route("/fields/<field_id>", methods=["PUT"])
@login_required
@api_action("update field")
def update_field(field_id: str):
    storage = get_storage()
    owned_field(storage, field_id, _user_id())

    changes = field_attrs(json_body(), partial=True)
    field = storage.update_field(field_id, changes)
    return jsonify(to_json(field))


@api.route("/fields/<field_id>", methods=["DELETE"])
@login_required
@api_action("delete field")
def delete_field(field_id: str):
    storage = get_storage()
    try:
        owned_field(storage, field_id, _user_id())
    except NotFound:
        # Already gone (or never ours): deleting stays a no-op success.
        return jsonify({"message": "Field deleted successfully"})

    storage.delete_field(field_id)
    current_app.logger.info("Field %s deleted", field_id)
    return jsonify({"message": "Field deleted successfully"})


# =========================================================
# Time-series readings (satellite / weather / predictions)
# =========================================================
def reading_routes(prefix: str, store_name: str, label: str) -> None:
    """
    Registers, for one reading store:
      GET  /api/<prefix>/<field_id>         all readings, newest first
      GET  /api/<prefix>/<field_id>/latest  latest reading or null
      POST /api/<prefix>                    append a reading
    """

    @api.route(f"/{prefix}/<field_id>", methods=["GET"], endpoint=f"{store_name}_list")
    @login_required
    @api_action(f"fetch {label}")
    def list_readings(field_id: str):
        storage = get_storage()
        owned_field(storage, field_id, _user_id())
        return jsonify(to_json_list(storage.reading_store(store_name).all_for(field_id)))

    @api.route(f"/{prefix}/<field_id>/latest", methods=["GET"], endpoint=f"{store_name}_latest")
    @login_required
    @api_action(f"fetch {label}")
    def latest_reading(field_id: str):
        storage = get_storage()
        owned_field(storage, field_id, _user_id())
        return jsonify(to_json(storage.reading_store(store_name).latest_for(field_id)))

    @api.route(f"/{prefix}", methods=["POST"], endpoint=f"{store_name}_create")
    @login_required
    @api_action(f"create {label}")
    def create_reading():
        storage = get_storage()
        payload = json_body()
        field_id = required_field_id(payload)
        owned_field(storage, field_id, _user_id())

        attrs = reading_attrs(store_name, payload)
        attrs["field_id"] = field_id
        row = storage.reading_store(store_name).create(attrs)
        return jsonify(to_json(row)), 201


reading_routes("satellite-data", "satellite", "satellite data")
reading_routes("weather", "weather", "weather data")
reading_routes("predictions", "predictions", "yield predictions")


# =========================================================
# Mock data (demo scaffolding)
# =========================================================
def mock_route(path: str, store_name: str, label: str) -> None:
    @api.route(f"/mock/{path}", methods=["POST"], endpoint=f"mock_{store_name}")
    @login_required
    @limiter.limit("30 per minute", scope=f"mock_{store_name}")
    @api_action(f"create mock {label}")
    def create_mock():
        storage = get_storage()
        field_id = required_field_id(json_body())
        owned_field(storage, field_id, _user_id())

        attrs = MOCK_GENERATORS[store_name](field_id)
        row = storage.reading_store(store_name).create(attrs)
        return jsonify(to_json(row)), 201


mock_route("satellite-data", "satellite", "satellite data")
mock_route("weather-data", "weather", "weather data")
mock_route("yield-prediction", "predictions", "yield prediction")


# =========================================================
# Alerts
# =========================================================
@api.route("/alerts", methods=["GET"])
@login_required
@api_action("fetch alerts")
def list_alerts():
    return jsonify(to_json_list(get_storage().list_alerts(_user_id())))


@api.route("/alerts/unread", methods=["GET"])
@login_required
@api_action("fetch unread alerts")
def list_unread_alerts():
    return jsonify(to_json_list(get_storage().list_unread_alerts(_user_id())))


@api.route("/alerts/active", methods=["GET"])
@login_required
@api_action("fetch active alerts")
def list_active_alerts():
    return jsonify(to_json_list(get_storage().list_active_alerts(_user_id())))


@api.route("/alerts", methods=["POST"])
@login_required
@api_action("create alert")
def create_alert():
    storage = get_storage()
    attrs = alert_attrs(json_body())
    if attrs.get("field_id"):
        owned_field(storage, attrs["field_id"], _user_id())

    attrs["user_id"] = _user_id()
    alert = storage.create_alert(attrs)
    return jsonify(to_json(alert)), 201


@api.route("/alerts/<alert_id>/read", methods=["PATCH"])
@login_required
@api_action("mark alert as read")
def mark_alert_read(alert_id: str):
    # Fire-and-forget from the UI: unknown or already-read ids still answer 200.
    changed = get_storage().mark_alert_read(alert_id, _user_id())
    if not changed:
        current_app.logger.debug("Alert %s: nothing to mark as read", alert_id)
    return jsonify({"message": "Alert marked as read"})


# =========================================================
# Dashboard
# =========================================================
@api.route("/dashboard/stats", methods=["GET"])
@login_required
@api_action("fetch dashboard stats")
def dashboard_stats():
    stats = compute_dashboard_stats(get_storage(), _user_id())
    return jsonify(stats.to_dict())


@api.route("/dashboard/field-map", methods=["GET"])
@login_required
@api_action("fetch field map")
def dashboard_field_map():
    return jsonify(summarize_field_map(get_storage(), _user_id()))
