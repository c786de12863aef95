# cropsight/auth.py
from __future__ import annotations

import hmac

from flask import Blueprint, current_app, jsonify, request
from flask_login import current_user, login_required, login_user, logout_user

from .errors import Unauthorized, api_action
from .extensions import limiter, login_manager
from .storage import get_storage
from .utils.parsers import json_body, user_attrs
from .utils.serializers import to_json

auth = Blueprint("auth", __name__, url_prefix="/api")

IDENTITY_PROXY_HEADER = "X-Identity-Proxy-Secret"


# =========================================================
# Flask-Login hooks
# =========================================================
@login_manager.user_loader
def load_user(user_id: str):
    # StoreFailure propagates: an outage answers 500, not a re-login 401.
    return get_storage().get_user(user_id)


@login_manager.unauthorized_handler
def unauthorized():
    return jsonify({"message": Unauthorized.default_message}), 401


# =========================================================
# Helpers
# =========================================================
def _check_identity_proxy() -> None:
    """
    When IDENTITY_PROXY_SECRET is set, only the identity proxy may log users in.
    """
    secret = current_app.config.get("IDENTITY_PROXY_SECRET") or ""
    if not secret:
        return
    sent = request.headers.get(IDENTITY_PROXY_HEADER) or ""
    if not hmac.compare_digest(sent.encode(), secret.encode()):
        current_app.logger.warning("Login rejected: bad identity proxy secret")
        raise Unauthorized("Invalid identity proxy credentials")


# =========================================================
# Login / Logout
# =========================================================
@auth.route("/login", methods=["POST"])
@limiter.limit("10 per minute")
@api_action("log in")
def login():
    """
    Called by the identity proxy after it authenticated the user.
    Creates the user on first login and refreshes the profile afterwards.
    """
    _check_identity_proxy()

    attrs = user_attrs(json_body())
    user = get_storage().upsert_user(attrs)

    login_user(user)
    current_app.logger.info("User %s logged in", user.id)
    return jsonify(to_json(user))


@auth.route("/logout", methods=["POST"])
@login_required
def logout():
    logout_user()
    return jsonify({"message": "Logged out"})


@auth.route("/auth/user", methods=["GET"])
@login_required
def current_profile():
    return jsonify(to_json(current_user._get_current_object()))
