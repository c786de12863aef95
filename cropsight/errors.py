# cropsight/errors.py
"""
Error kinds shared by the storage layer and the API.

Every error carries the HTTP status the API answers with, so blueprints can let
them propagate and rely on the handlers registered in `register_error_handlers`.
"""

from __future__ import annotations

from functools import wraps
from typing import Any, Callable

from flask import Flask, current_app, jsonify


class CropSightError(Exception):
    status_code = 500
    default_message = "Internal server error"

    def __init__(self, message: str | None = None):
        self.message = message or self.default_message
        super().__init__(self.message)


class ValidationError(CropSightError):
    """Malformed or missing required input."""

    status_code = 400
    default_message = "Invalid request data"


class NotFound(CropSightError):
    status_code = 404
    default_message = "Not found"


class Unauthorized(CropSightError):
    status_code = 401
    default_message = "Unauthorized"


class StoreFailure(CropSightError):
    """The backing store failed (connectivity, constraint violation, ...)."""

    status_code = 500
    default_message = "Storage operation failed"


def register_error_handlers(app: Flask) -> None:
    # ======================
    # Domain errors
    # ======================
    @app.errorhandler(CropSightError)
    def handle_cropsight_error(e: CropSightError):
        if isinstance(e, StoreFailure):
            current_app.logger.exception("Unhandled store failure: %s", e.message)
        return jsonify({"message": e.message}), e.status_code

    # ======================
    # HTTP errors (JSON for API clients)
    # ======================
    @app.errorhandler(404)
    def not_found(e):
        return jsonify({"message": "Not found"}), 404

    @app.errorhandler(405)
    def method_not_allowed(e):
        return jsonify({"message": "Method not allowed"}), 405

    @app.errorhandler(429)
    def ratelimit_handler(e):
        return jsonify({"message": "Too many requests. Please try again later."}), 429

    @app.errorhandler(500)
    def internal_error(e):
        return jsonify({"message": "Internal server error"}), 500


# ======================
# View helper
# ======================
def api_action(action: str) -> Callable[[Callable[..., Any]], Callable[..., Any]]:
    """
    Turn a StoreFailure raised inside a view into a 500 JSON answer:
        {"message": "Failed to <action>"}
    Other CropSightErrors (validation, not found) propagate to the app handlers.
    """
    def decorator(view: Callable[..., Any]) -> Callable[..., Any]:
        @wraps(view)
        def wrapped(*args, **kwargs):
            try:
                return view(*args, **kwargs)
            except StoreFailure:
                current_app.logger.exception("Failed to %s", action)
                return jsonify({"message": f"Failed to {action}"}), 500
        return wrapped
    return decorator
