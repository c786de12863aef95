# cropsight/__init__.py
from __future__ import annotations

from flask import Flask

from .settings import Config
from .extensions import db, migrate, login_manager, limiter


def create_app(config_class: type = Config) -> Flask:
    app = Flask(__name__)
    app.config.from_object(config_class)

    # ======================
    # Initialize Extensions
    # ======================
    db.init_app(app)
    migrate.init_app(app, db)
    login_manager.init_app(app)
    limiter.init_app(app)

    # ======================
    # Import Models (CRITICAL: metadata for migrations)
    # ======================
    from . import models  # noqa: F401

    # ======================
    # Storage backend
    # ======================
    from .storage import init_storage

    init_storage(app)

    # ======================
    # Register Blueprints
    # ======================
    from .auth import auth
    from .routes import api

    app.register_blueprint(auth)
    app.register_blueprint(api)

    # ======================
    # Error handlers (JSON)
    # ======================
    from .errors import register_error_handlers

    register_error_handlers(app)

    return app
