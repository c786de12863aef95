# migrations/env.py
from __future__ import annotations

import logging
import os
import sys
from logging.config import fileConfig

from alembic import context

# -----------------------------------------------------------------------------
# Project root on sys.path so "import cropsight" works from any cwd
# -----------------------------------------------------------------------------
PROJECT_ROOT = os.path.abspath(os.path.join(os.path.dirname(__file__), ".."))
if PROJECT_ROOT not in sys.path:
    sys.path.insert(0, PROJECT_ROOT)

config = context.config

if config.config_file_name:
    try:
        fileConfig(config.config_file_name, disable_existing_loggers=False)
    except KeyError:
        # alembic.ini without logging sections
        pass

logger = logging.getLogger("alembic.env")

# -----------------------------------------------------------------------------
# Two ways in:
# - `flask db upgrade`: Flask-Migrate pushed an app context, reuse its engine.
# - plain `alembic upgrade` (CI/deploy): DATABASE_URL must be set.
# -----------------------------------------------------------------------------
try:
    from flask import current_app

    _migrate_ext = current_app.extensions["migrate"]
except (ImportError, RuntimeError, KeyError):
    _migrate_ext = None


def _escape(url: str) -> str:
    # ConfigParser treats % as interpolation
    return url.replace("%", "%%")


def get_metadata():
    from cropsight import models  # noqa: F401  (registers tables)
    from cropsight.extensions import db

    if hasattr(db, "metadatas") and db.metadatas:
        return db.metadatas.get(None) or db.metadata
    return db.metadata


def get_url() -> str:
    if _migrate_ext is not None:
        engine = _migrate_ext.db.engine
        try:
            return engine.url.render_as_string(hide_password=False)
        except AttributeError:
            return str(engine.url)

    from cropsight.settings import _normalize_db_url

    url = _normalize_db_url(os.getenv("DATABASE_URL") or os.getenv("SQLALCHEMY_DATABASE_URI"))
    if not url:
        raise RuntimeError("DATABASE_URL is not set and no Flask app context is available.")
    return url


config.set_main_option("sqlalchemy.url", _escape(get_url()))


# -----------------------------------------------------------------------------
# Skip empty autogenerate revisions
# -----------------------------------------------------------------------------
def process_revision_directives(ctx, revision, directives):
    cmd_opts = getattr(config, "cmd_opts", None)
    if cmd_opts and getattr(cmd_opts, "autogenerate", False):
        script = directives[0]
        if script.upgrade_ops.is_empty():
            directives[:] = []
            logger.info("No changes in schema detected.")


def _configure_args() -> dict:
    args = dict(_migrate_ext.configure_args or {}) if _migrate_ext is not None else {}
    args.setdefault("process_revision_directives", process_revision_directives)
    args.setdefault("compare_type", True)
    args.setdefault("compare_server_default", True)
    return args


def run_migrations_offline():
    """Emit SQL to stdout instead of touching the database."""
    context.configure(
        url=config.get_main_option("sqlalchemy.url"),
        target_metadata=get_metadata(),
        literal_binds=True,
        **_configure_args(),
    )

    with context.begin_transaction():
        context.run_migrations()


def run_migrations_online():
    if _migrate_ext is not None:
        connectable = _migrate_ext.db.engine
    else:
        from sqlalchemy import create_engine  # runtime import is intentional

        connectable = create_engine(config.get_main_option("sqlalchemy.url"))

    with connectable.connect() as connection:
        context.configure(
            connection=connection,
            target_metadata=get_metadata(),
            **_configure_args(),
        )
        with context.begin_transaction():
            context.run_migrations()


if context.is_offline_mode():
    run_migrations_offline()
else:
    run_migrations_online()
