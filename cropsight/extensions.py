# cropsight/extensions.py
from __future__ import annotations

from flask_limiter import Limiter
from flask_limiter.util import get_remote_address
from flask_login import LoginManager
from flask_migrate import Migrate
from flask_sqlalchemy import SQLAlchemy

# ======================
# Database
# ======================
db = SQLAlchemy()
migrate = Migrate()

# ======================
# Sessions
# ======================
# user_loader and the JSON 401 handler are registered in cropsight.auth
login_manager = LoginManager()

# ======================
# Rate limiting
# ======================
# Limits are per client address and only on the routes that declare one
# (login, mock generators). Storage comes from RATELIMIT_STORAGE_URI.
limiter = Limiter(key_func=get_remote_address, default_limits=[])
