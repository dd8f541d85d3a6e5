"""HTTP route blueprints, all mounted under /api."""

from .admin import admin_bp
from .auth import auth_bp
from .health import health_bp
from .jobs import jobs_bp
from .matching import matching_bp
from .talent import talent_bp
from .users import users_bp

ALL_BLUEPRINTS = (health_bp, auth_bp, jobs_bp, matching_bp, talent_bp, admin_bp, users_bp)

__all__ = [
    "ALL_BLUEPRINTS",
    "admin_bp",
    "auth_bp",
    "health_bp",
    "jobs_bp",
    "matching_bp",
    "talent_bp",
    "users_bp",
]
