"""User listing (Admin-only)."""

from flask import Blueprint

from job_matching.domain.models import UserRole

from ..helpers import get_services, json_list
from ..identity import require_identity

users_bp = Blueprint("users", __name__)


@users_bp.route("/users", methods=["GET"])
@require_identity(UserRole.ADMIN)
def list_users():
    return json_list(get_services().accounts.list_users())
