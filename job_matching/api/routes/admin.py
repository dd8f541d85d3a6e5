"""Admin dashboard routes."""

from flask import Blueprint, jsonify

from job_matching.domain.models import UserRole

from ..helpers import get_services, to_json
from ..identity import require_identity

admin_bp = Blueprint("admin", __name__)


@admin_bp.route("/admin/stats", methods=["GET"])
@require_identity(UserRole.ADMIN)
def admin_stats():
    return jsonify(to_json(get_services().statistics.admin_stats()))
