"""Talent dashboard routes."""

from flask import Blueprint, jsonify

from job_matching.domain.models import UserRole

from ..helpers import get_services, json_list, to_json
from ..identity import current_identity, require_identity

talent_bp = Blueprint("talent", __name__)


@talent_bp.route("/talent/matches", methods=["GET"])
@require_identity(UserRole.TALENT)
def talent_matches():
    """Every match of the calling talent, newest first."""
    return json_list(
        get_services().matching.list_matches_for_talent(
            current_identity().id, include_inactive=True
        )
    )


@talent_bp.route("/talent/stats", methods=["GET"])
@require_identity(UserRole.TALENT)
def talent_stats():
    return jsonify(to_json(get_services().statistics.talent_stats(current_identity().id)))
