"""Match routes."""

from flask import Blueprint, jsonify

from job_matching.domain.models import UserRole

from ..helpers import get_services, json_body, json_list, to_json
from ..identity import current_identity, require_identity

matching_bp = Blueprint("matching", __name__)


@matching_bp.route("/matching", methods=["POST"])
@require_identity(UserRole.ADMIN)
def create_match():
    body = json_body()
    view = get_services().matching.create_match(
        job_id=body.get("jobId"),
        user_id=body.get("userId"),
        actor_id=current_identity().id,
    )
    return jsonify(to_json(view)), 201


@matching_bp.route("/matching", methods=["GET"])
@require_identity(UserRole.ADMIN)
def list_matches():
    return json_list(get_services().matching.list_all_matches())


@matching_bp.route("/matching/my-jobs", methods=["GET"])
@require_identity(UserRole.TALENT)
def my_jobs():
    """Active matches of the calling talent."""
    return json_list(
        get_services().matching.list_matches_for_talent(
            current_identity().id, include_inactive=False
        )
    )


@matching_bp.route("/matching/<match_id>/complete", methods=["POST"])
@require_identity(UserRole.ADMIN)
def complete_match(match_id):
    view = get_services().matching.complete_match(match_id, actor_id=current_identity().id)
    return jsonify(to_json(view))
