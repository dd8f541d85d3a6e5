"""Job posting routes. Reads are public, writes are Admin-only."""

from flask import Blueprint, jsonify

from job_matching.domain.models import UserRole

from ..helpers import get_services, json_body, json_list, to_json
from ..identity import current_identity, require_identity

jobs_bp = Blueprint("jobs", __name__)


@jobs_bp.route("/jobs", methods=["GET"])
def list_jobs():
    return json_list(get_services().postings.list_jobs())


@jobs_bp.route("/jobs/<job_id>", methods=["GET"])
def get_job(job_id):
    return jsonify(to_json(get_services().postings.get_job(job_id)))


@jobs_bp.route("/jobs", methods=["POST"])
@require_identity(UserRole.ADMIN)
def create_job():
    body = json_body()
    view = get_services().postings.create_job(
        actor_id=current_identity().id,
        title=body.get("title"),
        description=body.get("description"),
        location=body.get("location"),
        required_skills=body.get("requiredSkills") or [],
    )
    return jsonify(to_json(view)), 201


@jobs_bp.route("/jobs/<job_id>", methods=["PUT"])
@require_identity(UserRole.ADMIN)
def update_job(job_id):
    body = json_body()
    view = get_services().postings.update_job(
        job_id,
        title=body.get("title"),
        description=body.get("description"),
        location=body.get("location"),
        required_skills=body.get("requiredSkills") or [],
    )
    return jsonify(to_json(view))


@jobs_bp.route("/jobs/<job_id>", methods=["DELETE"])
@require_identity(UserRole.ADMIN)
def delete_job(job_id):
    get_services().postings.delete_job(job_id)
    return jsonify({"message": "Job deleted successfully"})
