"""Account routes: registration, verification, current user."""

from flask import Blueprint, jsonify

from ..helpers import get_services, json_body, to_json
from ..identity import current_identity, require_identity

auth_bp = Blueprint("auth", __name__)


@auth_bp.route("/auth/register", methods=["POST"])
def register():
    body = json_body()
    profile, _code = get_services().accounts.register_user(
        name=body.get("name"),
        email=body.get("email"),
        password=body.get("password"),
        location=body.get("location"),
        role=body.get("role"),
        skills=body.get("skills") or [],
    )
    return (
        jsonify(
            {
                "message": "User created successfully. Please check your email for verification code.",
                "user": to_json(profile),
            }
        ),
        201,
    )


@auth_bp.route("/auth/verify-email", methods=["POST"])
@require_identity()
def verify_email():
    body = json_body()
    profile = get_services().accounts.verify_email(current_identity().id, body.get("code"))
    return jsonify({"message": "Email verified successfully", "user": to_json(profile)})


@auth_bp.route("/auth/resend-verification", methods=["POST"])
@require_identity()
def resend_verification():
    get_services().accounts.resend_verification(current_identity().id)
    return jsonify({"message": "Verification email sent successfully"})


@auth_bp.route("/auth/me", methods=["GET"])
@require_identity()
def me():
    profile = get_services().accounts.get_profile(current_identity().id)
    return jsonify({"user": to_json(profile)})


@auth_bp.route("/auth/me", methods=["PUT"])
@require_identity()
def update_profile():
    body = json_body()
    profile = get_services().accounts.update_profile(
        current_identity().id,
        name=body.get("name"),
        skills=body.get("skills"),
        location=body.get("location"),
    )
    return jsonify({"message": "Profile updated successfully", "user": to_json(profile)})


@auth_bp.route("/auth/login", methods=["POST"])
def login():
    """Check credentials. Token issuance belongs to the gateway in front of this service."""
    body = json_body()
    profile = get_services().accounts.authenticate(body.get("email"), body.get("password"))
    return jsonify({"message": "Login successful", "user": to_json(profile)})
