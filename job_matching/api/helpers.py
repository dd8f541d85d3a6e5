"""Small request/response helpers shared by the blueprints."""

from typing import Any, Dict, Iterable

from flask import current_app, jsonify, request

from job_matching.domain.models import DomainModel
from job_matching.services import Services

from .errors import ApiError

EXTENSION_KEY = "job_matching"


def get_services() -> Services:
    return current_app.extensions[EXTENSION_KEY]


def json_body() -> Dict[str, Any]:
    """The request's JSON object, or {} when there is no body.

    Raises:
        ApiError: 400 when the body is JSON but not an object
    """
    body = request.get_json(silent=True)
    if body is None:
        return {}
    if not isinstance(body, dict):
        raise ApiError(400, "precondition_failed", "Request body must be a JSON object")
    return body


def to_json(model: DomainModel) -> Dict[str, Any]:
    return model.to_json_dict()


def json_list(models: Iterable[DomainModel]):
    return jsonify([model.to_json_dict() for model in models])
