"""Translation of service failures into HTTP responses.

Every error body has the same shape: ``{"message": ..., "code": ...}``.
"""

from typing import Dict, Type

from flask import Flask, jsonify
from werkzeug.exceptions import HTTPException

from job_matching.domain.exceptions import (
    DomainError,
    DuplicateEmailError,
    DuplicateMatchError,
    InvalidCredentialsError,
    InvalidRoleError,
    InvalidVerificationCodeError,
    NotFoundError,
    PreconditionFailedError,
)
from job_matching.logging import get_logger
from job_matching.persistence import PersistenceError

logger = get_logger(__name__, component="api")

# Checked in order; the first matching class wins
STATUS_BY_ERROR: Dict[Type[DomainError], int] = {
    NotFoundError: 404,
    PreconditionFailedError: 400,
    InvalidRoleError: 400,
    DuplicateMatchError: 400,
    DuplicateEmailError: 400,
    InvalidVerificationCodeError: 400,
    InvalidCredentialsError: 400,
}


class ApiError(Exception):
    """An HTTP-level failure raised by the web layer itself (401, 403, 400)."""

    def __init__(self, status: int, code: str, message: str):
        self.status = status
        self.code = code
        self.message = message
        super().__init__(message)


def status_for(error: DomainError) -> int:
    for error_type, status in STATUS_BY_ERROR.items():
        if isinstance(error, error_type):
            return status
    return 400


def error_response(status: int, code: str, message: str):
    return jsonify({"message": message, "code": code}), status


def register_error_handlers(app: Flask) -> None:
    """Install handlers for domain, persistence and HTTP errors."""

    @app.errorhandler(ApiError)
    def handle_api_error(error: ApiError):
        return error_response(error.status, error.code, error.message)

    @app.errorhandler(DomainError)
    def handle_domain_error(error: DomainError):
        status = status_for(error)
        logger.info(
            f"Request failed: {error.message}",
            extra={"event": "request.rejected", "code": error.code, "status": status},
        )
        return error_response(status, error.code, error.message)

    @app.errorhandler(PersistenceError)
    def handle_persistence_error(error: PersistenceError):
        logger.error(
            f"Storage failure while handling request: {error}",
            extra={"event": "request.failed", "error_type": type(error).__name__},
        )
        return error_response(500, "server_error", "Server error")

    @app.errorhandler(HTTPException)
    def handle_http_exception(error: HTTPException):
        code = (error.name or "error").lower().replace(" ", "_")
        return error_response(error.code or 500, code, error.description or error.name)
