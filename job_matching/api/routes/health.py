"""Liveness endpoint."""

from flask import Blueprint, jsonify
from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError

from job_matching.logging import get_logger
from job_matching.persistence import PersistenceError
from job_matching.utils.timestamps import format_timestamp, utc_now

from ..helpers import get_services

logger = get_logger(__name__, component="api")

health_bp = Blueprint("health", __name__)


@health_bp.route("/health", methods=["GET"])
def health_check():
    """Report whether the store answers a trivial query."""
    database_ok = True
    try:
        with get_services().database.session() as session:
            session.execute(text("SELECT 1"))
    except (PersistenceError, SQLAlchemyError) as e:
        logger.warning(f"Health check failed: {e}", extra={"event": "health.degraded"})
        database_ok = False

    payload = {
        "status": "OK" if database_ok else "DEGRADED",
        "database": "up" if database_ok else "down",
        "timestamp": format_timestamp(utc_now()),
    }
    return jsonify(payload), 200 if database_ok else 503
