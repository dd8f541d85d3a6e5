"""HTTP layer: Flask application factory, identity resolution, error mapping.

Example usage:
    >>> from job_matching.api import create_app
    >>> app = create_app(services, gateway_token="s3cret")
    >>> app.test_client().get("/api/health").status_code
    200
"""

from .app import create_app
from .errors import STATUS_BY_ERROR, ApiError
from .identity import HeaderIdentityResolver, IdentityResolver, require_identity

__all__ = [
    "create_app",
    "ApiError",
    "STATUS_BY_ERROR",
    "HeaderIdentityResolver",
    "IdentityResolver",
    "require_identity",
]
