"""Flask application factory."""

from typing import Optional, Sequence
from uuid import uuid4

from flask import Flask, g, request
from flask_cors import CORS

from job_matching.logging import get_logger
from job_matching.logging.context import pop_log_context, push_log_context
from job_matching.services import Services

from .errors import register_error_handlers
from .helpers import EXTENSION_KEY
from .identity import (
    GATEWAY_TOKEN_HEADER,
    USER_ID_HEADER,
    HeaderIdentityResolver,
    IdentityResolver,
)
from .routes import ALL_BLUEPRINTS

logger = get_logger(__name__, component="api")

REQUEST_ID_HEADER = "X-Request-Id"


def create_app(
    services: Services,
    identity_resolver: Optional[IdentityResolver] = None,
    gateway_token: Optional[str] = None,
    cors_origins: Sequence[str] = ("*",),
) -> Flask:
    """Build the HTTP application around an already wired Services bundle.

    Args:
        services: Use cases and the store they share
        identity_resolver: Resolves the caller of each request
        gateway_token: Shared gateway secret; builds a HeaderIdentityResolver
            over the same store when no identity_resolver is given
        cors_origins: Browser origins allowed to call the API (empty disables CORS)

    Raises:
        ValueError: If neither identity_resolver nor gateway_token is given

    Example:
        >>> app = create_app(build_services(app_config, env_config), gateway_token=token)
        >>> app.run(port=3001)
    """
    if identity_resolver is None:
        if not gateway_token:
            raise ValueError("create_app needs an identity_resolver or a gateway_token")
        identity_resolver = HeaderIdentityResolver(services.database, gateway_token)

    app = Flask(__name__)
    app.json.sort_keys = False
    app.extensions[EXTENSION_KEY] = services

    if cors_origins:
        CORS(
            app,
            origins=list(cors_origins),
            methods=["GET", "POST", "PUT", "DELETE", "OPTIONS"],
            allow_headers=["Content-Type", USER_ID_HEADER, GATEWAY_TOKEN_HEADER, REQUEST_ID_HEADER],
            expose_headers=[REQUEST_ID_HEADER],
            max_age=3600,
        )

    resolver = identity_resolver

    @app.before_request
    def _bind_request_context():
        g.request_id = request.headers.get(REQUEST_ID_HEADER) or uuid4().hex
        g.log_token = push_log_context(request_id=g.request_id)

        g.identity = resolver.resolve(request)
        if g.identity is not None:
            push_log_context(user_id=g.identity.id, role=g.identity.role.value)

    @app.after_request
    def _stamp_request_id(response):
        if "request_id" in g:
            response.headers[REQUEST_ID_HEADER] = g.request_id
        return response

    @app.teardown_request
    def _release_request_context(exc):
        token = g.pop("log_token", None)
        if token is not None:
            pop_log_context(token)

    register_error_handlers(app)

    for blueprint in ALL_BLUEPRINTS:
        app.register_blueprint(blueprint, url_prefix="/api")

    logger.info(
        "HTTP application created",
        extra={
            "event": "api.created",
            "blueprints": [bp.name for bp in ALL_BLUEPRINTS],
            "cors_origins": list(cors_origins),
        },
    )
    return app
