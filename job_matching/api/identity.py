"""Caller identity resolution and role guards.

Token issuance and verification happen upstream (an authenticating gateway or
a separate auth service). The application only needs to know who is calling
and with which role; an IdentityResolver answers that per request.
"""

import hmac
from functools import wraps
from typing import Callable, Optional, Protocol

from flask import Request, g

from job_matching.domain.models import CallerIdentity, UserRole
from job_matching.logging import get_logger
from job_matching.persistence import Database, UserRepository

from .errors import ApiError

logger = get_logger(__name__, component="api")

USER_ID_HEADER = "X-User-Id"
GATEWAY_TOKEN_HEADER = "X-Gateway-Token"


class IdentityResolver(Protocol):
    """Resolves the caller of a request, or None when anonymous."""

    def resolve(self, request: Request) -> Optional[CallerIdentity]:
        ...


class HeaderIdentityResolver:
    """Trusts a user id header set by an authenticating gateway.

    The gateway proves itself with a shared secret in X-Gateway-Token; a user
    id header without the matching secret is ignored and the request is
    anonymous. The role is always read from the store, never from the request.
    """

    def __init__(
        self,
        database: Database,
        gateway_token: str,
        header: str = USER_ID_HEADER,
        token_header: str = GATEWAY_TOKEN_HEADER,
    ):
        if not gateway_token:
            raise ValueError("HeaderIdentityResolver requires a non-empty gateway token")

        self.database = database
        self.gateway_token = gateway_token
        self.header = header
        self.token_header = token_header

    def resolve(self, request: Request) -> Optional[CallerIdentity]:
        user_id = (request.headers.get(self.header) or "").strip()
        if not user_id:
            return None

        presented = request.headers.get(self.token_header) or ""
        if not hmac.compare_digest(presented.encode(), self.gateway_token.encode()):
            logger.warning(
                "Identity header without a valid gateway token",
                extra={"event": "auth.gateway_token_rejected"},
            )
            return None

        with self.database.session() as session:
            user = UserRepository(session).get_by_id(user_id)

        if user is None:
            logger.info(
                "Identity header names an unknown user",
                extra={"event": "auth.unknown_user", "user_id": user_id},
            )
            return None

        return CallerIdentity(id=user.id, role=user.role)


def current_identity() -> Optional[CallerIdentity]:
    """Identity resolved for the current request, if any."""
    return g.get("identity")


def require_identity(*roles: UserRole) -> Callable:
    """Route decorator: 401 without an identity, 403 with the wrong role.

    Example:
        >>> @bp.route("/stats")
        ... @require_identity(UserRole.ADMIN)
        ... def stats(): ...
    """

    def decorator(view: Callable) -> Callable:
        @wraps(view)
        def wrapper(*args, **kwargs):
            identity = current_identity()
            if identity is None:
                raise ApiError(401, "unauthorized", "Authentication required")

            if roles and identity.role not in roles:
                wanted = " or ".join(role.value for role in roles)
                raise ApiError(403, "forbidden", f"Access denied. {wanted} role required.")

            return view(*args, **kwargs)

        return wrapper

    return decorator
