"""Domain error taxonomy.

Every failure a use case reports to its caller is a DomainError carrying a
stable machine-readable ``code`` and a human-readable ``message``. The HTTP
layer maps classes to status codes; nothing here knows about HTTP.
"""

from typing import Any, Dict, Optional


class DomainError(Exception):
    """Base exception for all recoverable, caller-facing failures.

    Catch this to handle every structured failure raised by the services.
    """

    code = "domain_error"

    def __init__(self, message: str, **details: Any):
        self.message = message
        self.details = details
        super().__init__(message)

    def to_dict(self) -> Dict[str, Any]:
        """Structured form, e.g. ``{"code": "job_not_found", "message": "Job not found"}``."""
        payload: Dict[str, Any] = {"code": self.code, "message": self.message}
        if self.details:
            payload["details"] = dict(self.details)
        return payload


class NotFoundError(DomainError):
    """A referenced entity does not exist."""

    code = "not_found"


class JobNotFoundError(NotFoundError):
    """Raised when a job id does not resolve."""

    code = "job_not_found"

    def __init__(self, job_id: Optional[str] = None):
        super().__init__("Job not found", job_id=job_id)


class UserNotFoundError(NotFoundError):
    """Raised when a user id does not resolve."""

    code = "user_not_found"

    def __init__(self, user_id: Optional[str] = None):
        super().__init__("User not found", user_id=user_id)


class MatchNotFoundError(NotFoundError):
    """Raised when a match id does not resolve."""

    code = "match_not_found"

    def __init__(self, match_id: Optional[str] = None):
        super().__init__("Match not found", match_id=match_id)


class InvalidRoleError(DomainError):
    """The resolved user has the wrong role for the operation.

    Example: matching a job to a user whose role is Admin.
    """

    code = "invalid_role"


class DuplicateMatchError(DomainError):
    """A match for this (job, user) pair already exists, whatever its status."""

    code = "duplicate_match"

    def __init__(self, job_id: str, user_id: str):
        super().__init__("User is already matched to this job", job_id=job_id, user_id=user_id)


class PreconditionFailedError(DomainError):
    """A required field is missing or malformed."""

    code = "precondition_failed"


class DuplicateEmailError(DomainError):
    """Registration with an email that is already taken."""

    code = "duplicate_email"

    def __init__(self):
        super().__init__("User already exists")


class InvalidVerificationCodeError(DomainError):
    """The email verification code is wrong, missing or expired."""

    code = "invalid_verification_code"

    def __init__(self, message: str = "Invalid or expired verification code"):
        super().__init__(message)


class InvalidCredentialsError(DomainError):
    """Email and password do not identify a user.

    Deliberately does not say which of the two was wrong.
    """

    code = "invalid_credentials"

    def __init__(self):
        super().__init__("Invalid credentials")
