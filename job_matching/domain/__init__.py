"""Domain models and errors for the job matching API."""

from .exceptions import (
    DomainError,
    DuplicateEmailError,
    DuplicateMatchError,
    InvalidCredentialsError,
    InvalidRoleError,
    InvalidVerificationCodeError,
    JobNotFoundError,
    MatchNotFoundError,
    NotFoundError,
    PreconditionFailedError,
    UserNotFoundError,
)
from .models import (
    CallerIdentity,
    Job,
    JobView,
    Match,
    MatchStatus,
    MatchView,
    TalentSummary,
    User,
    UserProfile,
    UserRole,
    UserSummary,
    normalize_skills,
)

__all__ = [
    # Entities
    "User",
    "Job",
    "Match",
    # Projections
    "UserSummary",
    "TalentSummary",
    "UserProfile",
    "JobView",
    "MatchView",
    "CallerIdentity",
    # Enums and helpers
    "UserRole",
    "MatchStatus",
    "normalize_skills",
    # Errors
    "DomainError",
    "NotFoundError",
    "JobNotFoundError",
    "UserNotFoundError",
    "MatchNotFoundError",
    "InvalidRoleError",
    "DuplicateMatchError",
    "PreconditionFailedError",
    "DuplicateEmailError",
    "InvalidVerificationCodeError",
    "InvalidCredentialsError",
]
