"""Core domain models for users, jobs and matches.

Entities (User, Job, Match) mirror what the store persists. Projections
(UserSummary, TalentSummary, UserProfile, JobView, MatchView) are the explicit
shapes handed to callers; each one names exactly the fields a listing exposes.

Every model serializes with camelCase aliases (``isEmailVerified``,
``requiredSkills``) and accepts either spelling on input.
"""

from datetime import datetime
from enum import Enum
from typing import Iterable, List, Optional

from pydantic import BaseModel, Field, field_validator
from pydantic.alias_generators import to_camel

from job_matching.utils.timestamps import ensure_utc


class UserRole(str, Enum):
    """Roles a user can hold. Fixed at registration."""

    TALENT = "Talent"
    ADMIN = "Admin"


class MatchStatus(str, Enum):
    """Lifecycle of a match. Inactive counts as completed on dashboards."""

    ACTIVE = "Active"
    INACTIVE = "Inactive"


def normalize_skills(skills: Optional[Iterable[str]]) -> List[str]:
    """Trim skills, drop blanks and duplicates, keep first-seen order.

    Example:
        >>> normalize_skills([" React", "Node", "React", ""])
        ['React', 'Node']
    """
    seen = set()
    normalized = []
    for skill in skills or []:
        if not isinstance(skill, str):
            raise ValueError(f"Skills must be strings, got {type(skill).__name__}")
        stripped = skill.strip()
        if stripped and stripped not in seen:
            seen.add(stripped)
            normalized.append(stripped)
    return normalized


class DomainModel(BaseModel):
    """Base for all domain models: camelCase aliases, population by field name."""

    model_config = {"alias_generator": to_camel, "populate_by_name": True}

    def to_json_dict(self) -> dict:
        """Serialize for API responses (camelCase keys, ISO timestamps)."""
        return self.model_dump(mode="json", by_alias=True)


class TimestampedModel(DomainModel):
    """Adds UTC-normalized created_at/updated_at."""

    created_at: datetime = Field(..., description="When the record was created (UTC)")
    updated_at: datetime = Field(..., description="When the record was last modified (UTC)")

    @field_validator("created_at", "updated_at")
    @classmethod
    def normalize_timestamps(cls, v: datetime) -> datetime:
        """Ensure datetime is timezone-aware and in UTC."""
        return ensure_utc(v)


# ---------------------------------------------------------------------------
# Entities
# ---------------------------------------------------------------------------


class User(TimestampedModel):
    """A registered account.

    Field-level validation only normalizes whitespace; required-field rules are
    enforced by the registration use case so that partially filled records can
    still be scored for profile completeness.
    """

    id: str = Field(..., description="User identifier")
    name: str = Field("", description="Display name")
    email: str = Field("", description="Login email, stored lower-cased")
    password_hash: str = Field("", exclude=True, description="Encoded password hash")
    role: UserRole = Field(UserRole.TALENT, description="Talent or Admin")
    skills: List[str] = Field(default_factory=list, description="Declared skills")
    location: str = Field("", description="Free-text location, e.g. 'Austin'")
    is_email_verified: bool = Field(False, description="Whether the email was confirmed")
    email_verification_code: Optional[str] = Field(None, exclude=True)
    email_verification_expires_at: Optional[datetime] = Field(None, exclude=True)

    @field_validator("name", "location", mode="before")
    @classmethod
    def strip_text(cls, v: Optional[str]) -> str:
        return (v or "").strip()

    @field_validator("email", mode="before")
    @classmethod
    def normalize_email(cls, v: Optional[str]) -> str:
        return (v or "").strip().lower()

    @field_validator("skills", mode="before")
    @classmethod
    def normalize_skill_list(cls, v: Optional[Iterable[str]]) -> List[str]:
        return normalize_skills(v)

    @field_validator("email_verification_expires_at")
    @classmethod
    def ensure_expiry_utc(cls, v: Optional[datetime]) -> Optional[datetime]:
        return ensure_utc(v)

    @property
    def is_talent(self) -> bool:
        return self.role == UserRole.TALENT

    @property
    def is_admin(self) -> bool:
        return self.role == UserRole.ADMIN

    def to_profile(self) -> "UserProfile":
        return UserProfile(
            id=self.id,
            name=self.name,
            email=self.email,
            role=self.role,
            skills=list(self.skills),
            location=self.location,
            is_email_verified=self.is_email_verified,
            created_at=self.created_at,
            updated_at=self.updated_at,
        )

    def to_summary(self) -> "UserSummary":
        return UserSummary(id=self.id, name=self.name, email=self.email)

    def to_talent_summary(self) -> "TalentSummary":
        return TalentSummary(
            id=self.id,
            name=self.name,
            email=self.email,
            skills=list(self.skills),
            location=self.location,
        )


class Job(TimestampedModel):
    """A job posting created by an admin. Present until deleted."""

    id: str = Field(..., description="Job identifier")
    title: str = Field(..., description="Job title")
    description: str = Field(..., description="Job description")
    required_skills: List[str] = Field(default_factory=list, description="Skills sought")
    location: str = Field(..., description="Free-text location, e.g. 'Austin, TX'")
    created_by: str = Field(..., description="Id of the admin who posted the job")

    @field_validator("title", "description", "location")
    @classmethod
    def strip_text(cls, v: str) -> str:
        return v.strip()

    @field_validator("required_skills", mode="before")
    @classmethod
    def normalize_skill_list(cls, v: Optional[Iterable[str]]) -> List[str]:
        return normalize_skills(v)


class Match(TimestampedModel):
    """Link between one job and one talent, created by an admin.

    job_id is None once the job has been deleted; the match itself is kept.
    """

    id: str = Field(..., description="Match identifier")
    job_id: Optional[str] = Field(None, description="Matched job (None after job deletion)")
    user_id: str = Field(..., description="Matched talent")
    matched_by: str = Field(..., description="Admin who created the match")
    status: MatchStatus = Field(MatchStatus.ACTIVE, description="Active or Inactive")

    @property
    def is_active(self) -> bool:
        return self.status == MatchStatus.ACTIVE


# ---------------------------------------------------------------------------
# Projections
# ---------------------------------------------------------------------------


class UserSummary(DomainModel):
    """Name and email only. Used for job creators and matching admins."""

    id: str
    name: str
    email: str


class TalentSummary(UserSummary):
    """What an admin sees about a matched talent."""

    skills: List[str] = Field(default_factory=list)
    location: str = ""


class UserProfile(TimestampedModel):
    """A user without credentials or verification secrets."""

    id: str
    name: str
    email: str
    role: UserRole
    skills: List[str] = Field(default_factory=list)
    location: str
    is_email_verified: bool


class JobView(TimestampedModel):
    """A job with its creator resolved."""

    id: str
    title: str
    description: str
    required_skills: List[str] = Field(default_factory=list)
    location: str
    created_by: Optional[UserSummary] = None


class MatchView(TimestampedModel):
    """A match with its references resolved for display.

    ``user`` is only populated by listings that join the matched talent
    (admin listing and creation); talent-facing listings leave it None.
    """

    id: str
    job_id: Optional[str] = None
    user_id: str
    status: MatchStatus
    job: Optional[JobView] = None
    user: Optional[TalentSummary] = None
    matched_by: Optional[UserSummary] = None


class CallerIdentity(DomainModel):
    """Resolved identity of the caller, supplied by the auth collaborator."""

    id: str
    role: UserRole

    @property
    def is_admin(self) -> bool:
        return self.role == UserRole.ADMIN

    @property
    def is_talent(self) -> bool:
        return self.role == UserRole.TALENT
