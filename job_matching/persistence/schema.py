"""Database schema definition and ORM models.

This module defines SQLAlchemy ORM models for users, jobs and matches and the
conversions between ORM rows and domain models. ORM instances never leave the
persistence package.
"""

import logging
from uuid import uuid4

from sqlalchemy import (
    JSON,
    Boolean,
    Column,
    ForeignKey,
    Index,
    String,
    Text,
    UniqueConstraint,
    inspect,
)
from sqlalchemy.engine import Engine
from sqlalchemy.orm import declarative_base

from job_matching.domain.models import Job, Match, MatchStatus, User, UserRole
from job_matching.utils.timestamps import format_for_storage, parse_from_storage

logger = logging.getLogger(__name__)

Base = declarative_base()

# Constraint names are matched when translating integrity errors
USER_EMAIL_CONSTRAINT = "uq_users_email"
MATCH_PAIR_CONSTRAINT = "uq_matches_job_user"


def new_id() -> str:
    """Generate a primary key for a new record."""
    return str(uuid4())


class UserModel(Base):
    """ORM model for users table."""

    __tablename__ = "users"

    id = Column(String(36), primary_key=True, default=new_id)

    name = Column(String(255), nullable=False, default="")
    email = Column(String(320), nullable=False)
    password_hash = Column(String(255), nullable=False)
    role = Column(String(20), nullable=False, default=UserRole.TALENT.value)
    skills = Column(JSON, nullable=False, default=list)
    location = Column(String(255), nullable=False, default="")

    # Email verification
    is_email_verified = Column(Boolean, nullable=False, default=False)
    email_verification_code = Column(String(12), nullable=True)
    email_verification_expires_at = Column(String(50), nullable=True)

    # Timestamps (stored as ISO 8601 strings)
    created_at = Column(String(50), nullable=False)
    updated_at = Column(String(50), nullable=False)

    __table_args__ = (
        UniqueConstraint("email", name=USER_EMAIL_CONSTRAINT),
        Index("idx_users_role", "role"),
    )

    def to_domain(self) -> User:
        """Convert ORM model to domain model."""
        return User(
            id=self.id,
            name=self.name,
            email=self.email,
            password_hash=self.password_hash,
            role=UserRole(self.role),
            skills=list(self.skills or []),
            location=self.location,
            is_email_verified=bool(self.is_email_verified),
            email_verification_code=self.email_verification_code,
            email_verification_expires_at=parse_from_storage(self.email_verification_expires_at),
            created_at=parse_from_storage(self.created_at),
            updated_at=parse_from_storage(self.updated_at),
        )

    @classmethod
    def from_domain(cls, user: User) -> "UserModel":
        """Create ORM model from domain model."""
        model = cls(id=user.id)
        model.apply(user)
        model.created_at = format_for_storage(user.created_at)
        return model

    def apply(self, user: User) -> None:
        """Copy every mutable field from a domain model onto this row."""
        self.name = user.name
        self.email = user.email
        self.password_hash = user.password_hash
        self.role = UserRole(user.role).value
        self.skills = list(user.skills)
        self.location = user.location
        self.is_email_verified = user.is_email_verified
        self.email_verification_code = user.email_verification_code
        self.email_verification_expires_at = format_for_storage(
            user.email_verification_expires_at
        )
        self.updated_at = format_for_storage(user.updated_at)


class JobModel(Base):
    """ORM model for jobs table."""

    __tablename__ = "jobs"

    id = Column(String(36), primary_key=True, default=new_id)

    title = Column(Text, nullable=False)
    description = Column(Text, nullable=False)
    required_skills = Column(JSON, nullable=False, default=list)
    location = Column(String(255), nullable=False)
    created_by = Column(String(36), ForeignKey("users.id"), nullable=False)

    created_at = Column(String(50), nullable=False)
    updated_at = Column(String(50), nullable=False)

    __table_args__ = (
        Index("idx_jobs_created_by", "created_by"),
        Index("idx_jobs_created_at", "created_at"),
    )

    def to_domain(self) -> Job:
        """Convert ORM model to domain model."""
        return Job(
            id=self.id,
            title=self.title,
            description=self.description,
            required_skills=list(self.required_skills or []),
            location=self.location,
            created_by=self.created_by,
            created_at=parse_from_storage(self.created_at),
            updated_at=parse_from_storage(self.updated_at),
        )

    @classmethod
    def from_domain(cls, job: Job) -> "JobModel":
        """Create ORM model from domain model."""
        model = cls(id=job.id, created_by=job.created_by)
        model.apply(job)
        model.created_at = format_for_storage(job.created_at)
        return model

    def apply(self, job: Job) -> None:
        """Copy the editable fields from a domain model onto this row."""
        self.title = job.title
        self.description = job.description
        self.required_skills = list(job.required_skills)
        self.location = job.location
        self.updated_at = format_for_storage(job.updated_at)


class MatchModel(Base):
    """ORM model for matches table.

    At most one row per (job_id, user_id), whatever its status. Deleting a job
    nulls job_id on its matches instead of removing them.
    """

    __tablename__ = "matches"

    id = Column(String(36), primary_key=True, default=new_id)

    job_id = Column(String(36), ForeignKey("jobs.id", ondelete="SET NULL"), nullable=True)
    user_id = Column(String(36), ForeignKey("users.id"), nullable=False)
    matched_by = Column(String(36), ForeignKey("users.id"), nullable=False)
    status = Column(String(20), nullable=False, default=MatchStatus.ACTIVE.value)

    created_at = Column(String(50), nullable=False)
    updated_at = Column(String(50), nullable=False)

    __table_args__ = (
        UniqueConstraint("job_id", "user_id", name=MATCH_PAIR_CONSTRAINT),
        Index("idx_matches_user_status", "user_id", "status"),
        Index("idx_matches_created_at", "created_at"),
    )

    def to_domain(self) -> Match:
        """Convert ORM model to domain model."""
        return Match(
            id=self.id,
            job_id=self.job_id,
            user_id=self.user_id,
            matched_by=self.matched_by,
            status=MatchStatus(self.status),
            created_at=parse_from_storage(self.created_at),
            updated_at=parse_from_storage(self.updated_at),
        )

    @classmethod
    def from_domain(cls, match: Match) -> "MatchModel":
        """Create ORM model from domain model."""
        return cls(
            id=match.id,
            job_id=match.job_id,
            user_id=match.user_id,
            matched_by=match.matched_by,
            status=MatchStatus(match.status).value,
            created_at=format_for_storage(match.created_at),
            updated_at=format_for_storage(match.updated_at),
        )


def create_schema(engine: Engine) -> None:
    """Create all tables and indexes if they don't exist (idempotent).

    Args:
        engine: SQLAlchemy engine instance
    """
    logger.info("Creating database schema if not exists")

    try:
        Base.metadata.create_all(engine, checkfirst=True)

        tables = inspect(engine).get_table_names()
        logger.info(f"Database schema ready. Tables: {', '.join(tables)}")

    except Exception as e:
        logger.error(f"Failed to create database schema: {e}", exc_info=True)
        raise
