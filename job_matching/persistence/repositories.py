"""Data access layer (repositories) for persistence operations.

Repositories wrap one session and return domain models, never ORM rows. Joined
listings are issued as a single SELECT so the rows of one listing always come
from the same snapshot.
"""

import logging
from typing import List, Optional, Sequence, Tuple

from sqlalchemy import delete, select, update
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session, aliased

from job_matching.domain.models import (
    Job,
    JobView,
    Match,
    MatchStatus,
    MatchView,
    User,
)
from job_matching.utils.timestamps import format_for_storage

from .exceptions import (
    DataIntegrityError,
    DuplicateRecordError,
    PersistenceError,
    RecordNotFoundError,
)
from .schema import (
    MATCH_PAIR_CONSTRAINT,
    USER_EMAIL_CONSTRAINT,
    JobModel,
    MatchModel,
    UserModel,
)

logger = logging.getLogger(__name__)

# Column lists SQLite reports in "UNIQUE constraint failed: <table>.<col>, ..."
_UNIQUE_COLUMNS = {
    USER_EMAIL_CONSTRAINT: "users.email",
    MATCH_PAIR_CONSTRAINT: "matches.job_id, matches.user_id",
}


def _is_unique_violation(error: IntegrityError, constraint: str) -> bool:
    """Whether an IntegrityError was raised by the named unique constraint.

    PostgreSQL and MySQL report the constraint name; SQLite reports the
    column list.
    """
    message = str(error.orig) if error.orig is not None else str(error)
    return constraint in message or f"UNIQUE constraint failed: {_UNIQUE_COLUMNS[constraint]}" in message


class UserRepository:
    """Repository for user accounts."""

    def __init__(self, session: Session):
        """Initialize repository with database session.

        Args:
            session: SQLAlchemy session for database operations
        """
        self.session = session

    def get_by_id(self, user_id: str) -> Optional[User]:
        """Retrieve a user by primary key, or None.

        Raises:
            PersistenceError: If database error occurs
        """
        try:
            user_model = self.session.get(UserModel, user_id)
            return user_model.to_domain() if user_model else None

        except SQLAlchemyError as e:
            logger.error(f"Error retrieving user {user_id}: {e}", exc_info=True)
            raise PersistenceError(f"Failed to retrieve user: {e}") from e

    def get_by_email(self, email: str) -> Optional[User]:
        """Retrieve a user by email (case-insensitive), or None.

        Raises:
            PersistenceError: If database error occurs
        """
        try:
            stmt = select(UserModel).where(UserModel.email == email.strip().lower())
            user_model = self.session.execute(stmt).scalar_one_or_none()
            return user_model.to_domain() if user_model else None

        except SQLAlchemyError as e:
            logger.error(f"Error retrieving user by email: {e}", exc_info=True)
            raise PersistenceError(f"Failed to retrieve user: {e}") from e

    def list_all(self) -> List[User]:
        """All users, oldest first.

        Raises:
            PersistenceError: If database error occurs
        """
        try:
            stmt = select(UserModel).order_by(UserModel.created_at.asc(), UserModel.id)
            return [model.to_domain() for model in self.session.execute(stmt).scalars()]

        except SQLAlchemyError as e:
            logger.error(f"Error listing users: {e}", exc_info=True)
            raise PersistenceError(f"Failed to list users: {e}") from e

    def add(self, user: User) -> User:
        """Insert a new user.

        Raises:
            DuplicateRecordError: If the email is already registered
            DataIntegrityError: On any other constraint violation
            PersistenceError: If database error occurs
        """
        try:
            user_model = UserModel.from_domain(user)
            self.session.add(user_model)
            self.session.flush()
            return user_model.to_domain()

        except IntegrityError as e:
            if _is_unique_violation(e, USER_EMAIL_CONSTRAINT):
                logger.info(
                    "Rejected duplicate email on insert",
                    extra={"event": "user.duplicate_email"},
                )
                raise DuplicateRecordError(
                    "A user with this email already exists", constraint=USER_EMAIL_CONSTRAINT
                ) from e
            logger.error(f"Integrity error inserting user {user.id}: {e}", exc_info=True)
            raise DataIntegrityError(f"Failed to insert user: {e}") from e
        except SQLAlchemyError as e:
            logger.error(f"Error inserting user {user.id}: {e}", exc_info=True)
            raise PersistenceError(f"Failed to insert user: {e}") from e

    def save(self, user: User) -> User:
        """Write every mutable field of an existing user.

        Raises:
            RecordNotFoundError: If the user does not exist
            PersistenceError: If database error occurs
        """
        try:
            existing = self.session.get(UserModel, user.id)
            if existing is None:
                raise RecordNotFoundError(f"User with id {user.id} not found")

            existing.apply(user)
            self.session.flush()
            return existing.to_domain()

        except RecordNotFoundError:
            raise
        except IntegrityError as e:
            logger.error(f"Integrity error saving user {user.id}: {e}", exc_info=True)
            raise DataIntegrityError(f"Failed to save user: {e}") from e
        except SQLAlchemyError as e:
            logger.error(f"Error saving user {user.id}: {e}", exc_info=True)
            raise PersistenceError(f"Failed to save user: {e}") from e


class JobRepository:
    """Repository for job postings."""

    def __init__(self, session: Session):
        """Initialize repository with database session.

        Args:
            session: SQLAlchemy session for database operations
        """
        self.session = session

    def get_by_id(self, job_id: str) -> Optional[Job]:
        """Retrieve a job by primary key, or None.

        Raises:
            PersistenceError: If database error occurs
        """
        try:
            job_model = self.session.get(JobModel, job_id)
            return job_model.to_domain() if job_model else None

        except SQLAlchemyError as e:
            logger.error(f"Error retrieving job {job_id}: {e}", exc_info=True)
            raise PersistenceError(f"Failed to retrieve job: {e}") from e

    def list_all(self) -> List[Job]:
        """All jobs, oldest first.

        Raises:
            PersistenceError: If database error occurs
        """
        try:
            stmt = select(JobModel).order_by(JobModel.created_at.asc(), JobModel.id)
            return [model.to_domain() for model in self.session.execute(stmt).scalars()]

        except SQLAlchemyError as e:
            logger.error(f"Error listing jobs: {e}", exc_info=True)
            raise PersistenceError(f"Failed to list jobs: {e}") from e

    def get_view(self, job_id: str) -> Optional[JobView]:
        """Retrieve a job with its creator resolved, or None.

        Raises:
            PersistenceError: If database error occurs
        """
        views = self._select_views(JobModel.id == job_id)
        return views[0] if views else None

    def list_views(self) -> List[JobView]:
        """All jobs with creators resolved, oldest first.

        Raises:
            PersistenceError: If database error occurs
        """
        return self._select_views(None)

    def _select_views(self, condition) -> List[JobView]:
        try:
            creator = aliased(UserModel)
            stmt = select(JobModel, creator).outerjoin(creator, JobModel.created_by == creator.id)
            if condition is not None:
                stmt = stmt.where(condition)
            stmt = stmt.order_by(JobModel.created_at.asc(), JobModel.id)

            return [
                build_job_view(job_model, creator_model)
                for job_model, creator_model in self.session.execute(stmt).all()
            ]

        except SQLAlchemyError as e:
            logger.error(f"Error retrieving job views: {e}", exc_info=True)
            raise PersistenceError(f"Failed to retrieve jobs: {e}") from e

    def add(self, job: Job) -> Job:
        """Insert a new job.

        Raises:
            DataIntegrityError: If created_by does not reference a user
            PersistenceError: If database error occurs
        """
        try:
            job_model = JobModel.from_domain(job)
            self.session.add(job_model)
            self.session.flush()
            return job_model.to_domain()

        except IntegrityError as e:
            logger.error(f"Integrity error inserting job {job.id}: {e}", exc_info=True)
            raise DataIntegrityError(f"Failed to insert job: {e}") from e
        except SQLAlchemyError as e:
            logger.error(f"Error inserting job {job.id}: {e}", exc_info=True)
            raise PersistenceError(f"Failed to insert job: {e}") from e

    def save(self, job: Job) -> Job:
        """Write the editable fields of an existing job.

        Raises:
            RecordNotFoundError: If the job does not exist
            PersistenceError: If database error occurs
        """
        try:
            existing = self.session.get(JobModel, job.id)
            if existing is None:
                raise RecordNotFoundError(f"Job with id {job.id} not found")

            existing.apply(job)
            self.session.flush()
            return existing.to_domain()

        except RecordNotFoundError:
            raise
        except SQLAlchemyError as e:
            logger.error(f"Error saving job {job.id}: {e}", exc_info=True)
            raise PersistenceError(f"Failed to save job: {e}") from e

    def delete(self, job_id: str) -> bool:
        """Delete a job. Its matches keep existing with job_id set to NULL.

        Returns:
            True if a row was deleted, False if the job did not exist

        Raises:
            PersistenceError: If database error occurs
        """
        try:
            # Detach matches explicitly too, for backends without ON DELETE support
            self.session.execute(
                update(MatchModel).where(MatchModel.job_id == job_id).values(job_id=None)
            )
            result = self.session.execute(delete(JobModel).where(JobModel.id == job_id))
            self.session.flush()
            return result.rowcount > 0

        except SQLAlchemyError as e:
            logger.error(f"Error deleting job {job_id}: {e}", exc_info=True)
            raise PersistenceError(f"Failed to delete job: {e}") from e


class MatchRepository:
    """Repository for job/talent matches."""

    def __init__(self, session: Session):
        """Initialize repository with database session.

        Args:
            session: SQLAlchemy session for database operations
        """
        self.session = session

    def get_by_id(self, match_id: str) -> Optional[Match]:
        """Retrieve a match by primary key, or None.

        Raises:
            PersistenceError: If database error occurs
        """
        try:
            match_model = self.session.get(MatchModel, match_id)
            return match_model.to_domain() if match_model else None

        except SQLAlchemyError as e:
            logger.error(f"Error retrieving match {match_id}: {e}", exc_info=True)
            raise PersistenceError(f"Failed to retrieve match: {e}") from e

    def get_by_pair(self, job_id: str, user_id: str) -> Optional[Match]:
        """Retrieve the match for a (job, user) pair, whatever its status.

        Raises:
            PersistenceError: If database error occurs
        """
        try:
            stmt = select(MatchModel).where(
                MatchModel.job_id == job_id,
                MatchModel.user_id == user_id,
            )
            match_model = self.session.execute(stmt).scalar_one_or_none()
            return match_model.to_domain() if match_model else None

        except SQLAlchemyError as e:
            logger.error(
                f"Error retrieving match for job {job_id}, user {user_id}: {e}", exc_info=True
            )
            raise PersistenceError(f"Failed to retrieve match: {e}") from e

    def list_all(self) -> List[Match]:
        """Every match, oldest first.

        Raises:
            PersistenceError: If database error occurs
        """
        return self._select_matches(None)

    def list_for_user(self, user_id: str) -> List[Match]:
        """All matches of one user, oldest first.

        Raises:
            PersistenceError: If database error occurs
        """
        return self._select_matches(MatchModel.user_id == user_id)

    def _select_matches(self, condition) -> List[Match]:
        try:
            stmt = select(MatchModel)
            if condition is not None:
                stmt = stmt.where(condition)
            stmt = stmt.order_by(MatchModel.created_at.asc(), MatchModel.id)
            return [model.to_domain() for model in self.session.execute(stmt).scalars()]

        except SQLAlchemyError as e:
            logger.error(f"Error listing matches: {e}", exc_info=True)
            raise PersistenceError(f"Failed to list matches: {e}") from e

    def add(self, match: Match) -> Match:
        """Insert a new match.

        Raises:
            DuplicateRecordError: If the (job_id, user_id) pair already exists
            DataIntegrityError: On any other constraint violation
            PersistenceError: If database error occurs
        """
        try:
            match_model = MatchModel.from_domain(match)
            self.session.add(match_model)
            self.session.flush()
            return match_model.to_domain()

        except IntegrityError as e:
            if _is_unique_violation(e, MATCH_PAIR_CONSTRAINT):
                raise DuplicateRecordError(
                    f"Match for job {match.job_id} and user {match.user_id} already exists",
                    constraint=MATCH_PAIR_CONSTRAINT,
                ) from e
            logger.error(f"Integrity error inserting match {match.id}: {e}", exc_info=True)
            raise DataIntegrityError(f"Failed to insert match: {e}") from e
        except SQLAlchemyError as e:
            logger.error(f"Error inserting match {match.id}: {e}", exc_info=True)
            raise PersistenceError(f"Failed to insert match: {e}") from e

    def update_status(self, match_id: str, status: MatchStatus, timestamp) -> None:
        """Set the status of a match.

        Raises:
            RecordNotFoundError: If the match does not exist
            PersistenceError: If database error occurs
        """
        try:
            stmt = (
                update(MatchModel)
                .where(MatchModel.id == match_id)
                .values(status=MatchStatus(status).value, updated_at=format_for_storage(timestamp))
            )
            result = self.session.execute(stmt)
            self.session.flush()

            if result.rowcount == 0:
                raise RecordNotFoundError(f"Match with id {match_id} not found")

        except RecordNotFoundError:
            raise
        except SQLAlchemyError as e:
            logger.error(f"Error updating status for match {match_id}: {e}", exc_info=True)
            raise PersistenceError(f"Failed to update match status: {e}") from e

    def get_view(self, match_id: str, include_user: bool = True) -> Optional[MatchView]:
        """Retrieve one match with job, creator, talent and admin resolved.

        Raises:
            PersistenceError: If database error occurs
        """
        views = self.list_views(match_id=match_id, include_user=include_user)
        return views[0] if views else None

    def list_views(
        self,
        user_id: Optional[str] = None,
        status: Optional[MatchStatus] = None,
        match_id: Optional[str] = None,
        newest_first: bool = False,
        include_user: bool = True,
    ) -> List[MatchView]:
        """List matches joined with their job, job creator, talent and admin.

        Everything comes back from one SELECT. Without newest_first the rows
        are in natural (insertion) order.

        Args:
            user_id: Only matches of this talent
            status: Only matches with this status
            match_id: Only this match
            newest_first: Order by created_at descending
            include_user: Resolve the matched talent into MatchView.user

        Raises:
            PersistenceError: If database error occurs
        """
        try:
            creator = aliased(UserModel)
            talent = aliased(UserModel)
            admin = aliased(UserModel)

            stmt = (
                select(MatchModel, JobModel, creator, talent, admin)
                .outerjoin(JobModel, MatchModel.job_id == JobModel.id)
                .outerjoin(creator, JobModel.created_by == creator.id)
                .outerjoin(talent, MatchModel.user_id == talent.id)
                .outerjoin(admin, MatchModel.matched_by == admin.id)
            )
            if user_id is not None:
                stmt = stmt.where(MatchModel.user_id == user_id)
            if status is not None:
                stmt = stmt.where(MatchModel.status == MatchStatus(status).value)
            if match_id is not None:
                stmt = stmt.where(MatchModel.id == match_id)

            if newest_first:
                stmt = stmt.order_by(MatchModel.created_at.desc(), MatchModel.id.desc())
            else:
                stmt = stmt.order_by(MatchModel.created_at.asc(), MatchModel.id)

            return [
                build_match_view(row, include_user=include_user)
                for row in self.session.execute(stmt).all()
            ]

        except SQLAlchemyError as e:
            logger.error(f"Error listing match views: {e}", exc_info=True)
            raise PersistenceError(f"Failed to list matches: {e}") from e


def build_job_view(job_model: JobModel, creator_model: Optional[UserModel]) -> JobView:
    """Project a job row and its creator row into a JobView."""
    job = job_model.to_domain()
    return JobView(
        id=job.id,
        title=job.title,
        description=job.description,
        required_skills=job.required_skills,
        location=job.location,
        created_by=creator_model.to_domain().to_summary() if creator_model else None,
        created_at=job.created_at,
        updated_at=job.updated_at,
    )


def build_match_view(
    row: Sequence[Optional[object]], include_user: bool = True
) -> MatchView:
    """Project a (match, job, creator, talent, admin) row into a MatchView."""
    match_model, job_model, creator_model, talent_model, admin_model = row
    match = match_model.to_domain()
    return MatchView(
        id=match.id,
        job_id=match.job_id,
        user_id=match.user_id,
        status=match.status,
        job=build_job_view(job_model, creator_model) if job_model is not None else None,
        user=talent_model.to_domain().to_talent_summary()
        if include_user and talent_model is not None
        else None,
        matched_by=admin_model.to_domain().to_summary() if admin_model is not None else None,
        created_at=match.created_at,
        updated_at=match.updated_at,
    )
