"""Job posting use cases."""

from typing import Iterable, List, Optional

from job_matching.domain.exceptions import JobNotFoundError, PreconditionFailedError
from job_matching.domain.models import Job, JobView, normalize_skills
from job_matching.logging import get_logger
from job_matching.persistence import Database, JobRepository
from job_matching.persistence.schema import new_id
from job_matching.utils.timestamps import utc_now

logger = get_logger(__name__, component="postings")

REQUIRED_FIELDS_MESSAGE = "Please provide title, description, and location"


def _validate_fields(
    title: Optional[str],
    description: Optional[str],
    location: Optional[str],
    required_skills: Optional[Iterable[str]],
) -> List[str]:
    for value in (title, description, location):
        if not isinstance(value, str) or not value.strip():
            raise PreconditionFailedError(REQUIRED_FIELDS_MESSAGE)

    if isinstance(required_skills, str):
        raise PreconditionFailedError("requiredSkills must be a list of strings")
    try:
        return normalize_skills(required_skills)
    except (TypeError, ValueError) as e:
        raise PreconditionFailedError("requiredSkills must be a list of strings") from e


class JobPostingService:
    """Create, edit, delete and read job postings.

    Role checks belong to the caller; this service trusts actor_id.
    """

    def __init__(self, database: Database):
        self.database = database

    def create_job(
        self,
        actor_id: str,
        title: str,
        description: str,
        location: str,
        required_skills: Optional[Iterable[str]] = (),
    ) -> JobView:
        """Post a new job.

        Raises:
            PreconditionFailedError: If title, description or location is missing
        """
        skills = _validate_fields(title, description, location, required_skills)
        now = utc_now()

        with self.database.session() as session:
            jobs = JobRepository(session)
            job = jobs.add(
                Job(
                    id=new_id(),
                    title=title,
                    description=description,
                    required_skills=skills,
                    location=location,
                    created_by=actor_id,
                    created_at=now,
                    updated_at=now,
                )
            )
            view = jobs.get_view(job.id)

        logger.info(
            f"Created job {job.id}",
            extra={"event": "job.created", "job_id": job.id, "created_by": actor_id},
        )
        return view

    def update_job(
        self,
        job_id: str,
        title: str,
        description: str,
        location: str,
        required_skills: Optional[Iterable[str]] = (),
    ) -> JobView:
        """Replace the editable fields of a job.

        Raises:
            PreconditionFailedError: If title, description or location is missing
            JobNotFoundError: If the job does not exist
        """
        skills = _validate_fields(title, description, location, required_skills)

        with self.database.session() as session:
            jobs = JobRepository(session)
            existing = jobs.get_by_id(job_id)
            if existing is None:
                raise JobNotFoundError(job_id)

            jobs.save(
                Job(
                    id=existing.id,
                    title=title,
                    description=description,
                    required_skills=skills,
                    location=location,
                    created_by=existing.created_by,
                    created_at=existing.created_at,
                    updated_at=utc_now(),
                )
            )
            view = jobs.get_view(job_id)

        logger.info(f"Updated job {job_id}", extra={"event": "job.updated", "job_id": job_id})
        return view

    def delete_job(self, job_id: str) -> None:
        """Delete a job. Its matches remain, detached from the job.

        Raises:
            JobNotFoundError: If the job does not exist
        """
        with self.database.session() as session:
            if not JobRepository(session).delete(job_id):
                raise JobNotFoundError(job_id)

        logger.info(f"Deleted job {job_id}", extra={"event": "job.deleted", "job_id": job_id})

    def get_job(self, job_id: str) -> JobView:
        """Raises JobNotFoundError when the job does not exist."""
        with self.database.session() as session:
            view = JobRepository(session).get_view(job_id)

        if view is None:
            raise JobNotFoundError(job_id)
        return view

    def list_jobs(self) -> List[JobView]:
        with self.database.session() as session:
            return JobRepository(session).list_views()
