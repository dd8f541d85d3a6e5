"""Matching engine: creates, lists and completes job/talent matches.

This module implements the matching rules:
1. A match links one existing job to one existing Talent
2. At most one match per (job, user) pair ever exists, whatever its status
3. A match moves from Active to Inactive when completed, never back
"""

from typing import List, Optional

from job_matching.domain.exceptions import (
    DuplicateMatchError,
    InvalidRoleError,
    JobNotFoundError,
    MatchNotFoundError,
    PreconditionFailedError,
    UserNotFoundError,
)
from job_matching.domain.models import Match, MatchStatus, MatchView, UserRole
from job_matching.logging import get_logger
from job_matching.persistence import (
    Database,
    DuplicateRecordError,
    JobRepository,
    MatchRepository,
    UserRepository,
)
from job_matching.persistence.schema import new_id
from job_matching.utils.timestamps import utc_now

logger = get_logger(__name__, component="matching")


class MatchingEngine:
    """Use cases over matches.

    Each public method runs in exactly one store transaction, so every read it
    makes sees the same snapshot. The engine keeps no state between calls.

    Example:
        >>> engine = MatchingEngine(database)
        >>> view = engine.create_match(job_id, talent_id, actor_id=admin_id)
        >>> view.status
        <MatchStatus.ACTIVE: 'Active'>
    """

    def __init__(self, database: Database):
        """Initialize MatchingEngine.

        Args:
            database: Initialized entity store
        """
        self.database = database

    def create_match(self, job_id: str, user_id: str, actor_id: str) -> MatchView:
        """Match a talent to a job.

        Checks run in a fixed order: job exists, user exists, user is a
        Talent, pair not already matched. The pair check is only a fast path;
        the store's unique constraint decides when two callers race.

        Args:
            job_id: Job to match
            user_id: Talent to match
            actor_id: Admin creating the match

        Returns:
            The new match with job, job creator, talent and admin joined

        Raises:
            PreconditionFailedError: If job_id or user_id is missing
            JobNotFoundError: If the job does not exist
            UserNotFoundError: If the user does not exist
            InvalidRoleError: If the user is not a Talent
            DuplicateMatchError: If the pair is already matched
        """
        if not job_id or not user_id:
            raise PreconditionFailedError("Please provide jobId and userId")

        try:
            with self.database.session(immediate=True) as session:
                jobs = JobRepository(session)
                users = UserRepository(session)
                matches = MatchRepository(session)

                if jobs.get_by_id(job_id) is None:
                    raise JobNotFoundError(job_id)

                user = users.get_by_id(user_id)
                if user is None:
                    raise UserNotFoundError(user_id)

                if user.role != UserRole.TALENT:
                    raise InvalidRoleError(
                        "User must be a Talent to be matched", user_id=user_id, role=user.role.value
                    )

                if matches.get_by_pair(job_id, user_id) is not None:
                    raise DuplicateMatchError(job_id, user_id)

                now = utc_now()
                match = matches.add(
                    Match(
                        id=new_id(),
                        job_id=job_id,
                        user_id=user_id,
                        matched_by=actor_id,
                        status=MatchStatus.ACTIVE,
                        created_at=now,
                        updated_at=now,
                    )
                )
                view = matches.get_view(match.id)

        except DuplicateMatchError:
            logger.info(
                f"Rejected duplicate match for job {job_id} and user {user_id}",
                extra={"event": "match.duplicate", "job_id": job_id, "user_id": user_id},
            )
            raise
        except DuplicateRecordError as e:
            # Lost the race to a concurrent writer of the same pair
            logger.info(
                f"Rejected duplicate match for job {job_id} and user {user_id} at insert",
                extra={"event": "match.duplicate", "job_id": job_id, "user_id": user_id},
            )
            raise DuplicateMatchError(job_id, user_id) from e

        logger.info(
            f"Matched user {user_id} to job {job_id}",
            extra={
                "event": "match.created",
                "match_id": view.id,
                "job_id": job_id,
                "user_id": user_id,
                "matched_by": actor_id,
            },
        )
        return view

    def list_matches_for_talent(
        self, user_id: str, include_inactive: bool = False
    ) -> List[MatchView]:
        """Matches of one talent, with job, job creator and admin joined.

        Args:
            user_id: The talent whose matches to list
            include_inactive: False returns Active matches in store order;
                True returns every match, newest first

        Returns:
            List of MatchView with ``user`` left unset
        """
        with self.database.session() as session:
            if include_inactive:
                return MatchRepository(session).list_views(
                    user_id=user_id, newest_first=True, include_user=False
                )
            return MatchRepository(session).list_views(
                user_id=user_id, status=MatchStatus.ACTIVE, include_user=False
            )

    def list_all_matches(self) -> List[MatchView]:
        """Every match, fully joined, in store order."""
        with self.database.session() as session:
            return MatchRepository(session).list_views()

    def get_match(self, match_id: str) -> MatchView:
        """Look up one match, fully joined.

        Raises:
            MatchNotFoundError: If the match does not exist
        """
        with self.database.session() as session:
            view = MatchRepository(session).get_view(match_id)

        if view is None:
            raise MatchNotFoundError(match_id)
        return view

    def complete_match(self, match_id: str, actor_id: Optional[str] = None) -> MatchView:
        """Mark a match as completed (Active to Inactive).

        Completing a match that is already Inactive changes nothing and
        returns it as is.

        Raises:
            MatchNotFoundError: If the match does not exist
        """
        with self.database.session() as session:
            matches = MatchRepository(session)

            match = matches.get_by_id(match_id)
            if match is None:
                raise MatchNotFoundError(match_id)

            if match.status == MatchStatus.INACTIVE:
                logger.info(
                    f"Match {match_id} already completed",
                    extra={"event": "match.already_completed", "match_id": match_id},
                )
                return matches.get_view(match_id)

            matches.update_status(match_id, MatchStatus.INACTIVE, utc_now())
            view = matches.get_view(match_id)

        logger.info(
            f"Completed match {match_id}",
            extra={
                "event": "match.completed",
                "match_id": match_id,
                "user_id": view.user_id,
                "completed_by": actor_id,
            },
        )
        return view
