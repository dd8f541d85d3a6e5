"""Statistics aggregator: reads a snapshot and hands it to the calculations."""

from datetime import datetime, timedelta
from typing import Optional

from job_matching.domain.exceptions import UserNotFoundError
from job_matching.logging import get_logger
from job_matching.persistence import Database, JobRepository, MatchRepository, UserRepository
from job_matching.utils.timestamps import utc_now

from .calculations import compute_admin_stats, compute_talent_stats
from .models import AdminStats, TalentStats

logger = get_logger(__name__, component="statistics")

DEFAULT_RECENT_WINDOW = timedelta(days=7)


class StatisticsAggregator:
    """Computes dashboard statistics.

    Every call reads users, jobs and matches inside one store transaction, so
    partitions always sum to their totals even while other requests write.
    """

    def __init__(self, database: Database, recent_window: timedelta = DEFAULT_RECENT_WINDOW):
        """Initialize StatisticsAggregator.

        Args:
            database: Initialized entity store
            recent_window: Age below which a match counts as recent
        """
        self.database = database
        self.recent_window = recent_window

    def admin_stats(self) -> AdminStats:
        """System-wide counts for the admin dashboard."""
        with self.database.session() as session:
            users = UserRepository(session).list_all()
            jobs = JobRepository(session).list_all()
            matches = MatchRepository(session).list_all()

        stats = compute_admin_stats(users, jobs, matches)
        logger.debug(
            "Computed admin statistics",
            extra={"event": "stats.admin", **stats.model_dump()},
        )
        return stats

    def talent_stats(self, user_id: str, now: Optional[datetime] = None) -> TalentStats:
        """Dashboard metrics for one talent.

        Args:
            user_id: The talent
            now: Reference time for recent matches (defaults to current UTC time)

        Raises:
            UserNotFoundError: If the user does not exist
        """
        with self.database.session() as session:
            user = UserRepository(session).get_by_id(user_id)
            if user is None:
                raise UserNotFoundError(user_id)

            matches = MatchRepository(session).list_for_user(user_id)
            jobs = JobRepository(session).list_all()

        stats = compute_talent_stats(
            user,
            matches,
            jobs,
            now=now or utc_now(),
            recent_window=self.recent_window,
        )
        logger.debug(
            f"Computed talent statistics for user {user_id}",
            extra={"event": "stats.talent", "user_id": user_id},
        )
        return stats
