"""Pure statistics functions over a snapshot of users, jobs and matches.

Nothing here touches the store; callers read a consistent snapshot and pass
the lists in.
"""

import math
from datetime import datetime, timedelta
from typing import Iterable, List, Sequence

from job_matching.domain.models import Job, Match, MatchStatus, User, UserRole
from job_matching.utils.timestamps import ensure_utc

from .models import AdminStats, TalentStats

PROFILE_CHECKS = 5


def round_half_up(value: float) -> int:
    """Round to the nearest integer, halves away from zero for positives.

    Python's round() rounds halves to even; dashboards round 0.5 up.

    Example:
        >>> round_half_up(2.5), round(2.5)
        (3, 2)
    """
    return int(math.floor(value + 0.5))


def percentage(part: int, total: int) -> int:
    """part/total as a half-up rounded percent, 0 when total is 0."""
    if total <= 0:
        return 0
    return round_half_up(part / total * 100)


def profile_completeness(user: User) -> int:
    """Share of the five profile checks a user passes, as a percent.

    Checks: name, email and location non-blank; at least one skill; email
    verified. The result is always one of 0, 20, 40, 60, 80, 100.
    """
    passed = sum(
        [
            bool(user.name and user.name.strip()),
            bool(user.email and user.email.strip()),
            bool(user.location and user.location.strip()),
            bool(user.skills),
            bool(user.is_email_verified),
        ]
    )
    return percentage(passed, PROFILE_CHECKS)


def count_matching_jobs(skills: Iterable[str], jobs: Iterable[Job]) -> int:
    """Number of jobs whose required skills share at least one skill.

    Comparison is exact. Returns 0 when skills is empty.
    """
    skill_set = set(skills)
    if not skill_set:
        return 0
    return sum(1 for job in jobs if skill_set.intersection(job.required_skills))


def count_jobs_in_location(location: str, jobs: Iterable[Job]) -> int:
    """Number of jobs whose location contains ``location``, ignoring case.

    The needle is a literal string, not a pattern. An empty location is
    contained in every job location.
    """
    needle = (location or "").casefold()
    return sum(1 for job in jobs if needle in job.location.casefold())


def compute_admin_stats(
    users: Sequence[User], jobs: Sequence[Job], matches: Sequence[Match]
) -> AdminStats:
    """Admin dashboard counts over one snapshot."""
    talents = sum(1 for user in users if user.role == UserRole.TALENT)
    verified = sum(1 for user in users if user.is_email_verified)
    active = sum(1 for match in matches if match.status == MatchStatus.ACTIVE)

    return AdminStats(
        total_jobs=len(jobs),
        total_users=len(users),
        total_talents=talents,
        total_admins=len(users) - talents,
        total_matches=len(matches),
        active_matches=active,
        completed_matches=len(matches) - active,
        verified_users=verified,
        unverified_users=len(users) - verified,
    )


def compute_talent_stats(
    user: User,
    matches: Sequence[Match],
    jobs: Sequence[Job],
    now: datetime,
    recent_window: timedelta,
) -> TalentStats:
    """Talent dashboard metrics over one snapshot.

    Args:
        user: The talent
        matches: The talent's own matches
        jobs: Every job in the store
        now: Reference time for the recent window
        recent_window: How far back a match still counts as recent
    """
    own: List[Match] = [match for match in matches if match.user_id == user.id]
    completed = sum(1 for match in own if match.status == MatchStatus.INACTIVE)
    cutoff = ensure_utc(now) - recent_window

    return TalentStats(
        total_matches=len(own),
        active_matches=len(own) - completed,
        completed_matches=completed,
        recent_matches=sum(1 for match in own if match.created_at >= cutoff),
        total_jobs=len(jobs),
        matching_jobs=count_matching_jobs(user.skills, jobs),
        jobs_in_location=count_jobs_in_location(user.location, jobs),
        match_success_rate=percentage(completed, len(own)),
        profile_completeness=profile_completeness(user),
    )
