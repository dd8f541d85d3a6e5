"""Dashboard statistics models."""

from pydantic import Field

from job_matching.domain.models import DomainModel


class AdminStats(DomainModel):
    """System-wide counts for the admin dashboard.

    talents/admins partition users by role, active/completed partition
    matches by status, verified/unverified partition users by email state.
    """

    total_jobs: int = Field(..., ge=0)
    total_users: int = Field(..., ge=0)
    total_talents: int = Field(..., ge=0)
    total_admins: int = Field(..., ge=0)
    total_matches: int = Field(..., ge=0)
    active_matches: int = Field(..., ge=0)
    completed_matches: int = Field(..., ge=0)
    verified_users: int = Field(..., ge=0)
    unverified_users: int = Field(..., ge=0)


class TalentStats(DomainModel):
    """Per-talent dashboard metrics."""

    total_matches: int = Field(..., ge=0)
    active_matches: int = Field(..., ge=0)
    completed_matches: int = Field(..., ge=0)
    recent_matches: int = Field(..., ge=0, description="Matches created inside the recent window")
    total_jobs: int = Field(..., ge=0)
    matching_jobs: int = Field(..., ge=0, description="Jobs sharing at least one skill")
    jobs_in_location: int = Field(..., ge=0)
    match_success_rate: int = Field(..., ge=0, le=100, description="Completed share, percent")
    profile_completeness: int = Field(..., ge=0, le=100, description="Percent of profile checks passed")
