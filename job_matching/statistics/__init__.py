"""Dashboard statistics for admins and talents.

This module provides:
- StatisticsAggregator: reads a snapshot from the store and computes stats
- AdminStats, TalentStats: result models (camelCase on the wire)
- Pure calculation helpers usable without a store
"""

from .aggregator import DEFAULT_RECENT_WINDOW, StatisticsAggregator
from .calculations import (
    compute_admin_stats,
    compute_talent_stats,
    count_jobs_in_location,
    count_matching_jobs,
    percentage,
    profile_completeness,
    round_half_up,
)
from .models import AdminStats, TalentStats

__all__ = [
    "StatisticsAggregator",
    "DEFAULT_RECENT_WINDOW",
    "AdminStats",
    "TalentStats",
    "compute_admin_stats",
    "compute_talent_stats",
    "count_matching_jobs",
    "count_jobs_in_location",
    "percentage",
    "profile_completeness",
    "round_half_up",
]
