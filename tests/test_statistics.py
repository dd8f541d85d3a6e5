"""Tests for dashboard statistics."""

import itertools
from datetime import timedelta

import pytest

from job_matching.domain.exceptions import UserNotFoundError
from job_matching.domain.models import MatchStatus
from job_matching.statistics import (
    StatisticsAggregator,
    compute_admin_stats,
    compute_talent_stats,
    count_jobs_in_location,
    count_matching_jobs,
    profile_completeness,
    round_half_up,
)
from tests.helpers import (
    FIXED_NOW,
    add_admin,
    add_job,
    add_match,
    add_user,
    days_ago,
    make_admin,
    make_job,
    make_match,
    make_user,
)

WEEK = timedelta(days=7)


class TestRounding:
    """Half-up rounding used by percentages."""

    @pytest.mark.parametrize(
        "value, expected",
        [(0.0, 0), (0.5, 1), (1.5, 2), (2.5, 3), (33.333, 33), (66.666, 67), (99.5, 100)],
    )
    def test_round_half_up(self, value, expected):
        assert round_half_up(value) == expected


class TestProfileCompleteness:
    """profile_completeness() scoring."""

    def test_name_email_location_only(self):
        user = make_user(name="Ada", email="ada@example.com", location="Austin", skills=[])
        assert profile_completeness(user) == 60

    def test_fully_populated_and_verified(self):
        user = make_user(skills=["React"], is_email_verified=True)
        assert profile_completeness(user) == 100

    def test_only_name(self):
        user = make_user(name="Ada", email="", location="", skills=[])
        assert profile_completeness(user) == 20

    def test_empty_profile(self):
        user = make_user(name="  ", email="", location=" ", skills=[])
        assert profile_completeness(user) == 0

    def test_score_is_always_a_multiple_of_twenty(self):
        for name, location, skills, verified in itertools.product(
            ["", "Ada"], ["", "Austin"], [[], ["React"]], [False, True]
        ):
            user = make_user(
                name=name, location=location, skills=skills, is_email_verified=verified
            )
            assert profile_completeness(user) in {0, 20, 40, 60, 80, 100}


class TestSkillAndLocationCounts:
    """Skill intersection and location substring counting."""

    def test_matching_jobs_zero_without_skills(self):
        jobs = [make_job(required_skills=["React"])]
        assert count_matching_jobs([], jobs) == 0

    def test_matching_jobs_counts_each_job_once(self):
        jobs = [
            make_job(required_skills=["React", "Node"]),
            make_job(required_skills=["Go"]),
            make_job(required_skills=[]),
        ]
        assert count_matching_jobs(["React", "Node"], jobs) == 1

    def test_matching_jobs_is_case_sensitive(self):
        jobs = [make_job(required_skills=["react"])]
        assert count_matching_jobs(["React"], jobs) == 0

    def test_location_substring_ignores_case(self):
        jobs = [make_job(location="Austin, TX"), make_job(location="Boston, MA")]
        assert count_jobs_in_location("austin", jobs) == 1

    def test_location_is_literal_not_pattern(self):
        jobs = [make_job(location="Austin, TX")]
        assert count_jobs_in_location("A.*n", jobs) == 0

    def test_empty_location_matches_every_job(self):
        jobs = [make_job(location="Austin, TX"), make_job(location="Remote")]
        assert count_jobs_in_location("", jobs) == 2


class TestComputeAdminStats:
    """compute_admin_stats() partitions."""

    def test_empty_store(self):
        stats = compute_admin_stats([], [], [])
        assert stats.total_users == 0
        assert stats.total_matches == 0
        assert stats.unverified_users == 0

    def test_partitions_sum_to_totals(self):
        users = [
            make_admin(is_email_verified=True),
            make_user(is_email_verified=True),
            make_user(),
            make_user(),
        ]
        matches = [
            make_match(status=MatchStatus.ACTIVE),
            make_match(status=MatchStatus.INACTIVE),
            make_match(status=MatchStatus.INACTIVE),
        ]
        jobs = [make_job(), make_job()]

        stats = compute_admin_stats(users, jobs, matches)

        assert stats.total_jobs == 2
        assert stats.total_users == 4
        assert (stats.total_talents, stats.total_admins) == (3, 1)
        assert (stats.active_matches, stats.completed_matches) == (1, 2)
        assert (stats.verified_users, stats.unverified_users) == (2, 2)
        assert stats.total_talents + stats.total_admins == stats.total_users
        assert stats.active_matches + stats.completed_matches == stats.total_matches
        assert stats.verified_users + stats.unverified_users == stats.total_users

    def test_serializes_camel_case(self):
        payload = compute_admin_stats([], [], []).to_json_dict()
        assert set(payload) == {
            "totalJobs",
            "totalUsers",
            "totalTalents",
            "totalAdmins",
            "totalMatches",
            "activeMatches",
            "completedMatches",
            "verifiedUsers",
            "unverifiedUsers",
        }


class TestComputeTalentStats:
    """compute_talent_stats() metrics."""

    def stats_for(self, user, matches=(), jobs=()):
        return compute_talent_stats(user, list(matches), list(jobs), FIXED_NOW, WEEK)

    def test_success_rate_zero_without_matches(self):
        assert self.stats_for(make_user()).match_success_rate == 0

    def test_success_rate_hundred_when_all_completed(self):
        user = make_user()
        matches = [make_match(user_id=user.id, status=MatchStatus.INACTIVE) for _ in range(3)]
        assert self.stats_for(user, matches).match_success_rate == 100

    def test_success_rate_fifty_for_one_of_two(self):
        user = make_user()
        matches = [
            make_match(user_id=user.id, status=MatchStatus.INACTIVE),
            make_match(user_id=user.id, status=MatchStatus.ACTIVE),
        ]
        assert self.stats_for(user, matches).match_success_rate == 50

    def test_success_rate_rounds_half_up(self):
        user = make_user()
        statuses = [MatchStatus.INACTIVE] + [MatchStatus.ACTIVE] * 7
        matches = [make_match(user_id=user.id, status=s) for s in statuses]
        # 1/8 = 12.5%
        assert self.stats_for(user, matches).match_success_rate == 13

    def test_skill_and_location_example(self):
        user = make_user(skills=["React"], location="Austin")
        jobs = [make_job(required_skills=["React", "Node"], location="Austin, TX")]

        stats = self.stats_for(user, jobs=jobs)

        assert stats.total_jobs == 1
        assert stats.matching_jobs == 1
        assert stats.jobs_in_location == 1

    def test_matching_jobs_zero_with_empty_skills(self):
        user = make_user(skills=[])
        jobs = [make_job(required_skills=["React"])]
        assert self.stats_for(user, jobs=jobs).matching_jobs == 0

    def test_recent_matches_use_window(self):
        user = make_user()
        matches = [
            make_match(user_id=user.id, created_at=days_ago(1)),
            make_match(user_id=user.id, created_at=days_ago(7)),
            make_match(user_id=user.id, created_at=days_ago(8)),
        ]
        stats = self.stats_for(user, matches)
        assert stats.recent_matches == 2
        assert stats.total_matches == 3

    def test_other_users_matches_are_ignored(self):
        user = make_user()
        matches = [make_match(user_id="someone-else")]
        assert self.stats_for(user, matches).total_matches == 0


class TestStatisticsAggregator:
    """StatisticsAggregator over a real store."""

    @pytest.fixture
    def populated(self, database):
        admin = add_admin(database, is_email_verified=True)
        talent = add_user(
            database, skills=["React"], location="Austin", is_email_verified=True
        )
        other = add_user(database, skills=[], location="Denver")
        austin = add_job(
            database, created_by=admin.id, required_skills=["React", "Node"], location="Austin, TX"
        )
        remote = add_job(database, created_by=admin.id, required_skills=["Go"], location="Remote")
        add_match(database, austin.id, talent.id, admin.id, created_at=days_ago(2))
        add_match(
            database,
            remote.id,
            talent.id,
            admin.id,
            created_at=days_ago(10),
            status=MatchStatus.INACTIVE,
        )
        add_match(database, austin.id, other.id, admin.id, created_at=days_ago(1))
        return admin, talent, other

    def test_admin_stats(self, database, populated):
        stats = StatisticsAggregator(database).admin_stats()

        assert stats.total_jobs == 2
        assert stats.total_users == 3
        assert stats.total_talents == 2
        assert stats.total_admins == 1
        assert stats.total_matches == 3
        assert stats.active_matches == 2
        assert stats.completed_matches == 1
        assert stats.verified_users == 2
        assert stats.unverified_users == 1

    def test_talent_stats(self, database, populated):
        _, talent, _ = populated

        stats = StatisticsAggregator(database).talent_stats(talent.id, now=FIXED_NOW)

        assert stats.total_matches == 2
        assert stats.active_matches == 1
        assert stats.completed_matches == 1
        assert stats.recent_matches == 1
        assert stats.total_jobs == 2
        assert stats.matching_jobs == 1
        assert stats.jobs_in_location == 1
        assert stats.match_success_rate == 50
        assert stats.profile_completeness == 100

    def test_talent_stats_custom_window(self, database, populated):
        _, talent, _ = populated

        aggregator = StatisticsAggregator(database, recent_window=timedelta(days=30))

        assert aggregator.talent_stats(talent.id, now=FIXED_NOW).recent_matches == 2

    def test_talent_stats_without_skills(self, database, populated):
        _, _, other = populated

        stats = StatisticsAggregator(database).talent_stats(other.id, now=FIXED_NOW)

        assert stats.matching_jobs == 0
        assert stats.jobs_in_location == 0
        assert stats.profile_completeness == 60

    def test_match_counts_survive_job_deletion(self, database, populated):
        from job_matching.postings import JobPostingService

        before = StatisticsAggregator(database).admin_stats()
        for job in JobPostingService(database).list_jobs():
            JobPostingService(database).delete_job(job.id)
        after = StatisticsAggregator(database).admin_stats()

        assert after.total_jobs == 0
        assert after.total_matches == before.total_matches

    def test_unknown_user(self, database):
        with pytest.raises(UserNotFoundError):
            StatisticsAggregator(database).talent_stats("missing")

