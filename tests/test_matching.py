"""Tests for the matching engine.

Covers:
- Precondition order (job, user, role, duplicate)
- One match per (job, user) pair, whatever its status
- Race on the unique constraint surfacing as DuplicateMatchError
- Two threads racing for the same pair on a file-backed store
- Talent and admin listings
- Completing matches
"""

import logging
import threading
from unittest.mock import patch

import pytest

from job_matching.domain.exceptions import (
    DuplicateMatchError,
    InvalidRoleError,
    JobNotFoundError,
    MatchNotFoundError,
    PreconditionFailedError,
    UserNotFoundError,
)
from job_matching.domain.models import MatchStatus, MatchView
from job_matching.matching import MatchingEngine
from job_matching.persistence import Database, MatchRepository
from job_matching.postings import JobPostingService
from tests.helpers import add_admin, add_job, add_match, add_user, days_ago


@pytest.fixture
def engine(database):
    return MatchingEngine(database)


@pytest.fixture
def admin(database):
    return add_admin(database, name="Grace", email="grace@example.com")


@pytest.fixture
def talent(database):
    return add_user(database, name="Ada", email="ada@example.com", skills=["React"])


@pytest.fixture
def job(database, admin):
    return add_job(database, created_by=admin.id, title="Frontend Engineer")


def count_matches(database):
    with database.session() as session:
        return len(MatchRepository(session).list_all())


class TestCreateMatch:
    """Tests for MatchingEngine.create_match."""

    def test_create_match_returns_joined_view(self, engine, admin, talent, job):
        view = engine.create_match(job.id, talent.id, actor_id=admin.id)

        assert view.status == MatchStatus.ACTIVE
        assert view.job.id == job.id
        assert view.job.title == "Frontend Engineer"
        assert view.job.created_by.email == "grace@example.com"
        assert view.user.name == "Ada"
        assert view.user.skills == ["React"]
        assert view.matched_by.id == admin.id

    def test_create_match_logs_event(self, engine, admin, talent, job, caplog):
        with caplog.at_level(logging.INFO, logger="job_matching.matching.engine"):
            engine.create_match(job.id, talent.id, actor_id=admin.id)

        events = [getattr(record, "event", None) for record in caplog.records]
        assert "match.created" in events

    def test_second_create_for_same_pair_fails(self, engine, database, admin, talent, job):
        engine.create_match(job.id, talent.id, actor_id=admin.id)

        with pytest.raises(DuplicateMatchError) as exc_info:
            engine.create_match(job.id, talent.id, actor_id=admin.id)

        assert exc_info.value.message == "User is already matched to this job"
        assert count_matches(database) == 1

    def test_completed_pair_cannot_be_rematched(self, engine, database, admin, talent, job):
        view = engine.create_match(job.id, talent.id, actor_id=admin.id)
        engine.complete_match(view.id, actor_id=admin.id)

        with pytest.raises(DuplicateMatchError):
            engine.create_match(job.id, talent.id, actor_id=admin.id)

        assert count_matches(database) == 1

    def test_admin_user_cannot_be_matched(self, engine, database, admin, job):
        other_admin = add_admin(database)

        with pytest.raises(InvalidRoleError):
            engine.create_match(job.id, other_admin.id, actor_id=admin.id)

        assert count_matches(database) == 0

    def test_missing_job(self, engine, admin, talent):
        with pytest.raises(JobNotFoundError):
            engine.create_match("missing-job", talent.id, actor_id=admin.id)

    def test_missing_user(self, engine, admin, job):
        with pytest.raises(UserNotFoundError):
            engine.create_match(job.id, "missing-user", actor_id=admin.id)

    def test_missing_job_reported_before_missing_user(self, engine, admin):
        with pytest.raises(JobNotFoundError):
            engine.create_match("missing-job", "missing-user", actor_id=admin.id)

    @pytest.mark.parametrize("job_id, user_id", [("", "u"), ("j", ""), (None, "u"), ("j", None)])
    def test_missing_ids_fail_precondition(self, engine, job_id, user_id):
        with pytest.raises(PreconditionFailedError):
            engine.create_match(job_id, user_id, actor_id="admin")

    def test_lost_race_is_reported_as_duplicate(self, engine, database, admin, talent, job):
        """A concurrent insert that slips past the pre-check hits the unique constraint."""
        add_match(database, job.id, talent.id, admin.id)

        with patch.object(MatchRepository, "get_by_pair", return_value=None):
            with pytest.raises(DuplicateMatchError):
                engine.create_match(job.id, talent.id, actor_id=admin.id)

        assert count_matches(database) == 1


class TestConcurrentCreateMatch:
    """Threads racing to match the same pair against a file-backed store."""

    @pytest.fixture
    def file_database(self, tmp_path):
        db = Database(f"sqlite:///{tmp_path / 'matching.db'}").initialize()
        yield db
        db.close()

    def race(self, database, attempts, job_id, user_id, actor_id):
        engine = MatchingEngine(database)
        barrier = threading.Barrier(attempts)
        outcomes = []

        def attempt():
            barrier.wait()
            try:
                outcomes.append(engine.create_match(job_id, user_id, actor_id=actor_id))
            except Exception as e:
                outcomes.append(e)

        threads = [threading.Thread(target=attempt) for _ in range(attempts)]
        for thread in threads:
            thread.start()
        for thread in threads:
            thread.join(timeout=60)

        return outcomes

    @pytest.mark.parametrize("attempts", [2, 4])
    def test_exactly_one_writer_wins(self, file_database, attempts):
        admin = add_admin(file_database)
        talent = add_user(file_database)
        job = add_job(file_database, created_by=admin.id)

        outcomes = self.race(file_database, attempts, job.id, talent.id, admin.id)

        created = [o for o in outcomes if isinstance(o, MatchView)]
        rejected = [o for o in outcomes if isinstance(o, DuplicateMatchError)]
        assert len(outcomes) == attempts
        assert len(created) == 1
        assert len(rejected) == attempts - 1
        assert count_matches(file_database) == 1


class TestListMatches:
    """Tests for talent and admin listings."""

    @pytest.fixture
    def two_matches(self, database, admin, talent):
        older_job = add_job(database, created_by=admin.id, title="Older")
        newer_job = add_job(database, created_by=admin.id, title="Newer")
        older = add_match(database, older_job.id, talent.id, admin.id, created_at=days_ago(5))
        newer = add_match(
            database,
            newer_job.id,
            talent.id,
            admin.id,
            created_at=days_ago(1),
            status=MatchStatus.INACTIVE,
        )
        return older, newer

    def test_active_only_listing(self, engine, talent, two_matches):
        older, _ = two_matches

        views = engine.list_matches_for_talent(talent.id, include_inactive=False)

        assert [v.id for v in views] == [older.id]
        assert views[0].user is None
        assert views[0].job.title == "Older"
        assert views[0].matched_by.name == "Grace"

    def test_full_listing_is_newest_first(self, engine, talent, two_matches):
        older, newer = two_matches

        views = engine.list_matches_for_talent(talent.id, include_inactive=True)

        assert [v.id for v in views] == [newer.id, older.id]

    def test_listing_only_contains_own_matches(self, engine, database, admin, talent, job):
        other = add_user(database)
        add_match(database, job.id, other.id, admin.id)

        assert engine.list_matches_for_talent(talent.id, include_inactive=True) == []

    def test_list_all_matches_joins_user(self, engine, database, admin, talent, job):
        other = add_user(database, name="Linus")
        add_match(database, job.id, talent.id, admin.id)
        add_match(database, job.id, other.id, admin.id)

        views = engine.list_all_matches()

        assert sorted(v.user.name for v in views) == ["Ada", "Linus"]
        assert all(v.job.created_by.name == "Grace" for v in views)

    def test_listing_survives_job_deletion(self, engine, database, admin, talent, job):
        add_match(database, job.id, talent.id, admin.id)
        JobPostingService(database).delete_job(job.id)

        (view,) = engine.list_all_matches()
        assert view.job is None
        assert view.job_id is None


class TestCompleteMatch:
    """Tests for MatchingEngine.complete_match."""

    def test_complete_marks_inactive(self, engine, admin, talent, job):
        created = engine.create_match(job.id, talent.id, actor_id=admin.id)

        completed = engine.complete_match(created.id, actor_id=admin.id)

        assert completed.status == MatchStatus.INACTIVE
        assert engine.get_match(created.id).status == MatchStatus.INACTIVE

    def test_complete_twice_is_a_no_op(self, engine, admin, talent, job):
        created = engine.create_match(job.id, talent.id, actor_id=admin.id)
        first = engine.complete_match(created.id, actor_id=admin.id)

        second = engine.complete_match(created.id, actor_id=admin.id)

        assert second.status == MatchStatus.INACTIVE
        assert second.updated_at == first.updated_at

    def test_complete_missing_match(self, engine):
        with pytest.raises(MatchNotFoundError):
            engine.complete_match("missing", actor_id="admin")

    def test_get_missing_match(self, engine):
        with pytest.raises(MatchNotFoundError):
            engine.get_match("missing")
