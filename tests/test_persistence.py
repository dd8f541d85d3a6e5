"""Unit tests for persistence layer."""

import pytest
from sqlalchemy import text

from job_matching.domain.models import MatchStatus
from job_matching.persistence import (
    Database,
    DatabaseConnectionError,
    DataIntegrityError,
    DuplicateRecordError,
    JobRepository,
    MatchRepository,
    RecordNotFoundError,
    UserRepository,
    init_database,
)
from job_matching.persistence.schema import MATCH_PAIR_CONSTRAINT, USER_EMAIL_CONSTRAINT
from tests.helpers import (
    FIXED_NOW,
    add_admin,
    add_job,
    add_match,
    add_user,
    days_ago,
    make_job,
    make_user,
)


class TestDatabaseInitialization:
    """Tests for database initialization."""

    def test_init_database_creates_file_and_parent_directories(self, tmp_path):
        db_file = tmp_path / "subdir" / "nested" / "test.db"

        database = init_database(f"sqlite:///{db_file}")

        assert db_file.exists()
        with database.session() as session:
            assert session.execute(text("SELECT 1")).scalar_one() == 1

        database.close()

    def test_in_memory_database_is_shared_across_sessions(self, database):
        user = add_user(database)

        with database.session() as session:
            assert UserRepository(session).get_by_id(user.id) is not None

    def test_invalid_url_raises_error(self):
        with pytest.raises(DatabaseConnectionError):
            Database("").initialize()

        with pytest.raises(DatabaseConnectionError):
            Database(None).initialize()

    def test_session_before_initialize_raises_error(self):
        with pytest.raises(DatabaseConnectionError):
            with Database("sqlite:///:memory:").session():
                pass

    def test_schema_creation_is_idempotent(self, tmp_path):
        url = f"sqlite:///{tmp_path / 'test.db'}"

        first = init_database(url)
        add_user(first, email="keep@example.com")
        first.close()

        second = init_database(url)
        with second.session() as session:
            assert UserRepository(session).get_by_email("keep@example.com") is not None
        second.close()

    def test_foreign_keys_are_enforced(self, database):
        with pytest.raises(DataIntegrityError):
            with database.session() as session:
                JobRepository(session).add(make_job(created_by="missing-admin"))

    def test_session_rolls_back_on_error(self, database):
        with pytest.raises(RuntimeError):
            with database.session() as session:
                UserRepository(session).add(make_user(email="rollback@example.com"))
                raise RuntimeError("boom")

        with database.session() as session:
            assert UserRepository(session).get_by_email("rollback@example.com") is None

    def test_close_is_idempotent(self):
        database = init_database("sqlite:///:memory:")
        database.close()
        database.close()
        assert database.is_initialized is False


class TestUserRepository:
    """Tests for UserRepository."""

    def test_add_and_get_round_trip(self, database):
        user = add_user(database, skills=["React", "Node"], is_email_verified=True)

        with database.session() as session:
            loaded = UserRepository(session).get_by_id(user.id)

        assert loaded.email == user.email
        assert loaded.skills == ["React", "Node"]
        assert loaded.is_email_verified is True
        assert loaded.password_hash == user.password_hash
        assert loaded.created_at == FIXED_NOW

    def test_get_by_email_is_case_insensitive(self, database):
        add_user(database, email="Ada@Example.com")

        with database.session() as session:
            assert UserRepository(session).get_by_email("  ADA@example.COM ") is not None

    def test_missing_user_returns_none(self, database):
        with database.session() as session:
            assert UserRepository(session).get_by_id("nope") is None

    def test_duplicate_email_raises_duplicate_record(self, database):
        add_user(database, email="taken@example.com")

        with pytest.raises(DuplicateRecordError) as exc_info:
            add_user(database, email="taken@example.com")

        assert exc_info.value.constraint == USER_EMAIL_CONSTRAINT

    def test_save_updates_fields(self, database):
        user = add_user(database)

        with database.session() as session:
            UserRepository(session).save(user.model_copy(update={"location": "Denver"}))

        with database.session() as session:
            assert UserRepository(session).get_by_id(user.id).location == "Denver"

    def test_save_missing_user_raises(self, database):
        with pytest.raises(RecordNotFoundError):
            with database.session() as session:
                UserRepository(session).save(make_user())


class TestJobRepository:
    """Tests for JobRepository."""

    def test_get_view_resolves_creator(self, database):
        admin = add_admin(database, name="Grace", email="grace@example.com")
        job = add_job(database, created_by=admin.id)

        with database.session() as session:
            view = JobRepository(session).get_view(job.id)

        assert view.title == job.title
        assert view.created_by.name == "Grace"
        assert view.created_by.email == "grace@example.com"

    def test_list_views_in_insertion_order(self, database):
        admin = add_admin(database)
        first = add_job(database, created_by=admin.id, created_at=days_ago(2))
        second = add_job(database, created_by=admin.id, created_at=days_ago(1))

        with database.session() as session:
            views = JobRepository(session).list_views()

        assert [v.id for v in views] == [first.id, second.id]

    def test_delete_keeps_matches_with_null_job(self, database):
        admin = add_admin(database)
        talent = add_user(database)
        job = add_job(database, created_by=admin.id)
        match = add_match(database, job.id, talent.id, admin.id)

        with database.session() as session:
            assert JobRepository(session).delete(job.id) is True

        with database.session() as session:
            survivor = MatchRepository(session).get_by_id(match.id)
            view = MatchRepository(session).get_view(match.id)

        assert survivor.job_id is None
        assert view.job is None
        assert view.user.id == talent.id

    def test_delete_missing_job_returns_false(self, database):
        with database.session() as session:
            assert JobRepository(session).delete("missing") is False


class TestMatchRepository:
    """Tests for MatchRepository."""

    @pytest.fixture
    def seeded(self, database):
        admin = add_admin(database, name="Grace", email="grace@example.com")
        talent = add_user(database, name="Ada", email="ada@example.com")
        job = add_job(database, created_by=admin.id)
        return admin, talent, job

    def test_duplicate_pair_raises_duplicate_record(self, database, seeded):
        admin, talent, job = seeded
        add_match(database, job.id, talent.id, admin.id)

        with pytest.raises(DuplicateRecordError) as exc_info:
            add_match(database, job.id, talent.id, admin.id, status=MatchStatus.INACTIVE)

        assert exc_info.value.constraint == MATCH_PAIR_CONSTRAINT

        with database.session() as session:
            assert len(MatchRepository(session).list_all()) == 1

    def test_get_by_pair(self, database, seeded):
        admin, talent, job = seeded
        match = add_match(database, job.id, talent.id, admin.id)

        with database.session() as session:
            assert MatchRepository(session).get_by_pair(job.id, talent.id).id == match.id
            assert MatchRepository(session).get_by_pair(job.id, admin.id) is None

    def test_update_status(self, database, seeded):
        admin, talent, job = seeded
        match = add_match(database, job.id, talent.id, admin.id)

        with database.session() as session:
            MatchRepository(session).update_status(match.id, MatchStatus.INACTIVE, FIXED_NOW)

        with database.session() as session:
            assert MatchRepository(session).get_by_id(match.id).status == MatchStatus.INACTIVE

    def test_update_status_missing_match_raises(self, database):
        with pytest.raises(RecordNotFoundError):
            with database.session() as session:
                MatchRepository(session).update_status("missing", MatchStatus.INACTIVE, FIXED_NOW)

    def test_list_views_joins_everything(self, database, seeded):
        admin, talent, job = seeded
        add_match(database, job.id, talent.id, admin.id)

        with database.session() as session:
            (view,) = MatchRepository(session).list_views()

        assert view.job.id == job.id
        assert view.job.created_by.name == "Grace"
        assert view.user.name == "Ada"
        assert view.user.skills == talent.skills
        assert view.matched_by.email == "grace@example.com"

    def test_list_views_without_user(self, database, seeded):
        admin, talent, job = seeded
        add_match(database, job.id, talent.id, admin.id)

        with database.session() as session:
            (view,) = MatchRepository(session).list_views(user_id=talent.id, include_user=False)

        assert view.user is None
        assert view.user_id == talent.id

    def test_list_views_filters_and_orders(self, database, seeded):
        admin, talent, _ = seeded
        older_job = add_job(database, created_by=admin.id)
        newer_job = add_job(database, created_by=admin.id)
        add_match(database, older_job.id, talent.id, admin.id, created_at=days_ago(3))
        add_match(
            database,
            newer_job.id,
            talent.id,
            admin.id,
            created_at=days_ago(1),
            status=MatchStatus.INACTIVE,
        )

        with database.session() as session:
            matches = MatchRepository(session)
            active = matches.list_views(user_id=talent.id, status=MatchStatus.ACTIVE)
            newest = matches.list_views(user_id=talent.id, newest_first=True)
            oldest = matches.list_views(user_id=talent.id)

        assert [v.job_id for v in active] == [older_job.id]
        assert [v.job_id for v in newest] == [newer_job.id, older_job.id]
        assert [v.job_id for v in oldest] == [older_job.id, newer_job.id]

    def test_list_for_user(self, database, seeded):
        admin, talent, job = seeded
        other = add_user(database)
        add_match(database, job.id, talent.id, admin.id)
        add_match(database, job.id, other.id, admin.id)

        with database.session() as session:
            assert [m.user_id for m in MatchRepository(session).list_for_user(talent.id)] == [
                talent.id
            ]
