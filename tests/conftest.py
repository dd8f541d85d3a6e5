"""Shared pytest fixtures."""

import pytest

from job_matching.logging.context import clear_log_context
from job_matching.persistence import Database


@pytest.fixture
def database():
    """Fresh in-memory store per test."""
    db = Database("sqlite:///:memory:").initialize()
    yield db
    db.close()


@pytest.fixture(autouse=True)
def clean_log_context():
    clear_log_context()
    yield
    clear_log_context()
