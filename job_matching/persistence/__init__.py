"""Persistence layer: the entity store for users, jobs and matches.

Public API:
    # Database lifecycle and sessions
    - Database(database_url).initialize() -> Database
    - Database.session() -> ContextManager[Session]
    - Database.close() -> None
    - init_database(database_url) -> Database

    # Repository classes (one session each)
    - UserRepository: user accounts
    - JobRepository: job postings and creator-joined views
    - MatchRepository: matches and fully joined match views

    # Exceptions
    - PersistenceError: Base exception for all persistence errors
    - DatabaseConnectionError: Connection/initialization failures
    - RecordNotFoundError: Update targeted a missing record
    - DataIntegrityError: Constraint violations
    - DuplicateRecordError: Named unique constraint violations

Example usage:
    >>> from job_matching.persistence import Database, MatchRepository
    >>>
    >>> database = Database("sqlite:///./data/job_matching.db").initialize()
    >>> with database.session() as session:
    ...     matches = MatchRepository(session).list_views(user_id="...")
"""

# Database lifecycle and sessions
from .database import Database, init_database

# Repository classes
from .repositories import JobRepository, MatchRepository, UserRepository

# Exceptions
from .exceptions import (
    DatabaseConnectionError,
    DataIntegrityError,
    DuplicateRecordError,
    PersistenceError,
    RecordNotFoundError,
)

__all__ = [
    # Database
    "Database",
    "init_database",
    # Repositories
    "UserRepository",
    "JobRepository",
    "MatchRepository",
    # Exceptions
    "PersistenceError",
    "DatabaseConnectionError",
    "RecordNotFoundError",
    "DataIntegrityError",
    "DuplicateRecordError",
]
