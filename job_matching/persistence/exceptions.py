"""Persistence layer exceptions.

All persistence exceptions inherit from PersistenceError, so callers can catch
every storage failure with a single except clause. Services translate the
integrity errors they expect into domain errors.
"""


class PersistenceError(Exception):
    """Base exception for all persistence layer errors."""

    pass


class DatabaseConnectionError(PersistenceError):
    """Raised when database connection or initialization fails.

    Examples:
    - Invalid database URL format
    - Database file not accessible
    - Database used before initialize()
    """

    pass


class RecordNotFoundError(PersistenceError):
    """Raised when an update targets a record that does not exist.

    Lookups return None instead of raising this.
    """

    pass


class DataIntegrityError(PersistenceError):
    """Raised when a database constraint is violated.

    Examples:
    - Foreign key pointing at a missing user or job
    - NOT NULL violation
    """

    pass


class DuplicateRecordError(DataIntegrityError):
    """Raised when a named unique constraint rejects an insert or update.

    Attributes:
        constraint: Name of the violated constraint, e.g. "uq_matches_job_user"
    """

    def __init__(self, message: str, constraint: str):
        self.constraint = constraint
        super().__init__(message)
