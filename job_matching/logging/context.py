"""Request-scoped context for structured logging.

Fields pushed here (request_id, user_id, match_id, ...) are merged into every
log record emitted while the scope is active. Storage is a ContextVar, so each
thread or task sees its own context.
"""

from contextlib import contextmanager
from contextvars import ContextVar, Token
from typing import Any, Dict, Iterator

LogContextVar: ContextVar[Dict[str, Any]] = ContextVar("log_context", default={})


def get_log_context() -> Dict[str, Any]:
    """Return a copy of the fields active in the current scope."""
    return dict(LogContextVar.get())


def push_log_context(**fields: Any) -> Token:
    """Layer new fields over the current context.

    Args:
        **fields: Key-value pairs to attach to subsequent log records

    Returns:
        Token for pop_log_context()

    Example:
        >>> token = push_log_context(request_id="req-1", user_id="u-42")
        >>> # ... every log line now carries request_id and user_id ...
        >>> pop_log_context(token)
    """
    return LogContextVar.set({**LogContextVar.get(), **fields})


def pop_log_context(token: Token) -> None:
    """Restore the context captured by push_log_context()."""
    LogContextVar.reset(token)


def clear_log_context() -> None:
    """Drop all fields. Mostly useful in tests."""
    LogContextVar.set({})


@contextmanager
def log_context(**fields: Any) -> Iterator[Dict[str, Any]]:
    """Scope fields to a with-block, restoring the previous context on exit.

    Example:
        >>> with log_context(match_id="m-1"):
        ...     logger.info("Completing match")  # includes match_id
    """
    token = push_log_context(**fields)
    try:
        yield get_log_context()
    finally:
        pop_log_context(token)
