"""Tests for logging context propagation."""

import threading

import pytest

from job_matching.logging.context import (
    clear_log_context,
    get_log_context,
    log_context,
    pop_log_context,
    push_log_context,
)


@pytest.fixture(autouse=True)
def clean_context():
    """Clear logging context before and after each test."""
    clear_log_context()
    yield
    clear_log_context()


def test_empty_context():
    assert get_log_context() == {}


def test_push_and_pop_fields():
    token = push_log_context(request_id="req-1", user_id="u-42")
    assert get_log_context() == {"request_id": "req-1", "user_id": "u-42"}

    pop_log_context(token)
    assert get_log_context() == {}


def test_nested_context():
    """Test nested pushes layer over each other and pop in reverse order."""
    token1 = push_log_context(request_id="req-1")
    token2 = push_log_context(user_id="u-42", role="Admin")
    token3 = push_log_context(match_id="m-7")

    assert get_log_context() == {
        "request_id": "req-1",
        "user_id": "u-42",
        "role": "Admin",
        "match_id": "m-7",
    }

    pop_log_context(token3)
    assert get_log_context() == {"request_id": "req-1", "user_id": "u-42", "role": "Admin"}

    pop_log_context(token2)
    assert get_log_context() == {"request_id": "req-1"}

    pop_log_context(token1)
    assert get_log_context() == {}


def test_context_override():
    """Test that pushing the same key shadows the previous value."""
    token1 = push_log_context(user_id="u-1")
    token2 = push_log_context(user_id="u-2")
    assert get_log_context() == {"user_id": "u-2"}

    pop_log_context(token2)
    assert get_log_context() == {"user_id": "u-1"}

    pop_log_context(token1)


def test_context_manager_nested():
    with log_context(request_id="req-1") as outer:
        assert outer == {"request_id": "req-1"}

        with log_context(match_id="m-7"):
            assert get_log_context() == {"request_id": "req-1", "match_id": "m-7"}

        assert get_log_context() == {"request_id": "req-1"}

    assert get_log_context() == {}


def test_context_manager_restores_on_exception():
    with pytest.raises(ValueError):
        with log_context(request_id="req-1"):
            raise ValueError("boom")

    assert get_log_context() == {}


def test_clear_context():
    push_log_context(request_id="req-1", user_id="u-42")

    clear_log_context()

    assert get_log_context() == {}


def test_context_is_returned_as_copy():
    token = push_log_context(request_id="req-1")

    context = get_log_context()
    context["user_id"] = "modified"

    assert get_log_context() == {"request_id": "req-1"}
    pop_log_context(token)


def test_context_is_per_thread():
    """Test that a field pushed in one thread is not visible in another."""
    seen = {}

    def worker():
        seen["before"] = get_log_context()
        with log_context(request_id="worker"):
            seen["inside"] = get_log_context()

    with log_context(request_id="main"):
        thread = threading.Thread(target=worker)
        thread.start()
        thread.join()

        assert get_log_context() == {"request_id": "main"}

    assert seen["before"] == {}
    assert seen["inside"] == {"request_id": "worker"}
