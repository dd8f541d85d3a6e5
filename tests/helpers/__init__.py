"""Test helper utilities for Job Matching API tests."""

from .builders import (
    DEFAULT_PASSWORD,
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
from .recording_sender import RecordingEmailSender

__all__ = [
    "DEFAULT_PASSWORD",
    "FIXED_NOW",
    "RecordingEmailSender",
    "add_admin",
    "add_job",
    "add_match",
    "add_user",
    "days_ago",
    "make_admin",
    "make_job",
    "make_match",
    "make_user",
]
