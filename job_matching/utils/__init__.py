"""Utility functions for hashing and time handling."""

from .hashing import codes_match, generate_verification_code, hash_password, verify_password
from .timestamps import (
    ensure_utc,
    format_for_storage,
    format_timestamp,
    parse_from_storage,
    utc_now,
)

__all__ = [
    # Hashing
    "hash_password",
    "verify_password",
    "generate_verification_code",
    "codes_match",
    # Timestamps
    "utc_now",
    "ensure_utc",
    "format_for_storage",
    "parse_from_storage",
    "format_timestamp",
]
