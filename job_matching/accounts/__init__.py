"""User accounts: registration, email verification, profiles."""

from .service import AccountService

__all__ = ["AccountService"]
