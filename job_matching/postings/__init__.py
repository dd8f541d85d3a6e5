"""Job postings managed by admins."""

from .service import JobPostingService

__all__ = ["JobPostingService"]
