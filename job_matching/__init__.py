"""Job matching backend: talents, jobs, matches and dashboard statistics."""

__version__ = "0.1.0"
