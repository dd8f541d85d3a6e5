"""Matching of talents to jobs.

This module provides:
- MatchingEngine: create, list, look up and complete matches
"""

from .engine import MatchingEngine

__all__ = ["MatchingEngine"]
