"""Exception types raised at the boundary of a deep-scrape run.

Collaborator and parse failures never surface as exceptions; they are
recorded in the run's debug trace instead.  Only the two cases below escape
``run_deep_scrape``.
"""

from __future__ import annotations


class DeepScrapeError(Exception):
    """Base class for errors surfaced by the deep-scrape entry point."""


class InvalidQueryError(DeepScrapeError, ValueError):
    """The query was missing, not a string, or blank after trimming."""

    def __init__(self, message: str = "Query is required and must be a non-empty string") -> None:
        super().__init__(message)


class InternalScrapeError(DeepScrapeError):
    """An unexpected fault escaped the orchestrator."""

    def __init__(self, message: str = "Internal server error during deep scrape") -> None:
        super().__init__(message)
