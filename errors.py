"""Failures reported by the assistant operations."""

from __future__ import annotations


class OperationError(RuntimeError):
    """Base class for a failed assistant operation.

    The message is fixed per operation; the backend error is only available
    through ``__cause__``.
    """

    tag = "OperationFailed"
    message = "Operation failed."

    def __init__(self, message: str | None = None):
        super().__init__(message or self.message)


class SearchFailed(OperationError):
    tag = "SearchFailed"
    message = "Failed to search for papers."


class AnalysisFailed(OperationError):
    tag = "AnalysisFailed"
    message = "Failed to analyze paper."


class ComparisonFailed(OperationError):
    tag = "ComparisonFailed"
    message = "Failed to compare papers."


class CitationFailed(OperationError):
    tag = "CitationFailed"
    message = "Failed to generate citations."
