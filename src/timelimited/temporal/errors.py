"""Exceptions raised while reading markers; converted to diagnostics by apply_time_limits."""

from typing import Optional


class MarkerError(ValueError):
    """Base class for problems found in a document's markers."""

    def __init__(self, message: str, line: Optional[int] = None, column: Optional[int] = None):
        super().__init__(message)
        self.message = message
        self.line = line
        self.column = column


class TagAttributeError(MarkerError):
    """A start tag's attributes are missing or malformed."""


class UnbalancedTagsError(MarkerError):
    """Start and end tags do not pair up."""
