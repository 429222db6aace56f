"""
Exception hierarchy for the Schooney record console.

Only caller contract violations and ineligible sends are raised. Expected
outcomes (empty results, an exhausted daily quota, an empty selection) are
returned as result values by the query and mailing layers.
"""

from __future__ import annotations


class SchooneyError(Exception):
    """Base class for all console errors."""


class QueryContractError(SchooneyError, ValueError):
    """A query stage was called with arguments it does not accept."""


class UnknownFieldError(QueryContractError):
    """Sort field or filter key not declared by the view."""

    def __init__(self, view: str, field: str, available: list[str] | None = None) -> None:
        self.view = view
        self.field = field
        self.available = sorted(available or [])
        message = f"View '{view}' has no field '{field}'"
        if self.available:
            message += f". Available: {', '.join(self.available)}"
        super().__init__(message)


class InvalidPageError(QueryContractError):
    """Page number below 1 or non-positive page size."""


class UnknownViewError(SchooneyError, ValueError):
    """Requested view is not registered."""


class RecordCollectionError(SchooneyError, KeyError):
    """Duplicate or missing id in a record collection."""

    def __str__(self) -> str:
        # KeyError.__str__ would repr() the message.
        return str(self.args[0]) if self.args else ""


class SendValidationError(SchooneyError):
    """A record selected for e-mail is not eligible; nothing was sent."""

    def __init__(self, record_id: str, reason: str) -> None:
        self.record_id = record_id
        self.reason = reason
        super().__init__(reason)


class RecordFileError(SchooneyError):
    """A records file could not be read into view records."""


class NotAuthenticatedError(SchooneyError):
    """A mutating action ran without an authenticated session."""


class TemplateRangeError(SchooneyError, ValueError):
    """Formatting range lies outside the reminder message."""


__all__ = [
    "SchooneyError",
    "QueryContractError",
    "UnknownFieldError",
    "InvalidPageError",
    "UnknownViewError",
    "RecordCollectionError",
    "RecordFileError",
    "SendValidationError",
    "NotAuthenticatedError",
    "TemplateRangeError",
]
