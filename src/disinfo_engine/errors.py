from __future__ import annotations
from typing import Optional


class DisinfoError(Exception):
    """Base error. `user_message` is safe to show to end users."""
    user_message = "Analysis temporarily unavailable. Please try again."

    def __init__(self, message: Optional[str] = None):
        super().__init__(message or self.user_message)


class InputValidationError(DisinfoError):
    """Rejected before any external call is made."""


class EmptyInputError(InputValidationError):
    user_message = "Please enter some content to analyze"


class UnsupportedLinkError(InputValidationError):
    user_message = "Only Reddit links are supported. Please paste a Reddit post URL or enter text directly."


class ContentTooLongError(InputValidationError):
    user_message = "Content is too long to analyze. Please shorten it and try again."

    def __init__(self, length: int, limit: int):
        super().__init__(f"content length {length} exceeds limit {limit}")
        self.length = length
        self.limit = limit


class ExternalServiceError(DisinfoError):
    """The classifier answered with a non-success status (or nothing at all)."""

    def __init__(self, status_code: Optional[int], detail: str = ""):
        super().__init__(f"Analysis service error: {status_code if status_code is not None else 'n/a'} {detail}".strip())
        self.status_code = status_code
        self.detail = detail


class AnalysisUnavailableError(DisinfoError):
    """Catch-all raised by the orchestrator; the cause is chained and logged."""
