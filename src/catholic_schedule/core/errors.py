"""
Error taxonomy for user-triggered actions.

Every failure surfaced to a user is one of these types. They are caught where
the action was triggered (search submit, form submit, CLI command, API handler)
and rendered as a plain message; none are retried.
"""

from enum import Enum
from typing import Any, Dict, Optional


class ErrorCategory(str, Enum):
    """High-level error categories."""

    INVALID_INPUT = "invalid_input"
    NOT_FOUND = "not_found"
    REMOTE_FAILURE = "remote_failure"
    NOT_AUTHENTICATED = "not_authenticated"


class CatholicScheduleError(Exception):
    """Base exception for all user-facing failures."""

    def __init__(self, message: str, code: str, category: ErrorCategory, http_status: int = 500):
        super().__init__(message)
        self.message = message
        self.code = code
        self.category = category
        self.http_status = http_status

    def to_response(self) -> Dict[str, Any]:
        """Convert to the JSON error envelope returned by the API."""
        return {
            "error": {
                "code": self.code,
                "message": self.message,
                "category": self.category.value,
            }
        }


class InvalidInputError(CatholicScheduleError):
    """Client-side validation failed; no network call was made."""

    def __init__(self, message: str, field: Optional[str] = None):
        super().__init__(message, "INVALID_INPUT", ErrorCategory.INVALID_INPUT, 400)
        self.field = field


class NotFoundError(CatholicScheduleError):
    """A remote lookup returned no match."""

    def __init__(self, message: str):
        super().__init__(message, "NOT_FOUND", ErrorCategory.NOT_FOUND, 404)


class RemoteFailureError(CatholicScheduleError):
    """A network or backend call did not succeed. The message is the backend's text."""

    def __init__(self, message: str):
        super().__init__(message, "REMOTE_FAILURE", ErrorCategory.REMOTE_FAILURE, 502)


class NotAuthenticatedError(CatholicScheduleError):
    """An admin operation was attempted without a signed-in session."""

    def __init__(self, message: str = "Please sign in first."):
        super().__init__(message, "NOT_AUTHENTICATED", ErrorCategory.NOT_AUTHENTICATED, 401)


def remote_error_message(exc: Exception) -> str:
    """Extract the backend's own message from a client library exception."""
    message = getattr(exc, "message", None)
    if isinstance(message, str) and message:
        return message
    return str(exc) or exc.__class__.__name__
