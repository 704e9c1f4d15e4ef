"""Exceptions raised by the workout tracker.

Local problems (bad input, an action that is not valid right now) are kept
apart from failures reported by the workout API so screens can decide how to
present each one.
"""


class TrackerError(Exception):
    """Base exception for workout tracker errors."""

    pass


class ValidationError(TrackerError):
    """Raised when user input is rejected before any request is made."""

    pass


class InvalidTransition(TrackerError):
    """Raised when an action is not allowed in the current workout state."""

    pass


class OperationInProgress(TrackerError):
    """Raised when a second action is submitted while a request is pending."""

    pass


class ServiceUnavailable(TrackerError):
    """Raised when the workout API cannot be reached or times out."""

    pass


class ApiError(TrackerError):
    """Raised when the workout API returns an error response."""

    def __init__(self, message: str, status_code: int):
        super().__init__(message)
        self.status_code = status_code


class ConflictError(ApiError):
    """Raised when the resource already exists, e.g. today's workout."""

    pass


class AuthenticationError(ApiError):
    """Raised when the credential is missing, invalid or expired."""

    pass


class NotFoundError(ApiError):
    """Raised when the requested resource does not exist."""

    pass
