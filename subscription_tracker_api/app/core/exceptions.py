"""
Domain exceptions.

Services and stores raise these; the API layer translates them into
HTTP responses.  Each class carries the status code it maps to so the
translation lives in one place (``api.errors``).
"""


class SubscriptionTrackerError(Exception):
    """Base class for all domain errors."""

    status_code = 500

    def __init__(self, message: str = "") -> None:
        super().__init__(message)
        self.message = message


class ValidationError(SubscriptionTrackerError):
    """Missing or malformed input."""

    status_code = 400


class DuplicateEmailError(SubscriptionTrackerError):
    """A user with the same normalized email already exists."""

    # Conflicts are reported as 400 to match the registration contract.
    status_code = 400

    def __init__(self, message: str = "Email already registered") -> None:
        super().__init__(message)


class NotFoundError(SubscriptionTrackerError):
    """Record absent, or not owned by the caller."""

    status_code = 404

    def __init__(self, message: str = "Not found") -> None:
        super().__init__(message)


class AuthenticationError(SubscriptionTrackerError):
    """Missing, invalid or expired session, or bad credentials."""

    status_code = 401

    def __init__(self, message: str = "Unauthorized") -> None:
        super().__init__(message)
