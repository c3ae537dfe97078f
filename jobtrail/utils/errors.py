"""
Error types raised by the tracker core.
"""


class JobTrailError(Exception):
    """Base class for tracker errors."""


class NotAuthenticated(JobTrailError):
    """Raised when no user is signed in for the current session."""

    def __init__(self, message: str = "Not authenticated"):
        super().__init__(message)


class BackendError(JobTrailError):
    """Raised when the backend rejects or fails a request."""


class ValidationError(JobTrailError):
    """Reserved for form validation in the presentation layer.

    The core never raises this; it exists so UI code can share one hierarchy.
    """
