"""
Domain exceptions - Semantic error types for the registration flow.

Field-level validation failures are not exceptions (see FailureKind); the
types here cover navigation, lookup and submission errors.
"""

from .ports import SubmitFailureReason, ViewId


class RegistrationError(Exception):
    """Base class for registration domain errors."""

    pass


class TransitionRejected(RegistrationError):
    """A view transition was dropped (busy, same view, or unreachable target)."""

    def __init__(self, target: ViewId, reason: str) -> None:
        super().__init__(f"{target.value}: {reason}")
        self.target = target
        self.reason = reason


class SubmissionFailed(RegistrationError):
    """The submission transport reported a failure."""

    def __init__(self, reason: SubmitFailureReason, message: str | None = None) -> None:
        super().__init__(message or reason.value)
        self.reason = reason
        self.message = message


class PostcodeLookupError(RegistrationError):
    """The postcode directory could not be queried."""

    pass


class MissingSnapshot(RegistrationError):
    """Confirmation was requested before a validated snapshot exists."""

    pass
