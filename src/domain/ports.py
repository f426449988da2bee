"""
Port interfaces - Protocol definitions for the registration flow's collaborators.

This module defines the interfaces (ports) that the domain requires from
presentation, transport and lookup infrastructure. Adapters implement these
protocols; the domain never touches presentation state directly.
"""

from collections.abc import Mapping
from dataclasses import dataclass
from enum import Enum
from typing import Protocol


class ViewId(str, Enum):
    """
    Screens of the registration flow.

    Forward order: FORM -> CONFIRMATION -> COMPLETE.
    The value doubles as the navigation hint token (URL hash equivalent).
    """

    FORM = "register-form"
    CONFIRMATION = "register-confirmation"
    COMPLETE = "register-complete"


class FailureKind(Enum):
    """
    Reason a single field failed validation.

    Field failures are recovered inside the validator and reported through
    the error sink; they are never raised.
    """

    REQUIRED_FIELD_MISSING = "required_field_missing"
    LENGTH_EXCEEDED = "length_exceeded"
    PATTERN_MISMATCH = "pattern_mismatch"
    CUSTOM_RULE_FAILED = "custom_rule_failed"
    VALIDATION_INTERNAL_ERROR = "validation_internal_error"


@dataclass(frozen=True)
class ValidationOutcome:
    """
    Result of evaluating one field value.

    A fresh instance is produced per evaluation. `suggestion` carries a
    corrected value when a check can propose one (e.g. a mistyped email domain).
    """

    valid: bool
    message: str | None = None
    normalized_value: str | None = None
    failure: FailureKind | None = None
    suggestion: str | None = None

    @classmethod
    def passed(cls, normalized_value: str | None = None) -> "ValidationOutcome":
        return cls(valid=True, normalized_value=normalized_value)

    @classmethod
    def failed(
        cls,
        failure: FailureKind,
        message: str,
        normalized_value: str | None = None,
        suggestion: str | None = None,
    ) -> "ValidationOutcome":
        return cls(
            valid=False,
            message=message,
            normalized_value=normalized_value,
            failure=failure,
            suggestion=suggestion,
        )


class SubmitFailureReason(Enum):
    """Transport-level reason a registration submission failed."""

    NETWORK = "network"
    TIMEOUT = "timeout"
    SERVER = "server"


@dataclass(frozen=True)
class SubmitResult:
    """Outcome of one submission attempt."""

    ok: bool
    reason: SubmitFailureReason | None = None
    message: str | None = None

    @classmethod
    def success(cls) -> "SubmitResult":
        return cls(ok=True)

    @classmethod
    def failure(cls, reason: SubmitFailureReason, message: str | None = None) -> "SubmitResult":
        return cls(ok=False, reason=reason, message=message)


class ValueSource(Protocol):
    """Port interface for reading and writing input values by field id."""

    def get_value(self, field_id: str) -> str: ...

    def set_value(self, field_id: str, value: str) -> None: ...

    def disable(self, field_id: str) -> None: ...

    def enable(self, field_id: str) -> None: ...


class ErrorSink(Protocol):
    """Port interface for per-field error display (one message per field)."""

    def show_error(self, field_id: str, message: str) -> None: ...

    def hide_error(self, field_id: str) -> None: ...


class SubmissionTransport(Protocol):
    """Port interface for sending a validated registration."""

    async def submit(self, snapshot: Mapping[str, str]) -> SubmitResult:
        """
        Submit the captured form values.

        Expected failures (network, timeout, server rejection) are reported
        through SubmitResult rather than raised.
        """
        ...


class NavigationHintStore(Protocol):
    """Port interface for the persisted navigation token (URL hash equivalent)."""

    def read(self) -> str | None: ...

    def write(self, token: str) -> None: ...


class ViewRenderer(Protocol):
    """Port interface for view visibility, fade animation and focus."""

    def fade_out(self, view: ViewId) -> None: ...

    def fade_in(self, view: ViewId) -> None: ...

    def swap(self, hide: ViewId, show: ViewId) -> None: ...

    def focus(self, element_id: str) -> None: ...


class PostcodeDirectory(Protocol):
    """Port interface for postal code existence lookups."""

    async def exists(self, postcode: str) -> bool:
        """
        Check whether a 7-digit postal code exists.

        Raises:
            PostcodeLookupError: If the lookup itself could not be performed
        """
        ...


class Notifier(Protocol):
    """Port interface for transient, auto-dismissing notifications."""

    def notify(self, message: str, *, level: str = "error", dismiss_after: float = 3.0) -> None: ...


class PageNavigator(Protocol):
    """Port interface for page-level navigation outside the three screens."""

    def reload(self) -> None: ...

    def go_home(self) -> None: ...
