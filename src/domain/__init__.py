"""
Domain layer - Pure registration logic with zero framework imports.

This package contains the validation engine and the view state machine of
the registration flow. It defines its own port interfaces for presentation,
transport and lookup collaborators, keeping adapters fully decoupled.
"""

from .exceptions import (
    MissingSnapshot,
    PostcodeLookupError,
    RegistrationError,
    SubmissionFailed,
    TransitionRejected,
)
from .navigation import ViewStateMachine
from .ports import (
    ErrorSink,
    FailureKind,
    NavigationHintStore,
    Notifier,
    PageNavigator,
    PostcodeDirectory,
    SubmissionTransport,
    SubmitFailureReason,
    SubmitResult,
    ValidationOutcome,
    ValueSource,
    ViewId,
    ViewRenderer,
)
from .registration import RegistrationFlow
from .rules import FIELD_NAMES, FieldRule, FormSnapshot, RuleRegistry, build_rule_registry
from .validation import FieldValidator, FormValidator

__all__ = [
    "FIELD_NAMES",
    "ErrorSink",
    "FailureKind",
    "FieldRule",
    "FieldValidator",
    "FormSnapshot",
    "FormValidator",
    "MissingSnapshot",
    "NavigationHintStore",
    "Notifier",
    "PageNavigator",
    "PostcodeDirectory",
    "PostcodeLookupError",
    "RegistrationError",
    "RegistrationFlow",
    "RuleRegistry",
    "SubmissionFailed",
    "SubmissionTransport",
    "SubmitFailureReason",
    "SubmitResult",
    "TransitionRejected",
    "ValidationOutcome",
    "ValueSource",
    "ViewId",
    "ViewRenderer",
    "ViewStateMachine",
    "build_rule_registry",
]
