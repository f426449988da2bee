"""
Field and form validation.

FieldValidator evaluates one value against its rule in a fixed order,
short-circuiting on the first failure:

    1. touched gate     untouched fields pass silently
    2. required         empty / whitespace-only values fail
    3. early exit       empty optional values pass
    4. length           value longer than max_length fails
    5. pattern          normalized value must match
    6. custom           async domain check, may override pattern success

FormValidator owns per-field touched/error state, runs every field
concurrently on submit and reports first messages to the error sink.
"""

import asyncio
import logging
from collections.abc import Mapping
from dataclasses import dataclass, field

from .ports import ErrorSink, FailureKind, ValidationOutcome
from .rules import FieldRule, RuleRegistry

logger = logging.getLogger(__name__)

REQUIRED_MESSAGE = "この項目は必須です"
INTERNAL_ERROR_MESSAGE = "検証中にエラーが発生しました"


def length_message(max_length: int, actual: int) -> str:
    return f"{max_length}文字以内で入力してください（現在{actual}文字）"


class FieldValidator:
    """Evaluates single field values against the rule registry."""

    def __init__(self, registry: RuleRegistry) -> None:
        self._registry = registry

    @property
    def registry(self) -> RuleRegistry:
        return self._registry

    async def validate(self, field_name: str, raw_value: str | None, is_touched: bool) -> ValidationOutcome:
        """
        Validate one value.

        Args:
            field_name: Registry field name (unknown names always pass)
            raw_value: Value as entered; None is treated as empty
            is_touched: Whether the field has been touched, including by
                the event that triggered this call

        Returns:
            A new ValidationOutcome. Exceptions raised by custom checks are
            logged and reported as VALIDATION_INTERNAL_ERROR, never raised.
        """
        rule = self._registry.lookup(field_name)
        value = raw_value or ""

        if rule is None or not is_touched:
            return ValidationOutcome.passed(value)

        is_empty = not value.strip()
        if rule.required and is_empty:
            return ValidationOutcome.failed(FailureKind.REQUIRED_FIELD_MISSING, REQUIRED_MESSAGE, value)
        if is_empty:
            return ValidationOutcome.passed(value)

        if rule.max_length is not None and len(value) > rule.max_length:
            return ValidationOutcome.failed(
                FailureKind.LENGTH_EXCEEDED, length_message(rule.max_length, len(value)), value
            )

        try:
            return await self._evaluate(field_name, rule, value)
        except Exception:
            logger.exception("Validation of field %r raised unexpectedly", field_name)
            return ValidationOutcome.failed(FailureKind.VALIDATION_INTERNAL_ERROR, INTERNAL_ERROR_MESSAGE, value)

    async def _evaluate(self, field_name: str, rule: FieldRule, value: str) -> ValidationOutcome:
        normalized = value
        if rule.normalize is not None:
            try:
                normalized = rule.normalize(value)
            except Exception:
                logger.warning("Normalizer for field %r failed", field_name, exc_info=True)
                return self._pattern_failure(rule, value)

        if rule.pattern is not None and not rule.pattern.match(normalized):
            return self._pattern_failure(rule, value)

        if rule.custom is not None:
            result = await rule.custom(normalized)
            if not result.valid:
                return ValidationOutcome.failed(
                    FailureKind.CUSTOM_RULE_FAILED,
                    result.message or rule.message or INTERNAL_ERROR_MESSAGE,
                    normalized,
                    suggestion=result.suggestion,
                )

        return ValidationOutcome.passed(normalized)

    @staticmethod
    def _pattern_failure(rule: FieldRule, value: str) -> ValidationOutcome:
        # Report the static message; never echo the normalized value
        return ValidationOutcome.failed(FailureKind.PATTERN_MISMATCH, rule.message or INTERNAL_ERROR_MESSAGE, value)


@dataclass
class FieldState:
    """Runtime state of one field."""

    touched: bool = False
    errors: list[str] = field(default_factory=list)


class FormValidator:
    """
    Form-level validation state.

    Owns every FieldState. All mutations go through validate_field,
    validate_form and clear_errors, serialized by one asyncio.Lock so that
    concurrent passes never interleave error state.
    """

    def __init__(self, field_validator: FieldValidator, error_sink: ErrorSink | None = None) -> None:
        self._field_validator = field_validator
        self._error_sink = error_sink
        self._states = {name: FieldState() for name in field_validator.registry.field_names}
        self._lock = asyncio.Lock()

    @property
    def field_names(self) -> tuple[str, ...]:
        return tuple(self._states)

    async def validate_field(self, field_name: str, value: str | None, touch: bool = False) -> ValidationOutcome:
        """
        Validate one field on input (touch=False) or blur (touch=True).

        Untouched fields pass without changing displayed errors.
        """
        state = self._states.get(field_name)
        if state is None:
            return ValidationOutcome.passed(value or "")

        async with self._lock:
            if not (state.touched or touch):
                return ValidationOutcome.passed(value or "")
            state.touched = True

            outcome = await self._field_validator.validate(field_name, value, True)
            self._apply(field_name, state, outcome)
            return outcome

    async def validate_form(self, snapshot: Mapping[str, str]) -> bool:
        """
        Validate every known field concurrently.

        Marks all fields touched and awaits every outcome before reporting.
        Error lists are populated only when the form as a whole fails.

        Returns:
            True if every field passed
        """
        async with self._lock:
            names = self.field_names
            for name in names:
                self._states[name].touched = True

            outcomes = await asyncio.gather(
                *(self._field_validator.validate(name, snapshot.get(name), True) for name in names)
            )
            results = dict(zip(names, outcomes, strict=True))
            is_valid = all(outcome.valid for outcome in outcomes)

            for name, outcome in results.items():
                self._states[name].errors = []
                if is_valid:
                    self._hide(name)
                else:
                    self._apply(name, self._states[name], outcome)

            if not is_valid:
                failed = [name for name, outcome in results.items() if not outcome.valid]
                logger.info("Form validation failed for fields: %s", ", ".join(failed))
            return is_valid

    def get_field_errors(self, field_name: str) -> list[str]:
        state = self._states.get(field_name)
        return list(state.errors) if state else []

    def get_all_errors(self) -> dict[str, list[str]]:
        return {name: list(state.errors) for name, state in self._states.items() if state.errors}

    def is_touched(self, field_name: str) -> bool:
        state = self._states.get(field_name)
        return state.touched if state else False

    async def clear_errors(self) -> None:
        """Reset every field to untouched with no errors (form reset); waits for a running pass."""
        async with self._lock:
            for name, state in self._states.items():
                state.touched = False
                state.errors = []
                self._hide(name)

    def _apply(self, field_name: str, state: FieldState, outcome: ValidationOutcome) -> None:
        state.errors = []
        self._hide(field_name)
        if not outcome.valid and outcome.message:
            state.errors.append(outcome.message)
            if self._error_sink is not None:
                self._error_sink.show_error(field_name, outcome.message)

    def _hide(self, field_name: str) -> None:
        if self._error_sink is not None:
            self._error_sink.hide_error(field_name)
