"""
Shared test fixtures and configuration.

This module provides pytest fixtures for:
- Rule registry, field and form validators
- Console / in-memory adapters standing in for the page
- Stub postcode directory and submission transport
"""

import asyncio
import logging
from collections.abc import Iterator, Mapping

import pytest

from src.adapters.console.presentation import (
    ConsoleErrorSink,
    ConsoleNotifier,
    ConsolePageNavigator,
    LoggingViewRenderer,
)
from src.adapters.memory.state import InMemoryHintStore, InMemoryValueSource
from src.config.logging import HANDLER_NAME
from src.domain.exceptions import PostcodeLookupError
from src.domain.navigation import ViewStateMachine
from src.domain.ports import SubmitResult
from src.domain.registration import RegistrationFlow
from src.domain.rules import RuleRegistry, build_rule_registry
from src.domain.validation import FieldValidator, FormValidator

VALID_FORM = {
    "name": "田中 太郎",
    "furigana": "タナカ タロウ",
    "email": "taro@example.com",
    "password": "Abc12345!",
    "phone": "09012345678",
    "postcode": "1000001",
    "prefecture": "東京都",
    "city": "千代田区",
    "address": "千代田1-1",
    "remarks": "",
}


class StubPostcodeDirectory:
    """PostcodeDirectory double with a fixed set of known postcodes."""

    def __init__(
        self,
        known: set[str] | None = None,
        fail: bool = False,
        delay: float = 0.0,
    ) -> None:
        self.known = known if known is not None else {"1000001"}
        self.fail = fail
        self.delay = delay
        self.calls: list[str] = []

    async def exists(self, postcode: str) -> bool:
        self.calls.append(postcode)
        if self.delay:
            await asyncio.sleep(self.delay)
        if self.fail:
            raise PostcodeLookupError("service unavailable")
        return postcode in self.known


class StubTransport:
    """SubmissionTransport double returning a preset result."""

    def __init__(self, result: SubmitResult | None = None) -> None:
        self.result = result or SubmitResult.success()
        self.calls: list[dict[str, str]] = []

    async def submit(self, snapshot: Mapping[str, str]) -> SubmitResult:
        self.calls.append(dict(snapshot))
        return self.result


@pytest.fixture(autouse=True)
def restore_root_logging() -> Iterator[None]:
    """Undo the stderr handler and level set when a flow is wired."""
    root = logging.getLogger()
    level = root.level
    yield
    for handler in root.handlers[:]:
        if handler.get_name() == HANDLER_NAME:
            root.removeHandler(handler)
    root.setLevel(level)


@pytest.fixture
def valid_form() -> dict[str, str]:
    return dict(VALID_FORM)


@pytest.fixture
def registry() -> RuleRegistry:
    """Registry without a postcode directory (format checks only)."""
    return build_rule_registry()


@pytest.fixture
def field_validator(registry: RuleRegistry) -> FieldValidator:
    return FieldValidator(registry)


@pytest.fixture
def error_sink() -> ConsoleErrorSink:
    return ConsoleErrorSink()


@pytest.fixture
def form_validator(field_validator: FieldValidator, error_sink: ConsoleErrorSink) -> FormValidator:
    return FormValidator(field_validator, error_sink)


@pytest.fixture
def renderer() -> LoggingViewRenderer:
    return LoggingViewRenderer()


@pytest.fixture
def hint_store() -> InMemoryHintStore:
    return InMemoryHintStore()


@pytest.fixture
def machine(renderer: LoggingViewRenderer, hint_store: InMemoryHintStore) -> ViewStateMachine:
    return ViewStateMachine(renderer, hint_store, animation_window=0)


@pytest.fixture
def values(valid_form: dict[str, str]) -> InMemoryValueSource:
    return InMemoryValueSource(valid_form)


@pytest.fixture
def transport() -> StubTransport:
    return StubTransport()


@pytest.fixture
def notifier() -> ConsoleNotifier:
    return ConsoleNotifier()


@pytest.fixture
def page() -> ConsolePageNavigator:
    return ConsolePageNavigator()


@pytest.fixture
def flow(
    values: InMemoryValueSource,
    form_validator: FormValidator,
    machine: ViewStateMachine,
    transport: StubTransport,
    notifier: ConsoleNotifier,
    page: ConsolePageNavigator,
) -> RegistrationFlow:
    return RegistrationFlow(
        values=values,
        validator=form_validator,
        navigator=machine,
        transport=transport,
        notifier=notifier,
        page=page,
        notification_seconds=0.05,
        min_submit_seconds=0,
    )
