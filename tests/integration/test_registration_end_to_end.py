"""
End-to-end tests for the registration flow.

Wires the flow through build_registration_flow with the real HTTP adapters
over httpx.MockTransport, then walks the three screens:

    FORM -> CONFIRMATION -> COMPLETE
"""

import json

import httpx
import pytest

from src.adapters.console.presentation import ConsoleErrorSink, ConsoleNotifier, ConsolePageNavigator
from src.adapters.http import HttpSubmissionTransport, ZipAddressDirectory
from src.adapters.memory.state import InMemoryHintStore, InMemoryValueSource
from src.app.dependencies import build_registration_flow
from src.config.settings import Settings
from src.domain.ports import ViewId
from src.domain.registration import REGISTER_BUTTON, RegistrationFlow
from src.domain.rules import build_rule_registry

pytestmark = pytest.mark.asyncio


class FakeBackend:
    """Postal code API and registration endpoint behind one MockTransport."""

    def __init__(self, register_status: int = 201, known_postcodes: frozenset[str] = frozenset({"1000001"})) -> None:
        self.register_status = register_status
        self.known_postcodes = known_postcodes
        self.registrations: list[dict[str, str]] = []

    def __call__(self, request: httpx.Request) -> httpx.Response:
        if request.url.host == "postcode.test":
            found = request.url.params["zipcode"] in self.known_postcodes
            return httpx.Response(200, json={"success": found})
        self.registrations.append(json.loads(request.content))
        if self.register_status >= 400:
            return httpx.Response(self.register_status, json={"message": "rejected"})
        return httpx.Response(self.register_status, json={"status": "ok"})


def make_flow(backend: FakeBackend, values: InMemoryValueSource, **ports) -> RegistrationFlow:
    settings = Settings(
        _env_file=None,
        animation_window_ms=0,
        min_submit_display_seconds=0,
        notification_dismiss_seconds=0.05,
    )
    mock = httpx.MockTransport(backend)
    return build_registration_flow(
        settings,
        registry=build_rule_registry(ZipAddressDirectory("https://postcode.test/", transport=mock)),
        values=values,
        transport=HttpSubmissionTransport("https://register.test", transport=mock),
        **ports,
    )


class TestHappyPath:
    """Tests for a complete registration."""

    async def test_form_to_complete(self, valid_form: dict[str, str]) -> None:
        backend = FakeBackend()
        values = InMemoryValueSource(valid_form)
        hint_store = InMemoryHintStore()
        flow = make_flow(backend, values, hint_store=hint_store)

        flow.start()
        assert await flow.submit_form() is True
        assert flow.navigator.current is ViewId.CONFIRMATION
        assert hint_store.token == "register-confirmation"

        assert await flow.confirm_registration() is True
        assert flow.navigator.current is ViewId.COMPLETE
        assert flow.navigator.history == (ViewId.FORM, ViewId.CONFIRMATION, ViewId.COMPLETE)
        assert backend.registrations == [valid_form]
        assert hint_store.token == "register-complete"

    async def test_back_to_form_keeps_values(self, valid_form: dict[str, str]) -> None:
        values = InMemoryValueSource(valid_form)
        flow = make_flow(FakeBackend(), values)

        await flow.submit_form()
        assert await flow.handle_browser_back() is True

        assert flow.navigator.current is ViewId.FORM
        assert values.get_value("name") == valid_form["name"]


class TestValidationFailures:
    """Tests for rejected forms."""

    async def test_unknown_postcode_blocks_submit(self, valid_form: dict[str, str]) -> None:
        sink = ConsoleErrorSink()
        flow = make_flow(FakeBackend(known_postcodes=frozenset()), InMemoryValueSource(valid_form), error_sink=sink)

        assert await flow.submit_form() is False
        assert sink.active == {"postcode": "存在しない郵便番号です"}
        assert flow.navigator.current is ViewId.FORM

    async def test_errors_shown_for_every_bad_field(self, valid_form: dict[str, str]) -> None:
        sink = ConsoleErrorSink()
        values = InMemoryValueSource(dict(valid_form, name="田中太郎", password="abcdefgh", phone="12345"))
        flow = make_flow(FakeBackend(), values, error_sink=sink)

        assert await flow.submit_form() is False
        assert set(sink.active) == {"name", "password", "phone"}


class TestSubmissionFailure:
    """Tests for a rejected registration."""

    async def test_server_rejection(self, valid_form: dict[str, str]) -> None:
        values = InMemoryValueSource(valid_form)
        notifier = ConsoleNotifier()
        page = ConsolePageNavigator()
        flow = make_flow(FakeBackend(register_status=500), values, notifier=notifier, page=page)

        await flow.submit_form()
        assert await flow.confirm_registration() is False

        assert flow.navigator.current is ViewId.CONFIRMATION
        assert values.is_disabled(REGISTER_BUTTON) is False
        assert notifier.active is not None
        # retry is possible with the same snapshot
        assert flow.snapshot is not None
