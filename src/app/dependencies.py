"""
Dependency wiring - Factories that assemble the registration flow.

Builds adapters from Settings and injects them into the domain services.
Any port can be overridden, e.g. by a UI layer supplying its own value
source, error sink and renderer.
"""

import logging

from src.adapters.console.presentation import (
    ConsoleErrorSink,
    ConsoleNotifier,
    ConsolePageNavigator,
    LoggingViewRenderer,
)
from src.adapters.http import HttpSubmissionTransport, ZipAddressDirectory
from src.adapters.memory.state import InMemoryHintStore, InMemoryValueSource
from src.config.logging import configure_logging
from src.config.settings import Settings, get_settings
from src.domain.navigation import ViewStateMachine
from src.domain.ports import (
    ErrorSink,
    NavigationHintStore,
    Notifier,
    PageNavigator,
    PostcodeDirectory,
    SubmissionTransport,
    ValueSource,
    ViewRenderer,
)
from src.domain.registration import RegistrationFlow
from src.domain.rules import RuleRegistry, build_rule_registry
from src.domain.validation import FieldValidator, FormValidator

logger = logging.getLogger(__name__)


def get_postcode_directory(settings: Settings) -> PostcodeDirectory | None:
    """Postcode lookup adapter, or None when lookups are disabled."""
    if not settings.postcode_lookup_enabled:
        logger.info("Postcode existence lookup disabled")
        return None
    return ZipAddressDirectory(
        base_url=settings.postcode_lookup_url,
        timeout=settings.postcode_lookup_timeout_seconds,
    )


def get_submission_transport(settings: Settings) -> SubmissionTransport:
    return HttpSubmissionTransport(
        base_url=settings.submit_base_url,
        path=settings.submit_path,
        timeout=settings.submit_timeout_seconds,
    )


def get_rule_registry(settings: Settings) -> RuleRegistry:
    return build_rule_registry(get_postcode_directory(settings))


def build_registration_flow(
    settings: Settings | None = None,
    *,
    registry: RuleRegistry | None = None,
    values: ValueSource | None = None,
    error_sink: ErrorSink | None = None,
    renderer: ViewRenderer | None = None,
    hint_store: NavigationHintStore | None = None,
    transport: SubmissionTransport | None = None,
    notifier: Notifier | None = None,
    page: PageNavigator | None = None,
) -> RegistrationFlow:
    """
    Create the registration flow with injected dependencies.

    Applies the configured log level, then wires the ports. Ports not
    supplied fall back to the console, in-memory and HTTP adapters.
    """
    settings = settings or get_settings()
    configure_logging(settings.log_level)
    registry = registry or get_rule_registry(settings)

    validator = FormValidator(FieldValidator(registry), error_sink or ConsoleErrorSink())
    navigator = ViewStateMachine(
        renderer=renderer or LoggingViewRenderer(),
        hint_store=hint_store or InMemoryHintStore(),
        animation_window=settings.animation_window_seconds,
    )
    return RegistrationFlow(
        values=values or InMemoryValueSource(),
        validator=validator,
        navigator=navigator,
        transport=transport or get_submission_transport(settings),
        notifier=notifier or ConsoleNotifier(),
        page=page or ConsolePageNavigator(),
        notification_seconds=settings.notification_dismiss_seconds,
        min_submit_seconds=settings.min_submit_display_seconds,
    )
