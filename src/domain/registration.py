"""
Registration flow - Orchestrates validation, confirmation and submission.

Flow:
    FORM          user input, live validation (input / blur)
      | submit_form: snapshot captured, whole form validated
      v
    CONFIRMATION  entries shown for review
      | confirm_registration: snapshot submitted through the transport
      v
    COMPLETE      form reset; browser back reloads the page

SubmissionFailed is the only error that crosses from the transport into
this layer. confirm_registration is its top-level handler: it shows an
auto-dismissing notification and re-enables the register button.
"""

import asyncio
import logging
from dataclasses import dataclass, field

from .checks import PasswordStrength, evaluate_password_strength
from .exceptions import MissingSnapshot, SubmissionFailed
from .navigation import ViewStateMachine
from .ports import (
    Notifier,
    PageNavigator,
    SubmissionTransport,
    SubmitFailureReason,
    ValidationOutcome,
    ValueSource,
    ViewId,
)
from .rules import FormSnapshot
from .validation import FormValidator

logger = logging.getLogger(__name__)

REGISTER_BUTTON = "register-btn"
EMPTY_PLACEHOLDER = "未入力"
SUCCESS_MESSAGE = "登録が完了しました！"

FAILURE_MESSAGES = {
    SubmitFailureReason.NETWORK: "ネットワークエラーが発生しました。インターネット接続を確認してください。",
    SubmitFailureReason.TIMEOUT: "サーバーの応答がありません。しばらく時間をおいて再度お試しください。",
}
GENERIC_FAILURE_MESSAGE = "登録中にエラーが発生しました。もう一度お試しください。"


@dataclass
class RegistrationFlow:
    """
    Application service for the three-screen registration flow.

    Presentation is reached only through the injected ports.
    """

    values: ValueSource
    validator: FormValidator
    navigator: ViewStateMachine
    transport: SubmissionTransport
    notifier: Notifier
    page: PageNavigator
    notification_seconds: float = 3.0
    min_submit_seconds: float = 1.0
    _snapshot: FormSnapshot | None = field(default=None, init=False, repr=False)
    _submitting: bool = field(default=False, init=False, repr=False)
    _confirming: bool = field(default=False, init=False, repr=False)

    @property
    def snapshot(self) -> FormSnapshot | None:
        return self._snapshot

    def start(self) -> None:
        """Restore the screen named by the navigation hint."""
        self.navigator.restore()

    async def on_input(self, field_name: str) -> ValidationOutcome:
        return await self.validator.validate_field(field_name, self.values.get_value(field_name))

    async def on_blur(self, field_name: str) -> ValidationOutcome:
        return await self.validator.validate_field(field_name, self.values.get_value(field_name), touch=True)

    async def submit_form(self) -> bool:
        """
        Validate the whole form and move to the confirmation screen.

        Re-entrant submits while one is running are ignored.

        Returns:
            True if the form was valid and the confirmation screen shown
        """
        if self._submitting:
            return False

        self._submitting = True
        try:
            snapshot = FormSnapshot.capture(self.values, self.validator.field_names)
            if not await self.validator.validate_form(snapshot):
                return False

            self._snapshot = snapshot
            if not await self.navigator.go_to_confirmation():
                self._snapshot = None
                return False
            return True
        finally:
            self._submitting = False

    def confirmation_entries(self) -> list[tuple[str, str]]:
        """
        Field/value pairs for the confirmation screen.

        Raises:
            MissingSnapshot: If no validated snapshot exists
        """
        snapshot = self._require_snapshot()
        return [(name, value or EMPTY_PLACEHOLDER) for name, value in snapshot.items()]

    async def confirm_registration(self) -> bool:
        """
        Submit the confirmed snapshot and move to the completion screen.

        Only runs from the confirmation screen, and only one submission is
        in flight at a time; other calls return False without submitting.

        Returns:
            True if the registration was accepted and the completion screen
            shown; False otherwise (failures are already notified)

        Raises:
            MissingSnapshot: If no validated snapshot exists
        """
        snapshot = self._require_snapshot()
        if self._confirming:
            return False
        if not self.navigator.is_current(ViewId.CONFIRMATION):
            logger.warning("Ignoring confirm outside the confirmation screen (on %s)", self.navigator.current.value)
            return False

        self._confirming = True
        self.values.disable(REGISTER_BUTTON)
        try:
            await self._submit(snapshot)
        except SubmissionFailed as exc:
            logger.warning("Registration submission failed: %s", exc)
            self.notifier.notify(
                FAILURE_MESSAGES.get(exc.reason, GENERIC_FAILURE_MESSAGE),
                level="error",
                dismiss_after=self.notification_seconds,
            )
            self.values.enable(REGISTER_BUTTON)
            return False
        finally:
            self._confirming = False

        self.notifier.notify(SUCCESS_MESSAGE, level="success", dismiss_after=self.notification_seconds)
        await self.reset_form()
        return await self.navigator.go_to_complete()

    async def reset_form(self) -> None:
        """Clear every value, error and touched flag, and drop the snapshot."""
        for name in self.validator.field_names:
            self.values.set_value(name, "")
        await self.validator.clear_errors()
        self._snapshot = None

    async def go_back(self) -> bool:
        """Previous screen; the snapshot is dropped once back on the form."""
        moved = await self.navigator.go_back()
        if moved and self.navigator.is_current(ViewId.FORM):
            self._snapshot = None
        return moved

    async def handle_browser_back(self) -> bool:
        """
        Browser back button.

        From COMPLETE the page is reloaded (the registration is finished);
        otherwise this is the same as go_back().
        """
        if self.navigator.is_current(ViewId.COMPLETE):
            self.page.reload()
            return True
        return await self.go_back()

    def go_home(self) -> None:
        self.page.go_home()

    def has_unsaved_changes(self) -> bool:
        """True while on the form screen with any non-empty value."""
        if not self.navigator.is_current(ViewId.FORM):
            return False
        return any(self.values.get_value(name).strip() for name in self.validator.field_names)

    def password_strength(self) -> PasswordStrength:
        return evaluate_password_strength(self.values.get_value("password"))

    async def _submit(self, snapshot: FormSnapshot) -> None:
        # Keep the loading state visible for at least min_submit_seconds
        result, _ = await asyncio.gather(
            self.transport.submit(snapshot),
            asyncio.sleep(self.min_submit_seconds),
        )
        if not result.ok:
            raise SubmissionFailed(result.reason or SubmitFailureReason.SERVER, result.message)
        logger.info("Registration submitted")

    def _require_snapshot(self) -> FormSnapshot:
        if self._snapshot is None:
            raise MissingSnapshot("No validated form data to confirm")
        return self._snapshot
