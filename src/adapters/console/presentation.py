"""
Console presentation adapters - Implement the presentation ports via logging.

These adapters stand in for a rendered page: they track what would be shown
(active error per field, visible view, focused element, notification) and
log each change, which makes the flow observable from the console.
"""

import asyncio
import logging

from src.domain.ports import ViewId

logger = logging.getLogger(__name__)

_NOTIFY_LEVELS = {
    "error": logging.WARNING,
    "success": logging.INFO,
    "info": logging.INFO,
}


class ConsoleErrorSink:
    """
    Implements ErrorSink protocol via console logging.

    Uses structural subtyping - no explicit inheritance from Protocol.
    Holds at most one active message per field.
    """

    def __init__(self) -> None:
        self.active: dict[str, str] = {}

    def show_error(self, field_id: str, message: str) -> None:
        self.active[field_id] = message
        logger.info("[ERROR] %s: %s", field_id, message)

    def hide_error(self, field_id: str) -> None:
        if self.active.pop(field_id, None) is not None:
            logger.debug("[ERROR CLEARED] %s", field_id)


class LoggingViewRenderer:
    """Implements ViewRenderer protocol; records visibility and focus."""

    def __init__(self) -> None:
        self.visible: ViewId = ViewId.FORM
        self.focused: str | None = None

    def fade_out(self, view: ViewId) -> None:
        logger.debug("[VIEW] fade out %s", view.value)

    def fade_in(self, view: ViewId) -> None:
        logger.debug("[VIEW] fade in %s", view.value)

    def swap(self, hide: ViewId, show: ViewId) -> None:
        self.visible = show
        logger.info("[VIEW] %s -> %s", hide.value, show.value)

    def focus(self, element_id: str) -> None:
        self.focused = element_id
        logger.debug("[FOCUS] %s", element_id)


class ConsoleNotifier:
    """
    Implements Notifier protocol via console logging.

    A new notification replaces the active one. Dismissal is scheduled on
    the running event loop, so notify() must be called from async code.
    """

    def __init__(self) -> None:
        self.active: str | None = None
        self._dismiss_handle: asyncio.TimerHandle | None = None

    def notify(self, message: str, *, level: str = "error", dismiss_after: float = 3.0) -> None:
        if self._dismiss_handle is not None:
            self._dismiss_handle.cancel()

        self.active = message
        logger.log(_NOTIFY_LEVELS.get(level, logging.INFO), "[NOTICE] %s", message)
        self._dismiss_handle = asyncio.get_running_loop().call_later(dismiss_after, self.dismiss)

    def dismiss(self) -> None:
        if self._dismiss_handle is not None:
            self._dismiss_handle.cancel()
            self._dismiss_handle = None
        self.active = None


class ConsolePageNavigator:
    """Implements PageNavigator protocol; logs page-level navigation."""

    def __init__(self, home_url: str = "/") -> None:
        self.home_url = home_url
        self.reloads = 0

    def reload(self) -> None:
        self.reloads += 1
        logger.info("[PAGE] reload")

    def go_home(self) -> None:
        logger.info("[PAGE] navigate to %s", self.home_url)
