"""
View state machine - Screen transitions of the registration flow.

States: FORM, CONFIRMATION, COMPLETE (closed set).

Forward transitions (push history, write navigation hint):
    FORM -> CONFIRMATION
    CONFIRMATION -> COMPLETE

Back transitions (pop history, no hint write):
    to the entry directly below the current one

Invariants:
- history is never empty and history[-1] == current
- at most one transition is in flight; requests arriving while
  `transitioning` is set are dropped, not queued
"""

import asyncio
import logging
from dataclasses import dataclass, field

from .exceptions import TransitionRejected
from .ports import NavigationHintStore, ViewId, ViewRenderer

logger = logging.getLogger(__name__)

FORWARD_EDGES = frozenset(
    {
        (ViewId.FORM, ViewId.CONFIRMATION),
        (ViewId.CONFIRMATION, ViewId.COMPLETE),
    }
)

FOCUS_TARGETS = {
    ViewId.FORM: "name",
    ViewId.CONFIRMATION: "register-btn",
    ViewId.COMPLETE: "home-btn",
}


@dataclass
class NavigationState:
    current: ViewId = ViewId.FORM
    history: list[ViewId] = field(default_factory=lambda: [ViewId.FORM])
    transitioning: bool = False


class ViewStateMachine:
    """Owns NavigationState; mutated only through the methods below."""

    def __init__(
        self,
        renderer: ViewRenderer,
        hint_store: NavigationHintStore,
        animation_window: float = 0.3,
    ) -> None:
        """
        Args:
            renderer: Visibility, fade and focus collaborator
            hint_store: Persisted navigation token (URL hash equivalent)
            animation_window: Seconds between fade-out start and view swap
        """
        self._renderer = renderer
        self._hint_store = hint_store
        self._animation_window = animation_window
        self._state = NavigationState()

    @property
    def current(self) -> ViewId:
        return self._state.current

    @property
    def history(self) -> tuple[ViewId, ...]:
        return tuple(self._state.history)

    @property
    def transitioning(self) -> bool:
        return self._state.transitioning

    def is_current(self, view: ViewId) -> bool:
        return self._state.current is view

    def restore(self) -> bool:
        """
        Jump to the view named by the navigation hint, if any.

        The jump is silent: no animation, no hint write. History restarts
        at the restored view.

        Returns:
            True if a jump happened
        """
        token = self._hint_store.read()
        try:
            target = ViewId(token)
        except ValueError:
            if token:
                logger.debug("Ignoring unknown navigation hint %r", token)
            return False

        if self._state.transitioning or target is self._state.current:
            return False

        self._renderer.swap(self._state.current, target)
        self._state.current = target
        self._state.history = [target]
        logger.info("Restored view %s from navigation hint", target.value)
        return True

    async def transit_to(self, target: ViewId, is_back: bool = False) -> bool:
        """
        Animate from the current view to `target`.

        Returns:
            True if the transition ran, False if it was rejected (no-op)
        """
        try:
            self._check_transition(target, is_back)
        except TransitionRejected as exc:
            logger.debug("Transition rejected: %s", exc)
            return False

        state = self._state
        source = state.current
        state.transitioning = True
        logger.info("View transition: %s -> %s", source.value, target.value)
        try:
            self._renderer.fade_out(source)
            await asyncio.sleep(self._animation_window)
            self._renderer.swap(source, target)
            self._renderer.fade_in(target)

            if is_back:
                state.history.pop()
            else:
                state.history.append(target)
                self._hint_store.write(target.value)
            state.current = target
        finally:
            state.transitioning = False

        self._renderer.focus(FOCUS_TARGETS[target])
        return True

    async def go_back(self) -> bool:
        """Return to the previous history entry; no-op when busy or at the root."""
        if self._state.transitioning or len(self._state.history) < 2:
            return False
        return await self.transit_to(self._state.history[-2], is_back=True)

    async def go_to_confirmation(self) -> bool:
        return await self.transit_to(ViewId.CONFIRMATION)

    async def go_to_complete(self) -> bool:
        return await self.transit_to(ViewId.COMPLETE)

    def _check_transition(self, target: ViewId, is_back: bool) -> None:
        state = self._state
        if state.transitioning:
            raise TransitionRejected(target, "transition in flight")
        if target is state.current:
            raise TransitionRejected(target, "already current")
        if is_back:
            if len(state.history) < 2 or state.history[-2] is not target:
                raise TransitionRejected(target, "not the previous history entry")
        elif (state.current, target) not in FORWARD_EDGES:
            raise TransitionRejected(target, f"not reachable from {state.current.value}")
