"""
Overlay system - runs dialogue sessions for the host UI.

Connects the pure navigation state machine to the outside world:
- Loads scripts through the ScriptLoader
- Drives the per-chunk reveal timer from the frame scheduler
- Routes the advance action (tap) and external close
- Publishes every overlay event on the EventBus

Usage:
    overlay = OverlaySystem(event_bus, fits_one_line, loader=ScriptLoader("data/dialogue"))
    overlay.start_dialogue("DEMO_1")

    # Each fixed update
    overlay.update(dt)

    # On tap
    overlay.advance()
"""

from __future__ import annotations

import logging
from typing import Callable, Optional

from narratix_engine.core.actions import Action
from narratix_engine.core.events import EventBus, OverlayEvent
from narratix_engine.core.timer import Scheduler
from narratix.dialogue.errors import ScriptLoadError
from narratix.dialogue.loader import ScriptLoader
from narratix.dialogue.models import DialogueScript, NavigationState, Session
from narratix.dialogue.navigation import DialogueNavigator, Emission, Transition
from narratix.dialogue.reveal import RevealController

logger = logging.getLogger(__name__)


class OverlaySystem:
    """
    Owns the single active dialogue session.

    All state changes (ticks, taps, close) happen inside method calls
    made from the game loop, so they never interleave. A request made by
    an event handler runs once the events of the current change have
    been delivered.
    """

    def __init__(
        self,
        event_bus: EventBus,
        fits_one_line: Callable[[str], bool],
        loader: Optional[ScriptLoader] = None,
        scheduler: Optional[Scheduler] = None,
    ):
        self.event_bus = event_bus
        self.loader = loader
        self.scheduler = scheduler or Scheduler()
        self.navigator = DialogueNavigator(fits_one_line)

        self._reveal = RevealController(self.scheduler)
        self._session: Optional[Session] = None
        # Requests made by event handlers while a transition is being published
        self._publishing = False
        self._deferred: list[Callable[[], None]] = []

    @property
    def session(self) -> Optional[Session]:
        """Current session snapshot (None before the first start)."""
        return self._session

    @property
    def is_visible(self) -> bool:
        """True while a session is open."""
        return self._session is not None and not self._session.is_closed

    @property
    def is_revealing(self) -> bool:
        return self._reveal.is_running

    # Session lifecycle

    def start_dialogue(self, script_id: str) -> bool:
        """
        Load a script and open a session on it.

        Returns:
            False when a session is already open or the script fails to load
        """
        if self.is_visible:
            logger.debug("Dialogue already visible, ignoring start of %s", script_id)
            return False

        if self.loader is None:
            logger.error("No script loader configured, cannot start %s", script_id)
            self.event_bus.publish(OverlayEvent.SESSION_FAILED, script_id=script_id,
                                   error="no script loader")
            return False

        try:
            script = self.loader.load(script_id)
        except ScriptLoadError as e:
            logger.error("Error loading script %s: %s", script_id, e.reason)
            self.event_bus.publish(OverlayEvent.SESSION_FAILED, script_id=script_id, error=e.reason)
            return False

        return self.start_script(script)

    def start_script(self, script: DialogueScript) -> bool:
        """Open a session on an already loaded script."""
        if self.is_visible:
            return False

        logger.info("Dialogue session %s opened", script.script_id)
        transition = self.navigator.start(script)
        transition.emissions.insert(0, Emission(
            OverlayEvent.SESSION_OPENED,
            {"script_id": script.script_id, "avatar": script.default_avatar},
        ))
        self._apply(transition)
        return True

    def close(self) -> None:
        """Close the open session (user dismiss). No-op when nothing is open."""
        self._run(self._close)

    # Input

    def advance(self) -> None:
        """The single user-advance action."""
        self._run(self._advance)

    def handle_action(self, action: Action) -> None:
        """Route a semantic input action."""
        if action is Action.ADVANCE:
            self.advance()
        elif action is Action.CANCEL:
            self.close()

    # Frame update

    def update(self, dt: float) -> None:
        """Advance timers; reveal ticks fire from here."""
        self.scheduler.update(dt)

    # Internals

    def _on_tick(self) -> None:
        self._run(self._tick)

    def _on_instant(self) -> None:
        self._run(self._finish_reveal)

    def _advance(self) -> None:
        if self.is_visible:
            self._apply(self.navigator.advance(self._session))

    def _close(self) -> None:
        if self.is_visible:
            self._apply(self.navigator.close(self._session))

    def _tick(self) -> None:
        if self.is_visible:
            self._apply(self.navigator.tick(self._session))

    def _finish_reveal(self) -> None:
        if self.is_visible:
            self._apply(self.navigator.finish_reveal(self._session))

    def _run(self, request: Callable[[], None]) -> None:
        """Run a state change now, or after the events being published are delivered."""
        if self._publishing:
            self._deferred.append(request)
            return
        request()

    def _apply(self, transition: Transition) -> None:
        previous = self._session
        self._session = session = transition.session
        self._sync_timer(previous, session)

        self._publishing = True
        try:
            for emission in transition.emissions:
                self.event_bus.publish(emission.event, **emission.data)
        finally:
            self._publishing = False

        while self._deferred:
            self._deferred.pop(0)()

    def _sync_timer(self, previous: Optional[Session], session: Session) -> None:
        """Keep exactly one tick source for an unfinished chunk, none otherwise."""
        if session.state is not NavigationState.AT_CHUNK or session.reveal.is_complete:
            self._reveal.cancel()
            return

        chunk_changed = (
            previous is None
            or previous.state is not NavigationState.AT_CHUNK
            or previous.cursor != session.cursor
        )
        if chunk_changed or not self._reveal.is_running:
            self._reveal.start(session.reveal_speed_ms, self._on_tick, self._on_instant)
