"""
Input handler with action-based abstraction.

Translates raw pygame events (keys, mouse clicks, touch) into semantic
Actions. With an event bus, actions are published as they happen;
without one, they are collected until the game loop drains them.

Usage:
    handler = InputHandler(event_bus)
    event_bus.subscribe(InputEvent.ACTION_PRESSED, on_action)

    for event in pygame.event.get():
        handler.process_event(event)

    # Or, polling
    handler = InputHandler()
    for action in handler.drain():
        ...
"""

from __future__ import annotations

import logging
from enum import Enum

import pygame

from narratix_engine.core.actions import (
    Action,
    DEFAULT_KEY_BINDINGS,
    DEFAULT_MOUSE_BINDINGS,
)
from narratix_engine.core.events import EventBus

logger = logging.getLogger(__name__)


class InputEvent(Enum):
    """Input-specific events."""
    ACTION_PRESSED = "input.action_pressed"


class InputHandler:
    """
    Maps raw pygame events to Actions.

    Touch events (FINGERDOWN) always count as ADVANCE, matching a tap
    anywhere on the overlay.
    """

    def __init__(
        self,
        event_bus: EventBus | None = None,
        key_bindings: dict[Action, list[int]] | None = None,
    ):
        self.event_bus = event_bus

        self._key_bindings = {
            action: list(keys)
            for action, keys in (key_bindings or DEFAULT_KEY_BINDINGS).items()
        }
        self._mouse_bindings = {
            action: list(buttons) for action, buttons in DEFAULT_MOUSE_BINDINGS.items()
        }
        self._reverse_key_bindings: dict[int, list[Action]] = {}
        self._rebuild_reverse_bindings()

        # Actions seen since the last drain (only without an event bus)
        self._pending: list[Action] = []

    def _rebuild_reverse_bindings(self) -> None:
        """Build reverse lookup: key -> actions."""
        self._reverse_key_bindings.clear()
        for action, keys in self._key_bindings.items():
            for key in keys:
                self._reverse_key_bindings.setdefault(key, []).append(action)

    # Key binding management

    def bind_key(self, action: Action, key: int) -> None:
        """Add a key binding for an action."""
        keys = self._key_bindings.setdefault(action, [])
        if key not in keys:
            keys.append(key)
        self._rebuild_reverse_bindings()

    def unbind_key(self, action: Action, key: int) -> None:
        """Remove a key binding for an action."""
        if key in self._key_bindings.get(action, []):
            self._key_bindings[action].remove(key)
        self._rebuild_reverse_bindings()

    def get_bindings(self, action: Action) -> list[int]:
        """Get all key bindings for an action."""
        return self._key_bindings.get(action, []).copy()

    # Event processing

    def process_event(self, event: pygame.event.Event) -> list[Action]:
        """
        Process a pygame event.

        Returns:
            Actions triggered by this event (possibly empty)
        """
        actions: list[Action] = []

        if event.type == pygame.KEYDOWN:
            actions = list(self._reverse_key_bindings.get(event.key, []))

        elif event.type == pygame.MOUSEBUTTONDOWN:
            actions = [
                action for action, buttons in self._mouse_bindings.items()
                if event.button in buttons
            ]

        elif event.type == pygame.FINGERDOWN:
            actions = [Action.ADVANCE]

        for action in actions:
            self._emit(action)

        return actions

    def drain(self) -> list[Action]:
        """Return and clear the actions collected since the last call (polling mode)."""
        actions, self._pending = self._pending, []
        return actions

    def _emit(self, action: Action) -> None:
        logger.debug("Action pressed: %s", action.name)
        if self.event_bus is not None:
            self.event_bus.publish(InputEvent.ACTION_PRESSED, action=action)
        else:
            self._pending.append(action)
