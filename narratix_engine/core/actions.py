"""
Input action definitions.

Actions abstract raw input (keys, taps, buttons) into semantic actions.
Overlay logic should use Actions, not raw keys. This enables:
- Key rebinding
- Touch, mouse and keyboard driving the same flow

Usage:
    if action is Action.ADVANCE:
        overlay.advance()
"""

from enum import Enum, auto

import pygame


class Action(Enum):
    """
    Semantic input actions.

    ADVANCE is the single opaque "tap" the dialogue flow reacts to;
    whether it skips the reveal or moves on is decided by the overlay.
    """

    ADVANCE = auto()
    CANCEL = auto()


# Default keyboard bindings (action -> list of pygame key codes)
DEFAULT_KEY_BINDINGS: dict[Action, list[int]] = {
    Action.ADVANCE: [pygame.K_SPACE, pygame.K_RETURN, pygame.K_KP_ENTER],
    Action.CANCEL: [pygame.K_ESCAPE],
}

# Mouse buttons that count as a tap (1 = left)
DEFAULT_MOUSE_BINDINGS: dict[Action, list[int]] = {
    Action.ADVANCE: [1],
}
