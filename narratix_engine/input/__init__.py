"""Input handling module."""

from narratix_engine.input.handler import InputHandler, InputEvent

__all__ = [
    "InputHandler",
    "InputEvent",
]
