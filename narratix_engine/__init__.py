"""
Narratix Engine

Runtime plumbing for the dialogue overlay: typed event bus, frame-clock
timers, action-based input and pygame text measurement.

Quick Start:
    from narratix_engine import EventBus, Scheduler

    bus = EventBus()
    scheduler = Scheduler()
    scheduler.call_every(30, on_tick)

    # Each fixed update
    scheduler.update(dt)
"""

__version__ = "0.1.0"

from narratix_engine.core import (
    Action,
    Event,
    EventBus,
    OverlayEvent,
    Scheduler,
    TimerHandle,
)

__all__ = [
    # Events
    "EventBus",
    "Event",
    "OverlayEvent",
    # Timers
    "Scheduler",
    "TimerHandle",
    # Input
    "Action",
]
