"""
Core runtime module.

Exports:
- EventBus, Event, OverlayEvent: Event system
- Scheduler, TimerHandle: Frame-clock timers
- Action: Input actions
"""

from narratix_engine.core.events import EventBus, Event, OverlayEvent
from narratix_engine.core.timer import Scheduler, TimerHandle
from narratix_engine.core.actions import Action

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
