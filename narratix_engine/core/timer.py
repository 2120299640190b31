"""
Frame-clock timers.

Timers are advanced by the game loop through Scheduler.update(dt), so
every callback runs on the loop's thread, serialized with input
handling. Nothing here sleeps or spawns threads.

Usage:
    scheduler = Scheduler()
    handle = scheduler.call_every(30, on_tick)   # every 30 ms
    scheduler.call_later(500, on_timeout)        # once, after 500 ms

    # In the fixed update
    scheduler.update(dt)

    # When the owner goes away
    handle.cancel()
"""

from __future__ import annotations

from typing import Callable

TimerCallback = Callable[[], None]


class TimerHandle:
    """
    A scheduled callback.

    Attributes:
        interval_ms: Delay between firings (first firing included)
        repeat: Whether the timer re-arms after firing
    """

    def __init__(self, interval_ms: float, callback: TimerCallback, repeat: bool):
        self.interval_ms = max(0.0, float(interval_ms))
        self.repeat = repeat
        self._callback = callback
        self._elapsed_ms = 0.0
        self._cancelled = False

    @property
    def cancelled(self) -> bool:
        return self._cancelled

    @property
    def active(self) -> bool:
        return not self._cancelled

    def cancel(self) -> None:
        """Stop the timer. Safe to call more than once, and from its own callback."""
        self._cancelled = True

    def _advance(self, dt_ms: float) -> None:
        """Accumulate time and fire as many times as the interval allows."""
        self._elapsed_ms += dt_ms

        while not self._cancelled and self._elapsed_ms >= self.interval_ms:
            self._elapsed_ms -= self.interval_ms
            if not self.repeat:
                self._cancelled = True
            self._callback()

            # A zero interval fires once per update, never in a tight loop
            if self.interval_ms == 0:
                self._elapsed_ms = 0.0
                break


class Scheduler:
    """
    Owns every pending timer and advances them from the game loop.

    Timers created during update() start counting on the next update.
    """

    def __init__(self):
        self._timers: list[TimerHandle] = []

    def call_every(self, interval_ms: float, callback: TimerCallback) -> TimerHandle:
        """Schedule a repeating callback."""
        return self._add(TimerHandle(interval_ms, callback, repeat=True))

    def call_later(self, delay_ms: float, callback: TimerCallback) -> TimerHandle:
        """Schedule a one-shot callback."""
        return self._add(TimerHandle(delay_ms, callback, repeat=False))

    def cancel_all(self) -> None:
        """Cancel every pending timer."""
        for timer in self._timers:
            timer.cancel()
        self._timers.clear()

    @property
    def pending(self) -> int:
        """Number of timers still armed."""
        return sum(1 for timer in self._timers if timer.active)

    def update(self, dt: float) -> None:
        """
        Advance all timers.

        Args:
            dt: Elapsed time in seconds (the loop's fixed timestep)
        """
        dt_ms = dt * 1000.0

        for timer in list(self._timers):
            if timer.active:
                timer._advance(dt_ms)

        self._timers = [timer for timer in self._timers if timer.active]

    def _add(self, timer: TimerHandle) -> TimerHandle:
        self._timers.append(timer)
        return timer
