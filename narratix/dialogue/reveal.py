"""
Reveal - the typewriter animation of a single chunk.

Progress is a plain RevealState value moved forward by the functions
below; RevealController only owns the timer that calls them.

Line 2 starts revealing once line 1 is fully shown:

    count = 7, line1 = "Hello", line2 = "world"  ->  "Hello", "wo"
"""

from __future__ import annotations

from dataclasses import replace
from typing import NamedTuple, Optional

from narratix_engine.core.timer import Scheduler, TimerCallback, TimerHandle
from narratix.dialogue.models import Chunk, RevealState, StyledText


class RevealStep(NamedTuple):
    """Result of moving a reveal forward."""
    state: RevealState
    changed: bool      # revealed_char_count moved
    completed: bool    # became complete on this step


def begin_reveal(chunk: Chunk) -> RevealState:
    """Fresh state for a chunk; an empty chunk is complete from the start."""
    return RevealState(is_complete=chunk.total_chars == 0)


def tick_reveal(state: RevealState, chunk: Chunk) -> RevealStep:
    """Reveal one more character."""
    if state.is_complete:
        return RevealStep(state, False, False)

    total = chunk.total_chars
    count = min(state.revealed_char_count + 1, total)
    is_complete = count >= total
    return RevealStep(
        replace(state, revealed_char_count=count, is_complete=is_complete),
        True,
        is_complete,
    )


def complete_reveal(state: RevealState, chunk: Chunk, skipping: bool = True) -> RevealStep:
    """
    Jump straight to the end of the chunk.

    On an already complete chunk nothing changes.
    """
    if state.is_complete:
        return RevealStep(state, False, False)

    return RevealStep(
        RevealState(
            revealed_char_count=chunk.total_chars,
            is_skipping=skipping,
            is_complete=True,
        ),
        state.revealed_char_count != chunk.total_chars,
        True,
    )


def visible_lines(chunk: Chunk, revealed_char_count: int) -> tuple[StyledText, StyledText]:
    """Visible part of each line for a given character count."""
    len1 = len(chunk.line1)
    count1 = min(revealed_char_count, len1)
    count2 = min(max(0, revealed_char_count - len1), len(chunk.line2))
    return chunk.line1.visible(count1), chunk.line2.visible(count2)


class RevealController:
    """
    Owns the repeating tick timer of the current chunk.

    Arming a new chunk cancels the previous timer, so at most one tick
    source is alive at any time.
    """

    def __init__(self, scheduler: Scheduler):
        self.scheduler = scheduler
        self._handle: Optional[TimerHandle] = None

    @property
    def is_running(self) -> bool:
        return self._handle is not None and self._handle.active

    def start(self, speed_ms: int, on_tick: TimerCallback, on_instant: TimerCallback) -> None:
        """
        Start ticking for a new chunk.

        Args:
            speed_ms: Milliseconds per character
            on_tick: Called once per character
            on_instant: Called once on the next update when speed_ms <= 0
        """
        self.cancel()
        if speed_ms <= 0:
            self._handle = self.scheduler.call_later(0, on_instant)
        else:
            self._handle = self.scheduler.call_every(speed_ms, on_tick)

    def cancel(self) -> None:
        """Stop the current chunk's timer, if any."""
        if self._handle is not None:
            self._handle.cancel()
            self._handle = None
