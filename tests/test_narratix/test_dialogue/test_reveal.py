"""Tests for the typewriter reveal."""

import pytest

from narratix.dialogue.models import Chunk, RevealState, StyledText
from narratix.dialogue.reveal import (
    RevealController,
    begin_reveal,
    complete_reveal,
    tick_reveal,
    visible_lines,
)

CHUNK = Chunk(StyledText("Hello"), StyledText("world"))


def test_begin_resets_progress():
    assert begin_reveal(CHUNK) == RevealState(0, False, False)


def test_empty_chunk_is_complete_immediately():
    assert begin_reveal(Chunk()).is_complete


def test_ticks_are_monotonic_and_complete_exactly_once():
    state = begin_reveal(CHUNK)
    counts = []
    completions = 0

    for _ in range(CHUNK.total_chars + 3):
        state, changed, completed = tick_reveal(state, CHUNK)
        counts.append(state.revealed_char_count)
        completions += completed
        if not state.is_complete:
            assert state.revealed_char_count < CHUNK.total_chars

    assert counts == sorted(counts)
    assert state.revealed_char_count == CHUNK.total_chars
    assert state.is_complete
    assert completions == 1


def test_skip_jumps_to_end():
    state, _, _ = tick_reveal(begin_reveal(CHUNK), CHUNK)

    state, changed, completed = complete_reveal(state, CHUNK)

    assert state == RevealState(10, True, True)
    assert changed and completed


def test_skip_on_complete_chunk_is_idempotent():
    state, _, _ = complete_reveal(begin_reveal(CHUNK), CHUNK)

    again, changed, completed = complete_reveal(state, CHUNK)

    assert again == state
    assert again.revealed_char_count == CHUNK.total_chars
    assert not changed and not completed


def test_finish_without_skip_flag():
    state, _, completed = complete_reveal(begin_reveal(CHUNK), CHUNK, skipping=False)

    assert completed
    assert not state.is_skipping


@pytest.mark.parametrize("count, expected", [
    (0, ("", "")),
    (3, ("Hel", "")),
    (5, ("Hello", "")),
    (7, ("Hello", "wo")),
    (10, ("Hello", "world")),
    (99, ("Hello", "world")),
])
def test_visible_lines(count, expected):
    line1, line2 = visible_lines(CHUNK, count)

    assert (line1.text, line2.text) == expected


def test_visible_lines_clip_highlights():
    from narratix.dialogue.models import HighlightSpan
    red = (255, 0, 0, 255)
    chunk = Chunk(StyledText("Hi there", (HighlightSpan(3, 8, red),)))

    line1, _ = visible_lines(chunk, 5)

    assert line1 == StyledText("Hi th", (HighlightSpan(3, 5, red),))
    assert visible_lines(chunk, 2)[0].spans == ()


def test_controller_ticks_at_speed(scheduler):
    ticks = []
    controller = RevealController(scheduler)

    controller.start(30, lambda: ticks.append("tick"), lambda: ticks.append("instant"))
    scheduler.update(0.1)

    assert ticks == ["tick"] * 3
    assert controller.is_running


def test_controller_zero_speed_reveals_on_next_update(scheduler):
    ticks = []
    controller = RevealController(scheduler)

    controller.start(0, lambda: ticks.append("tick"), lambda: ticks.append("instant"))
    scheduler.update(0.016)
    scheduler.update(0.016)

    assert ticks == ["instant"]


def test_controller_restart_cancels_previous_timer(scheduler):
    ticks = []
    controller = RevealController(scheduler)

    controller.start(10, lambda: ticks.append("old"), lambda: None)
    controller.start(10, lambda: ticks.append("new"), lambda: None)
    scheduler.update(0.015)

    assert ticks == ["new"]

    controller.cancel()
    scheduler.update(0.1)
    assert ticks == ["new"]
    assert not controller.is_running
