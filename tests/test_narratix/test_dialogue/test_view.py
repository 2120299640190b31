"""Tests for the overlay view model and renderer."""

import pytest
from unittest.mock import MagicMock

from narratix.config import OverlayConfig
from narratix.dialogue.models import NO_AVATAR, DialogueScript, HighlightSpan, Message
from narratix.dialogue.system import OverlaySystem
from narratix.dialogue.view import OverlayRenderer, OverlayViewModel

RED = (255, 0, 0, 255)


@pytest.fixture
def overlay(event_bus, char_oracle, scheduler):
    return OverlaySystem(event_bus, char_oracle, scheduler=scheduler)


@pytest.fixture
def script():
    return DialogueScript(
        script_id="VIEW",
        default_avatar="start.png",
        messages=(
            Message("Hi [AVATAR=0] there", highlight_map={"there": RED},
                    reveal_speed_ms=10, avatar_variants=("happy.png",)),
        ),
    )


def test_view_model_follows_session(event_bus, overlay, script):
    vm = OverlayViewModel(event_bus)
    assert not vm.is_visible

    overlay.start_script(script)
    assert vm.is_visible
    assert vm.current_avatar == "start.png"
    assert vm.total_chunks == 1
    assert vm.line1.text == ""
    assert not vm.is_waiting

    overlay.update(0.015)
    assert vm.line1.text == "H"

    overlay.advance()
    assert vm.line1.text == "Hi"
    assert vm.is_waiting

    overlay.advance()
    assert vm.current_avatar == "happy.png"
    assert not vm.is_waiting

    overlay.advance()
    assert vm.line1.text == "there"
    assert vm.line1.spans == (HighlightSpan(0, 5, RED),)

    overlay.advance()
    assert not vm.is_visible
    assert vm.line1.text == ""


def test_renderer_draws_nothing_when_hidden(event_bus):
    ui = MagicMock()
    renderer = OverlayRenderer(OverlayViewModel(event_bus), ui)

    renderer.render(800, 600)

    ui.draw_rect.assert_not_called()


def test_renderer_draws_lines_avatar_and_cursor(event_bus, overlay, script):
    ui = MagicMock()
    ui.get_line_height.return_value = 20
    vm = OverlayViewModel(event_bus)
    config = OverlayConfig(text_max_width=200, cursor_blink_seconds=0.5)
    renderer = OverlayRenderer(vm, ui, config)

    overlay.start_script(script)
    overlay.advance()
    renderer.render(800, 600)

    ui.draw_rect.assert_called_once()
    ui.draw_sprite.assert_called_once()
    assert ui.draw_sprite.call_args.args[0] == "start.png"

    lines = [c.args[0] for c in ui.draw_styled_line.call_args_list]
    assert lines == ["Hi", ""]
    ui.draw_text.assert_called_once()    # waiting cursor


def test_cursor_blinks(event_bus, overlay, script):
    vm = OverlayViewModel(event_bus)
    renderer = OverlayRenderer(vm, MagicMock(), OverlayConfig(cursor_blink_seconds=0.5))

    overlay.start_script(script)
    assert not renderer.cursor_visible

    overlay.advance()
    assert renderer.cursor_visible

    renderer.update(0.75)
    assert not renderer.cursor_visible

    renderer.update(0.5)
    assert renderer.cursor_visible


def test_no_avatar_is_not_drawn(event_bus, overlay):
    ui = MagicMock()
    ui.get_line_height.return_value = 20
    vm = OverlayViewModel(event_bus)
    overlay.start_script(DialogueScript("PLAIN", default_avatar=NO_AVATAR, messages=(Message("Yo"),)))

    OverlayRenderer(vm, ui).render(800, 600)

    ui.draw_sprite.assert_not_called()
