"""
Overlay view - host-side state and drawing for the dialogue overlay.

OverlayViewModel listens to overlay events and keeps what the screen
needs; OverlayRenderer draws it with the pygame UIRenderer.
"""

from __future__ import annotations

from typing import Optional

from narratix_engine.core.events import Event, EventBus, OverlayEvent
from narratix_engine.ui.renderer import UIRenderer
from narratix.config import OverlayConfig
from narratix.dialogue.models import NO_AVATAR, AvatarRef, StyledText


class OverlayViewModel:
    """
    Display state of the overlay, fed by the event bus.

    Attributes:
        is_visible: A session is open
        current_avatar: Avatar to show (NO_AVATAR for none)
        line1, line2: Currently visible part of the chunk
        is_waiting: Chunk fully shown, waiting for a tap
        total_chunks: Chunk count of the current text segment
    """

    def __init__(self, event_bus: EventBus):
        self.is_visible = False
        self.current_avatar: AvatarRef = NO_AVATAR
        self.line1 = StyledText()
        self.line2 = StyledText()
        self.is_waiting = False
        self.total_chunks = 0

        event_bus.subscribe(OverlayEvent.SESSION_OPENED, self._on_opened)
        event_bus.subscribe(OverlayEvent.SESSION_FAILED, self._on_closed)
        event_bus.subscribe(OverlayEvent.SESSION_CLOSED, self._on_closed)
        event_bus.subscribe(OverlayEvent.AVATAR_CHANGED, self._on_avatar_changed)
        event_bus.subscribe(OverlayEvent.TOTAL_CHUNKS_FOR_SEGMENT, self._on_total_chunks)
        event_bus.subscribe(OverlayEvent.CHUNK_VISIBLE_TEXT_CHANGED, self._on_visible_text)
        event_bus.subscribe(OverlayEvent.CHUNK_REVEAL_COMPLETE, self._on_reveal_complete)

    def _on_opened(self, event: Event) -> None:
        self.is_visible = True
        self.current_avatar = event.get("avatar", NO_AVATAR)

    def _on_closed(self, event: Event) -> None:
        self.is_visible = False
        self.line1 = StyledText()
        self.line2 = StyledText()
        self.is_waiting = False
        self.total_chunks = 0

    def _on_avatar_changed(self, event: Event) -> None:
        self.current_avatar = event["avatar"]

    def _on_total_chunks(self, event: Event) -> None:
        self.total_chunks = event["count"]

    def _on_visible_text(self, event: Event) -> None:
        self.line1 = event["line1"]
        self.line2 = event["line2"]
        self.is_waiting = False

    def _on_reveal_complete(self, event: Event) -> None:
        self.is_waiting = True


class OverlayRenderer:
    """
    Draws the overlay: bottom panel, avatar, two text lines, waiting cursor.
    """

    def __init__(
        self,
        view_model: OverlayViewModel,
        renderer: UIRenderer,
        config: Optional[OverlayConfig] = None,
    ):
        self.view_model = view_model
        self.renderer = renderer
        self.config = config or OverlayConfig()

        # Visual settings
        self.panel_color = (0, 0, 0, 200)
        self.avatar_size = 160
        self.margin = 16
        self.cursor_glyph = "_"

        self._blink_timer = 0.0

    @property
    def cursor_visible(self) -> bool:
        """Blink phase of the waiting cursor."""
        period = self.config.cursor_blink_seconds
        return self.view_model.is_waiting and (self._blink_timer % (period * 2)) < period

    def update(self, dt: float) -> None:
        self._blink_timer += dt

    def render(self, screen_width: int, screen_height: int) -> None:
        """Render the overlay panel at the bottom of the screen."""
        vm = self.view_model
        if not vm.is_visible:
            return

        font = self.config.font
        panel_y = screen_height - self.config.panel_height
        self.renderer.draw_rect(0, panel_y, screen_width, self.config.panel_height, self.panel_color)

        if vm.current_avatar != NO_AVATAR:
            self.renderer.draw_sprite(
                vm.current_avatar,
                self.margin,
                screen_height - self.avatar_size - self.margin,
                self.avatar_size,
                self.avatar_size,
            )

        line_height = self.renderer.get_line_height(font)
        text_x = screen_width - self.config.text_max_width - self.margin * 2
        text_y = screen_height - line_height * 2 - self.margin * 2

        for i, line in enumerate((vm.line1, vm.line2)):
            spans = [(span.start, span.end, span.color) for span in line.spans]
            self.renderer.draw_styled_line(
                line.text, spans, text_x, text_y + i * line_height,
                base_color=self.config.text_color, font_config=font,
            )

        if self.cursor_visible:
            self.renderer.draw_text(
                self.cursor_glyph,
                screen_width - self.margin * 2,
                text_y + line_height,
                color=self.config.text_color,
                font_config=font,
            )
