"""
UI Renderer for drawing primitives and text, plus text measurement.

Draws directly to pygame surfaces. The measurement helpers are also
used headless by the dialogue paginator, which only needs to know
whether a string fits on one line at a given width.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Callable, Iterable, Optional, Protocol

import pygame

logger = logging.getLogger(__name__)

# RGB or RGBA; alpha below 255 is blended
Color = tuple[int, ...]
LineFitOracle = Callable[[str], bool]


@dataclass(frozen=True)
class FontConfig:
    """Font configuration."""
    name: Optional[str] = None  # None = pygame default
    size: int = 22
    bold: bool = False
    italic: bool = False


class SizedFont(Protocol):
    """Anything that can report the pixel size of a string (pygame.font.Font does)."""

    def size(self, text: str) -> tuple[int, int]:
        ...


_font_cache: dict[FontConfig, pygame.font.Font] = {}


def load_font(config: Optional[FontConfig] = None) -> pygame.font.Font:
    """Get or create a font from config (cached per config)."""
    config = config or FontConfig()

    if config not in _font_cache:
        if not pygame.font.get_init():
            pygame.font.init()

        if config.name:
            font = pygame.font.Font(config.name, config.size)
        else:
            font = pygame.font.SysFont(None, config.size)
        font.set_bold(config.bold)
        font.set_italic(config.italic)
        _font_cache[config] = font

    return _font_cache[config]


def line_fit_oracle(font: SizedFont, max_width: float) -> LineFitOracle:
    """
    Build a predicate telling whether a string renders on a single line.

    The empty string always fits. With a degenerate width (<= 0) nothing
    else fits, which leaves the paginator to force one word per line.
    """
    def fits_one_line(text: str) -> bool:
        if not text:
            return True
        if max_width <= 0:
            return False
        return font.size(text)[0] <= max_width

    return fits_one_line


class UIRenderer:
    """
    Renderer for UI elements.

    Usage:
        renderer = UIRenderer(screen_surface)
        renderer.draw_rect(10, 10, 100, 50, (50, 50, 70))
        renderer.draw_text("Hello", 60, 35, color=(255, 255, 255))
    """

    def __init__(self, surface: pygame.Surface):
        self.surface = surface

    def set_surface(self, surface: pygame.Surface) -> None:
        """Change the target surface."""
        self.surface = surface

    def get_font(self, config: Optional[FontConfig] = None) -> pygame.font.Font:
        return load_font(config)

    def draw_rect(
        self,
        x: float,
        y: float,
        width: float,
        height: float,
        color: Color,
    ) -> None:
        """Draw a filled rectangle."""
        rect = pygame.Rect(int(x), int(y), int(width), int(height))

        if len(color) == 4 and color[3] < 255:
            # Alpha blending needed
            temp = pygame.Surface((int(width), int(height)), pygame.SRCALPHA)
            temp.fill(color)
            self.surface.blit(temp, (int(x), int(y)))
        else:
            pygame.draw.rect(self.surface, color[:3], rect)

    def draw_text(
        self,
        text: str,
        x: float,
        y: float,
        color: Color = (255, 255, 255),
        font_config: Optional[FontConfig] = None,
    ) -> pygame.Rect:
        """
        Draw a single line of text with its top-left corner at (x, y).

        Returns:
            Bounding rect of rendered text
        """
        if not text:
            return pygame.Rect(int(x), int(y), 0, 0)

        font = self.get_font(font_config)
        text_surface = font.render(text, True, color[:3])
        if len(color) == 4 and color[3] < 255:
            text_surface.set_alpha(color[3])

        rect = text_surface.get_rect(topleft=(int(x), int(y)))
        self.surface.blit(text_surface, rect)
        return rect

    def draw_styled_line(
        self,
        text: str,
        spans: Iterable[tuple[int, int, Color]],
        x: float,
        y: float,
        base_color: Color = (255, 255, 255),
        font_config: Optional[FontConfig] = None,
    ) -> None:
        """
        Draw one line where [start, end) character ranges get their own color.

        Spans past the end of the text are clipped, so a partially revealed
        line can be drawn with the spans of the full line.
        """
        font = self.get_font(font_config)
        colors: list[Color] = [base_color] * len(text)
        for start, end, color in spans:
            for i in range(max(0, start), min(end, len(text))):
                colors[i] = color

        # Draw runs of equal color left to right
        cursor_x = x
        run_start = 0
        for i in range(1, len(text) + 1):
            if i == len(text) or colors[i] != colors[run_start]:
                run = text[run_start:i]
                self.draw_text(run, cursor_x, y, colors[run_start], font_config)
                cursor_x += font.size(run)[0]
                run_start = i

    def draw_sprite(
        self,
        sprite_path: str,
        x: float,
        y: float,
        width: Optional[float] = None,
        height: Optional[float] = None,
    ) -> None:
        """Draw a sprite image."""
        try:
            image = pygame.image.load(sprite_path)
            if width and height:
                image = pygame.transform.scale(image, (int(width), int(height)))
            self.surface.blit(image, (int(x), int(y)))
        except (pygame.error, FileNotFoundError):
            logger.debug("Sprite unavailable, drawing placeholder: %s", sprite_path)
            w = int(width) if width else 32
            h = int(height) if height else 32
            self.draw_rect(x, y, w, h, (255, 0, 255))

    def measure_text(
        self,
        text: str,
        font_config: Optional[FontConfig] = None,
    ) -> tuple[int, int]:
        """Measure text dimensions."""
        return self.get_font(font_config).size(text)

    def get_line_height(self, font_config: Optional[FontConfig] = None) -> int:
        """Get font line height."""
        return self.get_font(font_config).get_height()
