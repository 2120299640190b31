"""
Overlay Demo: Scripted Dialogue

Demonstrates:
- Script loading with schema validation
- Avatar changes driven by [AVATAR=N] tags
- Two-line pagination measured with a real font
- Typewriter reveal, tap to skip, tap to advance

Controls: Space / Enter / click to advance, Escape to close.

Run: python -m demos.overlay_demo
"""

import logging

import pygame

from narratix_engine.core import EventBus, OverlayEvent, Scheduler
from narratix_engine.input import InputHandler
from narratix_engine.ui import UIRenderer, line_fit_oracle, load_font
from narratix.config import OverlayConfig
from narratix.dialogue import (
    AvatarResolver,
    OverlayRenderer,
    OverlaySystem,
    OverlayViewModel,
    ScriptLoader,
)

WIDTH, HEIGHT = 960, 540
FIXED_TIMESTEP = 1 / 60


def main() -> None:
    logging.basicConfig(level=logging.INFO)

    pygame.init()
    screen = pygame.display.set_mode((WIDTH, HEIGHT))
    pygame.display.set_caption("Narratix - Overlay Demo")
    clock = pygame.time.Clock()

    config = OverlayConfig()
    bus = EventBus()
    input_handler = InputHandler(key_bindings=config.key_bindings)
    loader = ScriptLoader(
        config.scripts_dir,
        AvatarResolver(config.avatar_dir, config.avatar_extension),
        default_speed_ms=config.default_speed_ms,
    )
    overlay = OverlaySystem(
        bus,
        line_fit_oracle(load_font(config.font), config.text_max_width),
        loader=loader,
        scheduler=Scheduler(),
    )
    view_model = OverlayViewModel(bus)
    overlay_renderer = OverlayRenderer(view_model, UIRenderer(screen), config)

    running = True

    def on_closed(event):
        nonlocal running
        running = False

    bus.subscribe(OverlayEvent.SESSION_CLOSED, on_closed)
    bus.subscribe(OverlayEvent.SESSION_FAILED, on_closed)

    overlay.start_dialogue("DEMO_1")

    while running:
        for event in pygame.event.get():
            if event.type == pygame.QUIT:
                running = False
            else:
                input_handler.process_event(event)

        for action in input_handler.drain():
            overlay.handle_action(action)

        overlay.update(FIXED_TIMESTEP)
        overlay_renderer.update(FIXED_TIMESTEP)

        screen.fill((30, 34, 52))
        overlay_renderer.render(WIDTH, HEIGHT)
        pygame.display.flip()
        clock.tick(60)

    pygame.quit()


if __name__ == "__main__":
    main()
