"""UI drawing and text measurement."""

from narratix_engine.ui.renderer import (
    FontConfig,
    LineFitOracle,
    UIRenderer,
    line_fit_oracle,
    load_font,
)

__all__ = [
    "FontConfig",
    "LineFitOracle",
    "UIRenderer",
    "line_fit_oracle",
    "load_font",
]
