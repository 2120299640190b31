"""
Overlay configuration.
"""

from __future__ import annotations

from typing import Any, Mapping, Optional

from narratix_engine.core.actions import DEFAULT_KEY_BINDINGS, Action
from narratix_engine.ui.renderer import Color, FontConfig


class OverlayConfig:
    """Configuration for the dialogue overlay."""

    def __init__(
        self,
        font: Optional[FontConfig] = None,
        text_max_width: int = 250,
        default_speed_ms: int = 30,
        scripts_dir: str = "data/dialogue",
        avatar_dir: str = "data/avatars",
        avatar_extension: str = ".png",
        text_color: Color = (255, 255, 255),
        panel_height: int = 300,
        cursor_blink_seconds: float = 0.5,
        key_bindings: Optional[dict[Action, list[int]]] = None,
    ):
        self.font = font or FontConfig()
        self.text_max_width = text_max_width
        self.default_speed_ms = default_speed_ms
        self.scripts_dir = scripts_dir
        self.avatar_dir = avatar_dir
        self.avatar_extension = avatar_extension
        self.text_color = text_color
        self.panel_height = panel_height
        self.cursor_blink_seconds = cursor_blink_seconds
        self.key_bindings = {
            action: list(keys)
            for action, keys in (key_bindings or DEFAULT_KEY_BINDINGS).items()
        }

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> OverlayConfig:
        """
        Build a config from a settings mapping, ignoring unknown keys.

        A "font" entry may be a mapping of FontConfig fields.
        "key_bindings" maps action names to pygame key codes.
        """
        known = {
            "text_max_width", "default_speed_ms", "scripts_dir", "avatar_dir",
            "avatar_extension", "panel_height", "cursor_blink_seconds",
        }
        kwargs: dict[str, Any] = {k: v for k, v in data.items() if k in known}

        if "text_color" in data:
            kwargs["text_color"] = tuple(data["text_color"])

        font = data.get("font")
        if isinstance(font, Mapping):
            kwargs["font"] = FontConfig(**{
                k: v for k, v in font.items() if k in ("name", "size", "bold", "italic")
            })

        bindings = data.get("key_bindings")
        if isinstance(bindings, Mapping):
            kwargs["key_bindings"] = {
                Action[name.upper()]: list(keys) for name, keys in bindings.items()
                if name.upper() in Action.__members__
            }

        return cls(**kwargs)
