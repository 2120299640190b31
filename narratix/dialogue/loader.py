"""
Script loader - reads dialogue scripts from JSON.

File format (one script per file, named after its id):

```
{
  "scriptId": "DEMO_1",
  "startAvatarResName": "guide_neutral",
  "messages": [
    {
      "text": "Welcome! [AVATAR=1] Ready for the tour?",
      "highlightMap": {"tour": "#FFD166"},
      "speed": 30,
      "avatars": ["guide_neutral", "guide_happy"]
    }
  ]
}
```

Files are checked against a JSON schema, parsed into pydantic models,
then mapped to domain objects with colors and avatar names resolved.
"""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any, Optional

import jsonschema
import pygame
from pydantic import BaseModel, ConfigDict, Field, ValidationError

from narratix.dialogue.errors import ScriptLoadError
from narratix.dialogue.models import NO_AVATAR, AvatarRef, Color, DialogueScript, Message

logger = logging.getLogger(__name__)

SCHEMA_PATH = Path(__file__).parent / "schemas" / "dialogue_script.schema.json"


class RawMessage(BaseModel):
    """A message as written in the script file."""

    model_config = ConfigDict(populate_by_name=True, extra='ignore')

    text: str
    highlight_map: dict[str, str] = Field(default_factory=dict, alias="highlightMap")
    speed: Optional[int] = Field(default=None, ge=0)
    avatars: list[str] = Field(default_factory=list)


class RawScript(BaseModel):
    """A script as written in the script file."""

    model_config = ConfigDict(populate_by_name=True, extra='ignore')

    script_id: str = Field(alias="scriptId")
    start_avatar: str = Field(alias="startAvatarResName")
    messages: list[RawMessage] = Field(default_factory=list)


def parse_color(value: str) -> Optional[Color]:
    """Hex string ("#RRGGBB", "#RRGGBBAA") or color name -> RGBA, None if unusable."""
    try:
        return tuple(pygame.Color(value))  # type: ignore[return-value]
    except (ValueError, TypeError):
        return None


class AvatarResolver:
    """
    Maps avatar resource names to asset paths.

    Unknown names resolve to NO_AVATAR so the overlay simply shows no
    avatar for them.
    """

    def __init__(self, avatar_dir: str | Path = "data/avatars", extension: str = ".png"):
        self.avatar_dir = Path(avatar_dir)
        self.extension = extension

    def resolve(self, name: str) -> AvatarRef:
        if not name:
            return NO_AVATAR

        if Path(name).exists():
            return name

        for candidate in (self.avatar_dir / name, self.avatar_dir / f"{name}{self.extension}"):
            if candidate.exists():
                return str(candidate)

        logger.warning("Avatar not found: %s", name)
        return NO_AVATAR


class ScriptLoader:
    """
    Loads and caches dialogue scripts by id.

    Usage:
        loader = ScriptLoader("data/dialogue", AvatarResolver("data/avatars"))
        script = loader.load("DEMO_1")   # data/dialogue/DEMO_1.json or demo_1.json
    """

    def __init__(
        self,
        scripts_dir: str | Path = "data/dialogue",
        avatar_resolver: Optional[AvatarResolver] = None,
        schema_path: str | Path = SCHEMA_PATH,
        default_speed_ms: int = 30,
    ):
        self.scripts_dir = Path(scripts_dir)
        self.avatars = avatar_resolver or AvatarResolver()
        self.default_speed_ms = default_speed_ms
        self._schema_path = Path(schema_path)
        self._schema: Optional[dict[str, Any]] = None
        self._cache: dict[str, DialogueScript] = {}

    def load(self, script_id: str) -> DialogueScript:
        """
        Load a script.

        Raises:
            ScriptLoadError: Unknown id, unreadable file or invalid content
        """
        if script_id in self._cache:
            return self._cache[script_id]

        path = self._find(script_id)
        try:
            with open(path, 'r', encoding='utf-8') as f:
                data = json.load(f)
        except (OSError, json.JSONDecodeError) as e:
            raise ScriptLoadError(script_id, str(e)) from e

        script = self.parse(script_id, data)
        self._cache[script_id] = script
        logger.info("Loaded script %s (%d messages)", script.script_id, len(script.messages))
        return script

    def parse(self, script_id: str, data: Any) -> DialogueScript:
        """Validate raw JSON data and map it to a DialogueScript."""
        try:
            jsonschema.validate(instance=data, schema=self.schema)
            raw = RawScript.model_validate(data)
        except jsonschema.ValidationError as e:
            raise ScriptLoadError(script_id, e.message) from e
        except ValidationError as e:
            raise ScriptLoadError(script_id, str(e)) from e

        return DialogueScript(
            script_id=raw.script_id,
            default_avatar=self.avatars.resolve(raw.start_avatar),
            messages=tuple(self._to_message(m) for m in raw.messages),
        )

    def clear_cache(self) -> None:
        self._cache.clear()

    @property
    def schema(self) -> dict[str, Any]:
        if self._schema is None:
            with open(self._schema_path, 'r', encoding='utf-8') as f:
                self._schema = json.load(f)
        return self._schema

    def _find(self, script_id: str) -> Path:
        if not script_id or "/" in script_id or "\\" in script_id or script_id in (".", ".."):
            raise ScriptLoadError(script_id, "script id must be a plain file stem")

        for stem in (script_id, script_id.lower()):
            path = self.scripts_dir / f"{stem}.json"
            if path.exists():
                return path
        raise ScriptLoadError(script_id, f"no script file in {self.scripts_dir}")

    def _to_message(self, raw: RawMessage) -> Message:
        highlight_map: dict[str, Color] = {}
        for keyword, value in raw.highlight_map.items():
            color = parse_color(value)
            if color is None:
                logger.warning("Ignoring highlight %r: bad color %r", keyword, value)
                continue
            highlight_map[keyword] = color

        return Message(
            text=raw.text,
            highlight_map=highlight_map,
            reveal_speed_ms=raw.speed if raw.speed is not None else self.default_speed_ms,
            avatar_variants=tuple(self.avatars.resolve(name) for name in raw.avatars),
        )
