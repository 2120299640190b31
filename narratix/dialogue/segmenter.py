"""
Message segmenter - splits raw message text on [AVATAR=N] tags.

"Hi [AVATAR=1] there" becomes:

    TextSegment("Hi"), AvatarChangeSegment(variants[1]), TextSegment("there")
"""

from __future__ import annotations

import logging
import re
from typing import Sequence

from narratix.dialogue.models import (
    NO_AVATAR,
    AvatarChangeSegment,
    AvatarRef,
    HighlightMap,
    Message,
    Segment,
    TextSegment,
)

logger = logging.getLogger(__name__)

AVATAR_TAG_PATTERN = re.compile(r'\[AVATAR=(\d+)\]')


def resolve_avatar(index: int, avatar_variants: Sequence[AvatarRef]) -> AvatarRef:
    """Variant at index, else the first variant, else NO_AVATAR."""
    if 0 <= index < len(avatar_variants):
        return avatar_variants[index]

    logger.warning(
        "Avatar index %d out of range (%d variants), using fallback",
        index, len(avatar_variants),
    )
    return avatar_variants[0] if avatar_variants else NO_AVATAR


def segment(
    text: str,
    highlight_map: HighlightMap,
    avatar_variants: Sequence[AvatarRef],
) -> list[Segment]:
    """
    Split text into an ordered list of text and avatar-change segments.

    Text segments are trimmed and empty ones are dropped. Every text
    segment carries the message's highlight map unchanged.
    """
    segments: list[Segment] = []
    position = 0

    for match in AVATAR_TAG_PATTERN.finditer(text):
        before = text[position:match.start()].strip()
        if before:
            segments.append(TextSegment(before, highlight_map))

        segments.append(
            AvatarChangeSegment(resolve_avatar(int(match.group(1)), avatar_variants))
        )
        position = match.end()

    rest = text[position:].strip()
    if rest:
        segments.append(TextSegment(rest, highlight_map))

    # Non-blank text always renders something
    if not segments and text.strip():
        segments.append(TextSegment(text.strip(), highlight_map))

    return segments


def segment_message(message: Message) -> list[Segment]:
    """Segment a message using its own highlight map and avatar variants."""
    return segment(message.text, message.highlight_map, message.avatar_variants)
