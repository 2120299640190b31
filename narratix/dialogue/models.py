"""
Dialogue data - messages, segments, chunks and overlay session state.

All types here are immutable value objects. State changes produce new
instances (see narratix.dialogue.navigation), so any snapshot can be
kept and compared in tests.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum, auto
from typing import Mapping, Optional, Union

from narratix_engine.ui.renderer import Color

# Avatar references are resolved asset paths; "" means "no avatar"
AvatarRef = str
NO_AVATAR: AvatarRef = ""

HighlightMap = Mapping[str, Color]


@dataclass(frozen=True)
class Message:
    """
    A single scripted message.

    Attributes:
        text: Raw text, may contain [AVATAR=N] tags
        highlight_map: Keyword -> color for highlighting
        reveal_speed_ms: Milliseconds per revealed character
        avatar_variants: Avatars addressable by tag index
    """
    text: str
    highlight_map: HighlightMap = field(default_factory=dict)
    reveal_speed_ms: int = 30
    avatar_variants: tuple[AvatarRef, ...] = ()


@dataclass(frozen=True)
class DialogueScript:
    """A complete script, as supplied by the loader."""
    script_id: str
    default_avatar: AvatarRef = NO_AVATAR
    messages: tuple[Message, ...] = ()


# Segments


class SegmentKind(Enum):
    """Discriminator for the Segment union."""
    TEXT = auto()
    AVATAR_CHANGE = auto()


@dataclass(frozen=True)
class TextSegment:
    """Displayable text, paginated into chunks."""
    content: str
    highlight_map: HighlightMap = field(default_factory=dict)
    kind: SegmentKind = field(default=SegmentKind.TEXT, init=False)


@dataclass(frozen=True)
class AvatarChangeSegment:
    """An immediate avatar swap, processed without user input."""
    avatar: AvatarRef
    kind: SegmentKind = field(default=SegmentKind.AVATAR_CHANGE, init=False)


Segment = Union[TextSegment, AvatarChangeSegment]


# Chunks


@dataclass(frozen=True)
class HighlightSpan:
    """Color applied to text[start:end]."""
    start: int
    end: int
    color: Color


@dataclass(frozen=True)
class StyledText:
    """Plain text plus highlight spans."""
    text: str = ""
    spans: tuple[HighlightSpan, ...] = ()

    def __len__(self) -> int:
        return len(self.text)

    def visible(self, count: int) -> StyledText:
        """The first `count` characters, with spans clipped to them."""
        count = max(0, min(count, len(self.text)))
        spans = tuple(
            HighlightSpan(span.start, min(span.end, count), span.color)
            for span in self.spans
            if span.start < count
        )
        return StyledText(self.text[:count], spans)


@dataclass(frozen=True)
class Chunk:
    """A two-line page of a text segment."""
    line1: StyledText = field(default_factory=StyledText)
    line2: StyledText = field(default_factory=StyledText)

    @property
    def total_chars(self) -> int:
        return len(self.line1) + len(self.line2)


EMPTY_CHUNK = Chunk()


# Runtime state


@dataclass(frozen=True)
class RevealState:
    """
    Typewriter progress for the current chunk.

    Attributes:
        revealed_char_count: Characters shown so far, across both lines
        is_skipping: Skip was requested for this chunk
        is_complete: Every character is shown
    """
    revealed_char_count: int = 0
    is_skipping: bool = False
    is_complete: bool = False


@dataclass(frozen=True)
class NavigationCursor:
    """Position of the displayed unit: message -> segment -> chunk."""
    message_index: int = 0
    segment_index: int = 0
    chunk_index: int = 0


class NavigationState(Enum):
    """Where the overlay's state machine rests."""
    AT_SEGMENT = auto()      # transient: an avatar change awaiting auto-processing
    AT_CHUNK = auto()        # a text chunk is revealing or waiting for input
    SESSION_CLOSED = auto()  # terminal


@dataclass(frozen=True)
class Session:
    """
    The whole mutable state of an overlay run, as one value.

    Attributes:
        script_id: Script the session was opened from
        messages: Every message of the script
        segments: Segments of the current message
        chunks: Chunks of the current text segment (empty otherwise)
        cursor: Current position
        reveal: Reveal progress of the current chunk
        current_avatar: Last avatar set by the script
        state: Navigation state
    """
    script_id: str
    messages: tuple[Message, ...]
    segments: tuple[Segment, ...] = ()
    chunks: tuple[Chunk, ...] = ()
    cursor: NavigationCursor = field(default_factory=NavigationCursor)
    reveal: RevealState = field(default_factory=RevealState)
    current_avatar: AvatarRef = NO_AVATAR
    state: NavigationState = NavigationState.AT_SEGMENT

    @property
    def is_closed(self) -> bool:
        return self.state is NavigationState.SESSION_CLOSED

    @property
    def current_message(self) -> Optional[Message]:
        if 0 <= self.cursor.message_index < len(self.messages):
            return self.messages[self.cursor.message_index]
        return None

    @property
    def current_segment(self) -> Optional[Segment]:
        if 0 <= self.cursor.segment_index < len(self.segments):
            return self.segments[self.cursor.segment_index]
        return None

    @property
    def current_chunk(self) -> Optional[Chunk]:
        if self.state is not NavigationState.AT_CHUNK:
            return None
        if 0 <= self.cursor.chunk_index < len(self.chunks):
            return self.chunks[self.cursor.chunk_index]
        return None

    @property
    def reveal_speed_ms(self) -> int:
        message = self.current_message
        return message.reveal_speed_ms if message else 0
