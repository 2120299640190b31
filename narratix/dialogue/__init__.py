"""
Dialogue module - scripted overlay conversations.

Provides:
- Script loading and validation
- Tag segmentation and two-line pagination
- Typewriter reveal with skip
- Navigation state machine and overlay system
- View model and renderer for the host UI
"""

from narratix.dialogue.models import (
    NO_AVATAR,
    AvatarChangeSegment,
    Chunk,
    DialogueScript,
    HighlightSpan,
    Message,
    NavigationCursor,
    NavigationState,
    RevealState,
    Segment,
    SegmentKind,
    Session,
    StyledText,
    TextSegment,
)
from narratix.dialogue.errors import DialogueError, ScriptLoadError
from narratix.dialogue.segmenter import segment, segment_message
from narratix.dialogue.paginator import apply_highlights, paginate, paginate_text
from narratix.dialogue.reveal import RevealController, visible_lines
from narratix.dialogue.navigation import DialogueNavigator, Emission, Transition
from narratix.dialogue.loader import AvatarResolver, ScriptLoader
from narratix.dialogue.system import OverlaySystem
from narratix.dialogue.view import OverlayRenderer, OverlayViewModel

__all__ = [
    # Models
    "NO_AVATAR",
    "AvatarChangeSegment",
    "Chunk",
    "DialogueScript",
    "HighlightSpan",
    "Message",
    "NavigationCursor",
    "NavigationState",
    "RevealState",
    "Segment",
    "SegmentKind",
    "Session",
    "StyledText",
    "TextSegment",
    # Errors
    "DialogueError",
    "ScriptLoadError",
    # Processing
    "segment",
    "segment_message",
    "apply_highlights",
    "paginate",
    "paginate_text",
    "RevealController",
    "visible_lines",
    # Flow
    "DialogueNavigator",
    "Emission",
    "Transition",
    "AvatarResolver",
    "ScriptLoader",
    "OverlaySystem",
    # View
    "OverlayRenderer",
    "OverlayViewModel",
]
