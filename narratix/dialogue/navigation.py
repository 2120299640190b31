"""
Navigation - the overlay's message -> segment -> chunk state machine.

Every operation takes a Session and returns a Transition: the next
Session plus the events the host should see, in order. Nothing here
touches timers or the event bus, so the whole transition table can be
driven directly from tests.

Flow:
    start -> first message -> segments
      AvatarChange : emit AVATAR_CHANGED, move on immediately
      Text         : paginate, rest on chunk 0 (revealing)
    advance while revealing : skip to end of chunk
    advance when complete   : next chunk / segment / message, or close
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field, replace
from typing import Any, Callable, NamedTuple

from narratix_engine.core.events import OverlayEvent
from narratix.dialogue.models import (
    DialogueScript,
    NavigationCursor,
    NavigationState,
    RevealState,
    SegmentKind,
    Session,
)
from narratix.dialogue.paginator import paginate
from narratix.dialogue.reveal import (
    RevealStep,
    begin_reveal,
    complete_reveal,
    tick_reveal,
    visible_lines,
)
from narratix.dialogue.segmenter import segment_message

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Emission:
    """An event to publish once the transition is applied."""
    event: OverlayEvent
    data: dict[str, Any] = field(default_factory=dict)


class Transition(NamedTuple):
    session: Session
    emissions: list[Emission]


class DialogueNavigator:
    """
    Pure transition functions over Session, parameterized by the line-fit oracle.

    Usage:
        navigator = DialogueNavigator(fits_one_line)
        session, emissions = navigator.start(script)
        session, emissions = navigator.tick(session)
        session, emissions = navigator.advance(session)
    """

    def __init__(self, fits_one_line: Callable[[str], bool]):
        self.fits_one_line = fits_one_line

    # Operations

    def start(self, script: DialogueScript) -> Transition:
        """Open a session on the first message of a script."""
        emissions: list[Emission] = []
        session = Session(
            script_id=script.script_id,
            messages=tuple(script.messages),
            current_avatar=script.default_avatar,
        )

        if not session.messages:
            logger.info("Script %s has no messages", script.script_id)
            return Transition(self._close(session, emissions), emissions)

        session = self._settle(self._load_message(session, 0), emissions)
        return Transition(session, emissions)

    def advance(self, session: Session) -> Transition:
        """
        The user's single advance action.

        Skips the reveal while it runs; once complete, moves to the next
        chunk, segment or message, closing the session after the last one.
        """
        emissions: list[Emission] = []
        chunk = session.current_chunk
        if chunk is None:
            # Closed, or resting on an avatar change: nothing to act on
            return Transition(session, emissions)

        if not session.reveal.is_complete:
            step = complete_reveal(session.reveal, chunk, skipping=True)
            return Transition(self._apply_step(session, step, emissions), emissions)

        cursor = session.cursor
        if cursor.chunk_index + 1 < len(session.chunks):
            return Transition(self._enter_chunk(session, cursor.chunk_index + 1, emissions), emissions)

        session = replace(
            session,
            chunks=(),
            cursor=replace(cursor, segment_index=cursor.segment_index + 1, chunk_index=0),
            reveal=RevealState(),
            state=NavigationState.AT_SEGMENT,
        )
        return Transition(self._settle(session, emissions), emissions)

    def tick(self, session: Session) -> Transition:
        """Reveal one more character of the current chunk."""
        emissions: list[Emission] = []
        chunk = session.current_chunk
        if chunk is None:
            return Transition(session, emissions)

        step = tick_reveal(session.reveal, chunk)
        return Transition(self._apply_step(session, step, emissions), emissions)

    def finish_reveal(self, session: Session) -> Transition:
        """Show the whole chunk at once without marking it as skipped."""
        emissions: list[Emission] = []
        chunk = session.current_chunk
        if chunk is None:
            return Transition(session, emissions)

        step = complete_reveal(session.reveal, chunk, skipping=False)
        return Transition(self._apply_step(session, step, emissions), emissions)

    def close(self, session: Session) -> Transition:
        """Close the session from outside (user dismiss)."""
        emissions: list[Emission] = []
        if session.is_closed:
            return Transition(session, emissions)
        return Transition(self._close(session, emissions), emissions)

    # Internals

    def _load_message(self, session: Session, message_index: int) -> Session:
        message = session.messages[message_index]
        return replace(
            session,
            segments=tuple(segment_message(message)),
            chunks=(),
            cursor=NavigationCursor(message_index=message_index),
            reveal=RevealState(),
            state=NavigationState.AT_SEGMENT,
        )

    def _settle(self, session: Session, emissions: list[Emission]) -> Session:
        """Walk forward from the cursor until resting on a chunk or closing."""
        while True:
            cursor = session.cursor

            if cursor.segment_index >= len(session.segments):
                next_index = cursor.message_index + 1
                if next_index >= len(session.messages):
                    return self._close(session, emissions)
                session = self._load_message(session, next_index)
                continue

            segment = session.segments[cursor.segment_index]
            next_segment = replace(cursor, segment_index=cursor.segment_index + 1, chunk_index=0)

            if segment.kind is SegmentKind.AVATAR_CHANGE:
                logger.debug("Avatar change to %r", segment.avatar)
                emissions.append(Emission(OverlayEvent.AVATAR_CHANGED, {"avatar": segment.avatar}))
                session = replace(session, current_avatar=segment.avatar, cursor=next_segment)
                continue

            chunks = tuple(paginate(segment, self.fits_one_line))
            emissions.append(Emission(OverlayEvent.TOTAL_CHUNKS_FOR_SEGMENT, {"count": len(chunks)}))
            if not chunks:
                session = replace(session, cursor=next_segment)
                continue

            session = replace(session, chunks=chunks)
            return self._enter_chunk(session, 0, emissions)

    def _enter_chunk(self, session: Session, chunk_index: int, emissions: list[Emission]) -> Session:
        chunk = session.chunks[chunk_index]
        session = replace(
            session,
            cursor=replace(session.cursor, chunk_index=chunk_index),
            reveal=begin_reveal(chunk),
            state=NavigationState.AT_CHUNK,
        )
        emissions.append(self._visible_text(session))
        if session.reveal.is_complete:
            emissions.append(self._complete(session))
        return session

    def _apply_step(self, session: Session, step: RevealStep, emissions: list[Emission]) -> Session:
        session = replace(session, reveal=step.state)
        if step.changed:
            emissions.append(self._visible_text(session))
        if step.completed:
            emissions.append(self._complete(session))
        return session

    def _close(self, session: Session, emissions: list[Emission]) -> Session:
        logger.info("Dialogue session %s closed", session.script_id)
        emissions.append(Emission(OverlayEvent.SESSION_CLOSED, {"script_id": session.script_id}))
        return replace(
            session,
            messages=(),
            segments=(),
            chunks=(),
            reveal=RevealState(),
            state=NavigationState.SESSION_CLOSED,
        )

    @staticmethod
    def _visible_text(session: Session) -> Emission:
        line1, line2 = visible_lines(session.chunks[session.cursor.chunk_index],
                                     session.reveal.revealed_char_count)
        return Emission(OverlayEvent.CHUNK_VISIBLE_TEXT_CHANGED, {
            "line1": line1,
            "line2": line2,
            "chunk_index": session.cursor.chunk_index,
        })

    @staticmethod
    def _complete(session: Session) -> Emission:
        return Emission(OverlayEvent.CHUNK_REVEAL_COMPLETE, {
            "chunk_index": session.cursor.chunk_index,
            "is_last_chunk": session.cursor.chunk_index + 1 >= len(session.chunks),
        })
