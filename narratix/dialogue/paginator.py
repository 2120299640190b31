"""
Paginator - wraps a text segment into two-line chunks.

Greedy and word-granular: each line takes words while the line-fit
oracle says the joined line still fits, and a word that does not fit
even on its own still gets a line to itself (words are never split).
"""

from __future__ import annotations

import logging
import re
from typing import Callable

from narratix.dialogue.models import (
    Chunk,
    HighlightMap,
    HighlightSpan,
    StyledText,
    TextSegment,
)

logger = logging.getLogger(__name__)

LINES_PER_CHUNK = 2


def apply_highlights(text: str, highlight_map: HighlightMap) -> StyledText:
    """
    Color case-insensitive whole-word matches of every highlight keyword.

    A keyword that cannot be compiled into a pattern is skipped.
    """
    if not text:
        return StyledText()

    spans: list[HighlightSpan] = []
    for keyword, color in highlight_map.items():
        if not keyword:
            continue
        try:
            pattern = re.compile(rf'\b{re.escape(keyword)}\b', re.IGNORECASE)
        except (re.error, TypeError):
            logger.warning("Skipping unusable highlight keyword %r", keyword)
            continue

        for match in pattern.finditer(text):
            if match.end() > match.start():
                spans.append(HighlightSpan(match.start(), match.end(), color))

    spans.sort(key=lambda span: (span.start, span.end))
    return StyledText(text, tuple(spans))


def fill_line(words: list[str], start: int, fits_one_line: Callable[[str], bool]) -> int:
    """
    Greedily take words from words[start:] for one line.

    Returns:
        Index of the first word not taken. At least one word is taken
        whenever any remain.
    """
    end = start
    while end < len(words):
        if fits_one_line(' '.join(words[start:end + 1])):
            end += 1
        elif end == start:
            # Lone oversized word keeps a line to itself
            return end + 1
        else:
            break
    return end


def paginate_text(
    content: str,
    highlight_map: HighlightMap,
    fits_one_line: Callable[[str], bool],
) -> list[Chunk]:
    """
    Split content into chunks of two styled lines.

    Args:
        content: Text to paginate; runs of whitespace separate words
        highlight_map: Keyword -> color applied per line
        fits_one_line: Oracle reporting whether a string renders on one line

    Returns:
        Chunks in reading order (empty for blank content)
    """
    words = content.split()
    chunks: list[Chunk] = []
    position = 0

    while position < len(words):
        lines: list[str] = []
        for _ in range(LINES_PER_CHUNK):
            if position >= len(words):
                lines.append('')
                continue
            end = fill_line(words, position, fits_one_line)
            lines.append(' '.join(words[position:end]))
            position = end

        chunks.append(Chunk(
            line1=apply_highlights(lines[0], highlight_map),
            line2=apply_highlights(lines[1], highlight_map),
        ))

    logger.debug("Paginated %d words into %d chunks", len(words), len(chunks))
    return chunks


def paginate(segment: TextSegment, fits_one_line: Callable[[str], bool]) -> list[Chunk]:
    """Paginate a text segment with its own highlight map."""
    return paginate_text(segment.content, segment.highlight_map, fits_one_line)
