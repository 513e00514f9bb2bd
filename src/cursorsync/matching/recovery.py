"""Relocate a cursor fingerprint inside a list of lines.

The cascade stops at the first strategy that succeeds:

1. context match -- ``context_before + context_after`` found in the
   format-stripped text of the target line or its neighbours;
2. word match -- the word at the cursor found in the raw line, then in the
   format-stripped line, first on the target line and then on its neighbours;
3. percentage -- ``percent_in_line`` applied to the target line's length.
"""

from __future__ import annotations

import logging
from typing import Iterator, Optional, Sequence

from cursorsync.config import DEFAULT_CONFIG, SyncConfig
from cursorsync.markdown.syntax import is_content_line, strip_inline_formatting
from cursorsync.matching.remap import map_stripped_to_original
from cursorsync.models import CursorContext, CursorInfo, WordPosition
from cursorsync.utils.text import clamp, round_half_up

LOGGER = logging.getLogger(__name__)


def _nearby_lines(target: int, radius: int, count: int) -> Iterator[int]:
    """Yield -1, +1, -2, +2 ... around ``target``, skipping lines out of range."""
    for distance in range(1, radius + 1):
        for line in (target - distance, target + distance):
            if 0 <= line < count:
                yield line


def find_word_in_line(line_text: str, word: str, offset_in_word: int) -> Optional[int]:
    """Column of the cursor if ``word`` occurs in the line, raw text first."""
    if not word:
        return None

    index = line_text.find(word)
    if index != -1:
        return index + offset_in_word

    stripped = strip_inline_formatting(line_text)
    index = stripped.find(word)
    if index != -1:
        return map_stripped_to_original(line_text, stripped, index + offset_in_word)
    return None


def find_context_match(
    lines: Sequence[str],
    target: int,
    context: CursorContext,
    *,
    config: SyncConfig = DEFAULT_CONFIG,
) -> Optional[WordPosition]:
    pattern = context.context_before + context.context_after
    if len(pattern) < config.min_context_pattern_length:
        return None

    candidates = [target] if 0 <= target < len(lines) else []
    candidates.extend(_nearby_lines(target, config.search_radius, len(lines)))
    for line in candidates:
        line_text = lines[line]
        stripped = strip_inline_formatting(line_text)
        index = stripped.find(pattern)
        if index != -1:
            column = map_stripped_to_original(
                line_text, stripped, index + len(context.context_before)
            )
            return WordPosition(line=line, column=column)
    return None


def find_best_position(
    lines: Sequence[str],
    target_line: int,
    context: CursorContext,
    percent_in_line: float,
    *,
    config: SyncConfig = DEFAULT_CONFIG,
) -> WordPosition:
    """Find the line and column that best match ``context`` near ``target_line``.

    ``target_line`` is a 0-based index and is clamped to the available lines.
    """
    if not lines:
        return WordPosition(line=0, column=0)

    target = clamp(target_line, 0, len(lines) - 1)
    line_text = lines[target]

    match = find_context_match(lines, target, context, config=config)
    if match is not None:
        LOGGER.debug("Context match on line %d, column %d", match.line, match.column)
        return match

    if context.word:
        column = find_word_in_line(line_text, context.word, context.offset_in_word)
        if column is not None:
            LOGGER.debug("Word %r matched on target line %d", context.word, target)
            return WordPosition(line=target, column=column)

        for line in _nearby_lines(target, config.search_radius, len(lines)):
            if not is_content_line(lines[line]):
                continue
            column = find_word_in_line(lines[line], context.word, context.offset_in_word)
            if column is not None:
                LOGGER.debug("Word %r matched on nearby line %d", context.word, line)
                return WordPosition(line=line, column=column)

    column = min(round_half_up(percent_in_line * len(line_text)), len(line_text))
    LOGGER.debug("Falling back to %.2f of line %d", percent_in_line, target)
    return WordPosition(line=target, column=column)


def find_column_in_text(
    text: str, info: CursorInfo, *, config: SyncConfig = DEFAULT_CONFIG
) -> int:
    """Same cascade as :func:`find_best_position`, confined to one block of text.

    Block text comes from the structured surface and holds no markdown, so no
    stripping or cross-line search happens here. The result is clamped to
    the text length.
    """
    pattern = info.context_before + info.context_after
    if len(pattern) >= config.min_context_pattern_length:
        index = text.find(pattern)
        if index != -1:
            return index + len(info.context_before)

    if info.word_at_cursor:
        index = text.find(info.word_at_cursor)
        if index != -1:
            return min(index + info.offset_in_word, len(text))

    return min(round_half_up(info.percent_in_line * len(text)), len(text))
