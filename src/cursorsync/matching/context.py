"""Capture a small text fingerprint around a cursor."""

from __future__ import annotations

from cursorsync.config import CONTEXT_LENGTH
from cursorsync.models import CursorContext
from cursorsync.utils.text import is_word_char


def extract_cursor_context(
    text: str, pos: int, *, context_length: int = CONTEXT_LENGTH
) -> CursorContext:
    """Return the word around ``pos`` and the raw characters on either side.

    The word is the run of word characters containing or touching ``pos``.
    ``context_before``/``context_after`` are the ``context_length`` characters
    immediately before and after ``pos``, whatever they are.
    """
    if not text or pos < 0:
        return CursorContext()

    pos = min(pos, len(text))

    start = pos
    while start > 0 and is_word_char(text[start - 1]):
        start -= 1
    end = pos
    while end < len(text) and is_word_char(text[end]):
        end += 1

    return CursorContext(
        word=text[start:end],
        offset_in_word=pos - start,
        context_before=text[max(0, pos - context_length) : pos],
        context_after=text[pos : pos + context_length],
    )
