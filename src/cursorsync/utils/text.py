"""Text helpers shared by the extractor, the recovery engine and the adapters."""

from __future__ import annotations

import math
import re
from typing import Sequence

from cursorsync.models import LineInfo

# Unicode-aware: covers letters, digits, underscore, CJK ideographs and kana.
_WORD_CHAR = re.compile(r"\w")


def is_word_char(ch: str) -> bool:
    """Return True when ``ch`` belongs to a word."""
    return bool(ch) and _WORD_CHAR.match(ch) is not None


def clamp(value: int, low: int, high: int) -> int:
    return max(low, min(high, value))


def round_half_up(value: float) -> int:
    """Round like a UI toolkit does: 0.5 goes up, not to even."""
    return int(math.floor(value + 0.5))


def split_lines(buffer: str) -> list[str]:
    """Split a buffer on ``\\n`` only, keeping a trailing empty line."""
    return buffer.split("\n")


def line_at_offset(buffer: str, offset: int) -> LineInfo:
    """Locate the line containing ``offset``; the offset is clamped first."""
    offset = clamp(offset, 0, len(buffer))
    line = buffer.count("\n", 0, offset)
    line_start = buffer.rfind("\n", 0, offset) + 1
    return LineInfo(line=line, column=offset - line_start, line_start=line_start)


def offset_of(lines: Sequence[str], line: int, column: int) -> int:
    """Convert a line/column pair back to a buffer offset, clamped to the line."""
    if not lines:
        return 0
    line = clamp(line, 0, len(lines) - 1)
    start = sum(len(text) + 1 for text in lines[:line])
    return start + clamp(column, 0, len(lines[line]))
