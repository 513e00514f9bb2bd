"""Single-line markdown classification and syntax stripping.

Everything here looks at one line of raw markdown at a time. The only
multi-line question answered is whether a line sits inside a fenced code
block, which needs the fence state of every line above it.
"""

from __future__ import annotations

import re
from typing import Optional, Sequence, Tuple

from cursorsync.models import NodeType

_HEADING = re.compile(r"^#{1,6}\s")
_BULLET = re.compile(r"^[-*+]\s")
_ORDERED = re.compile(r"^\d+\.\s")
_FENCE = re.compile(r"^(```|~~~)")
_ALERT = re.compile(r"^>\s*\[!(NOTE|TIP|IMPORTANT|WARNING|CAUTION)\]", re.IGNORECASE)
_QUOTE = re.compile(r"^>")
_DETAILS = re.compile(r"^(:::\s*details|<details)", re.IGNORECASE)
_TABLE_OPEN_ROW = re.compile(r"^\|[^|]+\|")
_WIKI_LINK = re.compile(r"^\[\[[^\]]+\]\]$")
_HTML_ONLY = re.compile(r"^</?[a-z][^>]*/?>$", re.IGNORECASE)

_HEADING_MARKER = re.compile(r"^#{1,6}\s+")
_LIST_MARKER = re.compile(r"^\s*(?:[-*+]|\d+\.)\s+")
_QUOTE_MARKER = re.compile(r"^(?:>\s*)+")

# (pattern, keeps group 1). Wider constructs first so emphasis markers inside
# them are not split.
INLINE_RULES: Tuple[Tuple[re.Pattern[str], bool], ...] = (
    (re.compile(r"\[\^[^\]]+\]"), False),
    (re.compile(r"!\[(.+?)\]\([^)]+\)"), True),
    (re.compile(r"\[(.+?)\]\([^)]+\)"), True),
    (re.compile(r"\$([^$]+)\$"), True),
    (re.compile(r"\*\*(.+?)\*\*"), True),
    (re.compile(r"__(.+?)__"), True),
    (re.compile(r"\*(.+?)\*"), True),
    (re.compile(r"_(.+?)_"), True),
    (re.compile(r"~~(.+?)~~"), True),
    (re.compile(r"`(.+?)`"), True),
)


def detect_node_type(line: str) -> NodeType:
    """Classify a raw markdown line by its leading syntax."""
    trimmed = line.lstrip()

    if _HEADING.match(trimmed):
        return NodeType.HEADING
    if _BULLET.match(trimmed) or _ORDERED.match(trimmed):
        return NodeType.LIST_ITEM
    if _FENCE.match(trimmed):
        return NodeType.CODE_BLOCK
    # An alert is a specialised blockquote, so it has to win first.
    if _ALERT.match(trimmed):
        return NodeType.ALERT_BLOCK
    if _QUOTE.match(trimmed):
        return NodeType.BLOCKQUOTE
    if _DETAILS.match(trimmed):
        return NodeType.DETAILS_BLOCK
    if trimmed.startswith("|") and trimmed.endswith("|"):
        return NodeType.TABLE_CELL
    if _TABLE_OPEN_ROW.match(trimmed):
        return NodeType.TABLE_CELL
    if _WIKI_LINK.match(trimmed.strip()):
        return NodeType.WIKI_LINK
    return NodeType.PARAGRAPH


def is_content_line(line: str) -> bool:
    """Blank lines and lone HTML tags such as ``<br />`` carry no content."""
    trimmed = line.strip()
    if not trimmed:
        return False
    return _HTML_ONLY.match(trimmed) is None


def find_code_fence_start_line(lines: Sequence[str], line_index: int) -> Optional[int]:
    """Return the opening fence line of the block containing ``line_index``.

    A fence only closes on the same marker that opened it, so a ``~~~`` line
    inside a backtick fence is plain content.
    """
    open_fence: Optional[str] = None
    start_line = -1

    for index in range(min(line_index + 1, len(lines))):
        match = _FENCE.match(lines[index].strip())
        if match is None:
            continue
        marker = match.group(1)
        if open_fence is None:
            open_fence = marker
            start_line = index
        elif marker == open_fence:
            open_fence = None
            start_line = -1

    return start_line if open_fence is not None else None


def is_inside_code_block(lines: Sequence[str], line_index: int) -> bool:
    return find_code_fence_start_line(lines, line_index) is not None


def leading_marker_length(line: str) -> int:
    """Width of a leading heading, list or blockquote marker, 0 if none."""
    for pattern in (_HEADING_MARKER, _LIST_MARKER, _QUOTE_MARKER):
        match = pattern.match(line)
        if match:
            return match.end()
    return 0


def strip_markdown_syntax(line: str, column: int) -> Tuple[str, int]:
    """Drop leading block syntax and shift ``column`` by the removed width.

    Returns ``(text, adjusted_column)``. When the column falls inside a marker
    the cursor was on syntax with no rendered counterpart, and the adjusted
    column is 0.
    """
    text = line
    removed = 0
    on_marker = False

    for pattern in (_HEADING_MARKER, _LIST_MARKER, _QUOTE_MARKER):
        match = pattern.match(text)
        if not match:
            continue
        width = match.end()
        text = text[width:]
        if column - removed < width:
            on_marker = True
        removed += width

    if on_marker:
        return text, 0
    return text, max(0, column - removed)


def strip_inline_formatting(text: str) -> str:
    """Remove inline markdown, keeping the rendered text.

    Footnote references vanish entirely; links and images keep their label.
    :func:`cursorsync.matching.remap.map_stripped_to_original` maps offsets in
    the result back to ``text``.
    """
    for pattern, keeps_label in INLINE_RULES:
        text = pattern.sub(r"\1" if keeps_label else "", text)
    return text
