"""Cursor extraction and restoration on the flat (raw markdown) surface."""

from __future__ import annotations

import logging
from typing import Optional, Sequence

from cursorsync.config import DEFAULT_CONFIG, SyncConfig
from cursorsync.markdown.syntax import (
    detect_node_type,
    find_code_fence_start_line,
    strip_markdown_syntax,
)
from cursorsync.markdown.table import table_anchor_for_line
from cursorsync.matching.context import extract_cursor_context
from cursorsync.matching.recovery import find_best_position
from cursorsync.models import BlockAnchor, CodeAnchor, CursorInfo, NodeType
from cursorsync.utils.text import clamp, line_at_offset, offset_of, split_lines

LOGGER = logging.getLogger(__name__)


def _flat_block_anchor(
    lines: Sequence[str], line_index: int, column: int, fence_start: Optional[int]
) -> Optional[BlockAnchor]:
    if fence_start is not None:
        if line_index == fence_start:
            return None
        return CodeAnchor(line_in_block=line_index - fence_start - 1, column_in_line=column)
    return table_anchor_for_line(lines, line_index, column)


def extract_from_flat(
    buffer: str, offset: int, *, config: SyncConfig = DEFAULT_CONFIG
) -> CursorInfo:
    """Snapshot the cursor at character ``offset`` of a markdown buffer.

    The offset is clamped to the buffer. Leading block syntax is stripped
    before measuring, so ``percent_in_line`` and the context match what the
    structured surface shows for the same line.
    """
    position = line_at_offset(buffer, offset)
    lines = split_lines(buffer)
    line_text = lines[position.line]

    node_type = detect_node_type(line_text)
    fence_start = find_code_fence_start_line(lines, position.line)
    if fence_start is not None:
        node_type = NodeType.CODE_BLOCK

    stripped, column = strip_markdown_syntax(line_text, position.column)
    context = extract_cursor_context(stripped, column, context_length=config.context_length)
    percent = column / len(stripped) if stripped else 0.0

    anchor = None
    if config.anchor_flat_blocks:
        anchor = _flat_block_anchor(lines, position.line, position.column, fence_start)

    return CursorInfo(
        source_line=position.line + 1,
        node_type=node_type,
        word_at_cursor=context.word,
        offset_in_word=context.offset_in_word,
        percent_in_line=min(1.0, percent),
        context_before=context.context_before,
        context_after=context.context_after,
        block_anchor=anchor,
    )


def restore_to_flat(buffer: str, info: CursorInfo, *, config: SyncConfig = DEFAULT_CONFIG) -> int:
    """Offset in ``buffer`` that best matches ``info``.

    The flat surface has no structural addressing, so a block anchor is not
    used here; the line and text cascade decides alone.
    """
    lines = split_lines(buffer)
    if info.block_anchor is not None:
        LOGGER.debug("Ignoring %s anchor on flat surface", info.block_anchor.kind)

    target = clamp(info.source_line - 1, 0, len(lines) - 1)
    position = find_best_position(
        lines, target, info.context, info.percent_in_line, config=config
    )
    return offset_of(lines, position.line, position.column)
