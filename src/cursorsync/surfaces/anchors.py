"""Exact coordinates for cursors inside tables and code blocks.

Table cells and code lines are often short or repeated (``x``, ``}``), so
searching for their text lands in the wrong place. These anchors address
them structurally instead and are always tried before text matching.
"""

from __future__ import annotations

import logging
from typing import Optional, Tuple

from cursorsync.errors import CursorSyncError
from cursorsync.models import BlockAnchor, CodeAnchor, TableAnchor
from cursorsync.surfaces.tree import Node, ResolvedPos, StructuredView
from cursorsync.utils.text import clamp

LOGGER = logging.getLogger(__name__)

TABLE_TYPES = frozenset({"table"})
ROW_TYPES = frozenset({"table_row"})
CELL_TYPES = frozenset({"table_cell", "table_header"})
CODE_TYPES = frozenset({"code_block"})


def _cell_text_offset(cell: Node, rel: int) -> int:
    """Characters of cell text before content offset ``rel``."""
    count = 0
    for start, end in cell.textblock_ranges():
        if rel < start:
            break
        if rel <= end:
            return count + rel - start
        count += end - start
    return count


def _cell_position(cell: Node, offset: int) -> int:
    """Content offset of the ``offset``-th text character, clamped to the cell's text."""
    ranges = cell.textblock_ranges()
    if not ranges:
        return 0
    offset = max(0, offset)
    for start, end in ranges:
        if offset <= end - start:
            return start + offset
        offset -= end - start
    return ranges[-1][1]


def get_block_anchor(resolved: ResolvedPos) -> Optional[BlockAnchor]:
    """Anchor for the innermost table cell or code block around ``resolved``."""
    for depth, node in resolved.ancestors():
        if node.type in CELL_TYPES:
            row = col = 0
            for outer in range(depth - 1, -1, -1):
                outer_type = resolved.node(outer).type
                if outer_type in ROW_TYPES:
                    col = resolved.index(outer)
                elif outer_type in TABLE_TYPES:
                    row = resolved.index(outer)
                    break
            offset = _cell_text_offset(node, resolved.pos - resolved.start(depth))
            return TableAnchor(row=row, col=col, offset_in_cell=offset)

        if node.type in CODE_TYPES:
            offset = resolved.pos - resolved.start(depth)
            before = node.text_content[:offset]
            last_newline = before.rfind("\n")
            return CodeAnchor(
                line_in_block=before.count("\n"),
                column_in_line=offset - last_newline - 1,
            )
    return None


def find_tagged_block(
    document: Node, types: frozenset, source_line: int
) -> Optional[Tuple[Node, int]]:
    """Block of one of ``types`` tagged ``source_line``, else the closest tag below it."""
    closest: Optional[Tuple[Node, int]] = None
    closest_line = -1
    for node, pos in document.descendants():
        if node.type not in types:
            continue
        tag = node.source_line
        if tag is None:
            continue
        if tag == source_line:
            return node, pos
        if closest_line < tag < source_line:
            closest, closest_line = (node, pos), tag
    return closest


def locate_table_anchor(
    document: Node, source_line: int, anchor: TableAnchor
) -> Optional[int]:
    found = find_tagged_block(document, TABLE_TYPES, source_line)
    if found is None:
        return None
    table, table_pos = found

    if not 0 <= anchor.row < table.child_count:
        return None
    row_pos = table_pos + 1
    for index in range(anchor.row):
        row_pos += table.child(index).node_size
    row = table.child(anchor.row)

    if not 0 <= anchor.col < row.child_count:
        return None
    cell_pos = row_pos + 1
    for index in range(anchor.col):
        cell_pos += row.child(index).node_size
    cell = row.child(anchor.col)

    return cell_pos + 1 + _cell_position(cell, anchor.offset_in_cell)


def locate_code_anchor(
    document: Node, source_line: int, anchor: CodeAnchor
) -> Optional[int]:
    found = find_tagged_block(document, CODE_TYPES, source_line)
    if found is None:
        return None
    code_block, block_pos = found

    lines = code_block.text_content.split("\n")
    line_in_block = max(0, anchor.line_in_block)
    offset = sum(len(line) + 1 for line in lines[:line_in_block])
    target_length = len(lines[line_in_block]) if line_in_block < len(lines) else 0
    offset += clamp(anchor.column_in_line, 0, target_length)
    offset = min(offset, code_block.content_size)
    return block_pos + 1 + offset


def restore_block_anchor(view: StructuredView, source_line: int, anchor: BlockAnchor) -> bool:
    """Place the cursor from ``anchor``; False lets the caller fall back."""
    if isinstance(anchor, TableAnchor):
        pos = locate_table_anchor(view.doc, source_line, anchor)
    else:
        pos = locate_code_anchor(view.doc, source_line, anchor)
    if pos is None:
        LOGGER.debug("No %s block for anchor near line %d", anchor.kind, source_line)
        return False

    try:
        view.select_near(pos)
    except CursorSyncError as exc:
        LOGGER.warning("Could not restore %s anchor at %d: %s", anchor.kind, pos, exc)
        return False
    LOGGER.debug("Restored cursor from %s anchor at %d", anchor.kind, pos)
    return True
