"""Cursor extraction and restoration on the structured (block tree) surface."""

from __future__ import annotations

import logging
from typing import Dict, Iterator, Optional, Tuple

from cursorsync.config import DEFAULT_CONFIG, SyncConfig
from cursorsync.errors import CursorSyncError
from cursorsync.matching.context import extract_cursor_context
from cursorsync.matching.recovery import find_column_in_text
from cursorsync.models import CursorInfo, NodeType
from cursorsync.surfaces.anchors import get_block_anchor, restore_block_anchor
from cursorsync.surfaces.tree import Node, ResolvedPos, StructuredView

LOGGER = logging.getLogger(__name__)

NODE_TYPES: Dict[str, NodeType] = {
    "heading": NodeType.HEADING,
    "code_block": NodeType.CODE_BLOCK,
    "blockquote": NodeType.BLOCKQUOTE,
    "alert": NodeType.ALERT_BLOCK,
    "details": NodeType.DETAILS_BLOCK,
    "wiki_link": NodeType.WIKI_LINK,
    "table_cell": NodeType.TABLE_CELL,
    "table_header": NodeType.TABLE_CELL,
    "list_item": NodeType.LIST_ITEM,
    "bullet_list": NodeType.LIST_ITEM,
    "ordered_list": NodeType.LIST_ITEM,
    "task_item": NodeType.LIST_ITEM,
    "task_list": NodeType.LIST_ITEM,
}


def source_line_of(resolved: ResolvedPos) -> Optional[int]:
    """Tag of the nearest ancestor that carries one."""
    for _, node in resolved.ancestors():
        if node.source_line is not None:
            return node.source_line
    return None


def estimate_source_line(document: Node, pos: int) -> int:
    """Last tag seen before ``pos``; used when the cursor's blocks were never tagged."""
    last = 1
    for node, _ in document.nodes_between(0, pos):
        if node.source_line is not None:
            last = node.source_line
    return last


def node_type_of(resolved: ResolvedPos) -> NodeType:
    for _, node in resolved.ancestors():
        node_type = NODE_TYPES.get(node.type)
        if node_type is not None:
            return node_type
    return NodeType.PARAGRAPH


def extract_from_structured(
    document: Node, pos: int, *, config: SyncConfig = DEFAULT_CONFIG
) -> CursorInfo:
    """Snapshot the cursor at ``pos`` in ``document``.

    Word, context and percentage are measured on the text of the enclosing
    textblock, which holds no markdown syntax.
    """
    pos = max(0, min(pos, document.content_size))
    resolved = document.resolve(pos)

    source_line = source_line_of(resolved)
    if source_line is None:
        source_line = estimate_source_line(document, pos)
        LOGGER.debug("No tagged ancestor at %d, estimated line %d", pos, source_line)

    parent = resolved.parent
    if parent.is_textblock:
        line_text = parent.text_content
        column = resolved.parent_offset
    else:
        line_text, column = "", 0

    context = extract_cursor_context(line_text, column, context_length=config.context_length)
    percent = column / len(line_text) if line_text else 0.0

    return CursorInfo(
        source_line=source_line,
        node_type=node_type_of(resolved),
        word_at_cursor=context.word,
        offset_in_word=context.offset_in_word,
        percent_in_line=min(1.0, percent),
        context_before=context.context_before,
        context_after=context.context_after,
        block_anchor=get_block_anchor(resolved),
    )


def _tagged_textblocks(
    node: Node, base: int = 0, inherited: Optional[int] = None
) -> Iterator[Tuple[Node, int, Optional[int]]]:
    """Yield ``(textblock, content_start, tag)``; untagged blocks inherit their ancestor's tag."""
    offset = base
    for child in node.children:
        tag = child.source_line if child.source_line is not None else inherited
        if child.is_textblock:
            yield child, offset + 1, tag
        elif not child.is_leaf:
            yield from _tagged_textblocks(child, offset + 1, tag)
        offset += child.node_size


def find_target_block(document: Node, source_line: int) -> Optional[Tuple[Node, int]]:
    """First textblock tagged ``source_line``; else the closest tag below it, else above it."""
    below: Optional[Tuple[Node, int]] = None
    below_line = -1
    above: Optional[Tuple[Node, int]] = None
    above_line = 0
    for node, start, tag in _tagged_textblocks(document):
        if tag is None:
            continue
        if tag == source_line:
            return node, start
        if below_line < tag < source_line:
            below, below_line = (node, start), tag
        elif tag > source_line and (above is None or tag < above_line):
            above, above_line = (node, start), tag
    return below if below is not None else above


def locate_in_structured(
    document: Node, info: CursorInfo, *, config: SyncConfig = DEFAULT_CONFIG
) -> Optional[int]:
    """Position for ``info`` by line tag and text matching; None if no block qualifies."""
    target = find_target_block(document, info.source_line)
    if target is None:
        return None
    node, start = target

    line_text = node.text_content
    column = min(find_column_in_text(line_text, info, config=config), len(line_text))
    if info.percent_in_line >= config.end_of_line_threshold:
        column = len(line_text)
    return start + column


def restore_to_structured(
    view: StructuredView, info: CursorInfo, *, config: SyncConfig = DEFAULT_CONFIG
) -> int:
    """Move ``view``'s cursor to the location described by ``info``.

    Never raises: when nothing can be located, or the located position has
    gone stale, the cursor goes to the document start. The selection change
    is kept out of undo history. Returns the final position.
    """
    if info.block_anchor is not None and restore_block_anchor(
        view, info.source_line, info.block_anchor
    ):
        return view.selection

    try:
        pos = locate_in_structured(view.doc, info, config=config)
        if pos is not None:
            LOGGER.debug("Restoring line %d at position %d", info.source_line, pos)
            return view.select_near(pos)
        LOGGER.debug("No block near line %d, going to document start", info.source_line)
    except CursorSyncError as exc:
        LOGGER.warning("Cursor restore failed for line %d: %s", info.source_line, exc)

    try:
        return view.select_start()
    except CursorSyncError as exc:
        LOGGER.warning("Could not place cursor at document start: %s", exc)
        return view.selection
