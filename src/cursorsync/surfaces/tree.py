"""Structured document tree and the live view that holds its selection.

Positions are integers counted the way block editors count them: a text
node occupies one position per character, every other node one position for
its opening token, its content, and one for its closing token. The document
node itself has no tokens, so its content starts at 0.

A markdown parser (not part of this package) builds the tree and records on
each block the 1-based ``source_line`` it was parsed from.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, Iterator, List, Optional, Tuple, Union

from cursorsync.errors import CursorSyncError, PositionError

TEXT = "text"
TEXTBLOCK_TYPES = frozenset({"paragraph", "heading", "code_block"})
LEAF_TYPES = frozenset({"horizontal_rule", "image"})


@dataclass(slots=True, eq=False)
class Node:
    type: str
    children: List["Node"] = field(default_factory=list)
    attrs: Dict[str, Any] = field(default_factory=dict)
    text: str = ""

    @property
    def is_text(self) -> bool:
        return self.type == TEXT

    @property
    def is_leaf(self) -> bool:
        return self.is_text or self.type in LEAF_TYPES

    @property
    def is_textblock(self) -> bool:
        return self.type in TEXTBLOCK_TYPES

    @property
    def source_line(self) -> Optional[int]:
        value = self.attrs.get("source_line")
        if isinstance(value, int) and not isinstance(value, bool):
            return value
        return None

    @property
    def child_count(self) -> int:
        return len(self.children)

    def child(self, index: int) -> "Node":
        return self.children[index]

    @property
    def content_size(self) -> int:
        if self.is_text:
            return len(self.text)
        return sum(child.node_size for child in self.children)

    @property
    def node_size(self) -> int:
        if self.is_text:
            return len(self.text)
        if self.type in LEAF_TYPES:
            return 1
        return self.content_size + 2

    @property
    def text_content(self) -> str:
        if self.is_text:
            return self.text
        return "".join(child.text_content for child in self.children)

    def descendants(self) -> Iterator[Tuple["Node", int]]:
        """Yield ``(node, pos)`` for every node below this one, in document order.

        ``pos`` is the position right before the node, relative to this
        node's content start.
        """
        offset = 0
        for child in self.children:
            yield child, offset
            if not child.is_leaf:
                for node, pos in child.descendants():
                    yield node, offset + 1 + pos
            offset += child.node_size

    def nodes_between(self, start: int, end: int) -> Iterator[Tuple["Node", int]]:
        """Yield the nodes overlapping ``[start, end)`` in document order."""
        for node, pos in self.descendants():
            if pos < end and pos + node.node_size > start:
                yield node, pos

    def resolve(self, pos: int) -> "ResolvedPos":
        if pos < 0 or pos > self.content_size:
            raise PositionError(f"Position {pos} out of range 0..{self.content_size}", pos=pos)

        path: List[Tuple[Node, int, int]] = []
        node, start = self, 0
        while True:
            index, child_offset = _find_index(node, pos - start)
            path.append((node, index, start))
            if pos - start == child_offset:
                break
            child = node.children[index]
            if child.is_leaf:
                break
            node, start = child, start + child_offset + 1
        return ResolvedPos(pos=pos, path=path)

    def textblock_ranges(self) -> List[Tuple[int, int]]:
        """Content ranges ``(start, end)`` of every textblock, in order."""
        return [
            (pos + 1, pos + 1 + node.content_size)
            for node, pos in self.descendants()
            if node.is_textblock
        ]


def _find_index(node: Node, offset: int) -> Tuple[int, int]:
    """Index of the child containing ``offset`` and that child's start offset."""
    current = 0
    for index, child in enumerate(node.children):
        end = current + child.node_size
        if end > offset:
            return index, current
        current = end
    return len(node.children), current


@dataclass(slots=True)
class ResolvedPos:
    """A position together with the chain of nodes that contain it.

    ``path[d]`` is ``(node, index, start)``: the ancestor at depth ``d``, the
    index of its child that holds the position, and where its content starts.
    """

    pos: int
    path: List[Tuple[Node, int, int]]

    @property
    def depth(self) -> int:
        return len(self.path) - 1

    @property
    def parent(self) -> Node:
        return self.path[-1][0]

    @property
    def parent_offset(self) -> int:
        return self.pos - self.start()

    def node(self, depth: Optional[int] = None) -> Node:
        return self.path[self.depth if depth is None else depth][0]

    def index(self, depth: Optional[int] = None) -> int:
        return self.path[self.depth if depth is None else depth][1]

    def start(self, depth: Optional[int] = None) -> int:
        return self.path[self.depth if depth is None else depth][2]

    def ancestors(self) -> Iterator[Tuple[int, Node]]:
        """Yield ``(depth, node)`` from the innermost node up to the document."""
        for depth in range(self.depth, -1, -1):
            yield depth, self.path[depth][0]


def text(value: str) -> Node:
    return Node(TEXT, text=value)


def block(type_name: str, *content: Union[Node, str], **attrs: Any) -> Node:
    """Build a node; plain strings in ``content`` become text nodes."""
    children = [text(item) if isinstance(item, str) else item for item in content if item != ""]
    return Node(type_name, children=children, attrs=attrs)


def doc(*content: Node) -> Node:
    return Node("doc", children=list(content))


def near(document: Node, pos: int) -> int:
    """Closest valid cursor position, preferring the next textblock forward."""
    if pos < 0 or pos > document.content_size:
        raise PositionError(f"Position {pos} out of range 0..{document.content_size}", pos=pos)
    ranges = document.textblock_ranges()
    if not ranges:
        return 0
    for start, end in ranges:
        if start <= pos <= end:
            return pos
        if start > pos:
            return start
    return ranges[-1][1]


def at_start(document: Node) -> int:
    ranges = document.textblock_ranges()
    return ranges[0][0] if ranges else 0


@dataclass(slots=True)
class Transaction:
    selection: int
    add_to_history: bool = True
    scroll_into_view: bool = False


class StructuredView:
    """Live structured surface: a document, its cursor and its undo history."""

    def __init__(self, document: Node, *, selection: int = 0, mounted: bool = True) -> None:
        self.doc = document
        self.selection = selection
        self.mounted = mounted
        self.connected = mounted
        self.destroyed = False
        self.scrolled_into_view = False
        self.history: List[Transaction] = []

    @property
    def is_ready(self) -> bool:
        return self.mounted and self.connected and not self.destroyed

    def mount(self) -> None:
        self.mounted = True
        self.connected = True

    def destroy(self) -> None:
        self.destroyed = True

    def dispatch(self, transaction: Transaction) -> None:
        if self.destroyed:
            raise CursorSyncError("View has been destroyed")
        if not 0 <= transaction.selection <= self.doc.content_size:
            raise PositionError(
                f"Selection {transaction.selection} outside document", pos=transaction.selection
            )
        self.selection = transaction.selection
        self.scrolled_into_view = transaction.scroll_into_view
        if transaction.add_to_history:
            self.history.append(transaction)

    def select_near(self, pos: int, *, add_to_history: bool = False) -> int:
        target = near(self.doc, pos)
        self.dispatch(Transaction(target, add_to_history=add_to_history, scroll_into_view=True))
        return target

    def select_start(self, *, add_to_history: bool = False) -> int:
        target = at_start(self.doc)
        self.dispatch(Transaction(target, add_to_history=add_to_history, scroll_into_view=True))
        return target
