"""Core cursor synchronization data models."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Any, ClassVar, Dict, Optional, Union


class NodeType(str, Enum):
    """Structural type of the block a cursor sits in."""

    HEADING = "heading"
    LIST_ITEM = "list_item"
    CODE_BLOCK = "code_block"
    ALERT_BLOCK = "alert_block"
    BLOCKQUOTE = "blockquote"
    DETAILS_BLOCK = "details_block"
    TABLE_CELL = "table_cell"
    WIKI_LINK = "wiki_link"
    PARAGRAPH = "paragraph"

    @classmethod
    def parse(cls, value: str | None) -> "NodeType":
        try:
            return cls(value)
        except ValueError:
            return cls.PARAGRAPH


@dataclass(frozen=True, slots=True)
class TableAnchor:
    """Cell coordinates of a cursor inside a table."""

    kind: ClassVar[str] = "table"

    row: int
    col: int
    offset_in_cell: int

    def to_dict(self) -> Dict[str, Any]:
        return {
            "kind": self.kind,
            "row": self.row,
            "col": self.col,
            "offset_in_cell": self.offset_in_cell,
        }


@dataclass(frozen=True, slots=True)
class CodeAnchor:
    """Line/column coordinates of a cursor inside a code block."""

    kind: ClassVar[str] = "code"

    line_in_block: int
    column_in_line: int

    def to_dict(self) -> Dict[str, Any]:
        return {
            "kind": self.kind,
            "line_in_block": self.line_in_block,
            "column_in_line": self.column_in_line,
        }


BlockAnchor = Union[TableAnchor, CodeAnchor]


def anchor_from_dict(data: Optional[Dict[str, Any]]) -> Optional[BlockAnchor]:
    """Decode a serialized anchor; unknown kinds decode to ``None``."""
    if not data:
        return None
    kind = data.get("kind")
    if kind == TableAnchor.kind:
        return TableAnchor(
            row=int(data.get("row", 0)),
            col=int(data.get("col", 0)),
            offset_in_cell=int(data.get("offset_in_cell", 0)),
        )
    if kind == CodeAnchor.kind:
        return CodeAnchor(
            line_in_block=int(data.get("line_in_block", 0)),
            column_in_line=int(data.get("column_in_line", 0)),
        )
    return None


@dataclass(frozen=True, slots=True)
class CursorContext:
    """Word and surrounding characters captured around a cursor."""

    word: str = ""
    offset_in_word: int = 0
    context_before: str = ""
    context_after: str = ""


@dataclass(frozen=True, slots=True)
class WordPosition:
    """Line index and column on the flat surface."""

    line: int
    column: int


@dataclass(frozen=True, slots=True)
class LineInfo:
    line: int
    column: int
    line_start: int


@dataclass(frozen=True, slots=True)
class CursorInfo:
    """Representation-independent snapshot of a cursor location.

    ``source_line`` is 1-based, matching the tags a markdown parser writes on
    the blocks it produces.
    """

    source_line: int
    node_type: NodeType = NodeType.PARAGRAPH
    word_at_cursor: str = ""
    offset_in_word: int = 0
    percent_in_line: float = 0.0
    context_before: str = ""
    context_after: str = ""
    block_anchor: Optional[BlockAnchor] = None

    def __post_init__(self) -> None:
        if not 0 <= self.offset_in_word <= len(self.word_at_cursor):
            raise ValueError(
                f"offset_in_word {self.offset_in_word} outside word {self.word_at_cursor!r}"
            )
        if not 0.0 <= self.percent_in_line <= 1.0:
            raise ValueError(f"percent_in_line {self.percent_in_line} outside [0, 1]")

    @property
    def context(self) -> CursorContext:
        return CursorContext(
            word=self.word_at_cursor,
            offset_in_word=self.offset_in_word,
            context_before=self.context_before,
            context_after=self.context_after,
        )

    def to_dict(self) -> Dict[str, Any]:
        data: Dict[str, Any] = {
            "source_line": self.source_line,
            "word_at_cursor": self.word_at_cursor,
            "offset_in_word": self.offset_in_word,
            "node_type": self.node_type.value,
            "percent_in_line": self.percent_in_line,
            "context_before": self.context_before,
            "context_after": self.context_after,
        }
        if self.block_anchor is not None:
            data["block_anchor"] = self.block_anchor.to_dict()
        return data

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "CursorInfo":
        return cls(
            source_line=int(data.get("source_line", 1)),
            node_type=NodeType.parse(data.get("node_type")),
            word_at_cursor=str(data.get("word_at_cursor", "")),
            offset_in_word=int(data.get("offset_in_word", 0)),
            percent_in_line=float(data.get("percent_in_line", 0.0)),
            context_before=str(data.get("context_before", "")),
            context_after=str(data.get("context_after", "")),
            block_anchor=anchor_from_dict(data.get("block_anchor")),
        )
