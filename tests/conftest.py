"""Shared document fixtures."""

from __future__ import annotations

from typing import Callable

import pytest

from cursorsync.surfaces.tree import Node, block, doc


def cell(value: str, *, header: bool = False) -> Node:
    return block("table_header" if header else "table_cell", block("paragraph", value))


def find_text_start(document: Node, needle: str, nth: int = 0) -> int:
    """Content start of the ``nth`` textblock whose text equals ``needle``."""
    seen = 0
    for node, pos in document.descendants():
        if node.is_textblock and node.text_content == needle:
            if seen == nth:
                return pos + 1
            seen += 1
    raise LookupError(needle)


@pytest.fixture
def text_start() -> Callable[..., int]:
    return find_text_start


@pytest.fixture
def sample_document() -> Node:
    return doc(
        block("heading", "Getting started", source_line=1, level=1),
        block("paragraph", "The quick brown fox jumps", source_line=3),
        block(
            "bullet_list",
            block("list_item", block("paragraph", "first item"), source_line=5),
            block("list_item", block("paragraph", "second item"), source_line=6),
        ),
        block("blockquote", block("paragraph", "quoted words"), source_line=8),
        block("code_block", "x = 1\ny = 2", source_line=10),
    )


@pytest.fixture
def table_document() -> Node:
    return doc(
        block("paragraph", "Intro", source_line=1),
        block(
            "table",
            block("table_row", cell("a"), cell("x"), cell("x")),
            block("table_row", cell("b"), cell("x"), cell("y")),
            source_line=3,
        ),
        block("code_block", "def f():\n    return 1\n}", source_line=6),
    )
