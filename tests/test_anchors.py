"""Tests for table and code block anchors."""

from __future__ import annotations

from cursorsync.models import CodeAnchor, TableAnchor
from cursorsync.surfaces.anchors import (
    TABLE_TYPES,
    find_tagged_block,
    get_block_anchor,
    locate_code_anchor,
    locate_table_anchor,
    restore_block_anchor,
)
from cursorsync.surfaces.tree import Node, StructuredView, block, doc

CODE_START = 44


class TestGetBlockAnchor:
    """Test anchor extraction from resolved positions."""

    def test_table_cell(self, table_document: Node) -> None:
        """Row and column come from sibling indices."""
        assert get_block_anchor(table_document.resolve(22)) == TableAnchor(
            row=0, col=2, offset_in_cell=1
        )
        assert get_block_anchor(table_document.resolve(38)) == TableAnchor(
            row=1, col=2, offset_in_cell=0
        )

    def test_code_block(self, table_document: Node) -> None:
        assert get_block_anchor(table_document.resolve(CODE_START + 13)) == CodeAnchor(
            line_in_block=1, column_in_line=4
        )
        assert get_block_anchor(table_document.resolve(CODE_START)) == CodeAnchor(0, 0)

    def test_plain_paragraph(self, table_document: Node) -> None:
        assert get_block_anchor(table_document.resolve(2)) is None


class TestFindTaggedBlock:
    """Test find_tagged_block function."""

    def test_exact(self, table_document: Node) -> None:
        node, pos = find_tagged_block(table_document, TABLE_TYPES, 3)
        assert node.type == "table"
        assert pos == 7

    def test_closest_below(self, table_document: Node) -> None:
        node, _ = find_tagged_block(table_document, TABLE_TYPES, 5)
        assert node.source_line == 3

    def test_nothing_below(self, table_document: Node) -> None:
        assert find_tagged_block(table_document, TABLE_TYPES, 2) is None

    def test_ties_keep_document_order(self) -> None:
        first = block("table", block("table_row"), source_line=2)
        second = block("table", block("table_row"), source_line=2)
        node, _ = find_tagged_block(doc(first, second), TABLE_TYPES, 4)
        assert node is first


class TestLocateAnchors:
    """Test anchor application."""

    def test_identical_cells_stay_distinct(self, table_document: Node) -> None:
        """Two cells holding the same text restore to their own positions."""
        second = locate_table_anchor(table_document, 3, TableAnchor(row=0, col=1, offset_in_cell=1))
        third = locate_table_anchor(table_document, 3, TableAnchor(row=0, col=2, offset_in_cell=1))

        assert second == 17
        assert third == 22

    def test_body_row(self, table_document: Node) -> None:
        assert locate_table_anchor(table_document, 3, TableAnchor(1, 2, 1)) == 39

    def test_offset_clamped_to_cell(self, table_document: Node) -> None:
        assert locate_table_anchor(table_document, 3, TableAnchor(0, 0, 99)) == 12

    def test_row_or_column_missing(self, table_document: Node) -> None:
        assert locate_table_anchor(table_document, 3, TableAnchor(5, 0, 0)) is None
        assert locate_table_anchor(table_document, 3, TableAnchor(0, 3, 0)) is None

    def test_code_line_and_column(self, table_document: Node) -> None:
        assert locate_code_anchor(table_document, 6, CodeAnchor(1, 4)) == CODE_START + 13

    def test_code_column_clamped_to_line(self, table_document: Node) -> None:
        assert locate_code_anchor(table_document, 6, CodeAnchor(0, 99)) == CODE_START + 8

    def test_code_line_past_block(self, table_document: Node) -> None:
        """A line beyond the block lands at its end."""
        assert locate_code_anchor(table_document, 6, CodeAnchor(99, 0)) == CODE_START + 23

    def test_repeated_code_lines(self) -> None:
        document = doc(block("code_block", "}\n}\n}", source_line=1))
        assert locate_code_anchor(document, 1, CodeAnchor(2, 1)) == 1 + 5

    def test_no_code_block(self, table_document: Node) -> None:
        assert locate_code_anchor(table_document, 2, CodeAnchor(0, 0)) is None


class TestRestoreBlockAnchor:
    """Test restore_block_anchor function."""

    def test_table_restore(self, table_document: Node) -> None:
        view = StructuredView(table_document)

        assert restore_block_anchor(view, 3, TableAnchor(row=0, col=2, offset_in_cell=1))
        assert view.selection == 22
        assert view.history == []

    def test_missing_block(self, table_document: Node) -> None:
        view = StructuredView(table_document, selection=5)

        assert not restore_block_anchor(view, 1, CodeAnchor(0, 0))
        assert view.selection == 5

    def test_destroyed_view(self, table_document: Node) -> None:
        view = StructuredView(table_document)
        view.destroy()

        assert not restore_block_anchor(view, 3, TableAnchor(0, 0, 1))
