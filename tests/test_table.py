"""Tests for pipe table geometry."""

from __future__ import annotations

from cursorsync.markdown.table import (
    CellRange,
    find_table_header_line,
    is_table_separator_line,
    restore_table_column,
    table_anchor_for_line,
    table_cell_ranges,
)
from cursorsync.models import TableAnchor

TABLE = ["| A | B |", "|---|---|", "| a1 | b1 |", "| a2 | b2 |"]


class TestTableLines:
    """Test separator and header detection."""

    def test_separator(self) -> None:
        assert is_table_separator_line("|---|---|")
        assert is_table_separator_line("| :--- | ---: |")
        assert is_table_separator_line("--- | ---")
        assert not is_table_separator_line("| a | b |")
        assert not is_table_separator_line("---")

    def test_header_from_every_row(self) -> None:
        """Every line of the table resolves to the same header."""
        for index in range(len(TABLE)):
            assert find_table_header_line(TABLE, index) == 0

    def test_header_of_table_after_text(self) -> None:
        lines = ["intro", ""] + TABLE
        assert find_table_header_line(lines, 5) == 2

    def test_not_a_table(self) -> None:
        assert find_table_header_line(["text", "more"], 1) is None
        assert find_table_header_line(TABLE, 10) is None


class TestCellRanges:
    """Test table_cell_ranges function."""

    def test_padded_cells(self) -> None:
        ranges = table_cell_ranges("| a1 | b1 |")

        assert ranges == [CellRange(1, 5, 2, 4), CellRange(6, 10, 7, 9)]
        assert ranges[0].content_length == 2

    def test_escaped_pipe(self) -> None:
        """An escaped pipe stays inside its cell."""
        ranges = table_cell_ranges("| a\\|b | c |")

        assert len(ranges) == 2
        assert ranges[0].content_length == 4

    def test_without_outer_pipes(self) -> None:
        ranges = table_cell_ranges("a | b")

        assert ranges == [CellRange(0, 2, 0, 1), CellRange(3, 5, 4, 5)]

    def test_no_pipes(self) -> None:
        assert table_cell_ranges("abc") == []


class TestTableAnchor:
    """Test anchors computed from raw table rows."""

    def test_body_row(self) -> None:
        assert table_anchor_for_line(TABLE, 2, 8) == TableAnchor(row=1, col=1, offset_in_cell=1)

    def test_header_row(self) -> None:
        assert table_anchor_for_line(TABLE, 0, 6) == TableAnchor(row=0, col=1, offset_in_cell=0)

    def test_second_body_row(self) -> None:
        assert table_anchor_for_line(TABLE, 3, 3) == TableAnchor(row=2, col=0, offset_in_cell=1)

    def test_separator_has_no_anchor(self) -> None:
        assert table_anchor_for_line(TABLE, 1, 2) is None

    def test_column_on_leading_pipe(self) -> None:
        """A column left of the first cell anchors to its start."""
        assert table_anchor_for_line(TABLE, 2, 0) == TableAnchor(row=1, col=0, offset_in_cell=0)

    def test_restore_column(self) -> None:
        assert restore_table_column("| a1 | b1 |", TableAnchor(row=1, col=1, offset_in_cell=1)) == 8

    def test_restore_clamps(self) -> None:
        """Should clamp column index and offset to the row."""
        assert restore_table_column("| a1 | b1 |", TableAnchor(row=0, col=5, offset_in_cell=99)) == 9
        assert restore_table_column("no table", TableAnchor(row=0, col=0, offset_in_cell=0)) is None
