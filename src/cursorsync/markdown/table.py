"""Geometry of pipe tables in raw markdown."""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import List, Optional, Sequence

from cursorsync.models import TableAnchor
from cursorsync.utils.text import clamp

_SEPARATOR = re.compile(r"^\s*\|?\s*:?-{3,}:?\s*(\|\s*:?-{3,}:?\s*)+\|?\s*$")


@dataclass(frozen=True, slots=True)
class CellRange:
    """Column span of one cell; ``content_*`` excludes padding spaces."""

    raw_start: int
    raw_end: int
    content_start: int
    content_end: int

    @property
    def content_length(self) -> int:
        return max(0, self.content_end - self.content_start)


def is_table_separator_line(line: str) -> bool:
    return _SEPARATOR.match(line) is not None


def is_table_row_line(line: str) -> bool:
    return "|" in line


def find_table_header_line(lines: Sequence[str], line_index: int) -> Optional[int]:
    """Find the header row of the table ``line_index`` belongs to.

    Only the header, the separator and the first body row can be recognised
    from their neighbours; deeper body rows walk up to the separator.
    """
    if not 0 <= line_index < len(lines):
        return None

    if line_index + 1 < len(lines):
        if is_table_row_line(lines[line_index]) and is_table_separator_line(lines[line_index + 1]):
            return line_index

    if is_table_separator_line(lines[line_index]):
        if line_index >= 1 and is_table_row_line(lines[line_index - 1]):
            return line_index - 1
        return None

    index = line_index - 1
    while index >= 1 and is_table_row_line(lines[index]):
        if is_table_separator_line(lines[index]):
            if is_table_row_line(lines[index - 1]):
                return index - 1
            return None
        index -= 1
    return None


def table_cell_ranges(line: str) -> List[CellRange]:
    """Split a table row into cell ranges, honouring ``\\|`` escapes."""
    separators: List[int] = []
    index = 0
    while index < len(line):
        ch = line[index]
        if ch == "\\":
            index += 2
            continue
        if ch == "|":
            separators.append(index)
        index += 1

    if not separators:
        return []

    trimmed_length = len(line.rstrip())
    has_leading_pipe = not line[: separators[0]].strip()
    has_trailing_pipe = separators[-1] == max(0, trimmed_length - 1)

    ranges: List[CellRange] = []
    cell_start = separators[0] + 1 if has_leading_pipe else 0
    for separator in separators[1:] if has_leading_pipe else separators:
        ranges.append(_cell_range(line, cell_start, separator))
        cell_start = separator + 1

    if not has_trailing_pipe and cell_start <= len(line):
        ranges.append(_cell_range(line, cell_start, len(line)))

    return ranges


def _cell_range(line: str, start: int, end: int) -> CellRange:
    content_start = start
    while content_start < end and line[content_start] == " ":
        content_start += 1
    content_end = end
    while content_end > content_start and line[content_end - 1] == " ":
        content_end -= 1
    return CellRange(start, end, content_start, content_end)


def table_anchor_for_line(
    lines: Sequence[str], line_index: int, column: int
) -> Optional[TableAnchor]:
    """Compute the cell coordinates of a flat cursor inside a table row.

    The header row is row 0 and body rows follow it, matching the row order
    of a parsed table node. The separator line has no cell to anchor to.
    """
    header = find_table_header_line(lines, line_index)
    if header is None or is_table_separator_line(lines[line_index]):
        return None

    row = 0 if line_index == header else max(0, line_index - (header + 1))
    ranges = table_cell_ranges(lines[line_index])
    if not ranges:
        return None

    col = next(
        (i for i, cell in enumerate(ranges) if cell.raw_start <= column <= cell.raw_end),
        -1,
    )
    if col == -1:
        col = 0 if column < ranges[0].raw_start else len(ranges) - 1

    cell = ranges[col]
    offset = clamp(column - cell.content_start, 0, cell.content_length)
    return TableAnchor(row=row, col=col, offset_in_cell=offset)


def restore_table_column(line: str, anchor: TableAnchor) -> Optional[int]:
    """Column in ``line`` addressed by ``anchor``'s cell and offset."""
    ranges = table_cell_ranges(line)
    if not ranges:
        return None
    cell = ranges[clamp(anchor.col, 0, len(ranges) - 1)]
    return cell.content_start + clamp(anchor.offset_in_cell, 0, cell.content_length)
