"""Tests for text utility functions."""

from __future__ import annotations

from cursorsync.models import LineInfo
from cursorsync.utils.text import (
    clamp,
    is_word_char,
    line_at_offset,
    offset_of,
    round_half_up,
    split_lines,
)


class TestIsWordChar:
    """Test is_word_char function."""

    def test_ascii_word_chars(self) -> None:
        for ch in ("a", "Z", "7", "_"):
            assert is_word_char(ch)

    def test_cjk_chars(self) -> None:
        """Should treat CJK ideographs, kana and hangul as word characters."""
        for ch in ("中", "か", "カ", "한"):
            assert is_word_char(ch)

    def test_non_word_chars(self) -> None:
        for ch in (" ", ".", "*", "|", "\n", ""):
            assert not is_word_char(ch)


class TestNumbers:
    """Test clamp and round_half_up."""

    def test_clamp(self) -> None:
        assert clamp(5, 0, 3) == 3
        assert clamp(-1, 0, 3) == 0
        assert clamp(2, 0, 3) == 2

    def test_round_half_up(self) -> None:
        """Halves round up instead of to even."""
        assert round_half_up(2.5) == 3
        assert round_half_up(0.5) == 1
        assert round_half_up(1.49) == 1
        assert round_half_up(0.0) == 0


class TestLineAddressing:
    """Test split_lines, line_at_offset and offset_of."""

    def test_split_keeps_trailing_line(self) -> None:
        assert split_lines("a\n") == ["a", ""]
        assert split_lines("") == [""]

    def test_line_at_offset(self) -> None:
        assert line_at_offset("ab\ncd\nef", 4) == LineInfo(line=1, column=1, line_start=3)

    def test_line_at_offset_clamps(self) -> None:
        """Should clamp offsets to the buffer."""
        assert line_at_offset("ab\ncd\nef", 100) == LineInfo(line=2, column=2, line_start=6)
        assert line_at_offset("ab", -5) == LineInfo(line=0, column=0, line_start=0)

    def test_offset_at_line_start(self) -> None:
        """An offset right after a newline is column 0 of the next line."""
        assert line_at_offset("ab\ncd", 3) == LineInfo(line=1, column=0, line_start=3)

    def test_offset_of(self) -> None:
        assert offset_of(["ab", "cd", "ef"], 2, 1) == 7

    def test_offset_of_clamps(self) -> None:
        assert offset_of(["ab", "cd"], 0, 10) == 2
        assert offset_of(["ab", "cd"], 9, 0) == 3
        assert offset_of([], 3, 3) == 0
