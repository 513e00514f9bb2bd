"""Synchronization tunables."""

from __future__ import annotations

from dataclasses import dataclass

CONTEXT_LENGTH = 10
MIN_CONTEXT_PATTERN_LENGTH = 3
SEARCH_RADIUS = 2
END_OF_LINE_THRESHOLD = 0.95
MAX_RESTORE_ATTEMPTS = 12


@dataclass(slots=True)
class SyncConfig:
    context_length: int = CONTEXT_LENGTH
    min_context_pattern_length: int = MIN_CONTEXT_PATTERN_LENGTH
    search_radius: int = SEARCH_RADIUS
    end_of_line_threshold: float = END_OF_LINE_THRESHOLD
    max_restore_attempts: int = MAX_RESTORE_ATTEMPTS
    anchor_flat_blocks: bool = False

    def __post_init__(self) -> None:
        if self.context_length < 0:
            raise ValueError("context_length must be >= 0")
        if self.min_context_pattern_length < 0:
            raise ValueError("min_context_pattern_length must be >= 0")
        if self.search_radius < 0:
            raise ValueError("search_radius must be >= 0")
        if not 0.0 <= self.end_of_line_threshold <= 1.0:
            raise ValueError("end_of_line_threshold must be within [0, 1]")
        if self.max_restore_attempts < 1:
            raise ValueError("max_restore_attempts must be >= 1")


DEFAULT_CONFIG = SyncConfig()
