"""Exceptions raised while addressing positions inside a document."""

from __future__ import annotations


class CursorSyncError(Exception):
    """Base class for failures the synchronizer degrades from."""


class PositionError(CursorSyncError):
    """Raised when a position lies outside a document or no longer exists."""

    def __init__(self, message: str, *, pos: int | None = None) -> None:
        super().__init__(message)
        self.pos = pos
