"""High-level API for moving a cursor between the two surfaces."""

from __future__ import annotations

from typing import Optional

from cursorsync.config import DEFAULT_CONFIG, SyncConfig
from cursorsync.models import CursorInfo
from cursorsync.scheduling import RestoreScheduler
from cursorsync.surfaces.flat import extract_from_flat, restore_to_flat
from cursorsync.surfaces.structured import extract_from_structured, restore_to_structured
from cursorsync.surfaces.tree import Node, StructuredView


class CursorSynchronizer:
    """Extract/restore entry points bound to one :class:`SyncConfig`."""

    def __init__(self, config: Optional[SyncConfig] = None) -> None:
        self.config = config or DEFAULT_CONFIG

    def extract_from_flat_surface(self, buffer: str, offset: int) -> CursorInfo:
        return extract_from_flat(buffer, offset, config=self.config)

    def restore_to_flat_surface(self, buffer: str, info: CursorInfo) -> int:
        return restore_to_flat(buffer, info, config=self.config)

    def extract_from_structured_surface(self, document: Node, pos: int) -> CursorInfo:
        return extract_from_structured(document, pos, config=self.config)

    def restore_to_structured_surface(self, view: StructuredView, info: CursorInfo) -> None:
        restore_to_structured(view, info, config=self.config)

    def schedule_structured_restore(
        self, view: StructuredView, info: Optional[CursorInfo]
    ) -> RestoreScheduler:
        """Restore once ``view`` is mounted; the caller ticks the scheduler per frame."""
        return RestoreScheduler(view, lambda: info, config=self.config)

    def flat_to_flat(self, old_buffer: str, offset: int, new_buffer: str) -> int:
        """Carry an offset across an edit of the same flat buffer."""
        info = self.extract_from_flat_surface(old_buffer, offset)
        return self.restore_to_flat_surface(new_buffer, info)


_DEFAULT = CursorSynchronizer()


def extract_from_flat_surface(buffer: str, offset: int) -> CursorInfo:
    return _DEFAULT.extract_from_flat_surface(buffer, offset)


def restore_to_flat_surface(buffer: str, info: CursorInfo) -> int:
    return _DEFAULT.restore_to_flat_surface(buffer, info)


def extract_from_structured_surface(document: Node, pos: int) -> CursorInfo:
    return _DEFAULT.extract_from_structured_surface(document, pos)


def restore_to_structured_surface(view: StructuredView, info: CursorInfo) -> None:
    _DEFAULT.restore_to_structured_surface(view, info)
